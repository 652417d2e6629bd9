# nfinstall/core/config.py
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from .catalog import DEFAULT_REPO

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
DEFAULT_CFG: Dict[str, Any] = {
    "schema": SCHEMA_VERSION,
    "repo": DEFAULT_REPO,  # GitHub "owner/name" whose latest release is browsed
    "staging_dir": "",     # empty = <system temp>/nfinstall
    "timeout": None,       # seconds per request; None waits forever
    "verbose": False,
}


def config_dir() -> Path:
    """NFINSTALL_DIR, else %APPDATA%\\nfinstall on Windows, else $XDG_CONFIG_HOME/nfinstall."""
    if os.environ.get("NFINSTALL_DIR"):
        return Path(os.environ["NFINSTALL_DIR"]).expanduser().resolve()
    if os.name == "nt":
        base = os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return (Path(base) / "nfinstall").resolve()


def config_path() -> Path:
    """NFINSTALL_CONFIG names the file directly."""
    if os.environ.get("NFINSTALL_CONFIG"):
        return Path(os.environ["NFINSTALL_CONFIG"]).expanduser().resolve()
    return config_dir() / "config.json"


def load_cfg() -> Dict[str, Any]:
    """Defaults overlaid with config.json. An unparsable file is renamed to *.bad.json."""
    cfg = DEFAULT_CFG.copy()
    p = config_path()
    if not p.exists():
        return cfg
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", p, e)
        try:
            p.rename(p.with_suffix(".bad.json"))
        except OSError as err:
            logger.warning("Could not move %s aside: %s", p, err)
        return cfg
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object", p)
        return cfg
    cfg.update(raw)
    return cfg
