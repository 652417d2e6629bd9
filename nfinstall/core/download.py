# nfinstall/core/download.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os
import tempfile

import requests

from .errors import PersistError, RemoteStatusError, StagingError, TransportError
from .http import SESSION
from .models import Font
from .utils import safe_filename

logger = logging.getLogger(__name__)

PROGRAM_DIR = "nfinstall"
DIR_MODE = 0o755
FILE_MODE = 0o644

def staging_dir(cfg: Optional[Dict[str, Any]] = None) -> Path:
    custom = (cfg or {}).get("staging_dir")
    if custom:
        return Path(custom).expanduser()
    return Path(tempfile.gettempdir()) / PROGRAM_DIR

def ensure_staging_dir(path: Path) -> Path:
    """Create the staging directory; an existing directory is fine."""
    try:
        path.mkdir(mode=DIR_MODE)
        logger.debug("Created staging directory %s", path)
    except FileExistsError:
        if not path.is_dir():
            raise StagingError(f"{path} exists and is not a directory")
    except OSError as e:
        raise StagingError(f"unable to create {path}: {e}") from e
    return path

def download_font(
    font: Font,
    staging: Optional[Path] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    chunk_size: int = 128 * 1024,
) -> Path:
    """
    Fetch one font archive into the staging directory.
    - Directory and connection failures happen before any file is opened
    - Streams into <name>.part and renames over <name> once complete
    - The .part file is removed on every failure path
    """
    if not font.download_url:
        raise ValueError(f"{font.name} has no download URL")

    base = ensure_staging_dir(staging or staging_dir())
    out_path = base / safe_filename(font.name)
    tmp = out_path.with_name(out_path.name + ".part")

    logger.debug("Starting download %s -> %s", font.download_url, out_path)
    try:
        r = (session or SESSION).get(font.download_url, stream=True, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"unable to fetch {font.name}: {e}") from e

    with r:
        if not 200 <= r.status_code < 300:
            raise RemoteStatusError(r.status_code, font.download_url)
        try:
            fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        except OSError as e:
            raise PersistError(f"unable to write {tmp}: {e}") from e
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in r.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
            os.replace(tmp, out_path)
        except requests.RequestException as e:
            _discard(tmp)
            raise TransportError(f"download of {font.name} interrupted: {e}") from e
        except OSError as e:
            _discard(tmp)
            raise PersistError(f"unable to write {out_path}: {e}") from e
        except BaseException:
            _discard(tmp)
            raise

    logger.debug("Download finished: %s (%d bytes)", out_path, out_path.stat().st_size)
    return out_path

def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove partial file %s: %s", path, e)
