# nfinstall/core/__init__.py
from .catalog import (
    ARCHIVE_SUFFIX, DEFAULT_REPO,
    fetch_latest_catalog, fetch_latest_release, fonts_from_release, resolve_font,
)
from .config import config_dir, config_path, load_cfg
from .download import download_font, ensure_staging_dir, staging_dir
from .errors import (
    NFInstallError, TransportError, RemoteStatusError, DecodeError,
    StagingError, PersistError, FontNotFoundError,
)
from .http import SESSION
from .models import Font, ReleaseAsset, ReleaseDescriptor
from .utils import human_size, safe_filename

__all__ = [
    "ARCHIVE_SUFFIX", "DEFAULT_REPO",
    "fetch_latest_catalog", "fetch_latest_release", "fonts_from_release", "resolve_font",
    "config_dir", "config_path", "load_cfg",
    "download_font", "ensure_staging_dir", "staging_dir",
    "NFInstallError", "TransportError", "RemoteStatusError", "DecodeError",
    "StagingError", "PersistError", "FontNotFoundError",
    "SESSION",
    "Font", "ReleaseAsset", "ReleaseDescriptor",
    "human_size", "safe_filename",
    "setup_logging",
]

# ---- logging for the package ----
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    # RichHandler prints through the shared console, above the live screen
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
