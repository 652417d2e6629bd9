# nfinstall/core/catalog.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional

import requests

from .errors import DecodeError, FontNotFoundError, RemoteStatusError, TransportError
from .http import SESSION
from .models import Font, ReleaseDescriptor

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com/repos"
DEFAULT_REPO = "ryanoasis/nerd-fonts"
ARCHIVE_SUFFIX = ".zip"

def latest_release_url(repo: str = DEFAULT_REPO) -> str:
    return f"{API_BASE}/{repo.strip('/')}/releases/latest"

def fetch_latest_release(
    repo: str = DEFAULT_REPO,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> ReleaseDescriptor:
    """
    One GET against the GitHub latest-release endpoint.
    - TransportError when the request itself fails
    - RemoteStatusError for anything but 200
    - DecodeError when the body is not a release document
    """
    url = latest_release_url(repo)
    logger.debug("Fetching latest release: %s", url)
    try:
        r = (session or SESSION).get(
            url, timeout=timeout, headers={"Accept": "application/vnd.github+json"}
        )
    except requests.RequestException as e:
        raise TransportError(f"unable to reach {url}: {e}") from e

    if r.status_code != 200:
        logger.debug("Unexpected status %s from %s", r.status_code, url)
        raise RemoteStatusError(r.status_code, url)

    try:
        data = r.json()
    except ValueError as e:
        raise DecodeError("unable to parse json") from e
    release = ReleaseDescriptor.from_json(data)
    logger.debug("Release %s (%s): %d assets", release.name, release.tag_name, len(release.assets))
    return release

def fonts_from_release(release: ReleaseDescriptor) -> List[Font]:
    return [
        Font(name=a.name, download_url=a.download_url)
        for a in release.assets
        if a.name.endswith(ARCHIVE_SUFFIX)
    ]

def fetch_latest_catalog(
    repo: str = DEFAULT_REPO,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> List[Font]:
    fonts = fonts_from_release(fetch_latest_release(repo, session=session, timeout=timeout))
    logger.debug("Catalog holds %d fonts", len(fonts))
    return fonts

def resolve_font(name: str, catalog: Iterable[Font]) -> Font:
    # exact match only, first occurrence wins
    for font in catalog:
        if font.name == name:
            return font
    raise FontNotFoundError(name)
