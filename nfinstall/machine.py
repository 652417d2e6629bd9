# -*- coding: utf-8 -*-
"""
Acquisition state machine for nfinstall.

Every transition is driven by one delivered message:
  init(session)        -> entry effects of the initial phase
  update(session, msg) -> effects to run next

Effects are plain data; ui.EffectRunner executes them and feeds the result
message back. Only update() mutates a Session.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from rich.spinner import Spinner

from .core.errors import FontNotFoundError, NFInstallError
from .core.models import Font
from .tui import Key, TextInput

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    FETCHING = "fetching"
    CHOOSING = "choosing"
    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    TERMINAL = "terminal"


# ────────────────────────── Messages ──────────────────────────
@dataclass(frozen=True)
class CatalogResult:
    fonts: Tuple[Font, ...] = ()
    error: Optional[NFInstallError] = None

@dataclass(frozen=True)
class ResolutionResult:
    font: Optional[Font] = None
    error: Optional[NFInstallError] = None

@dataclass(frozen=True)
class DownloadResult:
    path: Optional[Path] = None
    size: Optional[int] = None
    error: Optional[NFInstallError] = None

@dataclass(frozen=True)
class KeyEvent:
    key: Key

@dataclass(frozen=True)
class Interrupt:
    pass


# ────────────────────────── Effects ──────────────────────────
@dataclass(frozen=True)
class FetchCatalog:
    pass

@dataclass(frozen=True)
class ResolveFont:
    name: str
    catalog: Tuple[Font, ...]

@dataclass(frozen=True)
class DownloadFont:
    font: Font

@dataclass(frozen=True)
class Quit:
    pass


# Which result each phase is waiting for
_AWAITED = {
    CatalogResult: Phase.FETCHING,
    ResolutionResult: Phase.RESOLVING,
    DownloadResult: Phase.DOWNLOADING,
}


@dataclass
class Session:
    phase: Phase = Phase.FETCHING
    catalog: Tuple[Font, ...] = ()
    text_input: TextInput = field(default_factory=lambda: TextInput(placeholder="Enter font name"))
    selected: Optional[Font] = None
    stored_path: Optional[Path] = None
    stored_size: Optional[int] = None
    error: Optional[NFInstallError] = None
    not_found: Optional[str] = None
    spinner: Spinner = field(default_factory=lambda: Spinner("dots", style="magenta"))

    @property
    def typed(self) -> str:
        return self.text_input.value


def init(session: Session) -> list:
    return [FetchCatalog()] if session.phase is Phase.FETCHING else []


def update(session: Session, msg) -> list:
    if isinstance(msg, Interrupt):
        return [Quit()]
    if isinstance(msg, KeyEvent):
        return _on_key(session, msg.key)

    awaited = _AWAITED.get(type(msg))
    if awaited is None:
        raise TypeError(f"unknown message {msg!r}")
    if session.phase is not awaited:
        logger.warning("Dropping %s received while %s", type(msg).__name__, session.phase.value)
        return []

    if isinstance(msg, CatalogResult):
        if msg.error:
            return _fail(session, msg.error)
        session.catalog = tuple(msg.fonts)
        session.phase = Phase.CHOOSING
        logger.debug("Catalog ready: %d fonts", len(session.catalog))
        return []

    if isinstance(msg, ResolutionResult):
        if isinstance(msg.error, FontNotFoundError):
            session.selected = None
            session.not_found = msg.error.name
            session.phase = Phase.CHOOSING
            return []
        if msg.error:
            return _fail(session, msg.error)
        session.selected = msg.font
        session.phase = Phase.DOWNLOADING
        return [DownloadFont(msg.font)]

    # DownloadResult
    if msg.error:
        session.selected = None
        return _fail(session, msg.error)
    session.stored_path = msg.path
    session.stored_size = msg.size
    session.phase = Phase.TERMINAL
    return []


def _on_key(session: Session, key: Key) -> list:
    if key.name in ("escape", "ctrl+c"):
        return [Quit()]
    if key.name == "enter":
        if session.phase is Phase.CHOOSING:
            session.not_found = None
            session.phase = Phase.RESOLVING
            return [ResolveFont(session.typed, session.catalog)]
        if session.phase is Phase.TERMINAL:
            return [Quit()]
        return []
    if session.phase is Phase.CHOOSING and session.text_input.update(key):
        session.not_found = None
    return []


def _fail(session: Session, error: NFInstallError) -> list:
    logger.debug("Terminal error: %s", error)
    session.error = error
    session.phase = Phase.TERMINAL
    return []
