#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UI layer for nfinstall

- One queue carries every message (keys, effect results, interrupts)
- The main thread is the only consumer and the only caller of update()
- Effects run on daemon threads and each deliver exactly one message
- Rich Live screen redrawn after every reduction; the spinner animates on its own
"""

from __future__ import annotations
import logging
import queue
import threading
from typing import Any, Dict, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape

from .core import (
    DEFAULT_REPO,
    NFInstallError,
    PersistError,
    download_font,
    fetch_latest_catalog,
    human_size,
    resolve_font,
    staging_dir,
)
from .machine import (
    CatalogResult, DownloadResult, Interrupt, KeyEvent, ResolutionResult,
    DownloadFont, FetchCatalog, Quit, ResolveFont,
    Phase, Session, init, update,
)
from .tui import KeyReader
from .view import render

logger = logging.getLogger(__name__)

console = Console()

# ────────────────────────── Effects ──────────────────────────
class EffectRunner:
    """Runs effects off the main loop and posts their result message to `post`."""
    def __init__(self, post, cfg: Optional[Dict[str, Any]] = None):
        self.post = post
        self.cfg = cfg or {}

    def start(self, effect) -> threading.Thread:
        t = threading.Thread(
            target=self.run, args=(effect,),
            name=f"nfinstall-{type(effect).__name__}", daemon=True,
        )
        t.start()
        return t

    def run(self, effect) -> None:
        """Execute synchronously; errors become part of the result message."""
        timeout = self.cfg.get("timeout")
        if isinstance(effect, FetchCatalog):
            repo = self.cfg.get("repo") or DEFAULT_REPO
            make, call = CatalogResult, lambda: {"fonts": tuple(fetch_latest_catalog(repo, timeout=timeout))}
        elif isinstance(effect, ResolveFont):
            make, call = ResolutionResult, lambda: {"font": resolve_font(effect.name, effect.catalog)}
        elif isinstance(effect, DownloadFont):
            staging = staging_dir(self.cfg)
            make, call = DownloadResult, lambda: _saved(download_font(effect.font, staging=staging, timeout=timeout))
        else:
            raise TypeError(f"not an asynchronous effect: {effect!r}")

        try:
            msg = make(**call())
        except NFInstallError as e:
            logger.debug("%s failed: %s", type(effect).__name__, e)
            msg = make(error=e)
        except Exception as e:
            logger.exception("Unexpected failure in %s", type(effect).__name__)
            msg = make(error=NFInstallError(f"unexpected error: {e}"))
        self.post(msg)

def _saved(path) -> Dict[str, Any]:
    try:
        return {"path": path, "size": path.stat().st_size}
    except OSError as e:
        raise PersistError(f"cannot stat {path}: {e}") from e

# ────────────────────────── Run loop ──────────────────────────
class App:
    def __init__(self, cfg: Optional[Dict[str, Any]] = None, console_: Optional[Console] = None):
        self.cfg = cfg or {}
        self.console = console_ or console
        self.messages: "queue.Queue[Any]" = queue.Queue()
        self.runner = EffectRunner(self.messages.put, self.cfg)

    def _perform(self, effects) -> bool:
        """Start effects; True when one of them asks to quit."""
        for effect in effects:
            if isinstance(effect, Quit):
                return True
            self.runner.start(effect)
        return False

    def _next_message(self):
        while True:
            try:
                return self.messages.get(timeout=0.2)
            except queue.Empty:
                continue
            except KeyboardInterrupt:
                return Interrupt()

    def run(self) -> Session:
        session = Session()
        with KeyReader(lambda key: self.messages.put(KeyEvent(key))), Live(
            render(session),
            console=self.console,
            screen=True,
            auto_refresh=True,
            refresh_per_second=12,
            transient=True,
        ) as live:
            done = self._perform(init(session))
            while not done:
                msg = self._next_message()
                effects = update(session, msg)
                live.update(render(session), refresh=True)
                done = self._perform(effects)
        return session

# ────────────────────────── Summary ──────────────────────────
def print_summary(session: Session, console_: Optional[Console] = None) -> None:
    out = console_ or console
    if session.phase is not Phase.TERMINAL:
        out.print("[yellow]Canceled.[/]")
    elif session.error is not None:
        out.print(f"[red]Failed:[/] {escape(str(session.error))}")
    elif session.stored_path is not None:
        path = session.stored_path
        size = human_size(session.stored_size)
        out.print(f"[green]Done![/] File saved ({size}):\n[bold]{escape(str(path))}[/]")
