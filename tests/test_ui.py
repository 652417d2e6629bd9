from __future__ import annotations

import io
import queue
import threading
from pathlib import Path

from rich.console import Console

from nfinstall import ui
from nfinstall.core.errors import FontNotFoundError, NFInstallError, PersistError, TransportError
from nfinstall.core.models import Font
from nfinstall.machine import (
    CatalogResult, DownloadResult, ResolutionResult,
    DownloadFont, FetchCatalog, Phase, ResolveFont, Session,
)
from nfinstall.tui import Key, decode_keys

CATALOG = (Font("JetBrainsMono.zip", "u1"), Font("FiraCode.zip", "u2"))


def run_effect(effect, cfg=None):
    posted = []
    ui.EffectRunner(posted.append, cfg).run(effect)
    assert len(posted) == 1
    return posted[0]


def test_fetch_effect_posts_catalog(monkeypatch):
    seen = {}

    def fake_fetch(repo, timeout=None):
        seen.update(repo=repo, timeout=timeout)
        return list(CATALOG)

    monkeypatch.setattr(ui, "fetch_latest_catalog", fake_fetch)
    msg = run_effect(FetchCatalog(), {"repo": "me/fonts", "timeout": 5})
    assert msg == CatalogResult(fonts=CATALOG)
    assert seen == {"repo": "me/fonts", "timeout": 5}


def test_fetch_effect_defaults_to_nerd_fonts(monkeypatch):
    seen = []
    monkeypatch.setattr(ui, "fetch_latest_catalog", lambda repo, timeout=None: seen.append(repo) or [])
    run_effect(FetchCatalog())
    assert seen == ["ryanoasis/nerd-fonts"]


def test_leaf_errors_become_result_values(monkeypatch):
    def boom(repo, timeout=None):
        raise TransportError("unreachable")

    monkeypatch.setattr(ui, "fetch_latest_catalog", boom)
    msg = run_effect(FetchCatalog())
    assert isinstance(msg, CatalogResult)
    assert isinstance(msg.error, TransportError)
    assert msg.fonts == ()


def test_unexpected_errors_are_wrapped(monkeypatch):
    def boom(font, staging=None, timeout=None):
        raise KeyError("bug")

    monkeypatch.setattr(ui, "download_font", boom)
    msg = run_effect(DownloadFont(CATALOG[0]))
    assert isinstance(msg, DownloadResult)
    assert type(msg.error) is NFInstallError
    assert msg.path is None


def test_resolve_effect():
    assert run_effect(ResolveFont("FiraCode.zip", CATALOG)) == ResolutionResult(font=CATALOG[1])
    msg = run_effect(ResolveFont("FiraCode", CATALOG))
    assert isinstance(msg.error, FontNotFoundError)


def test_download_effect_uses_configured_staging(monkeypatch, tmp_path):
    monkeypatch.setattr(ui, "download_font", fake_download)
    msg = run_effect(DownloadFont(CATALOG[1]), {"staging_dir": str(tmp_path)})
    assert msg == DownloadResult(path=tmp_path / "FiraCode.zip", size=4)


def test_start_delivers_on_a_thread(monkeypatch):
    monkeypatch.setattr(ui, "fetch_latest_catalog", lambda repo, timeout=None: list(CATALOG))
    q = queue.Queue()
    t = ui.EffectRunner(q.put).start(FetchCatalog())
    assert t.daemon
    assert q.get(timeout=5) == CatalogResult(fonts=CATALOG)


class FakeKeyReader:
    """Stands in for the terminal; keys are pushed by the test."""
    instances = []

    def __init__(self, on_key, keys=()):
        self.on_key = on_key
        self.keys = keys
        FakeKeyReader.instances.append(self)

    def __enter__(self):
        for key in self.keys:
            self.on_key(key)
        return self

    def __exit__(self, *exc):
        return None


def fake_download(font, staging=None, timeout=None):
    out = staging / font.name
    out.write_bytes(b"font")
    return out


def quiet_console():
    return Console(file=io.StringIO(), force_terminal=False, width=80)


def test_app_runs_fetch_choose_download(monkeypatch, tmp_path):
    FakeKeyReader.instances = []
    monkeypatch.setattr(ui, "KeyReader", FakeKeyReader)
    monkeypatch.setattr(ui.EffectRunner, "start", lambda self, effect: self.run(effect))
    monkeypatch.setattr(ui, "fetch_latest_catalog", lambda repo, timeout=None: list(CATALOG))
    monkeypatch.setattr(ui, "download_font", fake_download)

    real_update = ui.update

    def scripted(session, msg):
        effects = real_update(session, msg)
        reader = FakeKeyReader.instances[0]
        if isinstance(msg, CatalogResult):
            for key in decode_keys("FiraCode.zip\r"):
                reader.on_key(key)
        elif isinstance(msg, DownloadResult):
            reader.on_key(Key("enter"))
        return effects

    monkeypatch.setattr(ui, "update", scripted)

    session = ui.App({"staging_dir": str(tmp_path)}, quiet_console()).run()

    assert session.phase is Phase.TERMINAL
    assert session.selected == CATALOG[1]
    assert session.stored_path == Path(tmp_path) / "FiraCode.zip"
    assert session.stored_size == 4


def test_escape_abandons_inflight_fetch(monkeypatch):
    release = threading.Event()

    def hanging_fetch(repo, timeout=None):
        release.wait()
        return []

    monkeypatch.setattr(ui, "KeyReader", lambda on_key: FakeKeyReader(on_key, keys=[Key("escape")]))
    monkeypatch.setattr(ui, "fetch_latest_catalog", hanging_fetch)
    try:
        session = ui.App({}, quiet_console()).run()
    finally:
        release.set()
    assert session.phase is Phase.FETCHING
    assert session.catalog == ()


def test_print_summary():
    console = quiet_console()
    ui.print_summary(Session(), console)
    s = Session(phase=Phase.TERMINAL, error=TransportError("reset"))
    ui.print_summary(s, console)
    out = console.file.getvalue()
    assert "Canceled." in out
    assert "Failed: reset" in out


def test_print_summary_shows_bracketed_paths_verbatim(tmp_path):
    stage = tmp_path / "[fonts]"
    stage.mkdir()
    saved = stage / "Hack.zip"
    saved.write_bytes(b"x" * 2048)
    console = Console(file=io.StringIO(), force_terminal=False, width=400)

    ui.print_summary(Session(phase=Phase.TERMINAL, stored_path=saved, stored_size=2048), console)

    out = console.file.getvalue()
    assert str(saved) in out
    assert "2.00 KB" in out


def test_print_summary_shows_bracketed_errors_verbatim():
    console = quiet_console()
    error = TransportError("unable to fetch [bold]Hack[/bold].zip")
    ui.print_summary(Session(phase=Phase.TERMINAL, error=error), console)
    assert "Failed: unable to fetch [bold]Hack[/bold].zip" in console.file.getvalue()


def test_vanished_download_is_a_persist_error(monkeypatch, tmp_path):
    monkeypatch.setattr(ui, "download_font", lambda font, staging=None, timeout=None: staging / "gone.zip")
    msg = run_effect(DownloadFont(CATALOG[1]), {"staging_dir": str(tmp_path)})
    assert isinstance(msg.error, PersistError)
    assert msg.path is None and msg.size is None
