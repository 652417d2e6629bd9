from __future__ import annotations
from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from .core.utils import human_size
from .machine import Phase, Session

QUIT_HINT = "(esc to quit)"
DONE_HINT = "(enter to quit)"

def _spinning(session: Session, label: str) -> RenderableType:
    grid = Table.grid(padding=(0, 1))
    grid.add_row(session.spinner, Text(label))
    return grid

def render(session: Session) -> RenderableType:
    """Screen for the current phase. Reads the session, never changes it."""
    phase = session.phase
    if phase is Phase.FETCHING:
        return _spinning(session, "Fetching Nerd fonts")

    if phase in (Phase.CHOOSING, Phase.RESOLVING):
        lines = [Text.assemble("Enter font name: ", session.text_input.render()), Text("")]
        if session.not_found is not None:
            lines.append(Text(f"{session.not_found} font not found", style="yellow"))
        lines.append(Text(QUIT_HINT, style="dim"))
        return Group(*lines)

    if phase is Phase.DOWNLOADING:
        return _spinning(session, f"Downloading {session.typed}")

    if session.error is not None:
        return Group(Text(f"Error: {session.error}", style="bold red"), Text(""), Text(DONE_HINT, style="dim"))
    if session.stored_path is not None:
        path = session.stored_path
        return Group(
            Text.assemble(("Saved ", "green"), (path.name, "bold"), f" to {path.parent} ({human_size(session.stored_size)})"),
            Text(""),
            Text(DONE_HINT, style="dim"),
        )
    return Text("")
