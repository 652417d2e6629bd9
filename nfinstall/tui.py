#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Terminal widgets for nfinstall.

- decode_keys: raw terminal input -> Key values
- KeyReader: background thread feeding keystrokes to a callback
- TextInput: single-line editable field rendered with Rich
"""
from __future__ import annotations
import codecs
import os
import select
import sys
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from rich.text import Text

try:
    import msvcrt
except ImportError:
    msvcrt = None

try:
    import termios
    import tty
except ImportError:
    termios = tty = None


@dataclass(frozen=True)
class Key:
    name: str       # "char" for printable input, otherwise the key name
    char: str = ""


_SINGLE = {
    "\r": "enter", "\n": "enter",
    "\x03": "ctrl+c",
    "\x7f": "backspace", "\x08": "backspace",
    "\x15": "ctrl+u",
    "\x01": "home", "\x05": "end",
    "\t": "tab",
}

# CSI / SS3 tails after ESC
_ESCAPES = {
    "[A": "up", "[B": "down", "[C": "right", "[D": "left",
    "[H": "home", "[F": "end", "OH": "home", "OF": "end",
    "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",
    "[3~": "delete",
}

# msvcrt scan codes after a \x00 / \xe0 prefix
_WIN_SCAN = {"H": "up", "P": "down", "K": "left", "M": "right", "G": "home", "O": "end", "S": "delete"}


def decode_keys(data: str) -> List[Key]:
    """Split one read from the terminal into keys. Unknown escape sequences are dropped."""
    keys: List[Key] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            rest = data[i + 1:]
            if not rest or rest[0] not in "[O":
                keys.append(Key("escape"))
                i += 1
                continue
            # sequence ends at the first letter or '~' after the introducer
            j = 1
            while j < len(rest) and not (rest[j].isalpha() or rest[j] == "~"):
                j += 1
            seq = rest[:j + 1]
            name = _ESCAPES.get(seq)
            if name:
                keys.append(Key(name))
            i += 1 + len(seq)
            continue
        if ch in _SINGLE:
            keys.append(Key(_SINGLE[ch]))
        elif ch.isprintable():
            keys.append(Key("char", ch))
        i += 1
    return keys


def _escape_pending(data: bytes) -> bool:
    """True when `data` ends inside an escape sequence (a bare ESC or an unterminated CSI/SS3)."""
    idx = data.rfind(b"\x1b")
    if idx < 0:
        return False
    tail = data[idx + 1:]
    if not tail:
        return True
    if tail[:1] not in (b"[", b"O"):
        return False
    return not any(chr(c).isalpha() or c == ord("~") for c in tail[1:])


class TextInput:
    """Single-line text field. Owns its value and cursor; updated one key at a time."""
    def __init__(self, placeholder: str = "", value: str = ""):
        self.placeholder = placeholder
        self.value = value
        self.cursor = len(value)

    def update(self, key: Key) -> bool:
        """Apply one key. Returns True when the value changed."""
        before = self.value
        if key.name == "char":
            self.value = self.value[:self.cursor] + key.char + self.value[self.cursor:]
            self.cursor += len(key.char)
        elif key.name == "backspace":
            if self.cursor > 0:
                self.value = self.value[:self.cursor - 1] + self.value[self.cursor:]
                self.cursor -= 1
        elif key.name == "delete":
            self.value = self.value[:self.cursor] + self.value[self.cursor + 1:]
        elif key.name == "left":
            self.cursor = max(0, self.cursor - 1)
        elif key.name == "right":
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key.name == "home":
            self.cursor = 0
        elif key.name == "end":
            self.cursor = len(self.value)
        elif key.name == "ctrl+u":
            self.value, self.cursor = "", 0
        return self.value != before

    def render(self) -> Text:
        if not self.value and self.placeholder:
            t = Text(self.placeholder[0], style="reverse dim")
            t.append(self.placeholder[1:], style="dim")
            return t
        t = Text(self.value[:self.cursor])
        under = self.value[self.cursor:self.cursor + 1] or " "
        t.append(under, style="reverse")
        t.append(self.value[self.cursor + 1:])
        return t


class KeyReader:
    """
    Reads the terminal on a daemon thread and hands each Key to `on_key`.
    POSIX: cbreak mode (Ctrl+C still raises KeyboardInterrupt in the main thread).
    Windows: msvcrt.getwch.
    """
    READ_SIZE = 64
    ESC_DELAY = 0.05  # seconds to wait for the rest of an escape sequence

    def __init__(self, on_key: Callable[[Key], None], stream=None):
        self.on_key = on_key
        self.stream = stream or sys.stdin
        self._saved = None
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "KeyReader":
        if not self.stream.isatty():
            raise RuntimeError("stdin is not a terminal")
        if msvcrt:
            target = self._read_windows
        elif termios:
            fd = self.stream.fileno()
            try:
                self._saved = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except termios.error as e:
                raise RuntimeError(f"unable to configure terminal: {e}") from e
            target = self._read_posix
        else:
            raise RuntimeError("no supported keyboard backend")
        self._thread = threading.Thread(target=target, name="nfinstall-keys", daemon=True)
        self._thread.start()
        return self

    def __exit__(self, *exc) -> None:
        # the reader thread is a daemon blocked on input; it is abandoned, not joined
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def _read_posix(self) -> None:
        fd = self.stream.fileno()
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            try:
                data = os.read(fd, self.READ_SIZE)
                # a lone ESC may be the head of an arrow key whose tail is still in flight
                while _escape_pending(data) and select.select([fd], [], [], self.ESC_DELAY)[0]:
                    more = os.read(fd, self.READ_SIZE)
                    if not more:
                        break
                    data += more
            except OSError:
                return
            if not data:
                return
            for key in decode_keys(decoder.decode(data)):
                self.on_key(key)

    def _read_windows(self) -> None:
        while True:
            ch = msvcrt.getwch()
            if ch in ("\x00", "\xe0"):
                name = _WIN_SCAN.get(msvcrt.getwch())
                if name:
                    self.on_key(Key(name))
                continue
            for key in decode_keys(ch):
                self.on_key(key)
