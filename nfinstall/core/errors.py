# nfinstall/core/errors.py
from __future__ import annotations


class NFInstallError(Exception):
    """Base class for failures that end up on screen."""


class TransportError(NFInstallError):
    """Network unreachable, connection refused, broken stream."""


class RemoteStatusError(NFInstallError):
    def __init__(self, code: int, url: str = ""):
        self.code = code
        self.url = url
        super().__init__(f"status code received: {code}")


class DecodeError(NFInstallError):
    """Release metadata could not be parsed."""


class StagingError(NFInstallError):
    """Staging directory could not be created or used."""


class PersistError(NFInstallError):
    """Downloaded bytes could not be written."""


class FontNotFoundError(NFInstallError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} font not found")
