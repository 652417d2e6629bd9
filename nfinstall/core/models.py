from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Tuple

from .errors import DecodeError

@dataclass(frozen=True)
class ReleaseAsset:
    id: int
    name: str
    download_url: str

@dataclass(frozen=True)
class ReleaseDescriptor:
    name: str
    tag_name: str
    assets: Tuple[ReleaseAsset, ...] = ()

    @classmethod
    def from_json(cls, data: Any) -> "ReleaseDescriptor":
        """Build from a GitHub ``releases/latest`` document; DecodeError on schema mismatch."""
        if not isinstance(data, dict):
            raise DecodeError("unable to parse json: release is not an object")
        name, tag, raw_assets = data.get("name"), data.get("tag_name"), data.get("assets")
        # GitHub sends null for untitled releases
        if name is None:
            name = ""
        if not isinstance(name, str) or not isinstance(tag, str) or not isinstance(raw_assets, list):
            raise DecodeError("unable to parse json: missing name, tag_name or assets")

        assets = []
        for e in raw_assets:
            if not isinstance(e, dict):
                raise DecodeError("unable to parse json: asset is not an object")
            aid, aname, url = e.get("id"), e.get("name"), e.get("browser_download_url")
            if not isinstance(aid, int) or not isinstance(aname, str) or not isinstance(url, str):
                raise DecodeError(f"unable to parse json: malformed asset {aname or aid!r}")
            assets.append(ReleaseAsset(id=aid, name=aname, download_url=url))
        return cls(name=name, tag_name=tag, assets=tuple(assets))

@dataclass(frozen=True)
class Font:
    name: str
    # Fonts compare by name only
    download_url: str = field(default="", compare=False)
