"""Platform facts used to decide which probes apply."""

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class Platform:
    is_win: bool = False
    is_mac: bool = False
    is_linux: bool = False
    is_unix: bool = False

    @classmethod
    def current(cls) -> Platform:
        return cls.from_sys_platform(sys.platform)

    @classmethod
    def from_sys_platform(cls, name: str) -> Platform:
        is_win = name == "win32"
        is_mac = name == "darwin"
        is_linux = name.startswith("linux")
        return cls(
            is_win=is_win,
            is_mac=is_mac,
            is_linux=is_linux,
            is_unix=not is_win,
        )
