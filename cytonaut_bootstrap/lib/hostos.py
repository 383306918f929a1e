from __future__ import annotations

import enum
import logging
import os
import platform
from typing import Optional, Tuple

from ..errors import UnsupportedPlatform

logger = logging.getLogger(__name__)


class PlatformTag(str, enum.Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS_COMPAT = "windows-compat"

    def __str__(self) -> str:
        return self.value


# Matched against the start of `uname -s`. Cygwin Python reports CYGWIN_NT-*;
# a native Windows Python launched from Git Bash/MSYS2 reports "Windows" and the
# shell flavour is read from MSYSTEM instead.
_PREFIXES: Tuple[Tuple[Tuple[str, ...], PlatformTag], ...] = (
    (("Linux",), PlatformTag.LINUX),
    (("Darwin",), PlatformTag.MACOS),
    (("MINGW", "MSYS", "CYGWIN"), PlatformTag.WINDOWS_COMPAT),
)

WINDOWS_HINT = (
    "On Windows use PowerShell: "
    "iwr -useb https://pixi.sh/install/install.ps1 | iex; "
    "pixi install; pixi run setup-environment"
)


def host_os_name() -> str:
    """Best equivalent of `uname -s` for the shell we were started from.

    Git Bash and MSYS2 ship no Python of their own, so the interpreter is
    usually a native Windows build whose platform.system() is "Windows". Those
    shells export MSYSTEM (MINGW64, UCRT64, MSYS, ...), which is mapped to the
    `uname -s` style name. Plain Windows (cmd, PowerShell) stays "Windows".
    """

    name = platform.system()
    if name == "Windows":
        msystem = os.environ.get("MSYSTEM", "").strip().upper()
        if msystem:
            if msystem.startswith(("MINGW", "MSYS")):
                return msystem
            # UCRT64, CLANG64, ... are MinGW environments too.
            return f"MINGW_NT-{msystem}"
    return name


def detect_platform(os_name: Optional[str] = None) -> PlatformTag:
    """Map the host OS identifier to a PlatformTag.

    Raises UnsupportedPlatform for anything unrecognized (including native
    Windows, which has no POSIX shell for the installer).
    """

    name = host_os_name() if os_name is None else os_name
    for prefixes, tag in _PREFIXES:
        if name.startswith(prefixes):
            logger.debug("OS identifier %r -> %s", name, tag.value)
            return tag
    raise UnsupportedPlatform(name or "<empty>", WINDOWS_HINT)
