"""Per-platform traits of the WebP command-line tools."""

import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional

from .exceptions import UnsupportedPlatformError


class Platform(str, Enum):
    """Platforms with a known tool layout."""

    WINDOWS = "windows"
    LINUX = "linux"


@dataclass(frozen=True)
class PlatformTraits:
    """Values that differ between supported platforms."""

    path_separator: str
    encoder_name: str
    decoder_name: str
    # CreateProcess takes a single command line, posix exec takes argv
    uses_command_line: bool
    creationflags: int = 0


PLATFORM_TABLE: Dict[Platform, PlatformTraits] = {
    Platform.WINDOWS: PlatformTraits(
        path_separator=";",
        encoder_name="cwebp.exe",
        decoder_name="dwebp.exe",
        uses_command_line=True,
        creationflags=0x08000000,  # CREATE_NO_WINDOW
    ),
    Platform.LINUX: PlatformTraits(
        path_separator=":",
        encoder_name="cwebp",
        decoder_name="dwebp",
        uses_command_line=False,
    ),
}


def detect_platform(platform_name: Optional[str] = None) -> Platform:
    """Classify a ``sys.platform`` value.

    Raises:
        UnsupportedPlatformError: For anything other than Windows or Linux
    """
    name = platform_name if platform_name is not None else sys.platform
    if name == "win32":
        return Platform.WINDOWS
    if name.startswith("linux"):
        return Platform.LINUX
    raise UnsupportedPlatformError(name)


@lru_cache(maxsize=None)
def current_platform() -> Platform:
    """Platform of the running interpreter, classified once."""
    return detect_platform()


def get_traits(platform: Optional[Platform] = None) -> PlatformTraits:
    """Look up the traits of ``platform`` (defaults to the running one)."""
    return PLATFORM_TABLE[platform or current_platform()]
