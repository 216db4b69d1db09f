"""
Platform classifier — maps the host OS name onto the families that need
distinct privilege handling when running raw-socket tests.
"""

from __future__ import annotations

from enum import Enum


class PlatformClass(Enum):
    LINUX = "linux"
    BSD_OR_DARWIN = "bsd-or-darwin"
    WINDOWS_COMPAT = "windows-compat"
    UNSUPPORTED = "unsupported"


_EXACT = {
    "Linux": PlatformClass.LINUX,
    "FreeBSD": PlatformClass.BSD_OR_DARWIN,
    "Darwin": PlatformClass.BSD_OR_DARWIN,
}

# MSYS / MinGW report names such as ``MINGW64_NT-10.0-19045``
_WINDOWS_COMPAT_PREFIXES = ("MINGW", "MSYS")


def classify_platform(system: str) -> PlatformClass:
    """Return the :class:`PlatformClass` for an ``uname -s`` style *system* name."""
    if system in _EXACT:
        return _EXACT[system]
    if system.startswith(_WINDOWS_COMPAT_PREFIXES):
        return PlatformClass.WINDOWS_COMPAT
    return PlatformClass.UNSUPPORTED
