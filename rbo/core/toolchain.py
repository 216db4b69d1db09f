"""
Toolchain resolver — locates the optional external tools on PATH.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Callable, Optional

Which = Callable[[str], Optional[str]]

# Tried in order; the first one found wins
C_COMPILERS = ("clang", "gcc")


@dataclass(frozen=True)
class ToolchainConfig:
    """Immutable snapshot of the external tools available on this host.

    Each field is the absolute path of the tool, or None when it is not on
    PATH.  A missing tool is a normal state, never an error.
    """

    cargo: Optional[str] = None
    rustc: Optional[str] = None
    rustdoc: Optional[str] = None
    cc: Optional[str] = None
    sudo: Optional[str] = None

    @property
    def has_package_tool(self) -> bool:
        return self.cargo is not None

    def command(self, tool: str) -> str:
        """Path of *tool*, or its bare name so a later run reports it missing."""
        path = getattr(self, tool)
        if path is not None:
            return path
        return C_COMPILERS[0] if tool == "cc" else tool


def _first_found(names: tuple, which: Which) -> Optional[str]:
    for name in names:
        path = which(name)
        if path:
            return path
    return None


def resolve_toolchain(which: Which = shutil.which) -> ToolchainConfig:
    """Look every tool up on PATH once and return the resulting config."""
    return ToolchainConfig(
        cargo=which("cargo"),
        rustc=which("rustc"),
        rustdoc=which("rustdoc"),
        cc=_first_found(C_COMPILERS, which),
        sudo=which("sudo"),
    )
