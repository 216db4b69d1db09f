"""
Shared test fixtures: injected settings and a recording command runner.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from rbo.config import Settings
from rbo.core import utils
from rbo.core.platform import PlatformClass
from rbo.core.toolchain import ToolchainConfig


class CommandRecorder:
    """Stands in for ``run_command``: records every call, exits 0 unless told otherwise."""

    def __init__(self) -> None:
        self.calls: List[Tuple[List[str], Dict[str, str]]] = []
        self._failures: List[Tuple[str, int]] = []

    def fail(self, fragment: str, rc: int = 1) -> None:
        """Make any command whose joined argv contains *fragment* exit with *rc*."""
        self._failures.append((fragment, rc))

    def __call__(self, cmd, timeout=None, capture=False, env=None):
        self.calls.append((list(cmd), dict(env or {})))
        joined = " ".join(cmd)
        for fragment, rc in self._failures:
            if fragment in joined:
                return rc, "", f"{cmd[0]} failed"
        return 0, "", ""

    @property
    def argvs(self) -> List[List[str]]:
        return [cmd for cmd, _ in self.calls]

    def ran(self, tool: str) -> bool:
        """True if any recorded argv contains *tool* as a word."""
        return any(tool in cmd for cmd in self.argvs)


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> CommandRecorder:
    rec = CommandRecorder()
    monkeypatch.setattr(utils, "run_command", rec)
    return rec


@pytest.fixture
def cargo_toolchain() -> ToolchainConfig:
    return ToolchainConfig(
        cargo="/usr/bin/cargo",
        rustc="/usr/bin/rustc",
        rustdoc="/usr/bin/rustdoc",
        cc="/usr/bin/clang",
        sudo="/usr/bin/sudo",
    )


@pytest.fixture
def direct_toolchain() -> ToolchainConfig:
    return ToolchainConfig(
        rustc="/usr/bin/rustc",
        rustdoc="/usr/bin/rustdoc",
        cc="/usr/bin/gcc",
        sudo="/usr/bin/sudo",
    )


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "target"


@pytest.fixture
def make_settings(cargo_toolchain: ToolchainConfig, out_dir: Path):
    """Factory for :class:`Settings` with sensible Linux/cargo defaults."""

    def _make(**overrides) -> Settings:
        values = dict(
            toolchain=cargo_toolchain,
            system="Linux",
            platform=PlatformClass.LINUX,
            interface="en0",
            verbose=False,
            is_root=False,
            out_dir=str(out_dir),
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def built_test_binary(out_dir: Path) -> Path:
    """An executable test binary as the direct build would leave it."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / "pnet-no-cargo"
    path.write_text("#!/bin/sh\nexit 0\n")
    os.chmod(path, 0o755)
    return path
