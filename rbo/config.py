"""
Centralised runtime configuration: project constants and the per-run
:class:`Settings` snapshot built once at startup.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from rbo.core.interface import discover_interface
from rbo.core.platform import PlatformClass, classify_platform
from rbo.core.toolchain import ToolchainConfig, resolve_toolchain

# Project layout
DEFAULT_OUT_DIR = "target"
CRATE_NAME = "pnet"
ENTRY_SOURCE = "src/lib.rs"
DOC_SUBDIR = "doc"
BENCH_SUBDIR = "benches"
RELEASE_SUBDIR = "release"

# Suffix for test binaries built without cargo, so they never clash with
# the regular build output
NO_CARGO_SUFFIX = "-no-cargo"

C_BENCHMARKS = ("benches/c_receiver.c", "benches/c_sender.c")
RUST_BENCHMARKS = ("benches/rs_receiver.rs", "benches/rs_sender.rs")

# Environment
VERBOSE_ENV = "VERBOSE"
TEST_IFACE_ENV = "PNET_TEST_IFACE"
TEST_TASKS_ENV = "RUST_TEST_TASKS"

# Raw-socket tests interfere with each other when run concurrently
TEST_TASKS = "1"

RAW_SOCKET_CAPABILITY = "cap_net_raw+ep"


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of everything a handler needs to know about the host."""

    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    system: str = ""
    platform: PlatformClass = PlatformClass.UNSUPPORTED
    interface: str = ""
    verbose: bool = False
    is_root: bool = False
    out_dir: str = DEFAULT_OUT_DIR
    crate_name: str = CRATE_NAME
    entry_source: str = ENTRY_SOURCE

    @property
    def verbose_flags(self) -> List[str]:
        """Extra diagnostic flags appended to tool invocations."""
        return ["--verbose"] if self.verbose else []

    @property
    def doc_dir(self) -> str:
        return os.path.join(self.out_dir, DOC_SUBDIR)

    @property
    def bench_dir(self) -> str:
        return os.path.join(self.out_dir, BENCH_SUBDIR)

    @property
    def release_dir(self) -> str:
        return os.path.join(self.out_dir, RELEASE_SUBDIR)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Resolve toolchain, platform and interface from the live environment."""
    env = os.environ if environ is None else environ
    system = platform.system()

    verbose = env.get(VERBOSE_ENV) == "1"

    interface = env.get(TEST_IFACE_ENV)
    if interface is None:
        interface = discover_interface(trace=verbose)

    return Settings(
        toolchain=resolve_toolchain(),
        system=system,
        platform=classify_platform(system),
        interface=interface,
        verbose=verbose,
        is_root=_is_root(),
    )
