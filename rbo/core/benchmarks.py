"""
Benchmarks — compile the C and Rust sender/receiver benchmark programs
into ``<out>/benches``, linking the Rust ones against the release build.
"""

from __future__ import annotations

import os
from typing import List, Optional

from rbo.config import C_BENCHMARKS, RUST_BENCHMARKS, Settings
from rbo.core.strategy import BuildStrategy, Command
from rbo.core.utils import OperationResult, command_result, print_warning, run_commands


def _stem(source: str) -> str:
    return os.path.splitext(os.path.basename(source))[0]


def benchmark_commands(settings: Settings) -> List[Command]:
    """C benchmarks first, then the Rust ones."""
    cc = settings.toolchain.command("cc")
    rustc = settings.toolchain.command("rustc")
    commands: List[Command] = [
        [cc, "-W", "-Wall", "-O2", src, "-o", os.path.join(settings.bench_dir, _stem(src))]
        for src in C_BENCHMARKS
    ]
    commands += [
        [rustc, "-O", src, "--out-dir", settings.bench_dir, "-L", settings.release_dir]
        for src in RUST_BENCHMARKS
    ]
    return commands


def build_benchmarks(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Compile all benchmark binaries.  Uses the C compiler and rustc directly."""
    if settings.system != "Darwin":
        print_warning("C benchmarks only work on OS X")

    ran: List[str] = []
    rc = run_commands(benchmark_commands(settings), trace=settings.verbose, ran=ran)
    return command_result(
        "Benchmarks", rc, ran,
        f"Benchmarks built in {settings.bench_dir}.",
        "Benchmark build failed",
    )
