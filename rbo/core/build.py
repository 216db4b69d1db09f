"""
Build, documentation and test-artifact operations.
"""

from __future__ import annotations

from typing import List, Optional

from rbo.config import Settings
from rbo.core.strategy import BuildStrategy, select_strategy
from rbo.core.utils import OperationResult, command_result, print_notice


def _announce_verbose(settings: Settings, strategy: BuildStrategy) -> None:
    if settings.verbose:
        print_notice(f"Verbose mode: passing {' '.join(settings.verbose_flags)} to {strategy.name}.")


# ── Public API ────────────────────────────────────────────────────────────────


def build(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Compile the library in release mode (or directly with rustc)."""
    strategy = strategy or select_strategy(settings)
    _announce_verbose(settings, strategy)
    ran: List[str] = []
    rc = strategy.run(strategy.build_commands(), ran)
    return command_result("Build", rc, ran, f"Library built with {strategy.name}.", "Build failed")


def build_docs(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Generate API documentation into ``<out>/doc``."""
    strategy = strategy or select_strategy(settings)
    _announce_verbose(settings, strategy)
    ran: List[str] = []
    rc = strategy.run(strategy.doc_commands(), ran)
    return command_result(
        "Documentation", rc, ran,
        f"Documentation generated in {settings.doc_dir}.",
        "Documentation build failed",
    )


def build_test_artifact(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Compile, but do not run, the test (and with cargo, benchmark) binaries."""
    strategy = strategy or select_strategy(settings)
    _announce_verbose(settings, strategy)
    ran: List[str] = []
    rc = strategy.run(strategy.test_artifact_commands(), ran)
    return command_result(
        "Test Artifacts", rc, ran,
        "Test binaries compiled.",
        "Test binaries failed to compile",
    )
