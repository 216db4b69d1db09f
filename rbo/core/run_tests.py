"""
Test runner — builds the test binaries, then runs them with whatever
privilege model the host platform needs for raw-socket access.

  • **Linux**: grant ``cap_net_raw`` to the test binaries with ``setcap``
    and run the suite as the current user.
  • **FreeBSD / macOS**: run the whole suite under ``sudo``.
  • **MSYS / MinGW**: run the suite directly.
"""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rbo.config import (
    RAW_SOCKET_CAPABILITY,
    TEST_IFACE_ENV,
    TEST_TASKS,
    TEST_TASKS_ENV,
    Settings,
)
from rbo.core.build import build_test_artifact
from rbo.core.platform import PlatformClass
from rbo.core.strategy import BuildStrategy, Command, select_strategy
from rbo.core.utils import (
    OperationResult,
    Status,
    command_result,
    print_error,
    print_notice,
    print_warning,
    run_commands,
)

TITLE = "Test Suite"


@dataclass(frozen=True)
class PrivilegePlan:
    """What to execute, and how, for one platform class."""

    platform: PlatformClass
    grant: List[Command] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    error: str = ""


def find_test_binaries(settings: Settings) -> List[str]:
    """Executable test binaries for the crate, from either build layout."""
    patterns = (
        os.path.join(settings.out_dir, f"{settings.crate_name}-*"),
        os.path.join(settings.out_dir, "debug", "deps", f"{settings.crate_name}-*"),
    )
    found: set = set()
    for pattern in patterns:
        for path in glob.glob(pattern):
            if path.endswith(".d") or not os.path.isfile(path):
                continue
            if os.access(path, os.X_OK):
                found.add(path)
    return sorted(found)


def plan_test_run(settings: Settings, strategy: BuildStrategy) -> PrivilegePlan:
    """Choose the privilege strategy for the host's :class:`PlatformClass`."""
    platform = settings.platform
    sudo = settings.toolchain.command("sudo")
    tasks = {TEST_TASKS_ENV: TEST_TASKS}

    if platform == PlatformClass.LINUX:
        grant: List[Command] = []
        if not settings.is_root:
            binaries = find_test_binaries(settings)
            if not binaries:
                return PrivilegePlan(
                    platform=platform,
                    error=f"No test binaries found under '{settings.out_dir}' to grant {RAW_SOCKET_CAPABILITY}.",
                )
            grant = [[sudo, "setcap", RAW_SOCKET_CAPABILITY, *binaries]]
        return PrivilegePlan(
            platform=platform,
            grant=grant,
            commands=strategy.test_runner_commands(),
            env=tasks,
        )

    if platform == PlatformClass.BSD_OR_DARWIN:
        # sudo resets the environment, so variables go on its command line
        assignments = [f"{TEST_IFACE_ENV}={settings.interface}", f"{TEST_TASKS_ENV}={TEST_TASKS}"]
        return PrivilegePlan(
            platform=platform,
            commands=[[sudo, *assignments, *cmd] for cmd in strategy.test_runner_commands()],
        )

    if platform == PlatformClass.WINDOWS_COMPAT:
        return PrivilegePlan(
            platform=platform,
            commands=strategy.test_runner_commands(),
            env={TEST_IFACE_ENV: settings.interface, **tasks},
        )

    return PrivilegePlan(
        platform=platform,
        error=f"Unsupported testing platform: {settings.system or 'unknown'}",
    )


# ── Public API ────────────────────────────────────────────────────────────────


def run_tests(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Build the test binaries, apply the platform privilege plan, run the suite."""
    strategy = strategy or select_strategy(settings)

    artifact = build_test_artifact(settings, strategy)
    if not artifact.ok:
        return OperationResult(
            title=TITLE,
            status=Status.FAILURE,
            summary="Test binaries failed to compile; tests were not run.",
            details=artifact.details,
            exit_code=artifact.exit_code,
        )

    print_notice("Setting permissions for test suite - enter sudo password if prompted")

    plan = plan_test_run(settings, strategy)
    if plan.error:
        print_error(plan.error)
        return OperationResult(title=TITLE, status=Status.ERROR, summary=plan.error, details=artifact.details)

    ran: List[str] = list(artifact.details)

    if plan.grant:
        print_warning(f"Privileged step: granting {RAW_SOCKET_CAPABILITY} to the test binaries with sudo setcap.")
        rc = run_commands(plan.grant, trace=settings.verbose, ran=ran)
        if rc != 0:
            return command_result(TITLE, rc, ran, "", f"Granting {RAW_SOCKET_CAPABILITY} failed")

    rc = run_commands(plan.commands, env=plan.env or None, trace=settings.verbose, ran=ran)
    return command_result(
        TITLE, rc, ran,
        f"Test suite passed ({plan.platform.value}).",
        "Test suite failed",
    )
