"""
Shared utilities: subprocess runner, result container, console output.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text
from rich import box

console = Console()
err_console = Console(stderr=True)

# Return codes used by run_command when the process never produced one,
# following the shell conventions. Negative codes from subprocess mean the
# child was killed by that signal.
RC_TIMEOUT = 124
RC_OS_ERROR = 126
RC_NOT_FOUND = 127


# ── Result types ──────────────────────────────────────────────────────────────


class Status(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


@dataclass
class OperationResult:
    """Outcome of one orchestrator operation (build, test, clean …)."""

    title: str
    status: Status
    summary: str = ""
    details: List[str] = field(default_factory=list)
    exit_code: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    @property
    def ok(self) -> bool:
        return self.status == Status.SUCCESS

    @property
    def process_exit_code(self) -> int:
        """Exit code suitable for ``sys.exit``.

        A child killed by signal N maps to 128 + N, as in a shell. Results
        that failed without any command map to 1.
        """
        if self.exit_code < 0:
            return 128 - self.exit_code
        if self.exit_code == 0 and not self.ok:
            return 1
        return self.exit_code


# ── Pretty printing ──────────────────────────────────────────────────────────


_STATUS_CONFIG = {
    Status.SUCCESS: {"icon": "✔", "badge": "PASS", "style": "bold green", "border": "green"},
    Status.FAILURE: {"icon": "✘", "badge": "FAIL", "style": "bold red",   "border": "red"},
    Status.ERROR:   {"icon": "⊘", "badge": "ERR",  "style": "bold red",   "border": "red"},
}


def print_result(result: OperationResult) -> None:
    """Render an *OperationResult* to the terminal via Rich."""
    cfg = _STATUS_CONFIG[result.status]
    console.print()

    header = Text()
    header.append(f" {cfg['badge']} ", style=f"bold white on {cfg['border']}")
    header.append(f"  {cfg['icon']}  ", style=cfg["style"])
    header.append(result.title, style="bold white")

    body = Text()
    if result.summary:
        body.append("  ")
        body.append(result.summary, style=cfg["style"])
        body.append("\n")

    if result.details:
        body.append("\n")
        for d in result.details:
            body.append("    ")
            body.append("› ", style=f"dim {cfg['border']}")
            body.append(f"{d}\n")

    if not result.summary and not result.details:
        body.append("  (no details)\n", style="dim")

    console.print(
        Panel(
            body,
            title=header,
            title_align="left",
            subtitle=f"[dim italic]exit {result.exit_code}  ⏱  {result.timestamp}[/dim italic]",
            subtitle_align="right",
            border_style=cfg["border"],
            box=box.ROUNDED,
            expand=True,
            padding=(0, 1),
        )
    )


def print_section(title: str) -> None:
    """Print a visually distinct section divider."""
    console.print()
    console.print(Rule(f"[bold bright_cyan] ◆  {title}  ◆ [/bold bright_cyan]", style="bright_cyan", characters="─"))


def print_notice(message: str) -> None:
    console.print(f"  [bold bright_yellow]❯[/bold bright_yellow] {escape(message)}")


def print_warning(message: str) -> None:
    err_console.print(f"  [bold yellow]⚠[/bold yellow] [yellow]{escape(message)}[/yellow]")


def print_error(message: str) -> None:
    err_console.print(f"  [bold red]✘[/bold red] [red]{escape(message)}[/red]")


def print_command(cmd: Sequence[str], env: Optional[Dict[str, str]] = None) -> None:
    """Echo a command the way ``set -x`` would, prefixed with ``+``."""
    assignments = [f"{k}={shlex.quote(v)}" for k, v in (env or {}).items()]
    line = " ".join([*assignments, format_command(cmd)])
    console.print(f"[dim]+ {escape(line)}[/dim]", highlight=False)


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


# ── Subprocess wrapper ────────────────────────────────────────────────────────


def run_command(
    cmd: List[str],
    timeout: Optional[int] = None,
    capture: bool = False,
    env: Optional[Dict[str, str]] = None,
) -> Tuple[int, str, str]:
    """Run an external command and return *(returncode, stdout, stderr)*.

    Output streams straight to the terminal unless *capture* is set.  *env*
    holds extra variables layered over the current environment.  Commands
    that cannot be started yield one of the ``RC_*`` codes and a message in
    *stderr* instead of raising.
    """
    kwargs: dict = dict(timeout=timeout)

    if capture:
        kwargs["stdout"] = subprocess.PIPE
        kwargs["stderr"] = subprocess.PIPE

    if env:
        kwargs["env"] = {**os.environ, **env}

    try:
        proc = subprocess.run(cmd, **kwargs)
        stdout = proc.stdout.decode("utf-8", errors="replace") if proc.stdout else ""
        stderr = proc.stderr.decode("utf-8", errors="replace") if proc.stderr else ""
        return proc.returncode, stdout, stderr
    except FileNotFoundError:
        return RC_NOT_FOUND, "", f"Command not found: {cmd[0]}"
    except subprocess.TimeoutExpired:
        return RC_TIMEOUT, "", f"Command timed out after {timeout}s"
    except OSError as exc:
        return RC_OS_ERROR, "", str(exc)


def run_commands(
    commands: Sequence[List[str]],
    env: Optional[Dict[str, str]] = None,
    trace: bool = False,
    ran: Optional[List[str]] = None,
) -> int:
    """Run *commands* in order, stopping at the first non-zero exit status.

    Every command actually started is appended to *ran* (formatted).
    Returns the exit status of the last command run, or 0 if there were none.
    """
    rc = 0
    for cmd in commands:
        if trace:
            print_command(cmd, env)
        if ran is not None:
            ran.append(format_command(cmd))
        rc, _, stderr = run_command(cmd, env=env)
        if rc != 0:
            if stderr:
                print_error(stderr)
            break
    return rc


def command_result(title: str, rc: int, ran: List[str], success: str, failure: str) -> OperationResult:
    """Build the standard result for an operation that ran external commands."""
    if rc == 0:
        return OperationResult(title=title, status=Status.SUCCESS, summary=success, details=ran)
    return OperationResult(
        title=title,
        status=Status.FAILURE,
        summary=f"{failure} (exit status {rc}).",
        details=ran,
        exit_code=rc,
    )
