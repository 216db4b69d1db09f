"""
Network interface discovery — picks an active interface for raw-socket tests.

Parses ``ifconfig`` output.  BSD / macOS print a ``status: active`` line
inside each interface block, so the interface we want is the header line
just before the first such status line once everything else has been
filtered out.  The result is only a hint: any failure yields ``""``.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

from rbo.core.utils import print_command, run_command

IFCONFIG_TIMEOUT = 10


def _relevant_lines(output: str) -> List[str]:
    """Interface headers (flags include ``UP``) and ``active`` status lines."""
    return [line for line in output.splitlines() if "UP" in line or " active" in line]


def parse_active_interface(output: str) -> str:
    """Return the name of the first active interface in *output*, or ``""``."""
    lines = _relevant_lines(output)
    for idx, line in enumerate(lines):
        if " active" not in line:
            continue
        if idx == 0:
            return ""
        return lines[idx - 1].split(":", 1)[0].strip()
    return ""


def discover_interface(
    run: Callable[..., Tuple[int, str, str]] = run_command,
    trace: bool = False,
) -> str:
    """Query ``ifconfig`` and return the first active interface, or ``""``."""
    cmd = ["ifconfig"]
    if trace:
        print_command(cmd)
    rc, stdout, _ = run(cmd, timeout=IFCONFIG_TIMEOUT, capture=True)
    if rc != 0 or not stdout.strip():
        return ""
    return parse_active_interface(stdout)
