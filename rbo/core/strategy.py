"""
Tool strategies — how each operation is carried out with or without cargo.

:func:`select_strategy` picks one of the two variants per run, so handlers
never check for cargo themselves.
"""

from __future__ import annotations

import glob
import os
import shutil
from typing import List

from rbo.config import NO_CARGO_SUFFIX, Settings
from rbo.core.utils import print_command, print_error, print_notice, run_commands

Command = List[str]


class BuildStrategy:
    """Base class: turns operations into external command lists."""

    name = ""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_commands(self) -> List[Command]:
        raise NotImplementedError

    def doc_commands(self) -> List[Command]:
        raise NotImplementedError

    def test_artifact_commands(self) -> List[Command]:
        raise NotImplementedError

    def test_runner_commands(self) -> List[Command]:
        """Commands that execute the already-built test suite."""
        raise NotImplementedError

    def clean(self, ran: List[str]) -> int:
        raise NotImplementedError

    def run(self, commands: List[Command], ran: List[str]) -> int:
        return run_commands(commands, trace=self.settings.verbose, ran=ran)


class PackageToolStrategy(BuildStrategy):
    """Everything goes through ``cargo``."""

    name = "cargo"

    @property
    def _cargo(self) -> str:
        return self.settings.toolchain.command("cargo")

    def build_commands(self) -> List[Command]:
        return [[self._cargo, "build", *self.settings.verbose_flags, "--release"]]

    def doc_commands(self) -> List[Command]:
        return [[self._cargo, "doc", *self.settings.verbose_flags]]

    def test_artifact_commands(self) -> List[Command]:
        return [
            [self._cargo, "test", "--no-run", *self.settings.verbose_flags],
            [self._cargo, "bench", "--no-run", *self.settings.verbose_flags],
        ]

    def test_runner_commands(self) -> List[Command]:
        return [[self._cargo, "test", *self.settings.verbose_flags]]

    def clean(self, ran: List[str]) -> int:
        return self.run([[self._cargo, "clean", *self.settings.verbose_flags]], ran)


class DirectToolStrategy(BuildStrategy):
    """Fallback when cargo is absent: call rustc / rustdoc on the entry source."""

    name = "rustc"

    @property
    def _rustc(self) -> str:
        return self.settings.toolchain.command("rustc")

    def build_commands(self) -> List[Command]:
        return [[self._rustc, *self.settings.verbose_flags, self.settings.entry_source]]

    def doc_commands(self) -> List[Command]:
        s = self.settings
        return [[
            s.toolchain.command("rustdoc"), *s.verbose_flags, s.entry_source,
            "-o", s.doc_dir,
            "--crate-name", s.crate_name,
        ]]

    def test_artifact_commands(self) -> List[Command]:
        s = self.settings
        return [[
            self._rustc, *s.verbose_flags, s.entry_source,
            "--test",
            "--out-dir", s.out_dir,
            "-C", f"extra-filename={NO_CARGO_SUFFIX}",
        ]]

    def test_runner_commands(self) -> List[Command]:
        pattern = os.path.join(self.settings.out_dir, f"{self.settings.crate_name}-*")
        binaries = sorted(p for p in glob.glob(pattern) if os.path.isfile(p) and os.access(p, os.X_OK))
        # Unmatched pattern is passed through literally, like an unexpanded shell glob
        return [[b] for b in binaries] or [[pattern]]

    def clean(self, ran: List[str]) -> int:
        out_dir = self.settings.out_dir
        ran.append(f"remove {out_dir}")
        if self.settings.verbose:
            print_command(["rm", "-fr", out_dir])
        if not os.path.exists(out_dir):
            print_notice(f"Nothing to clean: '{out_dir}' does not exist.")
            return 0
        try:
            shutil.rmtree(out_dir)
        except OSError as exc:
            print_error(f"Could not remove '{out_dir}': {exc}")
            return 1
        return 0


def select_strategy(settings: Settings) -> BuildStrategy:
    """Pick the cargo strategy when cargo is on PATH, else the direct one."""
    if settings.toolchain.has_package_tool:
        return PackageToolStrategy(settings)
    return DirectToolStrategy(settings)
