"""
CLI entry-point for the raw-socket build orchestrator.

    rbo               build the library (also any unrecognised verb)
    rbo test          build and run the test suite with raw-socket privileges
    rbo doc           generate documentation
    rbo clean         remove build output
    rbo benchmarks    compile the benchmark programs
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Dict, List, Optional

from rbo import __app_name__, __version__
from rbo.config import Settings, load_settings
from rbo.core.benchmarks import build_benchmarks
from rbo.core.build import build, build_docs
from rbo.core.clean import clean
from rbo.core.run_tests import run_tests
from rbo.core.strategy import BuildStrategy, select_strategy
from rbo.core.utils import OperationResult, Status, print_error, print_result, print_section

Operation = Callable[[Settings, Optional[BuildStrategy]], OperationResult]

OPERATIONS: Dict[str, Operation] = {
    "test": run_tests,
    "doc": build_docs,
    "clean": clean,
    "benchmarks": build_benchmarks,
}


def resolve_operation(verb: Optional[str]) -> Operation:
    """Map *verb* to its handler; anything unrecognised means build."""
    return OPERATIONS.get(verb or "", build)


def ensure_output_dirs(settings: Settings) -> Optional[OperationResult]:
    """Create the doc and benchmark output directories; an ERROR result on failure."""
    for path in (settings.doc_dir, settings.bench_dir):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            message = f"Could not create output directory '{path}': {exc}"
            print_error(message)
            return OperationResult(title="Output Directories", status=Status.ERROR, summary=message)
    return None


def dispatch(verb: Optional[str], settings: Settings) -> OperationResult:
    """Scaffold output directories, then run exactly one operation."""
    failure = ensure_output_dirs(settings)
    if failure is not None:
        return failure
    operation = resolve_operation(verb)
    strategy = select_strategy(settings)
    return operation(settings, strategy)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rbo",
        allow_abbrev=False,
        description=f"{__app_name__} — build and test a raw-socket library with the right privileges.",
        epilog="Set VERBOSE=1 for verbose tool output and command tracing; "
               "PNET_TEST_IFACE overrides the detected test interface.",
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "verb",
        nargs="?",
        default=None,
        help="test | doc | clean | benchmarks (anything else builds the library)",
    )
    return p


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry-point called by the ``rbo`` console script or ``python -m rbo``."""
    argv = sys.argv[1:] if argv is None else argv
    # Only the first argument is the verb; anything after it is ignored
    args, _ = _build_parser().parse_known_args(argv[:1])

    try:
        settings = load_settings()
        print_section(f"{__app_name__} · {args.verb or 'build'}")
        result = dispatch(args.verb, settings)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)

    print_result(result)
    sys.exit(result.process_exit_code)


if __name__ == "__main__":
    main()
