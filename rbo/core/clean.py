"""
Clean — remove build output, via ``cargo clean`` or by deleting the tree.
"""

from __future__ import annotations

from typing import List, Optional

from rbo.config import Settings
from rbo.core.strategy import BuildStrategy, select_strategy
from rbo.core.utils import OperationResult, command_result


def clean(settings: Settings, strategy: Optional[BuildStrategy] = None) -> OperationResult:
    """Remove all build output.  An already-clean tree is a success."""
    strategy = strategy or select_strategy(settings)
    ran: List[str] = []
    rc = strategy.clean(ran)
    return command_result("Clean", rc, ran, f"Build output removed ({strategy.name}).", "Clean failed")
