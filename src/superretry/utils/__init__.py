r"""Utilities shared by the retry orchestrator."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_delay_ms",
    "clear_execution_id",
    "get_execution_id",
    "set_execution_id",
    "wait_for_delay",
]

from superretry.utils.sleep import calculate_delay_ms, wait_for_delay
from superretry.utils.structured_logging import (
    StructuredFormatter,
    clear_execution_id,
    get_execution_id,
    set_execution_id,
)
