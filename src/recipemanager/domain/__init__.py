from .descriptor import DESCRIPTOR_NAME, descriptor_path, load_descriptor, parse_dependencies
from .models import (
    STATE_FAILED,
    STATE_NOT_EXECUTED,
    STATE_SUCCESS,
    ExecutionResult,
    HistoryEntry,
    OutputLine,
    Recipe,
    RecipeStatus,
)

__all__ = [
    "DESCRIPTOR_NAME",
    "STATE_FAILED",
    "STATE_NOT_EXECUTED",
    "STATE_SUCCESS",
    "ExecutionResult",
    "HistoryEntry",
    "OutputLine",
    "Recipe",
    "RecipeStatus",
    "descriptor_path",
    "load_descriptor",
    "parse_dependencies",
]
