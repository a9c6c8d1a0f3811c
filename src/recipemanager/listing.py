from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping

from .domain import STATE_FAILED, STATE_NOT_EXECUTED, STATE_SUCCESS, Recipe, RecipeStatus


STATUS_ICONS = {
    STATE_SUCCESS: "✓",
    STATE_FAILED: "✗",
    STATE_NOT_EXECUTED: "○",
}

# Recipes that still need attention sort first.
_STATE_ORDER = {
    STATE_NOT_EXECUTED: 0,
    STATE_FAILED: 1,
    STATE_SUCCESS: 2,
}


@dataclass(frozen=True)
class StatusSummary:
    success: int
    failed: int
    not_executed: int

    @property
    def total(self) -> int:
        return self.success + self.failed + self.not_executed


def state_of(status: RecipeStatus | None) -> str:
    if status is None:
        return STATE_NOT_EXECUTED
    return status.state


def status_icon(status: RecipeStatus | None) -> str:
    return STATUS_ICONS[state_of(status)]


def sort_by_status(recipes: Iterable[Recipe], statuses: Mapping[str, RecipeStatus]) -> list[Recipe]:
    """Not executed first, then failed, then successful; most recent run first in each group."""
    by_name = sorted(recipes, key=lambda recipe: recipe.name)
    by_time = sorted(
        by_name,
        key=lambda recipe: _timestamp_key(statuses.get(recipe.name)),
        reverse=True,
    )
    return sorted(by_time, key=lambda recipe: _STATE_ORDER[state_of(statuses.get(recipe.name))])


def summarize(recipes: Iterable[Recipe], statuses: Mapping[str, RecipeStatus]) -> StatusSummary:
    counts = {STATE_SUCCESS: 0, STATE_FAILED: 0, STATE_NOT_EXECUTED: 0}
    for recipe in recipes:
        counts[state_of(statuses.get(recipe.name))] += 1
    return StatusSummary(
        success=counts[STATE_SUCCESS],
        failed=counts[STATE_FAILED],
        not_executed=counts[STATE_NOT_EXECUTED],
    )


def format_last_run(status: RecipeStatus | None) -> str:
    if status is None or status.timestamp is None:
        return "Never"
    parsed = _parse_timestamp(status.timestamp)
    if parsed is None:
        return status.timestamp
    return parsed.strftime("%Y-%m-%d %H:%M")


def _timestamp_key(status: RecipeStatus | None) -> float:
    if status is None or status.timestamp is None:
        return 0.0
    parsed = _parse_timestamp(status.timestamp)
    if parsed is None:
        return 0.0
    return parsed.timestamp()


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
