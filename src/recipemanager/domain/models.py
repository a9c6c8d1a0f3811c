from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..errors import NonZeroExitError


STATE_SUCCESS = "success"
STATE_FAILED = "failed"
STATE_NOT_EXECUTED = "not-executed"


@dataclass(frozen=True)
class Recipe:
    name: str
    path: Path
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecipeStatus:
    """Last known outcome of running a command against one recipe.

    ``executed`` is true exactly when an exit code is present, so a stored
    record without ``exit_code`` reads back as not executed. The on-disk shape
    is ``{exit_code, command, timestamp, recipe_path}``.
    """

    exit_code: int | None = None
    timestamp: str | None = None
    directory: str | None = None
    command: str | None = None

    @property
    def executed(self) -> bool:
        return self.exit_code is not None

    @property
    def state(self) -> str:
        if self.exit_code is None:
            return STATE_NOT_EXECUTED
        if self.exit_code == 0:
            return STATE_SUCCESS
        return STATE_FAILED

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RecipeStatus":
        exit_code = _optional_int(data.get("exit_code"))
        timestamp = _optional_str(data.get("timestamp"))
        if exit_code is not None and timestamp is None:
            exit_code = None
        return cls(
            exit_code=exit_code,
            timestamp=timestamp,
            directory=_optional_str(data.get("recipe_path", data.get("directory"))),
            command=_optional_str(data.get("command")),
        )

    def to_mapping(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.exit_code is not None:
            data["exit_code"] = self.exit_code
        if self.command is not None:
            data["command"] = self.command
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.directory is not None:
            data["recipe_path"] = self.directory
        return data


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: str
    recipe: str
    command: str
    actual_command: str
    exit_code: int
    status: str

    @classmethod
    def create(
        cls, timestamp: str, recipe: str, command: str, actual_command: str, exit_code: int
    ) -> "HistoryEntry":
        status = STATE_SUCCESS if exit_code == 0 else STATE_FAILED
        return cls(timestamp, recipe, command, actual_command, exit_code, status)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HistoryEntry | None":
        exit_code = _optional_int(data.get("exit_code"))
        recipe = _optional_str(data.get("recipe"))
        if exit_code is None or recipe is None:
            return None
        return cls.create(
            timestamp=str(data.get("timestamp") or ""),
            recipe=recipe,
            command=str(data.get("command") or ""),
            actual_command=str(data.get("actual_command") or ""),
            exit_code=exit_code,
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "recipe": self.recipe,
            "command": self.command,
            "actual_command": self.actual_command,
            "exit_code": self.exit_code,
            "status": self.status,
        }


@dataclass(frozen=True)
class OutputLine:
    stream: str
    text: str

    @property
    def is_error(self) -> bool:
        return self.stream == "stderr"


@dataclass(frozen=True)
class ExecutionResult:
    command: str
    working_directory: str
    exit_code: int
    recipe: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def raise_for_status(self) -> None:
        if self.exit_code != 0:
            raise NonZeroExitError(self.recipe or self.command, self.exit_code)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None
