from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
from typing import Any

import yaml

from .domain import HistoryEntry, RecipeStatus
from .paths import LogPaths, log_paths_for


logger = logging.getLogger(__name__)


class StatusStore:
    """Status file and history log under one logs directory.

    Both files are plain YAML. The status file is rewritten whole on every
    record, so two processes sharing a logs directory can lose an update.
    The history file is appended to one sequence item at a time and stays a
    valid YAML list.
    """

    def __init__(self, logs_dir: str | Path) -> None:
        self.paths: LogPaths = log_paths_for(Path(logs_dir))

    def record(
        self,
        recipe: str,
        command_name: str,
        expanded_command: str,
        exit_code: int,
        recipe_path: str | Path,
    ) -> None:
        timestamp = _now()
        entry = HistoryEntry.create(timestamp, recipe, command_name, expanded_command, exit_code)
        self._append_history(entry)
        status = RecipeStatus(
            exit_code=exit_code,
            timestamp=timestamp,
            directory=str(recipe_path),
            command=command_name,
        )
        self._write_status(recipe, status)

    def load(self) -> dict[str, RecipeStatus]:
        data = self._read_status_file()
        statuses: dict[str, RecipeStatus] = {}
        for name, record in data.items():
            if not isinstance(record, dict):
                logger.debug("Ignoring malformed status entry for %s", name)
                continue
            statuses[str(name)] = RecipeStatus.from_mapping(record)
        return statuses

    def status_of(self, recipe: str) -> RecipeStatus | None:
        return self.load().get(recipe)

    def history(self, limit: int | None = None, recipe: str | None = None) -> list[HistoryEntry]:
        """History entries newest first, optionally for one recipe only."""
        path = self.paths.history_file
        if not path.exists():
            return []
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to read history log %s: %s", path, exc)
            return []
        if not isinstance(data, list):
            return []

        entries: list[HistoryEntry] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            entry = HistoryEntry.from_mapping(item)
            if entry is None:
                continue
            if recipe is not None and entry.recipe != recipe:
                continue
            entries.append(entry)

        entries.reverse()
        if limit is not None:
            return entries[:limit]
        return entries

    def _append_history(self, entry: HistoryEntry) -> None:
        path = self.paths.history_file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = yaml.safe_dump([entry.to_mapping()], sort_keys=False, allow_unicode=True)
            with path.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to append to history log %s: %s", path, exc)

    def _write_status(self, recipe: str, status: RecipeStatus) -> None:
        path = self.paths.status_file
        try:
            data = self._parse_status_file()
        except OSError as exc:
            logger.warning("Not updating recipe status for %s: cannot read %s: %s", recipe, path, exc)
            return
        except (yaml.YAMLError, ValueError) as exc:
            logger.warning("Discarding unreadable status file %s: %s", path, exc)
            data = {}
        data[recipe] = status.to_mapping()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to update recipe status for %s in %s: %s", recipe, path, exc)

    def _read_status_file(self) -> dict[str, Any]:
        try:
            return self._parse_status_file()
        except (OSError, yaml.YAMLError, ValueError) as exc:
            logger.warning("Failed to read recipe status %s: %s", self.paths.status_file, exc)
            return {}

    def _parse_status_file(self) -> dict[str, Any]:
        path = self.paths.status_file
        if not path.exists():
            return {}
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError("status file is not a mapping")
        return {str(key): value for key, value in data.items()}


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")
