from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


STATUS_FILE_NAME = "recipe_status.yaml"
HISTORY_FILE_NAME = "recipe_history.yaml"


@dataclass(frozen=True)
class LogPaths:
    logs_dir: Path
    status_file: Path
    history_file: Path


def log_paths_for(logs_dir: Path) -> LogPaths:
    return LogPaths(
        logs_dir=logs_dir,
        status_file=logs_dir / STATUS_FILE_NAME,
        history_file=logs_dir / HISTORY_FILE_NAME,
    )

