from __future__ import annotations

from pathlib import Path

from recipemanager.config import EffectiveConfig
from recipemanager.paths import log_paths_for
from recipemanager.status import StatusStore


def test_log_paths_for(tmp_path: Path) -> None:
    paths = log_paths_for(tmp_path / "logs")
    assert paths.logs_dir == tmp_path / "logs"
    assert paths.status_file.name == "recipe_status.yaml"
    assert paths.history_file.name == "recipe_history.yaml"
    assert paths.status_file.parent == paths.logs_dir


def test_status_store_uses_resolved_logs_dir(tmp_path: Path) -> None:
    cfg = EffectiveConfig(scan_dirs=("recipes",), logs_dir="logs", project_dir=str(tmp_path))
    store = StatusStore(cfg.resolved_logs_dir())
    assert store.paths.logs_dir == (tmp_path / "logs").resolve()


def test_absolute_logs_dir_ignores_project(tmp_path: Path) -> None:
    logs = tmp_path / "abs-logs"
    cfg = EffectiveConfig(scan_dirs=("recipes",), logs_dir=str(logs), project_dir="/somewhere")
    assert StatusStore(cfg.resolved_logs_dir()).paths.logs_dir == logs.resolve()
