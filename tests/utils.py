from __future__ import annotations

from pathlib import Path

import yaml


def write_recipe(root: Path, name: str, dependencies: list[str] | None = None, **extra: object) -> Path:
    recipe_dir = root / name
    recipe_dir.mkdir(parents=True, exist_ok=True)
    data: dict[str, object] = {"name": name, "type": "test", "recipes": list(dependencies or [])}
    data.update(extra)
    (recipe_dir / "recipe.yml").write_text(yaml.safe_dump(data), encoding="utf-8")
    return recipe_dir


def write_global_config(home: Path, content: str) -> Path:
    cfg_dir = home / ".config" / "recipemanager"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    path = cfg_dir / "config.toml"
    path.write_text(content, encoding="utf-8")
    return path


def write_profile(home: Path, name: str, project: str) -> Path:
    dir_path = home / ".config" / "recipemanager" / "projects.d"
    dir_path.mkdir(parents=True, exist_ok=True)
    path = dir_path / f"{name}.toml"
    path.write_text(f"project = {project!r}\n", encoding="utf-8")
    return path


def write_project_config(project: Path, content: str) -> Path:
    project.mkdir(parents=True, exist_ok=True)
    path = project / "recipemanager.toml"
    path.write_text(content, encoding="utf-8")
    return path
