from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml


DESCRIPTOR_NAME = "recipe.yml"

logger = logging.getLogger(__name__)


def descriptor_path(recipe_dir: Path) -> Path:
    return recipe_dir / DESCRIPTOR_NAME


def load_descriptor(recipe_dir: Path) -> dict[str, Any]:
    path = descriptor_path(recipe_dir)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return {}

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError:
        logger.warning("Invalid YAML in %s, treating it as having no dependencies", path)
        return {}

    if not isinstance(data, dict):
        logger.warning("%s is not a mapping, treating it as having no dependencies", path)
        return {}
    return data


def parse_dependencies(data: dict[str, Any]) -> tuple[str, ...]:
    raw = data.get("recipes")
    if not isinstance(raw, list):
        return ()

    names: list[str] = []
    for item in raw:
        if item is None or isinstance(item, (dict, list)):
            continue
        name = Path(str(item).strip().rstrip("/")).name
        if name:
            names.append(name)
    return tuple(names)
