from __future__ import annotations

import logging
import os
import re
import shlex
from pathlib import Path
from typing import Iterable

from .config import VariableTransform
from .domain import Recipe, descriptor_path
from .errors import ConfigError, InvalidRecipeError


# Matches {${key}} as well as ${key}; the braced form must be tried first.
PLACEHOLDER_RE = re.compile(r"\{\$\{([^{}$]+)\}\}|\$\{([^{}$]+)\}")
RESERVED_VARIABLES = ("folder", "folder_basename", "folder_dirname", "folder_relative")

logger = logging.getLogger(__name__)


def expand_command(
    template: str,
    recipe: Recipe,
    transforms: Iterable[VariableTransform] = (),
    base_dir: str | Path | None = None,
) -> str:
    check_recipe(recipe)
    variables = build_variables(recipe, transforms, base_dir)
    command = substitute(template, variables)
    logger.debug("Expanded command for %s: %s", recipe.name, command)
    return command


def check_recipe(recipe: Recipe) -> None:
    if not recipe.path.is_dir():
        raise InvalidRecipeError(recipe.name, f"directory does not exist: {recipe.path}")
    if not descriptor_path(recipe.path).is_file():
        raise InvalidRecipeError(recipe.name, f"recipe.yml not found in {recipe.path}")


def build_variables(
    recipe: Recipe,
    transforms: Iterable[VariableTransform] = (),
    base_dir: str | Path | None = None,
) -> dict[str, str]:
    folder = Path(os.path.abspath(recipe.path))
    variables = {
        "folder": str(folder),
        "folder_basename": folder.name,
        "folder_dirname": str(folder.parent),
        "folder_relative": _relative(folder, base_dir),
    }
    for transform in transforms:
        variables[transform.name] = apply_transform(transform, variables)
    return variables


def apply_transform(transform: VariableTransform, variables: dict[str, str]) -> str:
    """Run one transformation; an ``input`` that is not a known variable is used literally."""
    value = variables.get(transform.input, transform.input)
    try:
        return re.sub(transform.search, transform.replace, value)
    except re.error as exc:
        raise ConfigError(f"Variable {transform.name!r} has an invalid pattern or replacement: {exc}") from exc


def substitute(template: str, variables: dict[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) if match.group(1) is not None else match.group(2)
        if key not in variables:
            return match.group(0)
        return shlex.quote(variables[key])

    return PLACEHOLDER_RE.sub(_replace, template)


def _relative(folder: Path, base_dir: str | Path | None) -> str:
    base = Path(os.path.abspath(base_dir if base_dir is not None else os.getcwd()))
    try:
        return str(folder.relative_to(base))
    except ValueError:
        return str(folder)
