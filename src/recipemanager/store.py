from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .domain import Recipe, load_descriptor, parse_dependencies
from .errors import RecipeNotFoundError


logger = logging.getLogger(__name__)


class RecipeStore:
    """Name-indexed view of one scan, with a precomputed reverse dependency map."""

    def __init__(self, recipes: Iterable[Recipe]) -> None:
        self._by_name: dict[str, Recipe] = {}
        for recipe in recipes:
            existing = self._by_name.get(recipe.name)
            if existing is not None:
                logger.warning(
                    "Duplicate recipe %r at %s ignored (already found at %s)",
                    recipe.name,
                    recipe.path,
                    existing.path,
                )
                continue
            self._by_name[recipe.name] = recipe
        self._dependents = _reverse_map(self._by_name.values())

    @classmethod
    def build(cls, locations: Iterable[Path]) -> "RecipeStore":
        recipes: list[Recipe] = []
        for location in locations:
            path = Path(location)
            data = load_descriptor(path)
            recipes.append(Recipe(name=path.name, path=path, dependencies=parse_dependencies(data)))
        return cls(recipes)

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def find_by_name(self, name: str) -> Recipe | None:
        return self._by_name.get(name)

    def require(self, name: str) -> Recipe:
        recipe = self._by_name.get(name)
        if recipe is None:
            raise RecipeNotFoundError(name)
        return recipe

    def dependencies_of(self, recipe: Recipe) -> list[Recipe]:
        """Resolved dependencies in declared order; dangling names and self-references are dropped."""
        resolved: list[Recipe] = []
        seen: set[str] = set()
        for name in recipe.dependencies:
            if name == recipe.name or name in seen:
                continue
            seen.add(name)
            dependency = self._by_name.get(name)
            if dependency is not None:
                resolved.append(dependency)
        return resolved

    def dependents_of(self, name: str) -> list[str]:
        return list(self._dependents.get(name, ()))


def _reverse_map(recipes: Iterable[Recipe]) -> dict[str, tuple[str, ...]]:
    reverse: dict[str, list[str]] = {}
    for recipe in recipes:
        for dependency in recipe.dependencies:
            dependents = reverse.setdefault(dependency, [])
            if recipe.name not in dependents:
                dependents.append(recipe.name)
    return {name: tuple(dependents) for name, dependents in reverse.items()}
