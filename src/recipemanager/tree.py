from __future__ import annotations

from typing import Callable

from .errors import CircularDependencyError
from .store import RecipeStore


BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "
CIRCULAR_MARKER = "Circular dependency detected: {name}"

Neighbours = Callable[[str], list[str]]


class DependencyGraphWalker:
    """Renders dependency trees from a :class:`RecipeStore` as box-drawing lines.

    The cycle check only looks at the names on the current recursion path.
    That path lives in the top-level render call, so a recipe may show up in
    several sibling branches and repeated renders never share state.
    """

    def __init__(self, store: RecipeStore) -> None:
        self._store = store

    def render_dependency_tree(self, name: str) -> list[str]:
        return self._render(name, self._dependency_names)

    def render_dependent_tree(self, name: str) -> list[str]:
        return self._render(name, self._store.dependents_of)

    def _dependency_names(self, name: str) -> list[str]:
        recipe = self._store.require(name)
        return [dependency.name for dependency in self._store.dependencies_of(recipe)]

    def _render(self, name: str, neighbours: Neighbours) -> list[str]:
        self._store.require(name)
        lines = [name]
        self._walk(name, neighbours, [], "", lines)
        return lines

    def _walk(self, name: str, neighbours: Neighbours, path: list[str], prefix: str, lines: list[str]) -> None:
        if name in path:
            raise CircularDependencyError(name, path)

        path.append(name)
        try:
            children = _unique([child for child in neighbours(name) if child != name])
            for index, child in enumerate(children):
                is_last = index == len(children) - 1
                lines.append(prefix + (LAST_BRANCH if is_last else BRANCH) + child)
                child_prefix = prefix + (SPACE if is_last else PIPE)
                try:
                    self._walk(child, neighbours, path, child_prefix, lines)
                except CircularDependencyError as exc:
                    lines.append(child_prefix + LAST_BRANCH + CIRCULAR_MARKER.format(name=exc.recipe))
        finally:
            path.pop()


def _unique(names: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out
