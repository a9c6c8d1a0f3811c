from __future__ import annotations

from dataclasses import replace
import logging

from ..config import CommandConfig, EffectiveConfig
from ..domain import ExecutionResult, HistoryEntry, Recipe, RecipeStatus
from ..errors import CommandNotFoundError
from ..expand import expand_command
from ..runner import OutputCallback, run_command
from ..scanner import scan_recipe_dirs
from ..status import StatusStore
from ..store import RecipeStore
from ..tree import DependencyGraphWalker


logger = logging.getLogger(__name__)


class RecipeService:
    """Operations the command line (or any other front end) runs against the core.

    ``scan()`` rebuilds the index from disk; every other lookup uses the last
    scan, scanning lazily the first time.
    """

    def __init__(self, cfg: EffectiveConfig, status_store: StatusStore | None = None) -> None:
        self.cfg = cfg
        self.status_store = status_store or StatusStore(cfg.resolved_logs_dir())
        self._store: RecipeStore | None = None

    def scan(self) -> list[Recipe]:
        locations = scan_recipe_dirs(self.cfg.resolved_scan_dirs())
        self._store = RecipeStore.build(locations)
        logger.info("Found %d recipes", len(self._store))
        return self._store.recipes

    @property
    def store(self) -> RecipeStore:
        if self._store is None:
            self.scan()
        assert self._store is not None
        return self._store

    @property
    def recipes(self) -> list[Recipe]:
        return self.store.recipes

    def statuses(self) -> dict[str, RecipeStatus]:
        return self.status_store.load()

    def status_of(self, name: str) -> RecipeStatus | None:
        return self.status_store.status_of(name)

    def history(self, limit: int | None = None, recipe: str | None = None) -> list[HistoryEntry]:
        return self.status_store.history(limit=limit, recipe=recipe)

    def dependencies_of(self, name: str) -> list[Recipe]:
        return self.store.dependencies_of(self.store.require(name))

    def dependents_of(self, name: str) -> list[str]:
        self.store.require(name)
        return self.store.dependents_of(name)

    def render_dependency_tree(self, name: str) -> list[str]:
        return DependencyGraphWalker(self.store).render_dependency_tree(name)

    def render_dependent_tree(self, name: str) -> list[str]:
        return DependencyGraphWalker(self.store).render_dependent_tree(name)

    def command(self, command_name: str | None = None) -> CommandConfig:
        if command_name is None:
            if not self.cfg.commands:
                raise CommandNotFoundError("<default>")
            return next(iter(self.cfg.commands.values()))
        command = self.cfg.commands.get(command_name)
        if command is None:
            raise CommandNotFoundError(command_name)
        return command

    def expand(self, recipe_name: str, command_name: str | None = None) -> str:
        command = self.command(command_name)
        recipe = self.store.require(recipe_name)
        return expand_command(command.command, recipe, self.cfg.variables, self.cfg.project_dir)

    def expand_and_run(
        self,
        recipe_name: str,
        command_name: str | None = None,
        on_output: OutputCallback | None = None,
    ) -> ExecutionResult:
        """Expand the command for a recipe, run it, and record the outcome.

        Lookup, expansion and launch failures raise before anything is
        written. A non-zero exit is recorded and returned; call
        ``raise_for_status()`` on the result to turn it into an error.
        """
        command = self.command(command_name)
        recipe = self.store.require(recipe_name)
        expanded = expand_command(command.command, recipe, self.cfg.variables, self.cfg.project_dir)
        working_directory = str(recipe.path) if command.requires_folder else self.cfg.project_dir

        result = run_command(expanded, working_directory, on_output=on_output)
        self.status_store.record(recipe.name, command.name, expanded, result.exit_code, str(recipe.path))
        return replace(result, recipe=recipe.name)
