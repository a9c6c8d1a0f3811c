from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Callable

from . import __version__
from .config import PROJECT_CONFIG_NAME, EffectiveConfig, config_to_toml, resolve_config
from .errors import (
    CommandNotFoundError,
    ConfigError,
    InvalidRecipeError,
    LaunchError,
    NonZeroExitError,
    RecipeManagerError,
    RecipeNotFoundError,
)
from .listing import format_last_run, sort_by_status, status_icon, summarize
from .logging_config import setup_logging
from .runner import print_output
from .services import RecipeService


NO_RECIPES_MESSAGE = "No recipes found in configured directories."

INIT_TEMPLATE = """scan_dirs = ["recipes"]
logs_dir = "logs"

[commands.apply]
command = "drush recipe ${folder}"
requires_folder = true

# [[variables]]
# name = "folder_web"
# input = "folder"
# search = "^web/"
# replace = ""
"""


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.debug else "INFO" if args.verbose else None)

    handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "list": _cmd_list,
        "run": _cmd_run,
        "deps": _cmd_deps,
        "history": _cmd_history,
        "config": _cmd_config,
        "init": _cmd_init,
    }

    handler = handlers.get(args.command or "list")
    if handler is None:  # pragma: no cover
        return 1  # pragma: no cover

    try:
        return handler(args)
    except RecipeManagerError as exc:
        print(str(exc), file=sys.stderr)
        return _exit_code(exc)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project")
    common.add_argument("--profile")
    common.add_argument(
        "--scan-dir",
        dest="scan_dirs",
        action="append",
        help="Directory to scan for recipes (repeatable, comma-separated allowed)",
    )
    common.add_argument("--commands", dest="commands_json", help="JSON object of commands")
    common.add_argument("--logs-dir")
    common.add_argument("-v", "--verbose", action="store_true")
    common.add_argument("--debug", action="store_true")

    parser = argparse.ArgumentParser(prog="recipemanager", parents=[common])
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    listing = sub.add_parser("list", parents=[common], help="List recipes with their status")
    listing.add_argument("--json", action="store_true")

    run = sub.add_parser("run", parents=[common], help="Run a command against a recipe")
    run.add_argument("recipe")
    run.add_argument("-c", "--command", dest="command_name")

    deps = sub.add_parser("deps", parents=[common], help="Show a recipe's dependency tree")
    deps.add_argument("recipe")
    deps.add_argument("-i", "--inverted", action="store_true", help="Show recipes that depend on it")

    history = sub.add_parser("history", parents=[common], help="Show execution history")
    history.add_argument("--limit", type=int, default=20)
    history.add_argument("--recipe")
    history.add_argument("--json", action="store_true")

    sub.add_parser("config", parents=[common], help="Print the effective configuration")

    init = sub.add_parser("init", help=f"Write a starter {PROJECT_CONFIG_NAME}")
    init.add_argument("path", nargs="?", default=".")
    init.add_argument("--force", action="store_true")

    return parser


def _cmd_list(args: argparse.Namespace) -> int:
    service = RecipeService(_resolve_cfg(args))
    recipes = service.scan()
    if not recipes:
        print(f"Warning: {NO_RECIPES_MESSAGE}", file=sys.stderr)
        return 1

    statuses = service.statuses()
    ordered = sort_by_status(recipes, statuses)
    if getattr(args, "json", False):
        rows = []
        for recipe in ordered:
            status = statuses.get(recipe.name)
            rows.append(
                {
                    "name": recipe.name,
                    "path": str(recipe.path),
                    "dependencies": list(recipe.dependencies),
                    "state": status.state if status else "not-executed",
                    "exit_code": status.exit_code if status else None,
                    "timestamp": status.timestamp if status else None,
                }
            )
        print(json.dumps(rows, indent=2))
        return 0

    summary = summarize(recipes, statuses)
    print("Recipe Status Summary")
    print(f"  ✓ Successfully executed: {summary.success}")
    print(f"  ✗ Failed executions:     {summary.failed}")
    print(f"  ○ Not executed yet:      {summary.not_executed}")
    print(f"  Total:                   {summary.total}")
    print()
    print("Available Recipes")
    width = max(len(recipe.name) for recipe in ordered)
    for recipe in ordered:
        status = statuses.get(recipe.name)
        print(f"  {status_icon(status)} {recipe.name:<{width}}  {format_last_run(status)}")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    service = RecipeService(_resolve_cfg(args))
    if not service.scan():
        print(f"Warning: {NO_RECIPES_MESSAGE}", file=sys.stderr)
        return 1

    command = service.command(args.command_name)
    expanded = service.expand(args.recipe, command.name)
    print(f"Recipe: {args.recipe}")
    print(f"Command: {command.name}")
    print(f"Actual command: {expanded}")

    result = service.expand_and_run(args.recipe, command.name, on_output=print_output)
    result.raise_for_status()
    print("Recipe executed successfully")
    return 0


def _cmd_deps(args: argparse.Namespace) -> int:
    service = RecipeService(_resolve_cfg(args))
    if not service.scan():
        print(f"Warning: {NO_RECIPES_MESSAGE}", file=sys.stderr)
        return 1

    if args.inverted:
        lines = service.render_dependent_tree(args.recipe)
    else:
        lines = service.render_dependency_tree(args.recipe)
    for line in lines:
        print(line)
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    service = RecipeService(_resolve_cfg(args))
    entries = service.history(limit=args.limit, recipe=args.recipe)
    if args.json:
        print(json.dumps([entry.to_mapping() for entry in entries], indent=2))
        return 0
    if not entries:
        print("No executions recorded yet.")
        return 0
    for entry in entries:
        print(f"[{entry.timestamp}] {entry.recipe} ({entry.command}) exit={entry.exit_code} {entry.status}")
        print(f"    {entry.actual_command}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    print(config_to_toml(cfg), end="")
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    root = os.path.abspath(args.path)
    os.makedirs(root, exist_ok=True)
    config_path = os.path.join(root, PROJECT_CONFIG_NAME)
    if os.path.exists(config_path) and not args.force:
        raise ConfigError(f"{config_path} already exists (use --force to overwrite)")
    with open(config_path, "w", encoding="utf-8") as fh:
        fh.write(INIT_TEMPLATE)
    print(config_path)
    return 0


def _resolve_cfg(args: argparse.Namespace) -> EffectiveConfig:
    return resolve_config(_cli_args_dict(args))


def _cli_args_dict(args: argparse.Namespace) -> dict[str, object]:
    return vars(args).copy()


def _exit_code(exc: RecipeManagerError) -> int:
    if isinstance(exc, ConfigError):
        return 2
    if isinstance(exc, (RecipeNotFoundError, CommandNotFoundError)):
        return 3
    if isinstance(exc, InvalidRecipeError):
        return 4
    if isinstance(exc, LaunchError):
        return 5
    if isinstance(exc, NonZeroExitError):
        return 6
    return 1
