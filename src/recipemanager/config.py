from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
import tomllib
from typing import Any, Optional

from .errors import ConfigError


PROJECT_CONFIG_NAME = "recipemanager.toml"


@dataclass(frozen=True)
class CommandConfig:
    name: str
    command: str
    requires_folder: bool = True


@dataclass(frozen=True)
class VariableTransform:
    name: str
    input: str
    search: str
    replace: str


@dataclass(frozen=True)
class EffectiveConfig:
    scan_dirs: tuple[str, ...]
    logs_dir: str
    project_dir: str
    commands: dict[str, CommandConfig] = field(default_factory=dict)
    variables: tuple[VariableTransform, ...] = ()

    def resolved_scan_dirs(self) -> list[Path]:
        return [_resolve_under(self.project_dir, entry) for entry in self.scan_dirs]

    def resolved_logs_dir(self) -> Path:
        return _resolve_under(self.project_dir, self.logs_dir)


def _config_root() -> Path:
    return Path(os.path.expanduser("~/.config/recipemanager"))


def load_global_config() -> dict[str, Any]:
    path = _config_root() / "config.toml"
    if not path.exists():
        return {}
    return _load_toml(path)


def load_profile(profile: str) -> Optional[str]:
    path = _config_root() / "projects.d" / f"{profile}.toml"
    if not path.exists():
        return None
    data = _load_toml(path)
    project = data.get("project")
    if not project:
        raise ConfigError(f"Profile {profile!r} missing 'project' key")
    return str(project)


def load_project_config(project_dir: str) -> dict[str, Any]:
    path = Path(project_dir) / PROJECT_CONFIG_NAME
    if not path.exists():
        return {}
    return _load_toml(path)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"Failed to read config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config: {path}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(cli: dict[str, Any], project: dict[str, Any], global_cfg: dict[str, Any]) -> dict[str, Any]:
    merged = _deep_merge(global_cfg, project)
    return _deep_merge(merged, cli)


def resolve_config(cli_args: dict[str, Any]) -> EffectiveConfig:
    global_cfg = load_global_config()
    profile = cli_args.get("profile")
    project_dir = cli_args.get("project")
    if not project_dir and profile:
        project_dir = load_profile(profile)
    if not project_dir:
        project_dir = global_cfg.get("default_project") or os.getcwd()

    project_cfg = load_project_config(str(project_dir))

    cli_cfg = _cli_to_dict(cli_args)
    # Commands given on the command line replace the configured set.
    cli_commands = cli_cfg.pop("commands", None)
    merged = merge_config(cli_cfg, project_cfg, global_cfg)
    if cli_commands is not None:
        merged["commands"] = cli_commands

    scan_dirs = _parse_scan_dirs(merged.get("scan_dirs"))
    if not scan_dirs:
        raise ConfigError("scan_dirs is required (set in config or via --scan-dir)")

    return EffectiveConfig(
        scan_dirs=scan_dirs,
        logs_dir=str(merged.get("logs_dir") or "logs"),
        project_dir=str(Path(str(project_dir)).resolve()),
        commands=parse_commands(merged.get("commands", {})),
        variables=parse_variables(merged.get("variables", [])),
    )


def _cli_to_dict(cli_args: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    scan_dirs = cli_args.get("scan_dirs")
    if scan_dirs:
        out["scan_dirs"] = _split_scan_dirs(scan_dirs)
    if cli_args.get("logs_dir") is not None:
        out["logs_dir"] = cli_args["logs_dir"]

    commands_json = cli_args.get("commands_json")
    if commands_json is not None:
        try:
            commands = json.loads(commands_json)
        except json.JSONDecodeError as exc:
            raise ConfigError("Invalid JSON format for commands option") from exc
        if not isinstance(commands, dict):
            raise ConfigError("Invalid JSON format for commands option")
        out["commands"] = commands
    return out


def _split_scan_dirs(values: list[str]) -> list[str]:
    entries: list[str] = []
    for value in values:
        for part in str(value).split(","):
            part = part.strip()
            if part:
                entries.append(part)
    return entries


def _parse_scan_dirs(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError("scan_dirs must be a list of directories")
    return tuple(str(entry) for entry in value if str(entry).strip())


def parse_commands(value: Any) -> dict[str, CommandConfig]:
    if not isinstance(value, dict):
        raise ConfigError("commands must be a table of named commands")

    commands: dict[str, CommandConfig] = {}
    for name, entry in value.items():
        if isinstance(entry, str):
            entry = {"command": entry}
        if not isinstance(entry, dict) or not entry.get("command"):
            raise ConfigError(f"Command {name!r} missing 'command' key")
        requires_folder = entry.get("requires_folder", entry.get("requiresFolder", True))
        commands[str(name)] = CommandConfig(
            name=str(name),
            command=str(entry["command"]),
            requires_folder=bool(requires_folder),
        )
    return commands


def parse_variables(value: Any) -> tuple[VariableTransform, ...]:
    if not isinstance(value, list):
        raise ConfigError("variables must be a list of transformations")

    transforms: list[VariableTransform] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigError(f"Variable #{index + 1} must be a table")
        missing = [key for key in ("name", "input", "search", "replace") if key not in entry]
        if missing:
            label = entry.get("name", f"#{index + 1}")
            raise ConfigError(f"Variable {label!r} missing keys: {', '.join(missing)}")
        transforms.append(
            VariableTransform(
                name=str(entry["name"]),
                input=str(entry["input"]),
                search=str(entry["search"]),
                replace=str(entry["replace"]),
            )
        )
    return tuple(transforms)


def _resolve_under(root: str, entry: str) -> Path:
    path = Path(os.path.expanduser(entry))
    if not path.is_absolute():
        path = Path(root) / path
    return path.resolve()


def config_to_toml(cfg: EffectiveConfig) -> str:
    lines = [
        f"scan_dirs = {_toml_list(cfg.scan_dirs)}",
        f"logs_dir = {_toml_str(cfg.logs_dir)}",
    ]
    for command in cfg.commands.values():
        lines.append("")
        lines.append(f"[commands.{_toml_key(command.name)}]")
        lines.append(f"command = {_toml_str(command.command)}")
        lines.append(f"requires_folder = {'true' if command.requires_folder else 'false'}")
    for transform in cfg.variables:
        lines.append("")
        lines.append("[[variables]]")
        lines.append(f"name = {_toml_str(transform.name)}")
        lines.append(f"input = {_toml_str(transform.input)}")
        lines.append(f"search = {_toml_str(transform.search)}")
        lines.append(f"replace = {_toml_str(transform.replace)}")
    return "\n".join(lines) + "\n"


def _toml_str(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _toml_list(values: tuple[str, ...]) -> str:
    return "[" + ", ".join(_toml_str(value) for value in values) + "]"


def _toml_key(key: str) -> str:
    if key and all(ch.isalnum() or ch in "-_" for ch in key):
        return key
    return _toml_str(key)
