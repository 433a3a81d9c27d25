"""Configuration loading and deterministic merge order.

Rule levels come from three layers, later ones winning:

1. rule defaults,
2. the ``[lint]`` table of a ``tantrums.toml`` project file,
3. command-line overrides.

Example ``tantrums.toml``::

    [lint]
    allow = ["unused-variable"]
    deny = ["W0003"]
    skip_string_literal_lines = false
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from tantrums.analysis.rules import LintConfiguration, LintLevel, get_rule
from tantrums.utils.errors import ConfigError

CONFIG_FILENAME = "tantrums.toml"

_LEVEL_KEYS = ("allow", "warn", "deny")


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    allow: tuple[str, ...] = ()
    warn: tuple[str, ...] = ()
    deny: tuple[str, ...] = ()
    warn_all: bool = False
    skip_string_literal_lines: bool | None = None


def find_config_file(start: Path) -> Path | None:
    """Find the nearest tantrums.toml in ``start`` or one of its parents."""
    directory = start.resolve()
    if not directory.is_dir():
        directory = directory.parent
    for candidate in (directory, *directory.parents):
        path = candidate / CONFIG_FILENAME
        if path.is_file():
            return path
    return None


def load_config_file(path: Path) -> dict[str, object]:
    """Load a tantrums.toml file."""
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read configuration: {exc.strerror or exc}", str(path)) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", str(path)) from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a top-level table.", str(path))
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _apply(config: LintConfiguration, rule_ids: tuple[str, ...], level: LintLevel, origin: str) -> None:
    for rule_id in rule_ids:
        if get_rule(rule_id) is None:
            raise ConfigError(f"Unknown rule '{rule_id}' in {origin}.")
        config.set_level(rule_id, level)


def merge_config(
    base: LintConfiguration,
    file_payload: dict[str, object],
    overrides: CliOverrides | None = None,
) -> LintConfiguration:
    """Merge defaults, project file, then command-line overrides."""
    overrides = overrides or CliOverrides()
    config = base.copy()

    lint_payload = _get_table(file_payload, "lint")
    unknown = sorted(set(lint_payload) - {*_LEVEL_KEYS, "skip_string_literal_lines"})
    if unknown:
        raise ConfigError(f"Unknown config field 'lint.{unknown[0]}'.")

    for key in _LEVEL_KEYS:
        if key in lint_payload:
            rule_ids = _tuple_of_strings(lint_payload[key], "lint", key)
            _apply(config, rule_ids, LintLevel(key), f"lint.{key}")

    if "skip_string_literal_lines" in lint_payload:
        value = lint_payload["skip_string_literal_lines"]
        if not isinstance(value, bool):
            raise ConfigError("Config field 'lint.skip_string_literal_lines' must be a boolean.")
        config.skip_string_literal_lines = value

    if overrides.warn_all:
        config.warn_all()
    _apply(config, overrides.allow, LintLevel.ALLOW, "--allow")
    _apply(config, overrides.warn, LintLevel.WARN, "--warn")
    _apply(config, overrides.deny, LintLevel.DENY, "--deny")
    if overrides.skip_string_literal_lines is not None:
        config.skip_string_literal_lines = overrides.skip_string_literal_lines

    return config


def load_configuration(
    config_path: Path | None = None,
    search_from: Path | None = None,
    overrides: CliOverrides | None = None,
) -> LintConfiguration:
    """
    Build the effective configuration.

    Args:
        config_path: Explicit configuration file; must exist
        search_from: Where to look for tantrums.toml when no path is given
        overrides: Command-line overrides

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    if config_path is None and search_from is not None:
        config_path = find_config_file(search_from)
    payload = load_config_file(config_path) if config_path is not None else {}
    try:
        return merge_config(LintConfiguration(), payload, overrides)
    except ConfigError as exc:
        if config_path is not None and exc.path is None:
            raise ConfigError(exc.message, str(config_path)) from exc
        raise
