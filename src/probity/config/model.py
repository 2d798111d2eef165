# topmark:header:start
#
#   project      : Probity
#   file         : model.py
#   file_relpath : src/probity/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model, TOML loading, and layering.

This module defines:
    - `Config`: an immutable, runtime snapshot used by the CLI to build a run.
    - `MutableConfig`: a mutable builder; layers are applied in order
      (runtime defaults, config file, CLI overrides) and then frozen.
    - `load_config`: discovery + TOML parsing (via `tomlkit`) + layering.

Discovery (when no explicit config file is given), in the working directory:
    1. ``probity.toml`` (settings at the top level);
    2. ``pyproject.toml`` with a ``[tool.probity]`` table.

Path semantics:
    - Paths declared in a config file are normalized against that file's directory.
    - CLI paths are normalized against the invocation CWD.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from probity.config.logging import ProbityLogger, get_logger
from probity.constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_LEVEL,
    DEFAULT_MEMORY_LIMIT_FILE,
    MAX_LEVEL,
    PROBITY_TOML_NAME,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
)

logger: ProbityLogger = get_logger(__name__)

TomlTable = dict[str, Any]

DEFAULT_ERROR_FORMAT: str = "table"

KEY_LEVEL = "level"
KEY_PATHS = "paths"
KEY_IGNORE_ERRORS = "ignore_errors"
KEY_MEMORY_LIMIT_FILE = "memory_limit_file"
KEY_CACHE_DIR = "cache_dir"
KEY_ERROR_FORMAT = "error_format"

KNOWN_KEYS: frozenset[str] = frozenset(
    {
        KEY_LEVEL,
        KEY_PATHS,
        KEY_IGNORE_ERRORS,
        KEY_MEMORY_LIMIT_FILE,
        KEY_CACHE_DIR,
        KEY_ERROR_FORMAT,
    }
)


class ConfigError(Exception):
    """Raised for missing, malformed, or invalid configuration."""


def parse_level(value: object) -> int:
    """Return a rule level from an int, a numeric string, or ``"max"``.

    Raises:
        ConfigError: If the value is not a level between 0 and `MAX_LEVEL`.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "max":
            return MAX_LEVEL
        if not text.isdigit():
            raise ConfigError(f"Invalid level {value!r}: expected 0..{MAX_LEVEL} or 'max'")
        value = int(text)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Invalid level {value!r}: expected 0..{MAX_LEVEL} or 'max'")
    if not 0 <= value <= MAX_LEVEL:
        raise ConfigError(f"Invalid level {value}: expected 0..{MAX_LEVEL} or 'max'")
    return value


def _string_list(table: TomlTable, key: str) -> list[str]:
    value: Any = table.get(key, [])
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Invalid '{key}': expected a list of strings")
    return list(cast("list[str]", value))


def _string(table: TomlTable, key: str) -> str:
    value: Any = table[key]
    if not isinstance(value, str):
        raise ConfigError(f"Invalid '{key}': expected a string")
    return value


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration.

    Attributes:
        level (int | None): Rule level; ``None`` when no level was chosen.
        paths (tuple[str, ...]): Paths to analyse when none are given on the CLI.
        ignore_errors (tuple[str, ...]): Regexes of ignorable messages.
        memory_limit_file (Path): Memory ceiling record file.
        cache_dir (Path): Cache directory (changed-files mode).
        error_format (str): Error formatter name.
        config_file (Path | None): Config file the settings were read from.
    """

    level: int | None
    paths: tuple[str, ...]
    ignore_errors: tuple[str, ...]
    memory_limit_file: Path
    cache_dir: Path
    error_format: str
    config_file: Path | None

    @property
    def default_level_used(self) -> bool:
        """Return True if no rule level was chosen explicitly."""
        return self.level is None

    @property
    def effective_level(self) -> int:
        """Return the rule level to run with."""
        return DEFAULT_LEVEL if self.level is None else self.level

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this configuration."""
        return MutableConfig(
            level=self.level,
            paths=list(self.paths),
            ignore_errors=list(self.ignore_errors),
            memory_limit_file=self.memory_limit_file,
            cache_dir=self.cache_dir,
            error_format=self.error_format,
            config_file=self.config_file,
        )


@dataclass
class MutableConfig:
    """Mutable configuration builder; see `Config` for field semantics."""

    level: int | None = None
    paths: list[str] = field(default_factory=lambda: [])
    ignore_errors: list[str] = field(default_factory=lambda: [])
    memory_limit_file: Path = DEFAULT_MEMORY_LIMIT_FILE
    cache_dir: Path = DEFAULT_CACHE_DIR
    error_format: str = DEFAULT_ERROR_FORMAT
    config_file: Path | None = None

    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder holding the runtime defaults."""
        return cls()

    def apply_toml(self, table: TomlTable, *, config_file: Path) -> MutableConfig:
        """Layer settings from a parsed config table on top of this builder.

        Args:
            table (TomlTable): Settings table (top level of ``probity.toml`` or
                ``[tool.probity]``).
            config_file (Path): File the table came from; relative paths resolve
                against its directory.

        Returns:
            MutableConfig: ``self``, for chaining.

        Raises:
            ConfigError: If a known key has an invalid value.
        """
        base: Path = config_file.parent
        for key in sorted(set(table) - KNOWN_KEYS):
            logger.warning("Unknown configuration key '%s' in %s", key, config_file)

        if KEY_LEVEL in table:
            self.level = parse_level(table[KEY_LEVEL])
        if KEY_PATHS in table:
            self.paths = [str((base / p).resolve()) for p in _string_list(table, KEY_PATHS)]
        if KEY_IGNORE_ERRORS in table:
            self.ignore_errors = _string_list(table, KEY_IGNORE_ERRORS)
        if KEY_MEMORY_LIMIT_FILE in table:
            self.memory_limit_file = (base / _string(table, KEY_MEMORY_LIMIT_FILE)).resolve()
        if KEY_CACHE_DIR in table:
            self.cache_dir = (base / _string(table, KEY_CACHE_DIR)).resolve()
        if KEY_ERROR_FORMAT in table:
            self.error_format = _string(table, KEY_ERROR_FORMAT)
        self.config_file = config_file
        return self

    def apply_overrides(self, overrides: Mapping[str, Any]) -> MutableConfig:
        """Layer CLI overrides; ``None`` values (options not given) are skipped.

        Returns:
            MutableConfig: ``self``, for chaining.
        """
        level: Any = overrides.get(KEY_LEVEL)
        if level is not None:
            self.level = parse_level(level)
        paths: Any = overrides.get(KEY_PATHS)
        if paths:
            self.paths = [str(Path(p).resolve()) for p in paths]
        memory_limit_file: Any = overrides.get(KEY_MEMORY_LIMIT_FILE)
        if memory_limit_file is not None:
            self.memory_limit_file = Path(memory_limit_file).resolve()
        error_format: Any = overrides.get(KEY_ERROR_FORMAT)
        if error_format is not None:
            self.error_format = str(error_format)
        return self

    def freeze(self) -> Config:
        """Return an immutable snapshot."""
        return Config(
            level=self.level,
            paths=tuple(self.paths),
            ignore_errors=tuple(self.ignore_errors),
            memory_limit_file=self.memory_limit_file,
            cache_dir=self.cache_dir,
            error_format=self.error_format,
            config_file=self.config_file,
        )


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except TomlkitParseError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    data: Any = doc.unwrap()
    return cast("TomlTable", data) if isinstance(data, dict) else {}


def _settings_table(path: Path) -> TomlTable | None:
    """Return the Probity settings table of ``path``, or None if it has none."""
    data: TomlTable = load_toml_dict(path)
    if path.name != PYPROJECT_TOML_NAME:
        return data
    tool: Any = data.get("tool", {})
    section: Any = tool.get(PYPROJECT_TOOL_SECTION) if isinstance(tool, dict) else None
    return cast("TomlTable", section) if isinstance(section, dict) else None


def discover_config_file(cwd: Path) -> Path | None:
    """Return the config file to use for ``cwd``, or None."""
    candidate: Path = cwd / PROBITY_TOML_NAME
    if candidate.is_file():
        return candidate
    pyproject: Path = cwd / PYPROJECT_TOML_NAME
    if pyproject.is_file() and _settings_table(pyproject) is not None:
        return pyproject
    return None


def load_config(
    *,
    config_path: Path | None = None,
    cwd: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Resolve the configuration for a run.

    Args:
        config_path (Path | None): Explicit config file (``--configuration``).
        cwd (Path | None): Directory used for discovery; defaults to the CWD.
        overrides (Mapping[str, Any] | None): CLI overrides (``None`` = not given).

    Returns:
        Config: The frozen configuration.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    builder: MutableConfig = MutableConfig.from_defaults()

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Configuration file {config_path} does not exist")
        path: Path | None = config_path.resolve()
    else:
        path = discover_config_file((cwd or Path.cwd()).resolve())

    if path is not None:
        table: TomlTable | None = _settings_table(path)
        logger.info("Using configuration file %s", path)
        builder.apply_toml(table or {}, config_file=path)

    builder.apply_overrides(overrides or {})
    return builder.freeze()
