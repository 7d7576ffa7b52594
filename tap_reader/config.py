"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

@dataclass
class TapConfig:
    """Configuration for parsing TAP reports.

    Attributes:
        indent_level: Number of spaces that indent a test's YAML block.
        iter_limit: Maximum number of top-level lines parsed after the
            version header.
        yaml_line_limit: Maximum number of lines inside a YAML block,
            delimiters excluded.
        max_file_size: Maximum file size in bytes that will be read.

    Examples:
        TapConfig(indent_level=4, iter_limit=10_000)
    """

    # Grammar
    indent_level: int = 2

    # Limits
    iter_limit: int = 500
    yaml_line_limit: int = 10_000
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`iter_limit` must be a positive integer")
    """


def load_config(search_path: Path) -> TapConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.tap-reader]`` table from `pyproject.toml` and the
    ``[tap-reader]`` or ``[tool.tap-reader]`` table from `.tap-reader.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TapConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("reports"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "tap-reader")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".tap-reader.toml",
            table_paths=[("tap-reader",), ("tool", "tap-reader")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TapConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TapConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TapConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return TapConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return TapConfig()

    # TOML keys use dashes, dataclass fields use underscores
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return TapConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: TapConfig) -> None:
    """Validate a `TapConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a value is not an integer or is out of range.

    Examples:
        validate_config(TapConfig(indent_level=4))
    """
    _ensure_integers(
        {
            "indent_level": config.indent_level,
            "iter_limit": config.iter_limit,
            "yaml_line_limit": config.yaml_line_limit,
            "max_file_size": config.max_file_size,
        }
    )

    if config.indent_level < 0:
        raise ConfigError("`indent_level` must be a non-negative integer")

    _ensure_positive(
        {
            "iter_limit": config.iter_limit,
            "yaml_line_limit": config.yaml_line_limit,
            "max_file_size": config.max_file_size,
        }
    )


def apply_overrides(config: TapConfig, **overrides: object) -> TapConfig:
    """Apply override values to a `TapConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TapConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TapConfig`.

    Examples:
        updated = apply_overrides(config, iter_limit=2_000)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TapConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TapConfig: Validated configuration ready for parsing.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_level=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
