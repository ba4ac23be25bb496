"""Settings loader: parser defaults and search behaviour.

Settings live in ``settings_user.toml`` at the project root. The file is
optional; every key has a built-in default, and a partial file only overrides
the keys it names.

Usage::

    from dbcview.settings import load_settings, save_settings

    settings = load_settings()                          # reads settings_user.toml
    settings = load_settings("custom.toml")            # explicit path
    settings = load_settings(None)                      # pure defaults (no file)

    network = parse_dbc(text, settings.parser)
    hits = search_network(network, "rpm", settings.search)

    settings.search.case_sensitive = True
    save_settings(settings)                              # writes settings_user.toml
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Project root: two levels up from this file (dbcview/settings.py → repo root)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_USER_SETTINGS_PATH = _PROJECT_ROOT / "settings_user.toml"


@dataclass
class ParserSettings:
    """Fallback values used when a numeric DBC field fails to parse."""

    default_dlc: int = 8
    default_scale: float = 1.0


@dataclass
class SearchSettings:
    """Node-tree search behaviour."""

    case_sensitive: bool = False
    match_value_descriptions: bool = True
    path_separator: str = "."


@dataclass
class Settings:
    """Top-level settings container."""

    parser: ParserSettings = field(default_factory=ParserSettings)
    search: SearchSettings = field(default_factory=SearchSettings)
    settings_path: str | None = None  # path that was loaded, for diagnostics


# TOML section name → attribute on Settings
_SECTIONS: dict[str, str] = {
    "parser": "parser",
    "search": "search",
}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def _apply_section(section: str, target: ParserSettings | SearchSettings, data: dict) -> None:
    """Copy validated keys from ``data`` onto ``target``."""
    defaults = {f.name: getattr(target, f.name) for f in fields(target)}

    for key, value in data.items():
        if key not in defaults:
            logger.warning("Settings: unknown key '%s.%s', ignored", section, key)
            continue

        expected_type = type(defaults[key])
        # Accept int for float fields
        if expected_type is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        elif expected_type is int and isinstance(value, float) and value.is_integer():
            value = int(value)

        # bool is an int subclass; keep them apart
        type_ok = isinstance(value, expected_type) and (
            expected_type is bool or not isinstance(value, bool)
        )
        if not type_ok:
            logger.warning(
                "Settings: %s.%s expected %s, got %s, using default",
                section,
                key,
                expected_type.__name__,
                type(value).__name__,
            )
            continue

        # str settings are separators; an empty one cannot split a path
        if expected_type is str and not value:
            logger.warning("Settings: %s.%s must not be empty, using default", section, key)
            continue

        setattr(target, key, value)


def load_settings(path: str | Path | None = _USER_SETTINGS_PATH) -> Settings:
    """Load settings from a TOML file, falling back to defaults.

    Args:
        path: Path to settings file. Defaults to ``settings_user.toml``
              in the project root. If ``None``, returns pure defaults
              without reading any file. If the file doesn't exist, logs
              a debug message and returns defaults.

    Returns:
        A ``Settings`` instance with all values populated.
    """
    settings = Settings()

    if path is None:
        logger.debug("Settings: using built-in defaults (no file specified)")
        return settings

    toml_path = Path(path)
    if not toml_path.is_file():
        logger.debug("Settings: %s not found, using built-in defaults", toml_path)
        return settings

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Settings: failed to parse %s, using defaults", toml_path, exc_info=True)
        return settings

    settings.settings_path = str(toml_path)

    for section, value in data.items():
        if section not in _SECTIONS:
            logger.warning("Settings: unknown section [%s], ignored", section)
            continue
        if not isinstance(value, dict):
            logger.warning("Settings: [%s] is not a table, ignored", section)
            continue
        _apply_section(section, getattr(settings, _SECTIONS[section]), value)

    logger.info("Settings: loaded from %s", toml_path)
    return settings


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

# Human-readable descriptions for each setting, used in the generated TOML.
_DESCRIPTIONS: dict[str, str] = {
    "parser.default_dlc": "DLC used when a BO_ line carries a non-numeric length.",
    "parser.default_scale": "Scale used when an SG_ factor fails to parse.",
    "search.case_sensitive": "Match search queries case-sensitively.",
    "search.match_value_descriptions": "Also search value-table labels (VAL_).",
    "search.path_separator": (
        "Separator for qualified signal paths.\n"
        "# Node.Message.Signal with the default \".\""
    ),
}


def _format_value(value: bool | int | float | str) -> str:
    """Format a scalar for TOML output."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # Always show at least one decimal for float
        if value.is_integer():
            return f"{value:.1f}"
        return str(value)
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def save_settings(settings: Settings, path: str | Path | None = None) -> Path:
    """Write the current settings to a TOML file.

    Args:
        settings: The ``Settings`` instance to persist.
        path: Destination path. Falls back to ``settings.settings_path``,
              then to ``settings_user.toml`` in the project root.

    Returns:
        The ``Path`` that was written to.

    Raises:
        OSError: If the file cannot be written.
    """
    if path is not None:
        out = Path(path)
    elif settings.settings_path:
        out = Path(settings.settings_path)
    else:
        out = _USER_SETTINGS_PATH

    lines: list[str] = [
        "# " + "─" * 68,
        "# dbcview User Settings",
        "# " + "─" * 68,
        "# Delete a key (or the whole file) to fall back to the built-in default.",
        "# " + "─" * 68,
    ]

    for section, attr in _SECTIONS.items():
        group = getattr(settings, attr)
        defaults = type(group)()
        lines.append("")
        lines.append(f"[{section}]")
        lines.append("")
        for f in fields(group):
            desc = _DESCRIPTIONS.get(f"{section}.{f.name}", "")
            if desc:
                for desc_line in desc.split("\n"):
                    lines.append(f"# {desc_line}")
            val = getattr(group, f.name)
            default_val = getattr(defaults, f.name)
            if val != default_val:
                lines.append(f"# default: {_format_value(default_val)}")
            lines.append(f"{f.name} = {_format_value(val)}")
            lines.append("")

    out.write_text("\n".join(lines), encoding="utf-8")
    settings.settings_path = str(out)
    logger.info("Settings: saved to %s", out)
    return out
