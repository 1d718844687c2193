"""Configuration file loading and CLI overrides for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import os
from pathlib import Path
import tomllib
from typing import Any, Mapping

from domain.teleprompter import (
    INVALID_CONFIG_CODE,
    DisplaySettings,
    GlyphScale,
    PrompterError,
    parse_color,
)

CONFIG_DIR_NAME = "tui_prompter"
CONFIG_FILE_NAME = "config.toml"
DEFAULT_FONT_SCALE = 2
DEFAULT_TEXT_COLOR = "white"
DEFAULT_BACKGROUND_COLOR = "black"
DEFAULT_HORIZONTAL_PADDING = 10
DEFAULT_SPEED = 2.0
MIN_FONT_SCALE = 1
MAX_FONT_SCALE = 3
MIN_PADDING = 0
MAX_PADDING = 40
LOGGER = logging.getLogger("tui_prompter")


@dataclass(frozen=True)
class PrompterConfig:
    """Merged settings before color resolution."""

    font_scale: int = DEFAULT_FONT_SCALE
    text_color: str = DEFAULT_TEXT_COLOR
    background_color: str = DEFAULT_BACKGROUND_COLOR
    horizontal_padding: int = DEFAULT_HORIZONTAL_PADDING
    speed: float = DEFAULT_SPEED

    def to_display_settings(self) -> DisplaySettings:
        """Resolve colors and clamp ranges into DisplaySettings."""
        return DisplaySettings(
            font_scale=GlyphScale(clamp_int(self.font_scale, MIN_FONT_SCALE, MAX_FONT_SCALE)),
            text_color=parse_color(self.text_color),
            background_color=parse_color(self.background_color),
            horizontal_padding=clamp_int(self.horizontal_padding, MIN_PADDING, MAX_PADDING),
        )


def clamp_int(value: int, min_value: int, max_value: int) -> int:
    """Clamp an integer between min and max."""
    return max(min_value, min(max_value, value))


def default_config_path(env: Mapping[str, str]) -> Path:
    """Return $XDG_CONFIG_HOME/tui_prompter/config.toml or the ~/.config fallback."""
    config_home = env.get("XDG_CONFIG_HOME", "").strip()
    base_dir = Path(config_home) if config_home else Path.home() / ".config"
    return base_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def read_table(document: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    table = document.get(key, {})
    if not isinstance(table, dict):
        raise PrompterError(INVALID_CONFIG_CODE, f"[{key}] must be a table")
    return table


def read_typed(
    table: Mapping[str, Any], key: str, expected: type | tuple[type, ...], fallback: Any
) -> Any:
    """Read a value of the expected type, rejecting booleans posing as numbers."""
    if key not in table:
        return fallback
    value = table[key]
    if isinstance(value, bool) or not isinstance(value, expected):
        raise PrompterError(INVALID_CONFIG_CODE, f"{key} has an invalid type")
    return value


def parse_config(document: Mapping[str, Any]) -> PrompterConfig:
    """Build a PrompterConfig from a parsed TOML document."""
    defaults = PrompterConfig()
    display = read_table(document, "display")
    scroll = read_table(document, "scroll")
    speed = float(read_typed(scroll, "speed", (int, float), defaults.speed))
    if speed <= 0:
        raise PrompterError(INVALID_CONFIG_CODE, "speed must be positive")
    return PrompterConfig(
        font_scale=read_typed(display, "font_scale", int, defaults.font_scale),
        text_color=read_typed(display, "text_color", str, defaults.text_color),
        background_color=read_typed(
            display, "background_color", str, defaults.background_color
        ),
        horizontal_padding=read_typed(
            display, "horizontal_padding", int, defaults.horizontal_padding
        ),
        speed=speed,
    )


def load_config_file(config_path: Path) -> PrompterConfig:
    """Load a config file; a missing file yields defaults."""
    if not config_path.is_file():
        return PrompterConfig()
    try:
        with open(config_path, "rb") as file_handle:
            document = tomllib.load(file_handle)
    except OSError as exc:
        raise PrompterError(
            INVALID_CONFIG_CODE, f"cannot read config file {config_path}: {exc}"
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise PrompterError(
            INVALID_CONFIG_CODE, f"invalid TOML in {config_path}: {exc}"
        ) from exc
    return parse_config(document)


def load_config_or_default(config_path: Path) -> PrompterConfig:
    """Load a config file, logging and falling back to defaults on error."""
    try:
        return load_config_file(config_path)
    except PrompterError as exc:
        LOGGER.warning("%s: %s; using defaults", exc.code, str(exc).strip())
        return PrompterConfig()


def apply_overrides(
    config: PrompterConfig,
    speed: float | None = None,
    font_scale: int | None = None,
    text_color: str | None = None,
    background_color: str | None = None,
    horizontal_padding: int | None = None,
) -> PrompterConfig:
    """Layer command-line values over file settings."""
    changes: dict[str, Any] = {}
    if speed is not None:
        changes["speed"] = speed
    if font_scale is not None:
        changes["font_scale"] = clamp_int(font_scale, MIN_FONT_SCALE, MAX_FONT_SCALE)
    if text_color is not None:
        changes["text_color"] = text_color
    if background_color is not None:
        changes["background_color"] = background_color
    if horizontal_padding is not None:
        changes["horizontal_padding"] = clamp_int(
            horizontal_padding, MIN_PADDING, MAX_PADDING
        )
    return replace(config, **changes)


def resolve_config_path(env: Mapping[str, str] | None = None) -> Path:
    return default_config_path(os.environ if env is None else env)
