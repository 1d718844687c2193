"""Domain types and parsing for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import Iterable, Tuple

EMPTY_TEXT_CODE = "tui_prompter.input.empty_text"
INPUT_FILE_CODE = "tui_prompter.input.file_error"
STDIN_READ_CODE = "tui_prompter.input.stdin_error"
EDITOR_CODE = "tui_prompter.input.editor_failed"
INVALID_CONFIG_CODE = "tui_prompter.config.invalid"
INVALID_COLOR_CODE = "tui_prompter.config.invalid_color"
TERMINAL_CODE = "tui_prompter.terminal.unavailable"

HEX_COLOR_PATTERN = re.compile(r"^#(..)(..)(..)$")
HEX_CHANNEL_PATTERN = re.compile(r"^[0-9a-f]{2}$")
LOGGER = logging.getLogger("tui_prompter")


class PrompterError(RuntimeError):
    """Error with a stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class GlyphScale(int, Enum):
    """Rendered character size tiers."""

    SMALL = 1
    MEDIUM = 2
    LARGE = 3

    @property
    def glyph_width(self) -> int:
        """Terminal columns used by one character."""
        return 4 if self is GlyphScale.SMALL else 8

    @property
    def glyph_height(self) -> int:
        """Terminal rows used by one display line."""
        return 8 if self is GlyphScale.LARGE else 4


class NamedColor(str, Enum):
    """ANSI colors addressable by name."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "darkgray"
    LIGHT_RED = "lightred"
    LIGHT_GREEN = "lightgreen"
    LIGHT_YELLOW = "lightyellow"
    LIGHT_BLUE = "lightblue"
    LIGHT_MAGENTA = "lightmagenta"
    LIGHT_CYAN = "lightcyan"
    WHITE = "white"


COLOR_ALIASES = {
    "grey": NamedColor.GRAY,
    "darkgrey": NamedColor.DARK_GRAY,
}
NAMED_COLOR_VALUES = frozenset(color.value for color in NamedColor)


@dataclass(frozen=True)
class Color:
    """A named ANSI color or an RGB triple."""

    name: NamedColor | None = None
    rgb: Tuple[int, int, int] | None = None

    def __post_init__(self) -> None:
        if (self.name is None) == (self.rgb is None):
            raise PrompterError(
                INVALID_COLOR_CODE, "color needs exactly one of name or rgb"
            )


WHITE = Color(name=NamedColor.WHITE)


@dataclass(frozen=True)
class DisplaySettings:
    """Display configuration, clamped by the caller before construction."""

    font_scale: GlyphScale
    text_color: Color
    background_color: Color
    horizontal_padding: int


@dataclass(frozen=True)
class Document:
    """Raw text lines as supplied at startup."""

    lines: Tuple[str, ...]

    @classmethod
    def from_text(cls, text_value: str) -> "Document":
        """Split content into lines, dropping a trailing newline."""
        return cls(lines=tuple(text_value.replace("\ufeff", "").splitlines()))

    def __len__(self) -> int:
        return len(self.lines)


def parse_hex_channel(channel_text: str) -> int:
    """Parse a two-digit hex channel, falling back to full intensity."""
    if not HEX_CHANNEL_PATTERN.fullmatch(channel_text):
        return 255
    return int(channel_text, 16)


def parse_color(color_value: str) -> Color:
    """Resolve a color name or #RRGGBB value.

    Unknown names resolve to white; malformed hex channels resolve to 255.
    """
    normalized = color_value.strip().lower()
    alias = COLOR_ALIASES.get(normalized)
    if alias is not None:
        return Color(name=alias)
    if normalized in NAMED_COLOR_VALUES:
        return Color(name=NamedColor(normalized))

    match_value = HEX_COLOR_PATTERN.fullmatch(normalized)
    if match_value:
        return Color(
            rgb=(
                parse_hex_channel(match_value.group(1)),
                parse_hex_channel(match_value.group(2)),
                parse_hex_channel(match_value.group(3)),
            )
        )

    LOGGER.warning(
        "%s: unknown color %r, using white", INVALID_COLOR_CODE, color_value
    )
    return WHITE


def wrap_text(text_value: str, max_chars: int) -> Tuple[str, ...]:
    """Wrap one line to max_chars, keeping words whole where they fit."""
    if max_chars <= 0:
        return ()

    lines: list[str] = []
    current_line = ""

    for word in text_value.split():
        if len(word) > max_chars:
            if current_line:
                lines.append(current_line)
                current_line = ""
            remaining = word
            while len(remaining) > max_chars:
                lines.append(remaining[:max_chars])
                remaining = remaining[max_chars:]
            current_line = remaining
        elif not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_chars:
            current_line = f"{current_line} {word}"
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    if not lines and text_value:
        lines.append("")

    return tuple(lines)


def wrap_document(lines: Iterable[str], max_chars: int) -> Tuple[str, ...]:
    """Wrap every source line; blank lines become one empty display line."""
    wrapped: list[str] = []
    for line in lines:
        if not line.strip():
            wrapped.append("")
            continue
        wrapped.extend(wrap_text(line, max_chars))
    return tuple(wrapped)
