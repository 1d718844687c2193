"""Per-frame render instructions for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Tuple

from domain.teleprompter import Color, DisplaySettings, Document, wrap_document
from service.big_text import rasterize_line
from service.layout import ViewportGeometry, compute_geometry
from service.scroll_engine import ScrollEngine

PAUSED_INDICATOR = "[PAUSED] "
KEY_LEGEND = "[Space] Pause | [↑/↓] Scroll | [+/-] Speed | [r] Reset | [q] Quit"
LOGGER = logging.getLogger("tui_prompter")


@dataclass(frozen=True)
class LineDraw:
    """Block-character rows for one display line, positioned on screen."""

    text: str
    x: int
    y: int
    rows: Tuple[str, ...]


@dataclass(frozen=True)
class StatusLine:
    """Single status row drawn across the bottom of the screen."""

    x: int
    y: int
    text: str


@dataclass(frozen=True)
class RenderedFrame:
    """Everything the terminal painter needs for one frame."""

    width: int
    height: int
    foreground: Color
    background: Color
    lines: Tuple[LineDraw, ...]
    status: StatusLine


class WrapCache:
    """Wrapped lines, valid for a single character budget."""

    def __init__(self) -> None:
        self.max_chars: int | None = None
        self.lines: Tuple[str, ...] = ()

    def is_valid_for(self, max_chars: int) -> bool:
        return self.max_chars == max_chars

    def rebuild(self, document: Document, max_chars: int) -> None:
        self.lines = wrap_document(document.lines, max_chars)
        self.max_chars = max_chars
        LOGGER.debug(
            "rewrapped %d source lines into %d display lines at %d chars",
            len(document),
            len(self.lines),
            max_chars,
        )


def visible_line_index(scroll_offset: float, visible_line_count: int, row: int) -> int:
    """Wrapped-line index shown on a viewport row (bottom-anchored)."""
    return math.floor(scroll_offset) - visible_line_count + row


def format_status(engine: ScrollEngine, total_lines: int) -> str:
    """Build the status row text."""
    pause_indicator = PAUSED_INDICATOR if engine.paused else ""
    current_line = min(math.floor(engine.scroll_offset), total_lines)
    return (
        f"{pause_indicator}Speed: {engine.speed:.1f} | "
        f"{current_line}/{total_lines} | {KEY_LEGEND}"
    )


def center_column(area_x: int, area_width: int, content_width: int) -> int:
    return area_x + max(0, (area_width - content_width) // 2)


def clip_rows(rows: Tuple[str, ...], width: int) -> Tuple[str, ...]:
    """Trim rows that are wider than the content area, keeping the middle."""
    if not rows or len(rows[0]) <= width:
        return rows
    start = (len(rows[0]) - width) // 2
    return tuple(row[start : start + width] for row in rows)


class FrameRenderer:
    """Reconcile layout with playback state and emit draw instructions."""

    def __init__(
        self, document: Document, settings: DisplaySettings, engine: ScrollEngine
    ) -> None:
        self.document = document
        self.settings = settings
        self.engine = engine
        self.wrap_cache = WrapCache()
        self.geometry: ViewportGeometry | None = None

    @property
    def wrapped_lines(self) -> Tuple[str, ...]:
        return self.wrap_cache.lines

    def update_layout(self, terminal_width: int, terminal_height: int) -> ViewportGeometry:
        """Recompute geometry, rewrapping only when the character budget changed."""
        geometry = compute_geometry(
            terminal_width,
            terminal_height,
            self.settings.font_scale,
            self.settings.horizontal_padding,
        )
        if not self.wrap_cache.is_valid_for(geometry.max_chars_per_line):
            self.wrap_cache.rebuild(self.document, geometry.max_chars_per_line)
        self.geometry = geometry
        self.engine.update_extent(len(self.wrap_cache.lines), geometry.visible_line_count)
        return geometry

    def build_line_draws(self, geometry: ViewportGeometry) -> Tuple[LineDraw, ...]:
        wrapped_lines = self.wrap_cache.lines
        draws: list[LineDraw] = []
        area_bottom = geometry.content_y + geometry.content_height
        for row in range(geometry.visible_line_count):
            line_index = visible_line_index(
                self.engine.scroll_offset, geometry.visible_line_count, row
            )
            if line_index < 0 or line_index >= len(wrapped_lines):
                continue
            text_value = wrapped_lines[line_index]
            if not text_value:
                continue

            line_y = geometry.content_y + row * geometry.glyph_height
            if line_y + geometry.glyph_height > area_bottom:
                continue
            rows = clip_rows(
                rasterize_line(text_value, self.settings.font_scale),
                geometry.content_width,
            )
            draws.append(
                LineDraw(
                    text=text_value,
                    x=center_column(
                        geometry.content_x, geometry.content_width, len(rows[0])
                    ),
                    y=line_y,
                    rows=rows,
                )
            )
        return tuple(draws)

    def render(self, terminal_width: int, terminal_height: int) -> RenderedFrame:
        """Produce draw instructions for the current terminal size."""
        geometry = self.update_layout(terminal_width, terminal_height)
        status_text = format_status(self.engine, len(self.wrap_cache.lines))
        if len(status_text) > terminal_width:
            status_text = status_text[: max(0, terminal_width)]
        status = StatusLine(
            x=center_column(0, terminal_width, len(status_text)),
            y=max(0, terminal_height - 1),
            text=status_text,
        )
        return RenderedFrame(
            width=terminal_width,
            height=terminal_height,
            foreground=self.settings.text_color,
            background=self.settings.background_color,
            lines=self.build_line_draws(geometry),
            status=status,
        )
