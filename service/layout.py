"""Viewport geometry for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass

from domain.teleprompter import GlyphScale

STATUS_BAR_ROWS = 1


@dataclass(frozen=True)
class ViewportGeometry:
    """Content rectangle and glyph budget for one frame."""

    content_x: int
    content_y: int
    content_width: int
    content_height: int
    visible_line_count: int
    max_chars_per_line: int
    glyph_width: int
    glyph_height: int


def compute_horizontal_padding(terminal_width: int, padding_percent: int) -> int:
    """Columns removed from each side of the screen."""
    return max(0, terminal_width) * padding_percent // 100


def compute_geometry(
    terminal_width: int,
    terminal_height: int,
    font_scale: GlyphScale,
    padding_percent: int,
) -> ViewportGeometry:
    """Derive visible line count and character budget for a terminal size."""
    horizontal_pad = compute_horizontal_padding(terminal_width, padding_percent)
    content_width = max(0, terminal_width - horizontal_pad * 2)
    content_height = max(0, terminal_height - STATUS_BAR_ROWS)
    glyph_width = font_scale.glyph_width
    glyph_height = font_scale.glyph_height
    # One column is held back so the last glyph never touches the edge.
    max_chars = max(1, content_width // glyph_width - 1)
    return ViewportGeometry(
        content_x=horizontal_pad,
        content_y=0,
        content_width=content_width,
        content_height=content_height,
        visible_line_count=content_height // glyph_height,
        max_chars_per_line=max_chars,
        glyph_width=glyph_width,
        glyph_height=glyph_height,
    )
