"""Unit tests for per-frame render instructions."""

from __future__ import annotations

from domain.teleprompter import Color, DisplaySettings, Document, GlyphScale, NamedColor
from service.render_frame import (
    KEY_LEGEND,
    FrameRenderer,
    format_status,
    visible_line_index,
)
from service.scroll_engine import ScrollEngine


class FrozenClock:
    """Clock that never moves."""

    def now(self) -> float:
        return 0.0


def build_renderer(
    text_value: str,
    scale: GlyphScale = GlyphScale.SMALL,
    padding: int = 0,
) -> tuple[FrameRenderer, ScrollEngine]:
    """Create a renderer with a frozen clock."""
    document = Document.from_text(text_value)
    settings = DisplaySettings(
        font_scale=scale,
        text_color=Color(name=NamedColor.GREEN),
        background_color=Color(rgb=(0, 0, 51)),
        horizontal_padding=padding,
    )
    engine = ScrollEngine(speed=2.0, raw_line_count=len(document), clock=FrozenClock())
    return FrameRenderer(document, settings, engine), engine


def test_visible_line_index_is_bottom_anchored() -> None:
    """Map the last viewport row to the most recently revealed line."""
    assert visible_line_index(0.0, 3, 2) == -1
    assert visible_line_index(1.0, 3, 2) == 0
    assert visible_line_index(4.7, 3, 0) == 1


def test_first_frame_is_blank_until_scrolled() -> None:
    """Show nothing at offset zero since content enters from the bottom."""
    renderer, _ = build_renderer("one two three")
    frame = renderer.render(40, 9)
    assert frame.lines == ()
    assert frame.status.y == 8


def test_lines_enter_from_the_bottom() -> None:
    """Place the first line on the bottom row after one line of scroll."""
    renderer, engine = build_renderer("alpha\nbeta\ngamma")
    engine.state.scroll_offset = 1.0
    frame = renderer.render(40, 9)
    assert [line.text for line in frame.lines] == ["alpha"]
    assert frame.lines[0].y == 4

    engine.state.scroll_offset = 2.5
    frame = renderer.render(40, 9)
    assert [(line.text, line.y) for line in frame.lines] == [("alpha", 0), ("beta", 4)]


def test_lines_are_centered_within_padding() -> None:
    """Center rasterized rows inside the padded content area."""
    renderer, engine = build_renderer("ab", padding=10)
    engine.state.scroll_offset = 1.0
    frame = renderer.render(40, 5)
    line = frame.lines[0]
    assert len(line.rows) == 4
    assert len(line.rows[0]) == 8
    # content area starts at 4 and is 32 wide
    assert line.x == 4 + (32 - 8) // 2


def test_empty_lines_emit_no_draws() -> None:
    """Skip blank display lines."""
    renderer, engine = build_renderer("top\n\nbottom")
    engine.state.scroll_offset = 2.0
    frame = renderer.render(40, 9)
    assert [line.text for line in frame.lines] == ["top"]


def test_rewrap_only_when_character_budget_changes() -> None:
    """Reuse wrapped lines until the character budget changes."""
    renderer, engine = build_renderer("the quick brown fox jumps")
    renderer.render(40, 9)
    first_lines = renderer.wrapped_lines
    assert renderer.wrap_cache.max_chars == 9

    renderer.render(41, 13)
    assert renderer.wrapped_lines is first_lines

    renderer.render(80, 9)
    assert renderer.wrap_cache.max_chars == 19
    assert renderer.wrapped_lines == ("the quick brown fox", "jumps")
    assert engine.wrapped_line_count == 2


def test_render_updates_engine_extent() -> None:
    """Report wrapped line count and visible height to the engine."""
    renderer, engine = build_renderer("a\nb\nc\nd")
    renderer.render(40, 13)
    assert engine.total_lines == 4
    assert engine.visible_height == 3
    assert engine.max_scroll == 7.0


def test_frame_carries_colors_and_size() -> None:
    """Pass configured colors and terminal size through to the painter."""
    renderer, _ = build_renderer("hello", scale=GlyphScale.LARGE)
    frame = renderer.render(60, 20)
    assert frame.width == 60
    assert frame.height == 20
    assert frame.foreground == Color(name=NamedColor.GREEN)
    assert frame.background == Color(rgb=(0, 0, 51))


def test_status_line_text() -> None:
    """Show pause marker, speed, progress and key legend."""
    renderer, engine = build_renderer("a\nb\nc")
    renderer.render(200, 9)
    engine.state.scroll_offset = 2.9
    assert format_status(engine, 3) == f"Speed: 2.0 | 2/3 | {KEY_LEGEND}"

    engine.toggle_pause()
    engine.speed_up()
    engine.state.scroll_offset = 40.0
    assert format_status(engine, 3) == f"[PAUSED] Speed: 2.5 | 3/3 | {KEY_LEGEND}"


def test_status_line_is_centered_and_clipped() -> None:
    """Center the status row and trim it to the terminal width."""
    renderer, _ = build_renderer("a")
    wide = renderer.render(200, 9).status
    assert wide.x == (200 - len(wide.text)) // 2
    narrow = renderer.render(20, 9).status
    assert len(narrow.text) == 20
    assert narrow.x == 0


def test_wide_lines_are_clipped_to_content_area() -> None:
    """Trim rows that cannot fit the content width."""
    renderer, engine = build_renderer("abcdefghijkl", scale=GlyphScale.MEDIUM)
    engine.state.scroll_offset = 1.0
    frame = renderer.render(10, 5)
    # budget is one character, so every wrapped line holds one glyph of width 8
    assert all(len(row) <= 10 for line in frame.lines for row in line.rows)
