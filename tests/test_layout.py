"""Unit tests for viewport geometry."""

from __future__ import annotations

import pytest

from domain.teleprompter import GlyphScale
from service.layout import compute_geometry, compute_horizontal_padding


def test_padding_and_medium_scale_scenario() -> None:
    """Reserve padding on both sides and one spare glyph column."""
    geometry = compute_geometry(80, 25, GlyphScale.MEDIUM, 10)
    assert geometry.content_x == 8
    assert geometry.content_width == 64
    assert geometry.glyph_width == 8
    assert geometry.max_chars_per_line == 7
    assert geometry.content_height == 24
    assert geometry.visible_line_count == 6


@pytest.mark.parametrize(
    ("scale", "expected_chars", "expected_lines"),
    [
        (GlyphScale.SMALL, 24, 10),
        (GlyphScale.MEDIUM, 11, 10),
        (GlyphScale.LARGE, 11, 5),
    ],
)
def test_scale_tiers(scale: GlyphScale, expected_chars: int, expected_lines: int) -> None:
    """Derive character budget and line count from each glyph tier."""
    geometry = compute_geometry(100, 41, scale, 0)
    assert geometry.max_chars_per_line == expected_chars
    assert geometry.visible_line_count == expected_lines


def test_tiny_terminal_keeps_one_character() -> None:
    """Never drop the character budget below one."""
    geometry = compute_geometry(5, 2, GlyphScale.LARGE, 40)
    assert geometry.max_chars_per_line == 1
    assert geometry.visible_line_count == 0
    assert geometry.content_width >= 0


def test_zero_sized_terminal_saturates() -> None:
    """Clamp negative dimensions to zero."""
    geometry = compute_geometry(0, 0, GlyphScale.SMALL, 10)
    assert geometry.content_width == 0
    assert geometry.content_height == 0
    assert geometry.visible_line_count == 0


def test_horizontal_padding_rounds_down() -> None:
    """Truncate fractional padding columns."""
    assert compute_horizontal_padding(99, 10) == 9
    assert compute_horizontal_padding(80, 0) == 0
