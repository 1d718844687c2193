"""Unit tests for key decoding and palette mapping."""

from __future__ import annotations

import curses

import pytest

from domain.teleprompter import Color, NamedColor
from service.input_dispatch import Key, KeyEvent
from terminal_screen import (
    decode_key,
    nearest_basic_index,
    nearest_xterm256_index,
    resolve_color_index,
)


@pytest.mark.parametrize(
    ("raw_key", "expected"),
    [
        (curses.KEY_UP, KeyEvent(Key.UP)),
        (curses.KEY_DOWN, KeyEvent(Key.DOWN)),
        (curses.KEY_HOME, KeyEvent(Key.HOME)),
        (curses.KEY_END, KeyEvent(Key.END)),
        (curses.KEY_PPAGE, KeyEvent(Key.PAGE_UP)),
        (curses.KEY_NPAGE, KeyEvent(Key.PAGE_DOWN)),
        ("\x1b", KeyEvent(Key.ESCAPE)),
        ("\x03", KeyEvent("c", ctrl=True)),
        ("q", KeyEvent("q")),
        (" ", KeyEvent(" ")),
        ("é", KeyEvent("é")),
    ],
)
def test_decode_key(raw_key: int | str, expected: KeyEvent) -> None:
    """Translate curses input into key events."""
    assert decode_key(raw_key) == expected


def test_decode_unknown_special_key_is_ignored() -> None:
    """Drop special keys without a binding, such as resize notifications."""
    assert decode_key(curses.KEY_RESIZE) is None


def test_named_colors_use_ansi_indices() -> None:
    """Use the 16-color index, folding to 8 colors on small palettes."""
    white = Color(name=NamedColor.WHITE)
    assert resolve_color_index(white, 256) == 15
    assert resolve_color_index(white, 8) == 7
    assert resolve_color_index(Color(name=NamedColor.BLUE), 16) == 4


def test_rgb_colors_use_xterm_palette_when_available() -> None:
    """Map RGB to the 256-color cube or gray ramp."""
    assert resolve_color_index(Color(rgb=(255, 0, 0)), 256) == 196
    assert resolve_color_index(Color(rgb=(250, 10, 10)), 8) == 1


@pytest.mark.parametrize(
    ("rgb", "expected"),
    [
        ((0, 0, 0), 16),
        ((255, 255, 255), 231),
        ((0, 0, 51), 17),
        ((128, 128, 128), 244),
    ],
)
def test_nearest_xterm256_index(rgb: tuple[int, int, int], expected: int) -> None:
    """Pick the closest cube or gray entry."""
    assert nearest_xterm256_index(rgb) == expected


def test_nearest_basic_index() -> None:
    """Pick the closest of the eight basic colors."""
    assert nearest_basic_index((10, 200, 10)) == 2
    assert nearest_basic_index((230, 230, 230)) == 7
