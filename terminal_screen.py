"""Curses terminal setup, key decoding and frame painting for tui_prompter."""

from __future__ import annotations

import curses
import logging
import os
import sys
from typing import Any, Tuple

from domain.teleprompter import TERMINAL_CODE, Color, NamedColor, PrompterError
from service.input_dispatch import Key, KeyEvent
from service.render_frame import RenderedFrame

POLL_TIMEOUT_MS = 16
ESCAPE_DELAY_MS = "25"
TEXT_PAIR = 1
TTY_PATH = "/dev/tty"
ANSI_INDEX = {
    NamedColor.BLACK: 0,
    NamedColor.RED: 1,
    NamedColor.GREEN: 2,
    NamedColor.YELLOW: 3,
    NamedColor.BLUE: 4,
    NamedColor.MAGENTA: 5,
    NamedColor.CYAN: 6,
    NamedColor.GRAY: 7,
    NamedColor.DARK_GRAY: 8,
    NamedColor.LIGHT_RED: 9,
    NamedColor.LIGHT_GREEN: 10,
    NamedColor.LIGHT_YELLOW: 11,
    NamedColor.LIGHT_BLUE: 12,
    NamedColor.LIGHT_MAGENTA: 13,
    NamedColor.LIGHT_CYAN: 14,
    NamedColor.WHITE: 15,
}
BASIC_RGB = (
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
)
CUBE_LEVELS = (0, 95, 135, 175, 215, 255)
SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
}
LOGGER = logging.getLogger("tui_prompter")


def color_distance(first: Tuple[int, int, int], second: Tuple[int, int, int]) -> int:
    return sum((a - b) ** 2 for a, b in zip(first, second))


def nearest_basic_index(rgb: Tuple[int, int, int]) -> int:
    """Nearest of the eight basic ANSI colors."""
    return min(range(len(BASIC_RGB)), key=lambda index: color_distance(rgb, BASIC_RGB[index]))


def nearest_cube_level(channel: int) -> int:
    return min(range(len(CUBE_LEVELS)), key=lambda index: abs(CUBE_LEVELS[index] - channel))


def nearest_xterm256_index(rgb: Tuple[int, int, int]) -> int:
    """Nearest xterm-256 palette entry from the color cube or the gray ramp."""
    red, green, blue = (nearest_cube_level(channel) for channel in rgb)
    cube_index = 16 + 36 * red + 6 * green + blue
    cube_rgb = (CUBE_LEVELS[red], CUBE_LEVELS[green], CUBE_LEVELS[blue])

    average = sum(rgb) // 3
    gray_step = max(0, min(23, (average - 8) // 10))
    gray_value = 8 + gray_step * 10
    gray_index = 232 + gray_step
    if color_distance(rgb, (gray_value,) * 3) < color_distance(rgb, cube_rgb):
        return gray_index
    return cube_index


def resolve_color_index(color: Color, available_colors: int) -> int:
    """Map a Color to a curses color number for the terminal's palette size."""
    if color.name is not None:
        index = ANSI_INDEX[color.name]
        return index if available_colors >= 16 else index % 8
    rgb = color.rgb if color.rgb is not None else (255, 255, 255)
    if available_colors >= 256:
        return nearest_xterm256_index(rgb)
    return nearest_basic_index(rgb)


def decode_key(raw_key: Any) -> KeyEvent | None:
    """Convert a curses get_wch result into a KeyEvent."""
    if isinstance(raw_key, int):
        special = SPECIAL_KEYS.get(raw_key)
        return KeyEvent(code=special) if special is not None else None
    if raw_key == "\x1b":
        return KeyEvent(code=Key.ESCAPE)
    if len(raw_key) == 1 and 1 <= ord(raw_key) <= 26:
        return KeyEvent(code=chr(ord(raw_key) + ord("a") - 1), ctrl=True)
    return KeyEvent(code=raw_key)


def attach_stdin_to_tty() -> None:
    """Point fd 0 at the controlling terminal after piped input was consumed."""
    if sys.stdin.isatty():
        return
    try:
        tty_fd = os.open(TTY_PATH, os.O_RDONLY)
    except OSError as exc:
        raise PrompterError(
            TERMINAL_CODE, f"cannot open {TTY_PATH} for keyboard input: {exc}"
        ) from exc
    os.dup2(tty_fd, 0)
    os.close(tty_fd)


class TerminalScreen:
    """Context manager owning the curses screen for the lifetime of the loop."""

    def __init__(self) -> None:
        self.screen: Any = None
        self.attributes = curses.A_NORMAL

    def __enter__(self) -> "TerminalScreen":
        attach_stdin_to_tty()
        os.environ.setdefault("ESCDELAY", ESCAPE_DELAY_MS)
        try:
            self.screen = curses.initscr()
        except curses.error as exc:
            raise PrompterError(TERMINAL_CODE, f"cannot initialize terminal: {exc}") from exc
        curses.noecho()
        curses.raw()
        self.screen.keypad(True)
        self.screen.timeout(POLL_TIMEOUT_MS)
        try:
            curses.curs_set(0)
        except curses.error:
            LOGGER.debug("terminal does not support hiding the cursor")
        if curses.has_colors():
            curses.start_color()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.screen is not None:
            self.screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()

    def size(self) -> Tuple[int, int]:
        """Return (width, height) in cells."""
        height, width = self.screen.getmaxyx()
        return width, height

    def configure_colors(self, foreground: Color, background: Color) -> None:
        if not curses.has_colors():
            return
        available_colors = curses.COLORS
        curses.init_pair(
            TEXT_PAIR,
            resolve_color_index(foreground, available_colors),
            resolve_color_index(background, available_colors),
        )
        self.attributes = curses.color_pair(TEXT_PAIR)
        self.screen.bkgd(" ", self.attributes)

    def put(self, y: int, x: int, text_value: str, attributes: int) -> None:
        try:
            self.screen.addstr(y, x, text_value, attributes)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen.
            pass

    def paint(self, frame: RenderedFrame) -> None:
        """Draw one frame and flush it to the terminal."""
        self.screen.erase()
        for line in frame.lines:
            for row_offset, row in enumerate(line.rows):
                self.put(line.y + row_offset, line.x, row, self.attributes)
        self.put(frame.status.y, frame.status.x, frame.status.text, self.attributes | curses.A_DIM)
        self.screen.refresh()

    def read_key(self) -> KeyEvent | None:
        """Wait up to the poll timeout for one key."""
        try:
            raw_key = self.screen.get_wch()
        except curses.error:
            return None
        return decode_key(raw_key)
