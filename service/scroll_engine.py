"""Playback state and time-driven scrolling for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Protocol

MIN_SPEED = 0.5
MAX_SPEED = 20.0
SPEED_STEP = 0.5
PAGE_LINES = 10
DEFAULT_VISIBLE_HEIGHT = 24


class Clock(Protocol):
    """Source of timestamps in seconds."""

    def now(self) -> float:
        ...


class MonotonicClock:
    """Clock backed by time.monotonic."""

    def now(self) -> float:
        return time.monotonic()


@dataclass
class PlaybackState:
    """Mutable playback state owned by the application loop."""

    scroll_offset: float
    paused: bool
    speed: float
    last_update: float


def clamp_speed(speed: float) -> float:
    """Clamp a speed to the supported range."""
    return max(MIN_SPEED, min(MAX_SPEED, speed))


class ScrollEngine:
    """Advance the scroll offset from elapsed time and apply manual moves."""

    def __init__(
        self,
        speed: float,
        raw_line_count: int,
        clock: Clock | None = None,
    ) -> None:
        self.clock = clock if clock is not None else MonotonicClock()
        self.state = PlaybackState(
            scroll_offset=0.0,
            paused=False,
            speed=clamp_speed(speed),
            last_update=self.clock.now(),
        )
        self.raw_line_count = raw_line_count
        self.wrapped_line_count: int | None = None
        self.visible_height = DEFAULT_VISIBLE_HEIGHT

    @property
    def scroll_offset(self) -> float:
        return self.state.scroll_offset

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def total_lines(self) -> int:
        """Wrapped line count once wrapping happened, else raw line count."""
        if self.wrapped_line_count is None:
            return self.raw_line_count
        return self.wrapped_line_count

    @property
    def max_scroll(self) -> float:
        return float(self.total_lines + self.visible_height)

    @property
    def reached_end(self) -> bool:
        """True once the last line has scrolled past the top of the viewport."""
        return self.state.scroll_offset >= self.max_scroll

    def update_extent(self, wrapped_line_count: int, visible_height: int) -> None:
        """Record the current content length and viewport height."""
        self.wrapped_line_count = wrapped_line_count
        self.visible_height = visible_height

    def advance(self, now: float | None = None) -> bool:
        """Move the offset by speed * elapsed; return True at end of content."""
        current_time = self.clock.now() if now is None else now
        if self.state.paused:
            self.state.last_update = current_time
            return False

        elapsed = max(0.0, current_time - self.state.last_update)
        self.state.last_update = current_time
        self.state.scroll_offset += self.state.speed * elapsed
        return self.reached_end

    def toggle_pause(self) -> None:
        self.state.paused = not self.state.paused
        if not self.state.paused:
            self.state.last_update = self.clock.now()

    def speed_up(self) -> None:
        self.state.speed = clamp_speed(self.state.speed + SPEED_STEP)

    def speed_down(self) -> None:
        self.state.speed = clamp_speed(self.state.speed - SPEED_STEP)

    def scroll_up(self) -> None:
        self.state.scroll_offset = max(0.0, self.state.scroll_offset - 1.0)

    def scroll_down(self) -> None:
        self.state.scroll_offset = min(self.max_scroll, self.state.scroll_offset + 1.0)

    def page_up(self) -> None:
        for _ in range(PAGE_LINES):
            self.scroll_up()

    def page_down(self) -> None:
        for _ in range(PAGE_LINES):
            self.scroll_down()

    def jump_to_end(self) -> None:
        """Place the last wrapped line at the bottom of the viewport."""
        self.state.scroll_offset = float(self.wrapped_line_count or 0)

    def reset(self) -> None:
        """Rewind to the start without changing the paused state."""
        self.state.scroll_offset = 0.0
        self.state.last_update = self.clock.now()
