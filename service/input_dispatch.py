"""Key bindings for tui_prompter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from service.scroll_engine import ScrollEngine


class Key(str, Enum):
    """Non-character keys produced by the terminal decoder."""

    ESCAPE = "esc"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key press: a Key or a single character."""

    code: Key | str
    ctrl: bool = False


class Action(str, Enum):
    """Application-level effects of a key press."""

    QUIT = "quit"
    TOGGLE_PAUSE = "toggle_pause"
    SPEED_UP = "speed_up"
    SPEED_DOWN = "speed_down"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    RESET = "reset"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    JUMP_TO_END = "jump_to_end"


KEY_BINDINGS: dict[Key | str, Action] = {
    "q": Action.QUIT,
    Key.ESCAPE: Action.QUIT,
    " ": Action.TOGGLE_PAUSE,
    "p": Action.TOGGLE_PAUSE,
    "+": Action.SPEED_UP,
    "=": Action.SPEED_UP,
    "-": Action.SPEED_DOWN,
    "_": Action.SPEED_DOWN,
    Key.UP: Action.SCROLL_UP,
    "k": Action.SCROLL_UP,
    Key.DOWN: Action.SCROLL_DOWN,
    "j": Action.SCROLL_DOWN,
    "r": Action.RESET,
    Key.HOME: Action.RESET,
    Key.PAGE_UP: Action.PAGE_UP,
    Key.PAGE_DOWN: Action.PAGE_DOWN,
    Key.END: Action.JUMP_TO_END,
}

ENGINE_ACTIONS = {
    Action.TOGGLE_PAUSE: ScrollEngine.toggle_pause,
    Action.SPEED_UP: ScrollEngine.speed_up,
    Action.SPEED_DOWN: ScrollEngine.speed_down,
    Action.SCROLL_UP: ScrollEngine.scroll_up,
    Action.SCROLL_DOWN: ScrollEngine.scroll_down,
    Action.RESET: ScrollEngine.reset,
    Action.PAGE_UP: ScrollEngine.page_up,
    Action.PAGE_DOWN: ScrollEngine.page_down,
    Action.JUMP_TO_END: ScrollEngine.jump_to_end,
}


def resolve_action(event: KeyEvent) -> Action | None:
    """Map a key event to its bound action, or None when unbound."""
    if event.ctrl:
        return Action.QUIT if event.code == "c" else None
    return KEY_BINDINGS.get(event.code)


def dispatch_key(event: KeyEvent | None, engine: ScrollEngine) -> bool:
    """Apply one key event to the engine; return True when it requests quit."""
    if event is None:
        return False
    action = resolve_action(event)
    if action is None:
        return False
    if action is Action.QUIT:
        return True
    ENGINE_ACTIONS[action](engine)
    return False
