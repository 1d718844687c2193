#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "pillow>=10.1",
#   "numpy>=1.26"
# ]
# ///
"""Show text as a large, auto-scrolling teleprompter in the terminal."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
import logging
import os
import shlex
import subprocess
import sys
import tempfile
from typing import Mapping, Protocol, Sequence, TextIO

from domain.teleprompter import (
    EDITOR_CODE,
    EMPTY_TEXT_CODE,
    INPUT_FILE_CODE,
    STDIN_READ_CODE,
    DisplaySettings,
    Document,
    PrompterError,
)
from service.input_dispatch import KeyEvent, dispatch_key
from service.render_frame import FrameRenderer, RenderedFrame
from service.scroll_engine import Clock, MonotonicClock, ScrollEngine
from service.settings import (
    PrompterConfig,
    apply_overrides,
    load_config_or_default,
    resolve_config_path,
)
from terminal_screen import TerminalScreen

__version__ = "0.1.0"

LOG_LEVEL_ENV = "TUI_PROMPTER_LOG_LEVEL"
LOG_FILE_ENV = "TUI_PROMPTER_LOG_FILE"
DEFAULT_EDITOR = "vi"
EDITOR_TEMPLATE = (
    "# Enter your teleprompter text below\n"
    "# Lines starting with # will be removed\n"
    "# Save and close the editor when done\n\n"
)
LOGGER = logging.getLogger("tui_prompter")


class Screen(Protocol):
    """Terminal surface driven by the main loop."""

    def size(self) -> tuple[int, int]:
        ...

    def paint(self, frame: RenderedFrame) -> None:
        ...

    def read_key(self) -> KeyEvent | None:
        ...


@dataclass(frozen=True)
class PrompterRequest:
    """Parsed CLI request."""

    file_path: str | None
    speed: float | None
    font_scale: int | None
    text_color: str | None
    background_color: str | None
    horizontal_padding: int | None


def configure_logging(env: Mapping[str, str]) -> None:
    """Configure logging from environment.

    Records go to stderr unless TUI_PROMPTER_LOG_FILE names a file. Set it to
    keep records emitted while the screen is active from corrupting the display.
    """
    level_name = env.get(LOG_LEVEL_ENV, "WARNING").strip().upper()
    level = logging.WARNING
    if level_name == "DEBUG":
        level = logging.DEBUG
    elif level_name == "INFO":
        level = logging.INFO
    elif level_name == "ERROR":
        level = logging.ERROR
    log_file = env.get(LOG_FILE_ENV, "").strip()
    if log_file:
        logging.basicConfig(
            level=level,
            filename=log_file,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        return
    logging.basicConfig(level=level, format="%(message)s")


def parse_positive_float(raw_value: str) -> float:
    """argparse type for a strictly positive number."""
    try:
        parsed = float(raw_value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{raw_value!r} is not a number") from exc
    if not parsed > 0:
        raise argparse.ArgumentTypeError("speed must be positive")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tui_prompter.py",
        description="A terminal-based teleprompter.",
    )
    parser.add_argument("file", nargs="?", metavar="FILE", help="text file to display")
    parser.add_argument(
        "-s", "--speed", type=parse_positive_float, metavar="SPEED",
        help="scroll speed in lines per second",
    )
    parser.add_argument(
        "-S", "--scale", type=int, metavar="SCALE", help="font scale factor (1-3)"
    )
    parser.add_argument(
        "-c", "--color", metavar="COLOR", help="text color (e.g. white, green, #FF0000)"
    )
    parser.add_argument(
        "-b", "--background", metavar="COLOR",
        help="background color (e.g. black, blue, #000033)",
    )
    parser.add_argument(
        "-p", "--padding", type=int, metavar="PERCENT",
        help="horizontal padding as percentage of screen width (0-40)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str]) -> PrompterRequest:
    """Parse CLI arguments into a PrompterRequest."""
    parsed = build_parser().parse_args(list(argv))
    return PrompterRequest(
        file_path=parsed.file,
        speed=parsed.speed,
        font_scale=parsed.scale,
        text_color=parsed.color,
        background_color=parsed.background,
        horizontal_padding=parsed.padding,
    )


def merge_config(request: PrompterRequest, config: PrompterConfig) -> PrompterConfig:
    """Apply CLI values over the config file values."""
    return apply_overrides(
        config,
        speed=request.speed,
        font_scale=request.font_scale,
        text_color=request.text_color,
        background_color=request.background_color,
        horizontal_padding=request.horizontal_padding,
    )


def read_utf8_text_strict(file_path: str) -> str:
    """Read a UTF-8 file with strict decoding."""
    try:
        with open(file_path, "rb") as file_handle:
            file_bytes = file_handle.read()
    except FileNotFoundError as exc:
        raise PrompterError(INPUT_FILE_CODE, f"input text file not found: {file_path}") from exc
    except OSError as exc:
        raise PrompterError(
            INPUT_FILE_CODE, f"failed to read file {file_path}: {exc.strerror}"
        ) from exc

    try:
        return file_bytes.decode("utf-8", errors="strict")
    except UnicodeDecodeError as exc:
        raise PrompterError(
            INPUT_FILE_CODE,
            f"input text file is not valid UTF-8 at byte offset {exc.start}",
        ) from exc


def read_stdin_text(stream: TextIO) -> str:
    try:
        return stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise PrompterError(STDIN_READ_CODE, f"failed to read from stdin: {exc}") from exc


def strip_comment_lines(text_value: str) -> str:
    """Drop editor instruction lines starting with '#'."""
    return "\n".join(
        line for line in text_value.splitlines() if not line.lstrip().startswith("#")
    )


def resolve_editor_command(env: Mapping[str, str]) -> list[str]:
    editor = env.get("VISUAL", "").strip() or env.get("EDITOR", "").strip()
    return shlex.split(editor or DEFAULT_EDITOR)


def read_from_editor(env: Mapping[str, str]) -> str:
    """Collect text interactively through the user's editor."""
    command = resolve_editor_command(env)
    with tempfile.TemporaryDirectory(prefix="tui_prompter_") as work_dir:
        draft_path = os.path.join(work_dir, "prompter.txt")
        with open(draft_path, "w", encoding="utf-8") as file_handle:
            file_handle.write(EDITOR_TEMPLATE)
        try:
            result = subprocess.run([*command, draft_path], check=False)
        except OSError as exc:
            raise PrompterError(EDITOR_CODE, f"failed to open editor {command[0]}: {exc}") from exc
        if result.returncode != 0:
            raise PrompterError(
                EDITOR_CODE, f"editor exited with code {result.returncode}"
            )
        edited = read_utf8_text_strict(draft_path)

    content = strip_comment_lines(edited)
    if not content.strip():
        raise PrompterError(EMPTY_TEXT_CODE, "no content provided")
    return content


def get_text_content(
    file_path: str | None, stdin: TextIO, env: Mapping[str, str]
) -> str:
    """Resolve content: piped stdin, then the file argument, then the editor."""
    if not stdin.isatty():
        LOGGER.info("reading text from stdin")
        return read_stdin_text(stdin)
    if file_path is not None:
        LOGGER.info("reading text from %s", file_path)
        return read_utf8_text_strict(file_path)
    LOGGER.info("opening editor for text input")
    return read_from_editor(env)


def run_loop(screen: Screen, renderer: FrameRenderer, engine: ScrollEngine) -> None:
    """Advance, draw and poll once per iteration until quit or end of content."""
    while True:
        reached_end = engine.advance()
        width, height = screen.size()
        screen.paint(renderer.render(width, height))
        if reached_end:
            LOGGER.info("reached end of content")
            return
        if dispatch_key(screen.read_key(), engine):
            return


def build_session(
    content: str, config: PrompterConfig, clock: Clock | None = None
) -> tuple[DisplaySettings, ScrollEngine, FrameRenderer]:
    """Create the engine and renderer for a piece of content."""
    if not content.strip():
        raise PrompterError(EMPTY_TEXT_CODE, "no content to display")
    document = Document.from_text(content)
    settings = config.to_display_settings()
    engine = ScrollEngine(
        speed=config.speed,
        raw_line_count=len(document),
        clock=clock if clock is not None else MonotonicClock(),
    )
    return settings, engine, FrameRenderer(document, settings, engine)


def main() -> int:
    """CLI entrypoint."""
    configure_logging(os.environ)

    try:
        request = parse_args(sys.argv[1:])
        config = merge_config(
            request, load_config_or_default(resolve_config_path())
        )
        content = get_text_content(request.file_path, sys.stdin, os.environ)
        settings, engine, renderer = build_session(content, config)

        with TerminalScreen() as screen:
            screen.configure_colors(settings.text_color, settings.background_color)
            run_loop(screen, renderer, engine)
        return 0
    except PrompterError as exc:
        LOGGER.error("%s: %s", exc.code, str(exc).strip())
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        LOGGER.error("tui_prompter.unhandled_error: %s", str(exc).strip())
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
