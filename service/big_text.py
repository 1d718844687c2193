"""Rasterize text into block-character glyphs for tui_prompter."""

from __future__ import annotations

import functools
from typing import Tuple

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageFont

from domain.teleprompter import GlyphScale

GLYPH_PIXELS = 8
SUPERSAMPLE = 4
GLYPH_FONT_SIZE = 28
INK_COVERAGE_THRESHOLD = 0.35
BASELINE_REFERENCE = "Hg"
FULL_BLOCK = "█"
# Indexed by top * 2 + bottom.
HALF_BLOCKS = " ▄▀█"
# Indexed by top_left * 8 + top_right * 4 + bottom_left * 2 + bottom_right.
QUADRANT_BLOCKS = " ▗▖▄▝▐▞▟▘▚▌▙▀▜▛█"


@functools.lru_cache(maxsize=1)
def load_glyph_font() -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load the bundled Pillow font used for glyph rasterization."""
    return ImageFont.load_default(size=GLYPH_FONT_SIZE)


@functools.lru_cache(maxsize=1)
def compute_baseline_offset() -> float:
    """Vertical offset that centers ascenders and descenders in a cell."""
    canvas_size = GLYPH_PIXELS * SUPERSAMPLE
    layout_draw = ImageDraw.Draw(Image.new("L", (1, 1)))
    _, top, _, bottom = layout_draw.textbbox(
        (0, 0), BASELINE_REFERENCE, font=load_glyph_font()
    )
    return (canvas_size - (bottom - top)) / 2.0 - top


@functools.lru_cache(maxsize=1024)
def glyph_bitmap(character: str) -> NDArray[np.bool_]:
    """Return an 8x8 ink mask for one character."""
    canvas_size = GLYPH_PIXELS * SUPERSAMPLE
    if not character.strip():
        return np.zeros((GLYPH_PIXELS, GLYPH_PIXELS), dtype=bool)

    font = load_glyph_font()
    image = Image.new("L", (canvas_size, canvas_size), 0)
    draw = ImageDraw.Draw(image)
    left, _, right, _ = draw.textbbox((0, 0), character, font=font)
    x_offset = (canvas_size - (right - left)) / 2.0 - left
    draw.text((x_offset, compute_baseline_offset()), character, font=font, fill=255)

    coverage = (
        np.asarray(image, dtype=np.float32)
        .reshape(GLYPH_PIXELS, SUPERSAMPLE, GLYPH_PIXELS, SUPERSAMPLE)
        .mean(axis=(1, 3))
        / 255.0
    )
    bitmap = coverage >= INK_COVERAGE_THRESHOLD
    bitmap.setflags(write=False)
    return bitmap


def line_bitmap(text_value: str) -> NDArray[np.bool_]:
    """Concatenate glyph masks for a line of text."""
    if not text_value:
        return np.zeros((GLYPH_PIXELS, 0), dtype=bool)
    return np.hstack([glyph_bitmap(character) for character in text_value])


def join_rows(cells: NDArray[np.str_]) -> Tuple[str, ...]:
    return tuple("".join(row) for row in cells)


def bitmap_to_rows(bitmap: NDArray[np.bool_], scale: GlyphScale) -> Tuple[str, ...]:
    """Convert an ink mask to terminal rows at the pixel density of a scale."""
    pixels = bitmap.astype(np.int8)
    if scale is GlyphScale.LARGE:
        cells = np.where(bitmap, FULL_BLOCK, " ")
        return join_rows(cells)
    if scale is GlyphScale.MEDIUM:
        index = pixels[0::2] * 2 + pixels[1::2]
        return join_rows(np.array(list(HALF_BLOCKS))[index])
    index = (
        pixels[0::2, 0::2] * 8
        + pixels[0::2, 1::2] * 4
        + pixels[1::2, 0::2] * 2
        + pixels[1::2, 1::2]
    )
    return join_rows(np.array(list(QUADRANT_BLOCKS))[index])


def rasterize_line(text_value: str, scale: GlyphScale) -> Tuple[str, ...]:
    """Render a display line as glyph_height rows of block characters.

    Each row is len(text_value) * scale.glyph_width columns wide.
    """
    return bitmap_to_rows(line_bitmap(text_value), scale)
