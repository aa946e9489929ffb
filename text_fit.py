"""Label width estimation used to decide whether event text needs an ellipsis."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from PIL import Image, ImageDraw, ImageFont

TextWidthFn = Callable[[str, float], float]


def estimate_text_width(text: str | None, font_size_px: float) -> float:
    """Approximate rendered width of ``text`` in pixels.

    This is not a glyph measurement: every character is assumed to be two
    thirds of the font size wide.  Renderers that know their font can pass
    a ``PillowTextMeasurer`` (or any callable with the same signature)
    instead.
    """
    if not text:
        return 0.0
    return len(text) * font_size_px * 2 / 3


@lru_cache(maxsize=32)
def _load_font(font_path: str | None, size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            pass
    return ImageFont.load_default()


class PillowTextMeasurer:
    """Exact label width from Pillow glyph metrics.

    Falls back to Pillow's built-in bitmap font when ``font_path`` is not
    given or cannot be opened; that font ignores the requested size.
    """

    def __init__(self, font_path: str | None = None) -> None:
        self.font_path = font_path
        self._draw = ImageDraw.Draw(Image.new("L", (1, 1)))

    def __call__(self, text: str | None, font_size_px: float) -> float:
        if not text:
            return 0.0
        font = _load_font(self.font_path, max(1, round(font_size_px)))
        bbox = self._draw.textbbox((0, 0), text, font=font)
        return float(bbox[2] - bbox[0])
