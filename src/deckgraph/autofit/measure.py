"""Text measurement with Pillow's FreeType bindings."""

import logging
from pathlib import Path
from typing import Iterable, Protocol

from PIL import ImageFont

logger = logging.getLogger(__name__)

_FONT_SUFFIXES = (".ttf", ".otf", ".ttc")


class TextMeasurer(Protocol):
    def measure(self, typeface: str, size_pt: float, text: str) -> tuple[float, float]:
        """Width and line height of ``text`` set in ``typeface`` at ``size_pt``."""
        ...


class PillowTextMeasurer:
    """Measures text with TrueType fonts found in ``font_dirs``.

    A typeface is matched case-insensitively against font file stems, with
    spaces removed (``"Times New Roman"`` finds ``timesnewroman.ttf`` and
    ``Times New Roman.ttf``). When nothing matches, ``fallback_font`` is
    tried and then Pillow's bundled default font.
    """

    def __init__(self, font_dirs: Iterable[str | Path] = (), fallback_font: str | None = None) -> None:
        self._font_dirs = [Path(d).expanduser() for d in font_dirs]
        self._fallback_font = fallback_font
        self._index: dict[str, Path] | None = None
        self._fonts: dict[tuple[str, int], ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.replace(" ", "").replace("-", "").lower()

    def _font_index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = {}
            for directory in self._font_dirs:
                if not directory.is_dir():
                    logger.warning("Font directory %s does not exist", directory)
                    continue
                for path in sorted(directory.rglob("*")):
                    if path.suffix.lower() in _FONT_SUFFIXES:
                        self._index.setdefault(self._key(path.stem), path)
        return self._index

    def locate(self, typeface: str) -> Path | None:
        return self._font_index().get(self._key(typeface))

    def font(self, typeface: str, size_pt: float):
        size = max(1, int(round(size_pt)))
        cache_key = (self._key(typeface), size)
        if cache_key in self._fonts:
            return self._fonts[cache_key]

        candidates = [self.locate(typeface)]
        if self._fallback_font:
            candidates.append(self.locate(self._fallback_font) or Path(self._fallback_font))
        font = None
        for candidate in candidates:
            if candidate is None:
                continue
            try:
                font = ImageFont.truetype(str(candidate), size)
                break
            except OSError:
                logger.debug("Cannot load font file %s", candidate)
        if font is None:
            logger.debug("No font file for %r, using Pillow's default font", typeface)
            font = ImageFont.load_default(size=size)
        self._fonts[cache_key] = font
        return font

    def measure(self, typeface: str, size_pt: float, text: str) -> tuple[float, float]:
        font = self.font(typeface, size_pt)
        ascent, descent = font.getmetrics()
        return float(font.getlength(text)), float(ascent + descent)
