"""Auto-fit: grow a text box to fit its text.

Runs for frames in ``RESIZE`` mode after every text change. The dominant
font of the first paragraph is measured against the box's content width to
find the number of rows; the box height follows and the box is moved up by
half of the change so it grows around its centre. A non-wrapping frame keeps
its height and takes the width of its longest paragraph instead.
"""

import logging
import math
from collections import Counter

from pptx.util import Emu

logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525
NO_WRAP_SCALE = 1.4
VERTICAL_MARGIN_FACTOR = 2


def _px(emu: int) -> int:
    return int(emu) // EMU_PER_PIXEL


class AutofitEngine:
    def __init__(self, measurer) -> None:
        self.measurer = measurer

    @staticmethod
    def dominant_font(portions):
        """Most frequent resolved size among ``portions``; ties go to the first."""
        fonts = [portion.font.resolve() for portion in portions]
        counts = Counter(font.size_pt for font in fonts)
        best = max(counts.values())
        return next(font for font in fonts if counts[font.size_pt] == best)

    def apply(self, shape) -> bool:
        """Resize ``shape`` to its text; returns whether anything changed."""
        frame = shape.text_frame
        paragraphs = frame.paragraphs
        if not paragraphs or not paragraphs[0].portions:
            return False
        font = self.dominant_font(paragraphs[0].portions)

        left, right = _px(frame.margin_left), _px(frame.margin_right)
        top, bottom = _px(frame.margin_top), _px(frame.margin_bottom)
        content_width = _px(shape.width) - left - right
        if content_width <= 0:
            return False

        text = " ".join(p.text for p in paragraphs)
        text_width, line_height = self.measurer.measure(font.typeface, font.size_pt, text)
        if text_width <= 0:
            return False

        if not frame.wrap:
            longest = max((p.text for p in paragraphs), key=len)
            longest_width, _ = self.measurer.measure(font.typeface, font.size_pt, longest)
            old_width = _px(shape.width)
            new_width = int(longest_width * NO_WRAP_SCALE) + left + right
            shape.width = Emu(new_width * EMU_PER_PIXEL)
            logger.debug("Auto-fit %r (no wrap): width %d px -> %d px",
                         shape.name, old_width, new_width)
            return True

        rows = math.ceil(text_width / content_width)
        old_height = _px(shape.height)
        new_height = int(rows * line_height) + VERTICAL_MARGIN_FACTOR * (top + bottom)
        y_shift = (new_height - old_height) / 2
        shape.height = Emu(new_height * EMU_PER_PIXEL)
        shape.y = Emu(shape.y - int(y_shift) * EMU_PER_PIXEL)

        logger.debug("Auto-fit %r: %d row(s), height %d px -> %d px",
                     shape.name, rows, old_height, new_height)
        return True
