from .engine import EMU_PER_PIXEL, NO_WRAP_SCALE, VERTICAL_MARGIN_FACTOR, AutofitEngine
from .measure import PillowTextMeasurer, TextMeasurer

__all__ = [
    "EMU_PER_PIXEL",
    "NO_WRAP_SCALE",
    "VERTICAL_MARGIN_FACTOR",
    "AutofitEngine",
    "PillowTextMeasurer",
    "TextMeasurer",
]
