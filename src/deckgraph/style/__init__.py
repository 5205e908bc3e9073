from .cascade import CascadeResolver
from .colors import ColorRef, ColorType, ResolvedColor
from .fontdata import FontData, ResolvedFont
from .theme import Theme

__all__ = [
    "CascadeResolver",
    "ColorRef",
    "ColorType",
    "FontData",
    "ResolvedColor",
    "ResolvedFont",
    "Theme",
]
