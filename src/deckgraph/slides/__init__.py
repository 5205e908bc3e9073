from .background import Background
from .base import PartView, TreeLevel
from .collection import SlideCollection
from .layout import SlideLayout, SlideMaster
from .slide import Slide

__all__ = [
    "Background",
    "PartView",
    "Slide",
    "SlideCollection",
    "SlideLayout",
    "SlideMaster",
    "TreeLevel",
]
