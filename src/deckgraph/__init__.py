"""deckgraph: an object model for reading and editing .pptx presentations."""

from .config import Settings, load_settings, save_settings
from .errors import (
    DanglingRelationshipError,
    DeckGraphError,
    InvalidArgumentError,
    NotPresentError,
    PackageCorruptError,
    UnsupportedOperationError,
)
from .presentation import Presentation

__version__ = "0.1.0"

__all__ = [
    "DanglingRelationshipError",
    "DeckGraphError",
    "InvalidArgumentError",
    "NotPresentError",
    "PackageCorruptError",
    "Presentation",
    "Settings",
    "UnsupportedOperationError",
    "load_settings",
    "save_settings",
]
