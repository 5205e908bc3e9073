"""Copying shapes and slides, and the naming rule for copies."""

from .naming import next_copy_name, numeric_suffix
from .shapes import copy_shape, duplicate_shape
from .slides import (add_empty_slide, duplicate_slide, import_slide, insert_slide,
                     move_slide, remove_slide)

__all__ = [
    "add_empty_slide",
    "copy_shape",
    "duplicate_shape",
    "duplicate_slide",
    "import_slide",
    "insert_slide",
    "move_slide",
    "next_copy_name",
    "numeric_suffix",
    "remove_slide",
]
