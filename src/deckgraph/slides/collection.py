"""The ordered slide list of a presentation."""

import logging

from deckgraph.copying.slides import (add_empty_slide, duplicate_slide, import_slide,
                                      insert_slide, remove_slide, slide_id_entries)
from deckgraph.errors import InvalidArgumentError
from deckgraph.opc.oxml import r_attr

from .slide import Slide

logger = logging.getLogger(__name__)


class SlideCollection:
    """Slides in ``p:sldIdLst`` order; positions are 1-based."""

    def __init__(self, presentation) -> None:
        self._presentation = presentation

    def _slides(self) -> list[Slide]:
        prs = self._presentation

        def build():
            return [prs.view(prs.graph.resolve(prs.part, entry.get(r_attr("id"))))
                    for entry in slide_id_entries(prs)]
        return prs.cache.get(("slides",), build)

    def __len__(self) -> int:
        return len(self._slides())

    def __iter__(self):
        return iter(self._slides())

    def __getitem__(self, index: int) -> Slide:
        """0-based access, like a list."""
        return self._slides()[index]

    def at(self, position: int) -> Slide:
        """Slide at 1-based ``position``."""
        if not isinstance(position, int) or not 1 <= position <= len(self):
            raise InvalidArgumentError(f"slide position must be between 1 and {len(self)}, got {position!r}")
        return self._slides()[position - 1]

    def index(self, slide: Slide) -> int:
        return self._slides().index(slide)

    # -- mutation -----------------------------------------------------------

    def add(self, slide: Slide) -> Slide:
        """Append a copy of ``slide``, from this or another presentation."""
        return import_slide(slide, self._presentation)

    def add_empty(self, layout) -> Slide:
        return add_empty_slide(self._presentation, layout)

    def duplicate(self, slide: Slide) -> Slide:
        if slide.presentation is not self._presentation:
            raise InvalidArgumentError("the slide belongs to another presentation")
        return duplicate_slide(slide)

    def insert(self, position: int, slide: Slide) -> Slide:
        return insert_slide(self._presentation, position, slide)

    def remove(self, slide: "Slide | int"):
        """Remove a slide given as a view or a 1-based position."""
        if isinstance(slide, Slide):
            if slide.presentation is not self._presentation:
                raise InvalidArgumentError("the slide belongs to another presentation")
            position = slide.number
        else:
            position = slide
        return remove_slide(self._presentation, position)

    def to_list(self) -> list[dict]:
        return [slide.to_dict() for slide in self]
