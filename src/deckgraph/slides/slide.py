"""Slides."""

from deckgraph.errors import PackageCorruptError, UnsupportedOperationError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import r_attr

from .base import PartView, TreeLevel


class Slide(PartView):
    level = TreeLevel.SLIDE

    @property
    def layout(self):
        part = self._presentation.graph.related_one(self._part, PartKind.SLIDE_LAYOUT)
        return self._presentation.view(part)

    @property
    def parent(self):
        return self.layout

    @property
    def master(self):
        return self.layout.master

    # -- position -----------------------------------------------------------

    @property
    def rId(self) -> str:
        rId = self._presentation.graph.rel_id_of(self._presentation.part, self._part)
        if rId is None:
            raise PackageCorruptError(f"{self._part.partname} is not related from the presentation")
        return rId

    @property
    def id_entry(self):
        """This slide's ``p:sldId`` element in the presentation."""
        from deckgraph.copying.slides import slide_id_entries
        rId = self.rId
        for entry in slide_id_entries(self._presentation):
            if entry.get(r_attr("id")) == rId:
                return entry
        raise PackageCorruptError(f"slide {self._part.partname} has no slide id entry")

    @property
    def slide_id(self) -> int:
        return int(self.id_entry.get("id"))

    @property
    def number(self) -> int:
        """1-based position in the presentation."""
        from deckgraph.copying.slides import slide_id_entries
        return slide_id_entries(self._presentation).index(self.id_entry) + 1

    @number.setter
    def number(self, position: int) -> None:
        from deckgraph.copying.slides import move_slide
        move_slide(self._presentation, self, position)

    @property
    def hidden(self) -> bool:
        return self.element.get("show") in ("0", "false")

    @hidden.setter
    def hidden(self, value: bool) -> None:
        if value:
            self.element.set("show", "0")
        elif "show" in self.element.attrib:
            del self.element.attrib["show"]
        self._presentation.touch()

    @property
    def has_notes(self) -> bool:
        return bool(self._presentation.graph.related(self._part, PartKind.NOTES_SLIDE))

    # -- operations ---------------------------------------------------------

    def duplicate(self) -> "Slide":
        from deckgraph.copying.slides import duplicate_slide
        return duplicate_slide(self)

    def remove(self) -> None:
        self._presentation.slides.remove(self)

    def to_html(self) -> str:
        raise UnsupportedOperationError("slide HTML export is not implemented")

    def to_json(self) -> str:
        raise UnsupportedOperationError("slide JSON export is not implemented")

    def save_as_png(self, target) -> None:
        raise UnsupportedOperationError("slide rendering is not implemented")

    def to_dict(self) -> dict:
        d = {
            "number": self.number,
            "slide_id": self.slide_id,
            "layout": self.layout.name,
            "shapes": [shape.to_dict() for shape in self.shapes],
        }
        if self.hidden:
            d["hidden"] = True
        if self.background.present():
            d["background"] = self.background.name
        return d
