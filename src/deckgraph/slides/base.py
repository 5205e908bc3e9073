"""Behaviour shared by slides, layouts and masters."""

from enum import Enum

from deckgraph.errors import PackageCorruptError
from deckgraph.opc.oxml import qn
from deckgraph.shapes.tree import ShapeTree

from .background import Background


class TreeLevel(Enum):
    """Position of a part in the slide -> layout -> master chain."""
    SLIDE = "slide"
    LAYOUT = "layout"
    MASTER = "master"


class PartView:
    """View over one slide, layout or master part of a presentation."""

    level: TreeLevel

    def __init__(self, presentation, part) -> None:
        self._presentation = presentation
        self._part = part

    def __eq__(self, other) -> bool:
        return isinstance(other, PartView) and other._part is self._part

    def __hash__(self) -> int:
        return hash(self._part)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._part.partname}>"

    @property
    def presentation(self):
        return self._presentation

    @property
    def part(self):
        return self._part

    @property
    def element(self):
        return self._part._element

    @property
    def _cSld(self):
        cSld = self.element.find(qn("p:cSld"))
        if cSld is None:
            raise PackageCorruptError(f"{self._part.partname} has no p:cSld element")
        return cSld

    @property
    def name(self) -> str:
        return self._cSld.get("name", "")

    @name.setter
    def name(self, value: str) -> None:
        self._cSld.set("name", value)
        self._presentation.touch()

    @property
    def shapes(self) -> ShapeTree:
        sp_tree = self._cSld.find(qn("p:spTree"))
        if sp_tree is None:
            raise PackageCorruptError(f"{self._part.partname} has no shape tree")
        return ShapeTree(self, sp_tree)

    @property
    def background(self) -> Background:
        return Background(self)

    @property
    def parent(self) -> "PartView | None":
        """The view one level up the inheritance chain."""
        raise NotImplementedError

    @property
    def master(self):
        raise NotImplementedError
