"""Common shape behaviour: identity, naming, geometry and placeholder linkage."""

import logging
from enum import Enum

from pptx.util import Emu

from deckgraph.errors import InvalidArgumentError, UnsupportedOperationError
from deckgraph.opc.oxml import new_element, qn

from .placeholder import PlaceholderKey, parent_placeholder, placeholder_key

logger = logging.getLogger(__name__)


class ShapeKind(Enum):
    """Shape variants found in a shape tree."""
    AUTO_SHAPE = "auto_shape"
    PICTURE = "picture"
    CHART = "chart"
    TABLE = "table"
    GROUP = "group"
    CONNECTOR = "connector"
    OTHER = "other"          # graphic frames we do not model (SmartArt, OLE...)


class Shape:
    """A node of a shape tree.

    Wraps the shape's XML element; all state lives in the element, so any
    number of wrappers over the same element agree with each other.
    """

    kind = ShapeKind.OTHER
    _nv_tag = "p:nvSpPr"
    _props_tag = "p:spPr"

    def __init__(self, element, tree) -> None:
        self._element = element
        self._tree = tree

    def __eq__(self, other) -> bool:
        return isinstance(other, Shape) and other._element is self._element

    def __hash__(self) -> int:
        return hash(self._element)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} name={self.name!r}>"

    # -- ownership ----------------------------------------------------------

    @property
    def element(self):
        return self._element

    @property
    def tree(self):
        return self._tree

    @property
    def owner(self):
        """Slide, layout or master whose part holds this shape."""
        return self._tree.owner

    @property
    def presentation(self):
        return self.owner.presentation

    @property
    def part(self):
        return self.owner.part

    # -- identity -----------------------------------------------------------

    @property
    def _nv(self):
        return self._element.find(qn(self._nv_tag))

    @property
    def _cNvPr(self):
        return self._nv.find(qn("p:cNvPr"))

    @property
    def id(self) -> int:
        return int(self._cNvPr.get("id"))

    @property
    def name(self) -> str:
        return self._cNvPr.get("name", "")

    @name.setter
    def name(self, value: str) -> None:
        if value != self.name and value in self._tree.names():
            raise InvalidArgumentError(f"a shape named {value!r} already exists in this tree")
        self._cNvPr.set("name", value)
        self.presentation.touch()

    @property
    def hidden(self) -> bool:
        return self._cNvPr.get("hidden") in ("1", "true")

    @hidden.setter
    def hidden(self, value: bool) -> None:
        if value:
            self._cNvPr.set("hidden", "1")
        elif "hidden" in self._cNvPr.attrib:
            del self._cNvPr.attrib["hidden"]
        self.presentation.touch()

    # -- placeholder linkage ------------------------------------------------

    @property
    def placeholder(self) -> PlaceholderKey | None:
        return placeholder_key(self._element)

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None

    @property
    def parent_placeholder(self) -> "Shape | None":
        """The layout (or master) shape this placeholder inherits from."""
        return parent_placeholder(self)

    # -- geometry -----------------------------------------------------------

    def _xfrm_parent(self):
        return self._element.find(qn(self._props_tag))

    def _own_xfrm(self):
        props = self._xfrm_parent()
        return props.find(qn("a:xfrm")) if props is not None else None

    def _effective_xfrm(self):
        xfrm = self._own_xfrm()
        if xfrm is not None:
            return xfrm
        parent = self.parent_placeholder
        return parent._effective_xfrm() if parent is not None else None

    def _xfrm_value(self, child: str, attr: str) -> Emu:
        xfrm = self._effective_xfrm()
        node = xfrm.find(qn(child)) if xfrm is not None else None
        return Emu(int(node.get(attr, "0"))) if node is not None else Emu(0)

    def _get_or_add_xfrm(self):
        xfrm = self._own_xfrm()
        if xfrm is not None:
            return xfrm
        inherited = self._effective_xfrm()
        props = self._xfrm_parent()
        if props is None:
            props = new_element(self._props_tag)
            self._nv.addnext(props)
        xfrm = new_element("a:xfrm")
        props.insert(0, xfrm)
        off = new_element("a:off", x=0, y=0)
        ext = new_element("a:ext", cx=0, cy=0)
        xfrm.append(off)
        xfrm.append(ext)
        if inherited is not None:
            for tag in ("a:off", "a:ext"):
                source = inherited.find(qn(tag))
                if source is not None:
                    xfrm.find(qn(tag)).attrib.update(source.attrib)
        return xfrm

    def _set_xfrm_value(self, child: str, attr: str, value: int) -> None:
        xfrm = self._get_or_add_xfrm()
        xfrm.find(qn(child)).set(attr, str(int(value)))
        self.presentation.touch()

    @property
    def x(self) -> Emu:
        return self._xfrm_value("a:off", "x")

    @x.setter
    def x(self, value: int) -> None:
        self._set_xfrm_value("a:off", "x", value)

    @property
    def y(self) -> Emu:
        return self._xfrm_value("a:off", "y")

    @y.setter
    def y(self, value: int) -> None:
        self._set_xfrm_value("a:off", "y", value)

    @property
    def width(self) -> Emu:
        return self._xfrm_value("a:ext", "cx")

    @width.setter
    def width(self, value: int) -> None:
        self._set_xfrm_value("a:ext", "cx", value)

    @property
    def height(self) -> Emu:
        return self._xfrm_value("a:ext", "cy")

    @height.setter
    def height(self, value: int) -> None:
        self._set_xfrm_value("a:ext", "cy", value)

    # -- operations ---------------------------------------------------------

    def duplicate(self) -> "Shape":
        """Copy this shape into its own tree (new id, suffixed name)."""
        from deckgraph.copying.shapes import duplicate_shape
        return duplicate_shape(self)

    def remove(self) -> None:
        self._tree.remove(self)

    def to_json(self) -> str:
        raise UnsupportedOperationError("shape JSON export is not implemented")

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "x": int(self.x),
            "y": int(self.y),
            "width": int(self.width),
            "height": int(self.height),
        }
        if self.placeholder is not None:
            d["placeholder"] = self.placeholder.to_dict()
        if self.hidden:
            d["hidden"] = True
        return d
