"""AutoShapes (``p:sp``): text frame, fill, outline and preset geometry."""

from pptx.util import Emu

from deckgraph.opc.oxml import insert_in_order, new_element, qn
from deckgraph.style.colors import ColorRef, ResolvedColor, solid_fill
from deckgraph.text.frame import TextFrame

from .base import Shape, ShapeKind

_FILL_TAGS = ("a:noFill", "a:solidFill", "a:gradFill", "a:blipFill", "a:pattFill", "a:grpFill")
_SPPR_AFTER_FILL = ("a:ln", "a:effectLst", "a:effectDag", "a:scene3d", "a:sp3d", "a:extLst")


class Fill:
    """Shape fill; reads go through the fill cascade."""

    def __init__(self, shape: "AutoShape") -> None:
        self._shape = shape

    @property
    def ref(self) -> ColorRef | None:
        """The shape's own solid fill color, if it sets one."""
        sp_pr = self._shape.element.find(qn("p:spPr"))
        fill = sp_pr.find(qn("a:solidFill")) if sp_pr is not None else None
        return ColorRef.from_element(fill)

    @property
    def color(self) -> ResolvedColor | None:
        return self._shape.presentation.resolver.resolve_fill(self._shape)

    def _replace(self, fill) -> None:
        sp_pr = self._shape.element.find(qn("p:spPr"))
        for tag in _FILL_TAGS:
            for old in sp_pr.findall(qn(tag)):
                sp_pr.remove(old)
        insert_in_order(sp_pr, fill, _SPPR_AFTER_FILL)
        self._shape.presentation.touch()

    def set_color(self, color: "ColorRef | str") -> None:
        ref = color if isinstance(color, ColorRef) else ColorRef.rgb(color)
        self._replace(solid_fill(ref))

    def clear(self) -> None:
        self._replace(new_element("a:noFill"))


class Outline:
    def __init__(self, shape: "AutoShape") -> None:
        self._shape = shape

    @property
    def _ln(self):
        sp_pr = self._shape.element.find(qn("p:spPr"))
        return sp_pr.find(qn("a:ln")) if sp_pr is not None else None

    def _get_or_add_ln(self):
        ln = self._ln
        if ln is None:
            sp_pr = self._shape.element.find(qn("p:spPr"))
            ln = insert_in_order(sp_pr, new_element("a:ln"), _SPPR_AFTER_FILL[1:])
        return ln

    @property
    def width(self) -> Emu:
        ln = self._ln
        return Emu(int(ln.get("w", "0"))) if ln is not None else Emu(0)

    @width.setter
    def width(self, value: int) -> None:
        self._get_or_add_ln().set("w", str(int(value)))
        self._shape.presentation.touch()

    @property
    def color(self) -> ColorRef | None:
        ln = self._ln
        return ColorRef.from_element(ln.find(qn("a:solidFill"))) if ln is not None else None

    @color.setter
    def color(self, value: "ColorRef | str") -> None:
        ln = self._get_or_add_ln()
        for tag in _FILL_TAGS:
            for old in ln.findall(qn(tag)):
                ln.remove(old)
        ref = value if isinstance(value, ColorRef) else ColorRef.rgb(value)
        ln.insert(0, solid_fill(ref))
        self._shape.presentation.touch()


class AutoShape(Shape):
    kind = ShapeKind.AUTO_SHAPE

    @property
    def text_frame(self) -> TextFrame:
        return TextFrame(self)

    @property
    def has_text_frame(self) -> bool:
        return self._element.find(qn("p:txBody")) is not None

    @property
    def is_text_box(self) -> bool:
        c_nv_sp_pr = self._nv.find(qn("p:cNvSpPr"))
        return c_nv_sp_pr is not None and c_nv_sp_pr.get("txBox") in ("1", "true")

    @property
    def fill(self) -> Fill:
        return Fill(self)

    @property
    def outline(self) -> Outline:
        return Outline(self)

    @property
    def geometry(self) -> str:
        """Preset geometry name (``rect``, ``ellipse``...), or ``custom``."""
        sp_pr = self._element.find(qn("p:spPr"))
        if sp_pr is not None:
            prst = sp_pr.find(qn("a:prstGeom"))
            if prst is not None:
                return prst.get("prst", "rect")
            if sp_pr.find(qn("a:custGeom")) is not None:
                return "custom"
        parent = self.parent_placeholder
        if isinstance(parent, AutoShape):
            return parent.geometry
        return "rect"

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["geometry"] = self.geometry
        if self.has_text_frame:
            d["text"] = self.text_frame.text
        return d
