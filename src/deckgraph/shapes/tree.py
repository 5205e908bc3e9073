"""Shape trees: the ordered shapes of a slide, layout, master or group."""

import logging

from pptx.oxml import parse_xml
from pptx.oxml.ns import nsdecls
from pptx.parts.image import Image as ImageInfo
from pptx.util import Emu

from deckgraph.errors import InvalidArgumentError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import CHART_URI, TABLE_URI, insert_in_order, iter_rel_refs, qn

from .autoshape import AutoShape
from .base import Shape
from .connector import Connector
from .graphicframe import Chart, GraphicFrame, Table
from .group import GroupShape
from .picture import Picture

logger = logging.getLogger(__name__)

SHAPE_TAGS = {qn(tag) for tag in ("p:sp", "p:pic", "p:graphicFrame", "p:grpSp", "p:cxnSp")}

_EMU_PER_INCH = 914400

_TEXT_BOX_XML = (
    "<p:sp %s>"
    '<p:nvSpPr><p:cNvPr id="%d" name="%s"/><p:cNvSpPr txBox="1"/><p:nvPr/></p:nvSpPr>'
    '<p:spPr><a:xfrm><a:off x="%d" y="%d"/><a:ext cx="%d" cy="%d"/></a:xfrm>'
    '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom><a:noFill/></p:spPr>'
    '<p:txBody><a:bodyPr wrap="square" rtlCol="0"><a:spAutoFit/></a:bodyPr>'
    "<a:lstStyle/><a:p/></p:txBody>"
    "</p:sp>"
)

_PICTURE_XML = (
    "<p:pic %s>"
    '<p:nvPicPr><p:cNvPr id="%d" name="%s"/>'
    '<p:cNvPicPr><a:picLocks noChangeAspect="1"/></p:cNvPicPr><p:nvPr/></p:nvPicPr>'
    '<p:blipFill><a:blip r:embed="%s"/><a:stretch><a:fillRect/></a:stretch></p:blipFill>'
    '<p:spPr><a:xfrm><a:off x="%d" y="%d"/><a:ext cx="%d" cy="%d"/></a:xfrm>'
    '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr>'
    "</p:pic>"
)


def wrap_shape(element, tree) -> Shape:
    """Build the wrapper class matching a shape element."""
    tag = element.tag
    if tag == qn("p:sp"):
        return AutoShape(element, tree)
    if tag == qn("p:pic"):
        return Picture(element, tree)
    if tag == qn("p:grpSp"):
        return GroupShape(element, tree)
    if tag == qn("p:cxnSp"):
        return Connector(element, tree)
    frame = GraphicFrame(element, tree)
    if frame.uri == CHART_URI:
        return Chart(element, tree)
    if frame.uri == TABLE_URI:
        return Table(element, tree)
    return frame


class ShapeTree:
    """Ordered shapes directly under ``p:spTree`` (or a ``p:grpSp``).

    Ids are unique across the whole part (nested groups included); names
    only within the direct tree.

    Parameters
    ----------
    owner : Slide | SlideLayout | SlideMaster
        View over the part holding the tree.
    element : lxml element
        The ``p:spTree`` or ``p:grpSp`` element.
    """

    def __init__(self, owner, element) -> None:
        self._owner = owner
        self._element = element

    @property
    def owner(self):
        return self._owner

    @property
    def element(self):
        return self._element

    @property
    def presentation(self):
        return self._owner.presentation

    def _shapes(self) -> list[Shape]:
        def build():
            return [wrap_shape(child, self) for child in self._element if child.tag in SHAPE_TAGS]
        return self.presentation.cache.get(("shapes", self._element), build)

    def __iter__(self):
        return iter(self._shapes())

    def __len__(self) -> int:
        return len(self._shapes())

    def __getitem__(self, key: int | str) -> Shape:
        if isinstance(key, str):
            shape = self.get(key)
            if shape is None:
                raise KeyError(key)
            return shape
        return self._shapes()[key]

    def get(self, name: str) -> Shape | None:
        for shape in self._shapes():
            if shape.name == name:
                return shape
        return None

    def find_by_id(self, shape_id: int) -> Shape | None:
        for shape in self._shapes():
            if shape.id == shape_id:
                return shape
            if isinstance(shape, GroupShape):
                found = shape.shapes.find_by_id(shape_id)
                if found is not None:
                    return found
        return None

    # -- identity -----------------------------------------------------------

    def names(self) -> list[str]:
        return [shape.name for shape in self._shapes()]

    def ids(self) -> list[int]:
        """Every shape id used anywhere in the owning part."""
        ids = []
        for c_nv_pr in self._owner.element.iter(qn("p:cNvPr")):
            value = c_nv_pr.get("id")
            if value is not None and value.isdigit():
                ids.append(int(value))
        return ids

    def next_id(self) -> int:
        return max(self.ids(), default=0) + 1

    # -- mutation -----------------------------------------------------------

    def append_element(self, element) -> Shape:
        insert_in_order(self._element, element, ("p:extLst",))
        self.presentation.touch()
        return wrap_shape(element, self)

    def remove(self, shape: Shape) -> None:
        if shape.element.getparent() is not self._element:
            raise InvalidArgumentError(f"{shape!r} is not a member of this tree")
        rIds = {value for _, _, value in iter_rel_refs(shape.element)}
        self._element.remove(shape.element)
        graph = self.presentation.graph
        for rId in rIds:
            graph.release(self._owner.part, rId)
        self.presentation.touch()
        logger.debug("Removed shape %s from %s", shape.name, self._owner.part.partname)

    def duplicate(self, shape: Shape) -> Shape:
        from deckgraph.copying.shapes import duplicate_shape
        return duplicate_shape(shape, self)

    def add_copy(self, shape: Shape) -> Shape:
        """Copy ``shape`` (from any tree, slide or presentation) into this tree."""
        from deckgraph.copying.shapes import copy_shape
        return copy_shape(shape, self)

    def _fresh_name(self, base: str) -> str:
        from deckgraph.copying.naming import next_copy_name
        return next_copy_name(base, self.names())

    def add_text_box(self, x: int, y: int, width: int, height: int, text: str = "") -> AutoShape:
        shape_id = self.next_id()
        name = self._fresh_name(f"TextBox {shape_id - 1}")
        element = parse_xml(_TEXT_BOX_XML % (nsdecls("a", "p"), shape_id, name,
                                             int(x), int(y), int(width), int(height)))
        shape = self.append_element(element)
        if text:
            shape.text_frame.text = text
        return shape

    def add_picture(self, blob: bytes, x: int, y: int, width: int | None = None,
                    height: int | None = None) -> Picture:
        graph = self.presentation.graph
        info = ImageInfo.from_blob(blob)
        if width is None or height is None:
            px_width, px_height = info.size
            dpi_x, dpi_y = info.dpi
            width = width if width is not None else Emu(int(px_width * _EMU_PER_INCH / dpi_x))
            height = height if height is not None else Emu(int(px_height * _EMU_PER_INCH / dpi_y))
        image_part = graph.stage_part(PartKind.IMAGE, blob, content_type=info.content_type)
        rId = graph.relate(self._owner.part, image_part, PartKind.IMAGE)
        shape_id = self.next_id()
        name = self._fresh_name(f"Picture {shape_id - 1}")
        element = parse_xml(_PICTURE_XML % (nsdecls("a", "p", "r"), shape_id, name, rId,
                                            int(x), int(y), int(width), int(height)))
        return self.append_element(element)
