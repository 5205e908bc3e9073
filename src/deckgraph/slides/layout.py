"""Slide layouts and slide masters."""

from deckgraph.errors import InvalidArgumentError, PackageCorruptError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import get_or_add, qn, r_attr
from deckgraph.style.fontdata import FontData
from deckgraph.text.font import level_font_data, set_level_font

from .base import PartView, TreeLevel

TEXT_STYLES = ("title", "body", "other")


class SlideLayout(PartView):
    level = TreeLevel.LAYOUT

    @property
    def master(self) -> "SlideMaster":
        part = self._presentation.graph.related_one(self._part, PartKind.SLIDE_MASTER)
        return self._presentation.view(part)

    @property
    def parent(self) -> "SlideMaster":
        return self.master

    @property
    def layout_type(self) -> str:
        return self.element.get("type", "cust")

    @property
    def layout_id(self) -> int | None:
        master = self.master
        rId = self._presentation.graph.rel_id_of(master.part, self._part)
        lst = master.element.find(qn("p:sldLayoutIdLst"))
        if lst is None or rId is None:
            return None
        for entry in lst.findall(qn("p:sldLayoutId")):
            if entry.get(r_attr("id")) == rId:
                return int(entry.get("id"))
        return None

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.layout_type, "layout_id": self.layout_id}


class SlideMaster(PartView):
    level = TreeLevel.MASTER

    @property
    def master(self) -> "SlideMaster":
        return self

    @property
    def parent(self) -> None:
        return None

    @property
    def layouts(self) -> list[SlideLayout]:
        """Layouts in ``p:sldLayoutIdLst`` order."""
        graph = self._presentation.graph
        lst = self.element.find(qn("p:sldLayoutIdLst"))
        if lst is None:
            return []
        return [self._presentation.view(graph.resolve(self._part, entry.get(r_attr("id"))))
                for entry in lst.findall(qn("p:sldLayoutId"))]

    def layout(self, name: str) -> SlideLayout:
        for layout in self.layouts:
            if layout.name == name:
                return layout
        raise InvalidArgumentError(f"master has no layout named {name!r}")

    @property
    def theme(self):
        part = self._presentation.graph.related_one(self._part, PartKind.THEME)
        return self._presentation.theme(part)

    @property
    def color_map(self) -> dict[str, str]:
        """``p:clrMap`` as token -> scheme token (``tx1 -> dk1``...)."""
        clr_map = self.element.find(qn("p:clrMap"))
        return dict(clr_map.attrib) if clr_map is not None else {}

    @property
    def master_id(self) -> int | None:
        rId = self._presentation.graph.rel_id_of(self._presentation.part, self._part)
        lst = self._presentation.element.find(qn("p:sldMasterIdLst"))
        if lst is None or rId is None:
            return None
        for entry in lst.findall(qn("p:sldMasterId")):
            if entry.get(r_attr("id")) == rId:
                return int(entry.get("id"))
        return None

    # -- text styles --------------------------------------------------------

    def _text_style(self, style: str, create: bool = False):
        if style not in TEXT_STYLES:
            raise InvalidArgumentError(f"text style must be one of {TEXT_STYLES}, got {style!r}")
        tx_styles = self.element.find(qn("p:txStyles"))
        if tx_styles is None:
            if not create:
                return None
            raise PackageCorruptError(f"{self._part.partname} has no p:txStyles element")
        tag = f"p:{style}Style"
        if create:
            successors = tuple(f"p:{s}Style" for s in TEXT_STYLES[TEXT_STYLES.index(style) + 1:])
            return get_or_add(tx_styles, tag, successors + ("p:extLst",))
        return tx_styles.find(qn(tag))

    def text_style_font_data(self, style: str, level: int) -> FontData:
        return level_font_data(self._text_style(style), level)

    def set_text_style_font(self, style: str, level: int, size_pt: float | None = None,
                            typeface: str | None = None, bold: bool | None = None,
                            italic: bool | None = None, color=None) -> None:
        set_level_font(self._text_style(style, create=True), level, size_pt=size_pt,
                       typeface=typeface, bold=bold, italic=italic, color=color)
        self._presentation.touch()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "master_id": self.master_id,
            "theme": self.theme.name,
            "layouts": [layout.to_dict() for layout in self.layouts],
        }
