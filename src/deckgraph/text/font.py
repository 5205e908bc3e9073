"""Character properties of a text run (``a:rPr``) and list-style levels."""

from deckgraph.opc.oxml import get_or_add, insert_in_order, new_element, qn
from deckgraph.style.colors import ColorRef, ColorType, ResolvedColor, normalize_hex
from deckgraph.style.fontdata import FontData, parse_bool

# Schema order of CT_TextCharacterProperties children.
_RPR_ORDER = (
    "a:ln", "a:noFill", "a:solidFill", "a:gradFill", "a:blipFill", "a:pattFill", "a:grpFill",
    "a:effectLst", "a:effectDag", "a:highlight", "a:uLnTx", "a:uLn", "a:uFillTx", "a:uFill",
    "a:latin", "a:ea", "a:cs", "a:sym", "a:hlinkClick", "a:hlinkMouseOver", "a:rtl", "a:extLst",
)
_FILL_TAGS = ("a:noFill", "a:solidFill", "a:gradFill", "a:blipFill", "a:pattFill", "a:grpFill")

# Schema order of CT_TextParagraphProperties children.
_PPR_ORDER = (
    "a:lnSpc", "a:spcBef", "a:spcAft", "a:buClrTx", "a:buClr", "a:buSzTx", "a:buSzPct",
    "a:buSzPts", "a:buFontTx", "a:buFont", "a:buNone", "a:buAutoNum", "a:buChar", "a:buBlip",
    "a:tabLst", "a:defRPr", "a:extLst",
)

_LEVEL_TAGS = ["a:defPPr"] + [f"a:lvl{n}pPr" for n in range(1, 10)]


def successors_of(tag: str, order: tuple[str, ...]) -> tuple[str, ...]:
    return order[order.index(tag) + 1:]


def set_font_fields(rpr, size_pt=None, typeface=None, bold=None, italic=None, color=None) -> None:
    """Write the given (non-``None``) fields onto an rPr-like element."""
    if size_pt is not None:
        rpr.set("sz", str(int(round(size_pt * 100))))
    if bold is not None:
        rpr.set("b", "1" if bold else "0")
    if italic is not None:
        rpr.set("i", "1" if italic else "0")
    if typeface is not None:
        latin = get_or_add(rpr, "a:latin", successors_of("a:latin", _RPR_ORDER))
        latin.set("typeface", typeface)
    if color is not None:
        ref = color if isinstance(color, ColorRef) else ColorRef.rgb(color)
        for tag in _FILL_TAGS:
            for old in rpr.findall(qn(tag)):
                rpr.remove(old)
        fill = new_element("a:solidFill")
        fill.append(ref.to_element())
        insert_in_order(rpr, fill, successors_of("a:solidFill", _RPR_ORDER))


def level_properties(lst_style, level: int, create: bool = False):
    """``a:lvl{level+1}pPr`` of a list style, optionally created in place."""
    if not 0 <= level <= 8:
        raise ValueError(f"outline level must be 0-8, got {level}")
    tag = _LEVEL_TAGS[level + 1]
    ppr = lst_style.find(qn(tag))
    if ppr is None and create:
        ppr = insert_in_order(lst_style, new_element(tag), tuple(_LEVEL_TAGS[level + 2:]) + ("a:extLst",))
    return ppr


def level_font_data(lst_style, level: int) -> FontData:
    if lst_style is None:
        return FontData()
    ppr = level_properties(lst_style, level)
    if ppr is None:
        return FontData()
    return FontData.from_rpr(ppr.find(qn("a:defRPr")))


def set_level_font(lst_style, level: int, **fields) -> None:
    ppr = level_properties(lst_style, level, create=True)
    def_rpr = get_or_add(ppr, "a:defRPr", successors_of("a:defRPr", _PPR_ORDER))
    set_font_fields(def_rpr, **fields)


class Font:
    """Explicit character formatting of one portion.

    Every getter returns ``None`` when the field is inherited; use
    :meth:`resolve` for the effective value.
    """

    def __init__(self, portion) -> None:
        self._portion = portion

    @property
    def _rpr(self):
        return self._portion.element.find(qn("a:rPr"))

    def _get_or_add_rpr(self):
        rpr = self._rpr
        if rpr is None:
            rpr = new_element("a:rPr", lang="en-US")
            self._portion.element.insert(0, rpr)
        return rpr

    def _changed(self) -> None:
        self._portion.presentation.touch()
        self._portion.text_changed()

    @property
    def data(self) -> FontData:
        return FontData.from_rpr(self._rpr)

    @property
    def size_pt(self) -> float | None:
        return self.data.size_pt

    @size_pt.setter
    def size_pt(self, value: float) -> None:
        set_font_fields(self._get_or_add_rpr(), size_pt=value)
        self._changed()

    @property
    def typeface(self) -> str | None:
        return self.data.typeface

    @typeface.setter
    def typeface(self, value: str) -> None:
        set_font_fields(self._get_or_add_rpr(), typeface=value)
        self._changed()

    @property
    def bold(self) -> bool | None:
        return parse_bool(self._rpr.get("b")) if self._rpr is not None else None

    @bold.setter
    def bold(self, value: bool) -> None:
        set_font_fields(self._get_or_add_rpr(), bold=value)
        self._changed()

    @property
    def italic(self) -> bool | None:
        return parse_bool(self._rpr.get("i")) if self._rpr is not None else None

    @italic.setter
    def italic(self, value: bool) -> None:
        set_font_fields(self._get_or_add_rpr(), italic=value)
        self._changed()

    @property
    def color(self) -> ColorRef | None:
        return self.data.color

    @color.setter
    def color(self, value: "ColorRef | str") -> None:
        set_font_fields(self._get_or_add_rpr(), color=value)
        self._portion.presentation.touch()

    @property
    def highlight(self) -> ResolvedColor | None:
        """Highlight color with its alpha (0.0-1.0), ``None`` when unset."""
        rpr = self._rpr
        highlight = rpr.find(qn("a:highlight")) if rpr is not None else None
        srgb = highlight.find(qn("a:srgbClr")) if highlight is not None else None
        if srgb is None or srgb.get("val") is None:
            return None
        alpha = srgb.find(qn("a:alpha"))
        value = int(alpha.get("val")) / 100000 if alpha is not None else 1.0
        return ResolvedColor(srgb.get("val").upper(), ColorType.RGB, alpha=value)

    def set_highlight(self, hex_color: str, alpha: float = 1.0) -> None:
        rpr = self._get_or_add_rpr()
        for old in rpr.findall(qn("a:highlight")):
            rpr.remove(old)
        highlight = new_element("a:highlight")
        srgb = new_element("a:srgbClr", val=normalize_hex(hex_color))
        if alpha < 1.0:
            srgb.append(new_element("a:alpha", val=int(round(alpha * 100000))))
        highlight.append(srgb)
        insert_in_order(rpr, highlight, successors_of("a:highlight", _RPR_ORDER))
        self._portion.presentation.touch()

    def resolve(self):
        """Effective font of this portion after the full cascade."""
        return self._portion.presentation.resolver.resolve_portion_font(self._portion)
