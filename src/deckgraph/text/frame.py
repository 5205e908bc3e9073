"""Text frames, paragraphs and portions of an AutoShape.

Any change to the text content runs the owning presentation's auto-fit
engine on the shape (it only acts on frames in ``RESIZE`` mode).
"""

import copy
from enum import Enum

from pptx.util import Emu

from deckgraph.errors import InvalidArgumentError
from deckgraph.opc.oxml import get_or_add, insert_in_order, new_element, qn, r_attr
from deckgraph.style.fontdata import FontData

from .font import Font, level_font_data, set_level_font

_BODY_INSETS = {
    "left": ("lIns", 91440),
    "top": ("tIns", 45720),
    "right": ("rIns", 91440),
    "bottom": ("bIns", 45720),
}

_AUTOFIT_TAGS = ("a:noAutofit", "a:normAutofit", "a:spAutoFit")
_BODY_PR_AFTER_AUTOFIT = ("a:scene3d", "a:sp3d", "a:flatTx", "a:extLst")


class AutofitType(Enum):
    """What the editor does when text overflows the box."""
    NONE = "none"        # a:noAutofit (or nothing)
    SHRINK = "shrink"    # a:normAutofit, text is scaled down
    RESIZE = "resize"    # a:spAutoFit, the shape grows


_AUTOFIT_BY_TAG = {
    qn("a:noAutofit"): AutofitType.NONE,
    qn("a:normAutofit"): AutofitType.SHRINK,
    qn("a:spAutoFit"): AutofitType.RESIZE,
}
_TAG_BY_AUTOFIT = {
    AutofitType.NONE: "a:noAutofit",
    AutofitType.SHRINK: "a:normAutofit",
    AutofitType.RESIZE: "a:spAutoFit",
}


# ---------------------------------------------------------------------------
# Portion
# ---------------------------------------------------------------------------

class Portion:
    """A run of text (``a:r``) sharing one set of character properties."""

    def __init__(self, element, paragraph) -> None:
        self._element = element
        self._paragraph = paragraph

    @property
    def element(self):
        return self._element

    @property
    def paragraph(self) -> "Paragraph":
        return self._paragraph

    @property
    def presentation(self):
        return self._paragraph.presentation

    @property
    def shape(self):
        return self._paragraph.frame.shape

    @property
    def text(self) -> str:
        t = self._element.find(qn("a:t"))
        return t.text or "" if t is not None else ""

    @text.setter
    def text(self, value: str) -> None:
        if value is None:
            raise InvalidArgumentError("portion text cannot be None")
        get_or_add(self._element, "a:t").text = value
        self.text_changed()

    @property
    def font(self) -> Font:
        return Font(self)

    def text_changed(self) -> None:
        self._paragraph.frame.text_changed()

    # -- hyperlink ----------------------------------------------------------

    @property
    def hyperlink(self) -> str | None:
        rpr = self._element.find(qn("a:rPr"))
        link = rpr.find(qn("a:hlinkClick")) if rpr is not None else None
        rId = link.get(r_attr("id")) if link is not None else None
        if not rId:
            return None
        rel = self.shape.part.rels.get(rId)
        if rel is None:
            return None
        return rel.target_ref

    @hyperlink.setter
    def hyperlink(self, url: str | None) -> None:
        graph = self.presentation.graph
        part = self.shape.part
        rpr = self.font._get_or_add_rpr()
        old = rpr.find(qn("a:hlinkClick"))
        old_rId = old.get(r_attr("id")) if old is not None else None
        if old is not None:
            rpr.remove(old)
        if url is not None:
            rId = graph.relate_external(part, url)
            link = new_element("a:hlinkClick")
            link.set(r_attr("id"), rId)
            insert_in_order(rpr, link, ("a:hlinkMouseOver", "a:rtl", "a:extLst"))
        if old_rId:
            graph.release(part, old_rId)
        graph.touch()

    def remove(self) -> None:
        self._element.getparent().remove(self._element)
        self.text_changed()


# ---------------------------------------------------------------------------
# Paragraph
# ---------------------------------------------------------------------------

class Paragraph:
    def __init__(self, element, frame) -> None:
        self._element = element
        self._frame = frame

    @property
    def element(self):
        return self._element

    @property
    def frame(self) -> "TextFrame":
        return self._frame

    @property
    def presentation(self):
        return self._frame.shape.presentation

    @property
    def _ppr(self):
        return self._element.find(qn("a:pPr"))

    def _get_or_add_ppr(self):
        ppr = self._ppr
        if ppr is None:
            ppr = new_element("a:pPr")
            self._element.insert(0, ppr)
        return ppr

    @property
    def level(self) -> int:
        ppr = self._ppr
        return int(ppr.get("lvl", "0")) if ppr is not None else 0

    @level.setter
    def level(self, value: int) -> None:
        if not 0 <= value <= 8:
            raise InvalidArgumentError(f"outline level must be 0-8, got {value}")
        self._get_or_add_ppr().set("lvl", str(value))
        self.presentation.touch()
        self._frame.text_changed()

    @property
    def alignment(self) -> str | None:
        ppr = self._ppr
        return ppr.get("algn") if ppr is not None else None

    @alignment.setter
    def alignment(self, value: str) -> None:
        self._get_or_add_ppr().set("algn", value)
        self.presentation.touch()

    @property
    def portions(self) -> list[Portion]:
        return [Portion(r, self) for r in self._element.findall(qn("a:r"))]

    @property
    def end_font_data(self) -> FontData:
        return FontData.from_rpr(self._element.find(qn("a:endParaRPr")))

    @property
    def text(self) -> str:
        parts = []
        for child in self._element:
            if child.tag in (qn("a:r"), qn("a:fld")):
                t = child.find(qn("a:t"))
                parts.append(t.text or "" if t is not None else "")
            elif child.tag == qn("a:br"):
                parts.append("\v")
        return "".join(parts)

    @text.setter
    def text(self, value: str) -> None:
        self._replace_runs(value)
        self._frame.text_changed()

    def _replace_runs(self, value: str) -> None:
        runs = self._element.findall(qn("a:r"))
        template = runs[0].find(qn("a:rPr")) if runs else None
        for child in list(self._element):
            if child.tag in (qn("a:r"), qn("a:br"), qn("a:fld")):
                self._element.remove(child)
        if value:
            self._append_run(value, template)

    def _append_run(self, text: str, rpr=None) -> Portion:
        r = new_element("a:r")
        if rpr is not None:
            r.append(copy.deepcopy(rpr))
        t = new_element("a:t")
        t.text = text
        r.append(t)
        insert_in_order(self._element, r, ("a:endParaRPr",))
        return Portion(r, self)

    def add_portion(self, text: str) -> Portion:
        portion = self._append_run(text)
        self._frame.text_changed()
        return portion

    def remove(self) -> None:
        self._element.getparent().remove(self._element)
        self._frame.text_changed()


# ---------------------------------------------------------------------------
# TextFrame
# ---------------------------------------------------------------------------

class TextFrame:
    """The ``p:txBody`` of a shape; created on first write when absent."""

    def __init__(self, shape) -> None:
        self._shape = shape

    @property
    def shape(self):
        return self._shape

    @property
    def _txBody(self):
        return self._shape.element.find(qn("p:txBody"))

    def _get_or_add_txBody(self):
        txBody = self._txBody
        if txBody is None:
            txBody = new_element("p:txBody")
            txBody.append(new_element("a:bodyPr"))
            txBody.append(new_element("a:lstStyle"))
            txBody.append(new_element("a:p"))
            insert_in_order(self._shape.element, txBody, ("p:extLst",))
        return txBody

    @property
    def _body_pr(self):
        txBody = self._txBody
        return txBody.find(qn("a:bodyPr")) if txBody is not None else None

    def _get_or_add_body_pr(self):
        txBody = self._get_or_add_txBody()
        body_pr = txBody.find(qn("a:bodyPr"))
        if body_pr is None:
            body_pr = new_element("a:bodyPr")
            txBody.insert(0, body_pr)
        return body_pr

    @property
    def list_style(self):
        txBody = self._txBody
        return txBody.find(qn("a:lstStyle")) if txBody is not None else None

    def _get_or_add_list_style(self):
        txBody = self._get_or_add_txBody()
        lst = txBody.find(qn("a:lstStyle"))
        if lst is None:
            lst = new_element("a:lstStyle")
            txBody.find(qn("a:bodyPr")).addnext(lst)
        return lst

    # -- content ------------------------------------------------------------

    @property
    def paragraphs(self) -> list[Paragraph]:
        txBody = self._txBody
        if txBody is None:
            return []
        return [Paragraph(p, self) for p in txBody.findall(qn("a:p"))]

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.paragraphs)

    @text.setter
    def text(self, value: str) -> None:
        txBody = self._get_or_add_txBody()
        paragraphs = txBody.findall(qn("a:p"))
        first = paragraphs[0] if paragraphs else insert_in_order(txBody, new_element("a:p"), ())
        for extra in paragraphs[1:]:
            txBody.remove(extra)
        lines = value.split("\n")
        first_paragraph = Paragraph(first, self)
        template_rpr = first.find(qn("a:r") + "/" + qn("a:rPr"))
        first_paragraph._replace_runs(lines[0])
        anchor = first
        for line in lines[1:]:
            p = copy.deepcopy(first)
            Paragraph(p, self)._replace_runs("")
            if line:
                Paragraph(p, self)._append_run(line, template_rpr)
            anchor.addnext(p)
            anchor = p
        self.text_changed()

    def add_paragraph(self, text: str = "") -> Paragraph:
        txBody = self._get_or_add_txBody()
        p = new_element("a:p")
        txBody.append(p)
        paragraph = Paragraph(p, self)
        if text:
            paragraph._append_run(text)
        self.text_changed()
        return paragraph

    def portions(self) -> list[Portion]:
        return [portion for p in self.paragraphs for portion in p.portions]

    def text_changed(self) -> None:
        """Hook run after every content change: bump caches, run auto-fit."""
        presentation = self._shape.presentation
        presentation.touch()
        if presentation.settings.autofit_enabled and self.autofit_type is AutofitType.RESIZE:
            presentation.autofit.apply(self._shape)

    # -- body properties ----------------------------------------------------

    @property
    def autofit_type(self) -> AutofitType:
        body_pr = self._body_pr
        if body_pr is None:
            return AutofitType.NONE
        for child in body_pr:
            if child.tag in _AUTOFIT_BY_TAG:
                return _AUTOFIT_BY_TAG[child.tag]
        return AutofitType.NONE

    @autofit_type.setter
    def autofit_type(self, value: AutofitType) -> None:
        body_pr = self._get_or_add_body_pr()
        for tag in _AUTOFIT_TAGS:
            for old in body_pr.findall(qn(tag)):
                body_pr.remove(old)
        insert_in_order(body_pr, new_element(_TAG_BY_AUTOFIT[value]), _BODY_PR_AFTER_AUTOFIT)
        self.text_changed()

    def _inset(self, side: str) -> Emu:
        attr, default = _BODY_INSETS[side]
        body_pr = self._body_pr
        value = body_pr.get(attr) if body_pr is not None else None
        return Emu(int(value)) if value is not None else Emu(default)

    def _set_inset(self, side: str, value: int) -> None:
        attr, _ = _BODY_INSETS[side]
        self._get_or_add_body_pr().set(attr, str(int(value)))
        self.text_changed()

    @property
    def margin_left(self) -> Emu:
        return self._inset("left")

    @margin_left.setter
    def margin_left(self, value: int) -> None:
        self._set_inset("left", value)

    @property
    def margin_right(self) -> Emu:
        return self._inset("right")

    @margin_right.setter
    def margin_right(self, value: int) -> None:
        self._set_inset("right", value)

    @property
    def margin_top(self) -> Emu:
        return self._inset("top")

    @margin_top.setter
    def margin_top(self, value: int) -> None:
        self._set_inset("top", value)

    @property
    def margin_bottom(self) -> Emu:
        return self._inset("bottom")

    @margin_bottom.setter
    def margin_bottom(self, value: int) -> None:
        self._set_inset("bottom", value)

    @property
    def wrap(self) -> bool:
        """``False`` when the body is set to ``wrap="none"``."""
        body_pr = self._body_pr
        return body_pr is None or body_pr.get("wrap") != "none"

    @wrap.setter
    def wrap(self, value: bool) -> None:
        self._get_or_add_body_pr().set("wrap", "square" if value else "none")
        self.text_changed()

    # -- list style ---------------------------------------------------------

    def level_font_data(self, level: int) -> FontData:
        """Font fields this frame's own list style sets for ``level``."""
        return level_font_data(self.list_style, level)

    def set_level_font(self, level: int, size_pt: float | None = None, typeface: str | None = None,
                       bold: bool | None = None, italic: bool | None = None, color=None) -> None:
        set_level_font(self._get_or_add_list_style(), level, size_pt=size_pt, typeface=typeface,
                       bold=bold, italic=italic, color=color)
        self.text_changed()

    def clear_list_style(self) -> None:
        lst = self.list_style
        if lst is None:
            return
        for child in list(lst):
            lst.remove(child)
        self.text_changed()
