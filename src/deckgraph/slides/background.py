"""Slide background image (``p:bg/p:bgPr/a:blipFill``)."""

from deckgraph.errors import NotPresentError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import insert_in_order, new_element, qn, r_attr
from deckgraph.shapes.image import Image

_NOT_PRESENT = "background image is not present; check Background.present() first"


class Background:
    def __init__(self, owner) -> None:
        self._owner = owner

    def _blip(self):
        cSld = self._owner.element.find(qn("p:cSld"))
        bg_pr = cSld.find(f"{qn('p:bg')}/{qn('p:bgPr')}") if cSld is not None else None
        blip_fill = bg_pr.find(qn("a:blipFill")) if bg_pr is not None else None
        return blip_fill.find(qn("a:blip")) if blip_fill is not None else None

    def present(self) -> bool:
        """``True`` when the background is an image that resolves to a part."""
        blip = self._blip()
        if blip is None:
            return False
        rId = blip.get(r_attr("embed"))
        rel = self._owner.part.rels.get(rId) if rId else None
        return rel is not None and not rel.is_external

    @property
    def image(self) -> Image:
        if not self.present():
            raise NotPresentError(_NOT_PRESENT)
        return Image(self._owner, self._blip())

    @property
    def blob(self) -> bytes:
        return self.image.blob

    @property
    def mime(self) -> str:
        return self.image.mime

    @property
    def name(self) -> str:
        return self.image.name

    def update(self, blob: bytes) -> None:
        """Replace the background image, creating an image background if needed."""
        if self.present():
            self.image.update(blob)
            return
        graph = self._owner.presentation.graph
        image_part = graph.stage_part(PartKind.IMAGE, blob)
        rId = graph.relate(self._owner.part, image_part, PartKind.IMAGE)
        cSld = self._owner.element.find(qn("p:cSld"))
        old = cSld.find(qn("p:bg"))
        if old is not None:
            cSld.remove(old)
        bg = new_element("p:bg")
        bg_pr = new_element("p:bgPr")
        blip_fill = new_element("a:blipFill")
        blip = new_element("a:blip")
        blip.set(r_attr("embed"), rId)
        stretch = new_element("a:stretch")
        stretch.append(new_element("a:fillRect"))
        blip_fill.append(blip)
        blip_fill.append(stretch)
        bg_pr.append(blip_fill)
        bg_pr.append(new_element("a:effectLst"))
        bg.append(bg_pr)
        insert_in_order(cSld, bg, ("p:spTree",))
        self._owner.presentation.touch()
