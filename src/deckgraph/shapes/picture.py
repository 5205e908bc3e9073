"""Pictures (``p:pic``)."""

from deckgraph.errors import NotPresentError
from deckgraph.opc.oxml import qn, r_attr, xpath

from .base import Shape, ShapeKind
from .image import Image


class Picture(Shape):
    kind = ShapeKind.PICTURE
    _nv_tag = "p:nvPicPr"

    @property
    def blip(self):
        blip_fill = self._element.find(qn("p:blipFill"))
        return blip_fill.find(qn("a:blip")) if blip_fill is not None else None

    @property
    def image(self) -> Image:
        blip = self.blip
        if blip is None or not blip.get(r_attr("embed")):
            raise NotPresentError(f"picture {self.name!r} has no embedded image")
        return Image(self.owner, blip)

    @property
    def svg_content(self) -> str | None:
        """SVG source when the picture carries an ``asvg:svgBlip`` alternative."""
        blip = self.blip
        if blip is None:
            return None
        svg_blips = xpath(blip, "a:extLst/a:ext/asvg:svgBlip")
        if not svg_blips:
            return None
        rId = svg_blips[0].get(r_attr("embed"))
        part = self.presentation.graph.resolve(self.part, rId)
        return part.blob.decode("utf-8")

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.blip is not None and self.blip.get(r_attr("embed")):
            d["image"] = self.image.name
        return d
