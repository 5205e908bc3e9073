"""Image payloads referenced from ``a:blip`` elements."""

import logging
import posixpath

from pptx.parts.image import Image as ImageInfo

from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import r_attr

logger = logging.getLogger(__name__)


class Image:
    """The image behind one ``a:blip`` of a slide, layout or master.

    Parameters
    ----------
    owner : Slide | SlideLayout | SlideMaster
        View over the part that holds the blip.
    blip : lxml element
        The ``a:blip`` whose ``r:embed`` names the image relationship.
    """

    def __init__(self, owner, blip) -> None:
        self._owner = owner
        self._blip = blip

    @property
    def rId(self) -> str:
        return self._blip.get(r_attr("embed"))

    @property
    def part(self):
        return self._owner.presentation.graph.resolve(self._owner.part, self.rId)

    @property
    def blob(self) -> bytes:
        return self.part.blob

    @property
    def mime(self) -> str:
        return self.part.content_type

    @property
    def name(self) -> str:
        return posixpath.basename(str(self.part.partname))

    @property
    def is_shared(self) -> bool:
        return self._owner.presentation.graph.reference_count(self.part) > 1

    def update(self, blob: bytes) -> None:
        """Replace the image bytes.

        When the image part is shared with other blips, or the new bytes
        are a different format, the blip is repointed at a fresh image part
        so nobody else sees the change.
        """
        graph = self._owner.presentation.graph
        part = self.part
        content_type = ImageInfo.from_blob(blob).content_type
        if not self.is_shared and content_type == part.content_type:
            graph.replace_blob(part, blob)
            return
        new_part = graph.stage_part(PartKind.IMAGE, blob, content_type=content_type)
        old_rId = self.rId
        new_rId = graph.relate(self._owner.part, new_part, PartKind.IMAGE)
        self._blip.set(r_attr("embed"), new_rId)
        graph.release(self._owner.part, old_rId)
        graph.touch()
        logger.debug("Image %s of %s copied on write to %s",
                     old_rId, self._owner.part.partname, new_part.partname)
