"""Part kinds and their OPC constants.

Maps the typed parts of a presentation package onto python-pptx's content
type and relationship type constants, and records which companion links a
part of each kind must carry.
"""

from enum import Enum

from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from deckgraph.errors import InvalidArgumentError


class PartKind(Enum):
    """Role of a part inside the package."""
    PRESENTATION = "presentation"
    SLIDE_MASTER = "slide_master"
    SLIDE_LAYOUT = "slide_layout"
    SLIDE = "slide"
    NOTES_SLIDE = "notes_slide"
    THEME = "theme"
    IMAGE = "image"
    CHART = "chart"
    WORKBOOK = "workbook"
    OTHER = "other"


CONTENT_TYPES = {
    PartKind.PRESENTATION: CT.PML_PRESENTATION_MAIN,
    PartKind.SLIDE_MASTER: CT.PML_SLIDE_MASTER,
    PartKind.SLIDE_LAYOUT: CT.PML_SLIDE_LAYOUT,
    PartKind.SLIDE: CT.PML_SLIDE,
    PartKind.NOTES_SLIDE: CT.PML_NOTES_SLIDE,
    PartKind.THEME: CT.OFC_THEME,
    PartKind.CHART: CT.DML_CHART,
    PartKind.WORKBOOK: CT.SML_SHEET,
}

RELTYPES = {
    PartKind.SLIDE_MASTER: RT.SLIDE_MASTER,
    PartKind.SLIDE_LAYOUT: RT.SLIDE_LAYOUT,
    PartKind.SLIDE: RT.SLIDE,
    PartKind.NOTES_SLIDE: RT.NOTES_SLIDE,
    PartKind.THEME: RT.THEME,
    PartKind.IMAGE: RT.IMAGE,
    PartKind.CHART: RT.CHART,
    PartKind.WORKBOOK: RT.PACKAGE,
}

PARTNAME_TEMPLATES = {
    PartKind.SLIDE_MASTER: "/ppt/slideMasters/slideMaster%d.xml",
    PartKind.SLIDE_LAYOUT: "/ppt/slideLayouts/slideLayout%d.xml",
    PartKind.SLIDE: "/ppt/slides/slide%d.xml",
    PartKind.NOTES_SLIDE: "/ppt/notesSlides/notesSlide%d.xml",
    PartKind.THEME: "/ppt/theme/theme%d.xml",
    PartKind.CHART: "/ppt/charts/chart%d.xml",
    PartKind.WORKBOOK: "/ppt/embeddings/Microsoft_Excel_Sheet%d.xlsx",
}

IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/svg+xml": "svg",
    "image/x-emf": "emf",
    "image/x-wmf": "wmf",
}

# Companion links a part must be created with; a slide without a layout
# (or a layout without a master) is a corrupt package.
REQUIRED_LINKS = {
    PartKind.SLIDE: (PartKind.SLIDE_LAYOUT,),
    PartKind.SLIDE_LAYOUT: (PartKind.SLIDE_MASTER,),
    PartKind.SLIDE_MASTER: (PartKind.THEME,),
}

_KIND_BY_CONTENT_TYPE = {ct: kind for kind, ct in CONTENT_TYPES.items()}
_KIND_BY_CONTENT_TYPE.update({
    CT.PML_PRES_MACRO_MAIN: PartKind.PRESENTATION,
    CT.PML_TEMPLATE_MAIN: PartKind.PRESENTATION,
    CT.PML_SLIDESHOW_MAIN: PartKind.PRESENTATION,
})


def kind_of(part) -> PartKind:
    """Classify a python-pptx part by its content type."""
    content_type = part.content_type
    if content_type in _KIND_BY_CONTENT_TYPE:
        return _KIND_BY_CONTENT_TYPE[content_type]
    if content_type.startswith("image/"):
        return PartKind.IMAGE
    return PartKind.OTHER


def reltype_for(kind: "PartKind | str") -> str:
    """Relationship type used to point at a part of ``kind``.

    A plain string is taken to already be a relationship type URI.
    """
    if isinstance(kind, str):
        return kind
    try:
        return RELTYPES[kind]
    except KeyError:
        raise InvalidArgumentError(f"no relationship type for part kind {kind.value!r}") from None
