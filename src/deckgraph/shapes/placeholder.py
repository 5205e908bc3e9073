"""Placeholder keys and the one-level-up placeholder lookup.

A slide shape inherits from the layout shape with the same placeholder key,
a layout shape from the master shape; the chain is at most two hops long
and strictly ascends slide -> layout -> master.
"""

from dataclasses import dataclass
from enum import Enum

from deckgraph.opc.oxml import qn


class PlaceholderType(Enum):
    """ST_PlaceholderType values."""
    TITLE = "title"
    BODY = "body"
    CENTER_TITLE = "ctrTitle"
    SUBTITLE = "subTitle"
    DATE = "dt"
    SLIDE_NUMBER = "sldNum"
    FOOTER = "ftr"
    HEADER = "hdr"
    OBJECT = "obj"
    CHART = "chart"
    TABLE = "tbl"
    CLIP_ART = "clipArt"
    DIAGRAM = "dgm"
    MEDIA = "media"
    SLIDE_IMAGE = "sldImg"
    PICTURE = "pic"

    @property
    def is_title(self) -> bool:
        return self in (PlaceholderType.TITLE, PlaceholderType.CENTER_TITLE)

    @property
    def normalized(self) -> "PlaceholderType":
        """Type the master uses for this role (ctrTitle -> title, content -> body)."""
        if self.is_title:
            return PlaceholderType.TITLE
        if self in _BODY_LIKE:
            return PlaceholderType.BODY
        return self


_BODY_LIKE = {
    PlaceholderType.BODY,
    PlaceholderType.SUBTITLE,
    PlaceholderType.OBJECT,
    PlaceholderType.CHART,
    PlaceholderType.TABLE,
    PlaceholderType.CLIP_ART,
    PlaceholderType.DIAGRAM,
    PlaceholderType.MEDIA,
    PlaceholderType.PICTURE,
}


@dataclass(frozen=True)
class PlaceholderKey:
    """``{type, idx}`` pair of a ``p:ph`` element (defaults: obj, 0)."""
    type: PlaceholderType = PlaceholderType.OBJECT
    idx: int = 0

    @classmethod
    def from_ph(cls, ph) -> "PlaceholderKey":
        type_ = ph.get("type")
        return cls(
            type=PlaceholderType(type_) if type_ else PlaceholderType.OBJECT,
            idx=int(ph.get("idx", "0")),
        )

    def to_dict(self) -> dict:
        return {"type": self.type.value, "idx": self.idx}


_NV_TAGS = ("p:nvSpPr", "p:nvPicPr", "p:nvGraphicFramePr", "p:nvGrpSpPr", "p:nvCxnSpPr")


def ph_element(shape_element):
    """The ``p:ph`` element under a shape's non-visual properties, if any."""
    for tag in _NV_TAGS:
        nv = shape_element.find(qn(tag))
        if nv is None:
            continue
        nv_pr = nv.find(qn("p:nvPr"))
        return nv_pr.find(qn("p:ph")) if nv_pr is not None else None
    return None


def placeholder_key(shape_element) -> PlaceholderKey | None:
    ph = ph_element(shape_element)
    return PlaceholderKey.from_ph(ph) if ph is not None else None


def match_placeholder(key: PlaceholderKey, candidates):
    """Pick the shape among ``candidates`` that ``key`` inherits from.

    Exact ``{type, idx}`` first, then the same idx with a compatible type,
    then the first shape of the same normalized type. ``None`` when nothing
    matches.
    """
    keyed = [(shape.placeholder, shape) for shape in candidates if shape.placeholder is not None]
    for other, shape in keyed:
        if other == key:
            return shape
    normalized = key.type.normalized
    if key.idx:
        for other, shape in keyed:
            if other.idx == key.idx and other.type.normalized is normalized:
                return shape
    for other, shape in keyed:
        if other.type.normalized is normalized:
            return shape
    return None


def parent_placeholder(shape):
    """The shape one level up that ``shape`` inherits from, or ``None``.

    Parametrised only by the owner's level: a slide shape looks in its
    layout's tree, a layout shape in its master's tree, and a master shape
    has no parent.
    """
    key = shape.placeholder
    if key is None:
        return None
    parent = shape.owner.parent
    if parent is None:
        return None
    return match_placeholder(key, parent.shapes)
