"""Style cascade: effective fonts and fills of shapes.

A font field is looked up, in order, on the shape itself, on the matching
placeholder of the layout and of the master, in the master's text styles,
in the presentation's default text style and in the theme font scheme;
whatever is still unset takes a fixed default. Fills follow the shape, its
placeholder ancestors and finally the shape's style reference.

The resolver is total: a damaged inheritance chain degrades to defaults and
is logged, it never raises.
"""

import logging
from dataclasses import replace

from deckgraph.errors import DeckGraphError
from deckgraph.opc.oxml import qn
from deckgraph.text.font import level_font_data

from .colors import ColorRef, ResolvedColor, resolve_color
from .fontdata import FontData, ResolvedFont
from .theme import MAJOR_LATIN, MINOR_LATIN

logger = logging.getLogger(__name__)

DEFAULT_TYPEFACE = "Calibri"
DEFAULT_COLOR = ColorRef.scheme("tx1")

_FILL_TAGS = ("a:noFill", "a:solidFill", "a:gradFill", "a:blipFill", "a:pattFill", "a:grpFill")


class CascadeResolver:
    """Resolves fonts and fills of one presentation's shapes.

    Results are memoised in the presentation's generation cache, so they
    are recomputed after any mutation made through the object model.
    """

    def __init__(self, presentation) -> None:
        self._presentation = presentation

    # -- font data ----------------------------------------------------------

    @staticmethod
    def own_font_data(shape, level: int) -> FontData:
        """Fields the shape sets itself for ``level``.

        The frame's list style first, then, at level 0, the end-of-paragraph
        properties of the first paragraph.
        """
        if not getattr(shape, "has_text_frame", False):
            return FontData()
        frame = shape.text_frame
        data = frame.level_font_data(level)
        if level == 0:
            paragraphs = frame.paragraphs
            if paragraphs:
                data = data.merged_with(paragraphs[0].end_font_data)
        return data

    def font_data(self, shape, level: int = 0) -> FontData:
        """Own font data merged with the placeholder chain up to the master."""
        def compute():
            data = self.own_font_data(shape, level)
            if data.is_filled() or not shape.is_placeholder:
                return data
            try:
                parent = shape.parent_placeholder
            except DeckGraphError as exc:
                logger.warning("Placeholder chain of %r is broken: %s", shape.name, exc)
                return data
            if parent is None:
                return data
            return data.merged_with(self.font_data(parent, level))
        return self._presentation.cache.get(("font", shape.element, level), compute)

    # -- resolution ---------------------------------------------------------

    def _master_of(self, shape):
        try:
            return shape.owner.master
        except DeckGraphError as exc:
            logger.warning("No master found for %r: %s", shape.name, exc)
            return None

    @staticmethod
    def _style_name(shape) -> str:
        key = shape.placeholder
        if key is None:
            return "other"
        return "title" if key.type.is_title else "body"

    def _complete(self, shape, level: int, data: FontData) -> ResolvedFont:
        master = self._master_of(shape)
        theme = None
        if master is not None and not data.is_filled():
            try:
                data = data.merged_with(master.text_style_font_data(self._style_name(shape), level))
            except DeckGraphError as exc:
                logger.warning("Cannot read text styles of %s: %s", master.part.partname, exc)
        if not data.is_filled():
            data = data.merged_with(level_font_data(self._presentation.default_text_style, level))

        if master is not None:
            try:
                theme = master.theme
            except DeckGraphError as exc:
                logger.warning("Cannot read theme of %s: %s", master.part.partname, exc)
        key = shape.placeholder
        token = data.typeface
        if token is None:
            token = MAJOR_LATIN if key is not None and key.type.is_title else MINOR_LATIN
        typeface = theme.typeface(token) if theme is not None else None
        if typeface is None and not token.startswith("+"):
            typeface = token

        data = replace(data, typeface=typeface).merged_with(FontData(
            size_pt=self._presentation.settings.default_font_size_pt,
            typeface=DEFAULT_TYPEFACE,
            bold=False,
            italic=False,
            color=DEFAULT_COLOR,
        ))
        return ResolvedFont.from_data(data, self.resolve_color(data.color, master))

    def resolve_font(self, shape, level: int = 0) -> ResolvedFont:
        """Effective font of ``shape`` at outline ``level``."""
        return self._presentation.cache.get(
            ("resolved", shape.element, level),
            lambda: self._complete(shape, level, self.font_data(shape, level)))

    def resolve_portion_font(self, portion) -> ResolvedFont:
        """Effective font of one portion; its explicit fields win."""
        shape = portion.shape
        level = portion.paragraph.level
        explicit = portion.font.data
        if explicit.is_empty():
            return self.resolve_font(shape, level)
        return self._complete(shape, level, explicit.merged_with(self.font_data(shape, level)))

    def resolve_color(self, ref: ColorRef | None, master=None) -> ResolvedColor | None:
        """Resolve ``ref`` with the theme and color map of ``master``."""
        if ref is None:
            return None
        scheme: dict = {}
        color_map: dict = {}
        if master is not None:
            try:
                scheme = master.theme.color_scheme
                color_map = master.color_map
            except DeckGraphError as exc:
                logger.warning("Cannot read colors of %s: %s", master.part.partname, exc)
        return resolve_color(ref, scheme, color_map)

    # -- fills --------------------------------------------------------------

    def resolve_fill(self, shape) -> ResolvedColor | None:
        """Solid fill color of ``shape``; ``None`` when unfilled or not solid."""
        master = self._master_of(shape)
        current = shape
        while current is not None:
            sp_pr = current.element.find(qn("p:spPr"))
            fill = None
            if sp_pr is not None:
                fill = next((child for child in sp_pr if child.tag in {qn(t) for t in _FILL_TAGS}), None)
            if fill is not None:
                if fill.tag != qn("a:solidFill"):
                    return None
                return self.resolve_color(ColorRef.from_element(fill), master)
            try:
                current = current.parent_placeholder
            except DeckGraphError as exc:
                logger.warning("Placeholder chain of %r is broken: %s", shape.name, exc)
                break
        style = shape.element.find(qn("p:style"))
        fill_ref = style.find(qn("a:fillRef")) if style is not None else None
        if fill_ref is None or fill_ref.get("idx") == "0":
            return None
        return self.resolve_color(ColorRef.from_element(fill_ref), master)
