"""The presentation object model entry point.

Usage::

    from deckgraph import Presentation

    prs = Presentation.open("deck.pptx")
    title = prs.slides[0].shapes["Title 1"]
    title.duplicate()
    print(title.text_frame.paragraphs[0].portions[0].font.resolve().size_pt)
    prs.slides.remove(2)
    prs.save("out/deck.pptx")
"""

import logging
from pathlib import Path
from typing import IO

from pptx.util import Emu

from deckgraph.autofit.engine import AutofitEngine
from deckgraph.autofit.measure import PillowTextMeasurer
from deckgraph.cache import GenerationCache
from deckgraph.config import Settings
from deckgraph.errors import InvalidArgumentError
from deckgraph.opc import package
from deckgraph.opc.graph import PartGraph
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import get_or_add, qn, r_attr
from deckgraph.slides.collection import SlideCollection
from deckgraph.slides.layout import SlideLayout, SlideMaster
from deckgraph.slides.slide import Slide
from deckgraph.style.cascade import CascadeResolver
from deckgraph.style.theme import Theme

logger = logging.getLogger(__name__)

_VIEWS = {
    PartKind.SLIDE: Slide,
    PartKind.SLIDE_LAYOUT: SlideLayout,
    PartKind.SLIDE_MASTER: SlideMaster,
}


class Presentation:
    """A presentation package and the object model over it.

    Not thread-safe. Every mutation made through the object model bumps
    :attr:`generation`, which invalidates the cached slide lists, shape
    trees, fonts and themes.

    Parameters
    ----------
    prs : pptx.presentation.Presentation
        The python-pptx presentation to wrap.
    settings : Settings, optional
    measurer : TextMeasurer, optional
        Used by auto-fit; defaults to a :class:`PillowTextMeasurer` built
        from ``settings``.
    """

    def __init__(self, prs, settings: Settings | None = None, measurer=None) -> None:
        self._prs = prs
        self.settings = settings if settings is not None else Settings()
        self.graph = PartGraph(prs.part.package)
        self.cache = GenerationCache(lambda: self.graph.generation)
        self._measurer = measurer
        self._autofit: AutofitEngine | None = None
        self.resolver = CascadeResolver(self)

    @classmethod
    def open(cls, source: package.Source = None, settings: Settings | None = None,
             measurer=None) -> "Presentation":
        """Open a path, bytes or stream; ``None`` gives a blank presentation."""
        return cls(package.load(source), settings=settings, measurer=measurer)

    def __repr__(self) -> str:
        return f"<Presentation {len(self.slides)} slide(s)>"

    # -- identity and state -------------------------------------------------

    @property
    def part(self):
        return self._prs.part

    @property
    def element(self):
        return self._prs.part._element

    @property
    def generation(self) -> int:
        return self.graph.generation

    def touch(self) -> int:
        return self.graph.touch()

    @property
    def measurer(self):
        if self._measurer is None:
            self._measurer = PillowTextMeasurer(self.settings.font_dirs, self.settings.fallback_font)
        return self._measurer

    @property
    def autofit(self) -> AutofitEngine:
        if self._autofit is None:
            self._autofit = AutofitEngine(self.measurer)
        return self._autofit

    # -- views --------------------------------------------------------------

    def view(self, part):
        """Slide, layout or master view over ``part``."""
        kind = self.graph.kind_of(part)
        view_class = _VIEWS.get(kind)
        if view_class is None:
            raise InvalidArgumentError(f"no view for a {kind.value} part ({part.partname})")
        return view_class(self, part)

    @property
    def slides(self) -> SlideCollection:
        return SlideCollection(self)

    @property
    def slide_masters(self) -> list[SlideMaster]:
        def build():
            lst = self.element.find(qn("p:sldMasterIdLst"))
            if lst is None:
                return []
            return [self.view(self.graph.resolve(self.part, entry.get(r_attr("id"))))
                    for entry in lst.findall(qn("p:sldMasterId"))]
        return self.cache.get(("masters",), build)

    @property
    def slide_layouts(self) -> list[SlideLayout]:
        return [layout for master in self.slide_masters for layout in master.layouts]

    def theme(self, part) -> Theme:
        return self.cache.get(("theme", part), lambda: Theme(part))

    @property
    def default_text_style(self):
        return self.element.find(qn("p:defaultTextStyle"))

    # -- slide size ---------------------------------------------------------

    def _sld_sz(self):
        return get_or_add(self.element, "p:sldSz", (
            "p:notesSz", "p:smartTags", "p:embeddedFontLst", "p:custShowLst", "p:photoAlbum",
            "p:custDataLst", "p:kinsoku", "p:defaultTextStyle", "p:modifyVerifier", "p:extLst",
        ))

    @property
    def slide_width(self) -> Emu:
        return Emu(int(self._sld_sz().get("cx", "9144000")))

    @slide_width.setter
    def slide_width(self, value: int) -> None:
        self._set_slide_size("cx", value)

    @property
    def slide_height(self) -> Emu:
        return Emu(int(self._sld_sz().get("cy", "6858000")))

    @slide_height.setter
    def slide_height(self, value: int) -> None:
        self._set_slide_size("cy", value)

    def _set_slide_size(self, attr: str, value: int) -> None:
        if int(value) <= 0:
            raise InvalidArgumentError(f"slide size must be positive, got {value}")
        sld_sz = self._sld_sz()
        sld_sz.set(attr, str(int(value)))
        if "type" in sld_sz.attrib:
            del sld_sz.attrib["type"]
        self.touch()

    # -- output -------------------------------------------------------------

    def save(self, target: str | Path | IO[bytes]) -> None:
        package.save(self._prs, target)
        logger.debug("Saved presentation with %d slide(s)", len(self.slides))

    def to_bytes(self) -> bytes:
        return package.to_bytes(self._prs)

    def to_dict(self) -> dict:
        return {
            "slide_width": int(self.slide_width),
            "slide_height": int(self.slide_height),
            "masters": [master.to_dict() for master in self.slide_masters],
            "slides": self.slides.to_list(),
        }
