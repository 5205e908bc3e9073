"""Theme part reader: color scheme and font scheme."""

from deckgraph.opc.oxml import localname, parse, qn

from .colors import SCHEME_TOKENS, ColorRef, ColorType

MAJOR_LATIN = "+mj-lt"
MINOR_LATIN = "+mn-lt"


class Theme:
    """Parsed view of a theme part (``a:theme``).

    python-pptx keeps theme parts as raw blobs, so the XML is parsed once
    here; the presentation caches instances per generation.
    """

    def __init__(self, part) -> None:
        self.part = part
        element = getattr(part, "_element", None)
        self._element = element if element is not None else parse(part.blob)

    @property
    def name(self) -> str:
        return self._element.get("name", "")

    def _scheme_element(self):
        elements = self._element.find(qn("a:themeElements"))
        return elements.find(qn("a:clrScheme")) if elements is not None else None

    @property
    def color_scheme(self) -> dict[str, str | None]:
        """Scheme token -> hex value (``srgbClr`` value or ``sysClr`` lastClr)."""
        scheme = {}
        clr_scheme = self._scheme_element()
        if clr_scheme is None:
            return scheme
        for child in clr_scheme:
            if not isinstance(child.tag, str):
                continue
            ref = ColorRef.from_element(child)
            if ref is None:
                scheme[localname(child)] = None
            elif ref.kind is ColorType.STANDARD:
                scheme[localname(child)] = ref.last_color
            else:
                scheme[localname(child)] = ref.value
        return {token: scheme.get(token) for token in SCHEME_TOKENS} | scheme

    def _latin(self, which: str) -> str | None:
        path = f"a:themeElements/a:fontScheme/a:{which}/a:latin"
        node = self._element
        for step in path.split("/"):
            node = node.find(qn(step)) if node is not None else None
        return node.get("typeface") if node is not None else None

    @property
    def major_font(self) -> str | None:
        return self._latin("majorFont")

    @property
    def minor_font(self) -> str | None:
        return self._latin("minorFont")

    def typeface(self, token: str) -> str | None:
        """Resolve ``+mj-lt`` / ``+mn-lt``; any other name is returned as is."""
        if token == MAJOR_LATIN:
            return self.major_font
        if token == MINOR_LATIN:
            return self.minor_font
        return token

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "major_font": self.major_font,
            "minor_font": self.minor_font,
            "colors": self.color_scheme,
        }
