"""Color references and the color cascade.

A DrawingML color is either given directly (``a:srgbClr``, ``a:sysClr``,
``a:prstClr``) or as a scheme token (``a:schemeClr``) that has to be looked
up in the master's theme. Tokens such as ``tx1`` or ``bg1`` are not members
of the theme color scheme at all; the master's ``p:clrMap`` maps them onto
one (``tx1 -> dk1``) before the scheme is queried again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from deckgraph.opc.oxml import localname, new_element, qn


class ColorType(Enum):
    """Where a resolved color came from."""
    RGB = "rgb"            # a:srgbClr
    STANDARD = "standard"  # a:sysClr (its lastClr)
    PRESET = "preset"      # a:prstClr
    THEME = "theme"        # a:schemeClr via the theme color scheme


_REF_TAGS = {
    "srgbClr": ColorType.RGB,
    "sysClr": ColorType.STANDARD,
    "prstClr": ColorType.PRESET,
    "schemeClr": ColorType.THEME,
}

# Scheme tokens that live directly in a theme's a:clrScheme.
SCHEME_TOKENS = (
    "dk1", "lt1", "dk2", "lt2",
    "accent1", "accent2", "accent3", "accent4", "accent5", "accent6",
    "hlink", "folHlink",
)


# ---------------------------------------------------------------------------
# Preset colors (ST_PresetColorVal)
# ---------------------------------------------------------------------------

_NAMED_COLORS = {
    "aliceBlue": "F0F8FF", "antiqueWhite": "FAEBD7", "aqua": "00FFFF",
    "aquamarine": "7FFFD4", "azure": "F0FFFF", "beige": "F5F5DC",
    "bisque": "FFE4C4", "black": "000000", "blanchedAlmond": "FFEBCD",
    "blue": "0000FF", "blueViolet": "8A2BE2", "brown": "A52A2A",
    "burlyWood": "DEB887", "cadetBlue": "5F9EA0", "chartreuse": "7FFF00",
    "chocolate": "D2691E", "coral": "FF7F50", "cornflowerBlue": "6495ED",
    "cornsilk": "FFF8DC", "crimson": "DC143C", "cyan": "00FFFF",
    "darkBlue": "00008B", "darkCyan": "008B8B", "darkGoldenrod": "B8860B",
    "darkGray": "A9A9A9", "darkGreen": "006400", "darkGrey": "A9A9A9",
    "darkKhaki": "BDB76B", "darkMagenta": "8B008B", "darkOliveGreen": "556B2F",
    "darkOrange": "FF8C00", "darkOrchid": "9932CC", "darkRed": "8B0000",
    "darkSalmon": "E9967A", "darkSeaGreen": "8FBC8F", "darkSlateBlue": "483D8B",
    "darkSlateGray": "2F4F4F", "darkSlateGrey": "2F4F4F", "darkTurquoise": "00CED1",
    "darkViolet": "9400D3", "deepPink": "FF1493", "deepSkyBlue": "00BFFF",
    "dimGray": "696969", "dimGrey": "696969", "dodgerBlue": "1E90FF",
    "firebrick": "B22222", "floralWhite": "FFFAF0", "forestGreen": "228B22",
    "fuchsia": "FF00FF", "gainsboro": "DCDCDC", "ghostWhite": "F8F8FF",
    "gold": "FFD700", "goldenrod": "DAA520", "gray": "808080",
    "green": "008000", "greenYellow": "ADFF2F", "grey": "808080",
    "honeydew": "F0FFF0", "hotPink": "FF69B4", "indianRed": "CD5C5C",
    "indigo": "4B0082", "ivory": "FFFFF0", "khaki": "F0E68C",
    "lavender": "E6E6FA", "lavenderBlush": "FFF0F5", "lawnGreen": "7CFC00",
    "lemonChiffon": "FFFACD", "lightBlue": "ADD8E6", "lightCoral": "F08080",
    "lightCyan": "E0FFFF", "lightGoldenrodYellow": "FAFAD2", "lightGray": "D3D3D3",
    "lightGreen": "90EE90", "lightGrey": "D3D3D3", "lightPink": "FFB6C1",
    "lightSalmon": "FFA07A", "lightSeaGreen": "20B2AA", "lightSkyBlue": "87CEFA",
    "lightSlateGray": "778899", "lightSlateGrey": "778899", "lightSteelBlue": "B0C4DE",
    "lightYellow": "FFFFE0", "lime": "00FF00", "limeGreen": "32CD32",
    "linen": "FAF0E6", "magenta": "FF00FF", "maroon": "800000",
    "mediumAquamarine": "66CDAA", "mediumBlue": "0000CD", "mediumOrchid": "BA55D3",
    "mediumPurple": "9370DB", "mediumSeaGreen": "3CB371", "mediumSlateBlue": "7B68EE",
    "mediumSpringGreen": "00FA9A", "mediumTurquoise": "48D1CC",
    "mediumVioletRed": "C71585", "midnightBlue": "191970", "mintCream": "F5FFFA",
    "mistyRose": "FFE4E1", "moccasin": "FFE4B5", "navajoWhite": "FFDEAD",
    "navy": "000080", "oldLace": "FDF5E6", "olive": "808000",
    "oliveDrab": "6B8E23", "orange": "FFA500", "orangeRed": "FF4500",
    "orchid": "DA70D6", "paleGoldenrod": "EEE8AA", "paleGreen": "98FB98",
    "paleTurquoise": "AFEEEE", "paleVioletRed": "DB7093", "papayaWhip": "FFEFD5",
    "peachPuff": "FFDAB9", "peru": "CD853F", "pink": "FFC0CB",
    "plum": "DDA0DD", "powderBlue": "B0E0E6", "purple": "800080",
    "red": "FF0000", "rosyBrown": "BC8F8F", "royalBlue": "4169E1",
    "saddleBrown": "8B4513", "salmon": "FA8072", "sandyBrown": "F4A460",
    "seaGreen": "2E8B57", "seaShell": "FFF5EE", "sienna": "A0522D",
    "silver": "C0C0C0", "skyBlue": "87CEEB", "slateBlue": "6A5ACD",
    "slateGray": "708090", "slateGrey": "708090", "snow": "FFFAFA",
    "springGreen": "00FF7F", "steelBlue": "4682B4", "tan": "D2B48C",
    "teal": "008080", "thistle": "D8BFD8", "tomato": "FF6347",
    "turquoise": "40E0D0", "violet": "EE82EE", "wheat": "F5DEB3",
    "white": "FFFFFF", "whiteSmoke": "F5F5F5", "yellow": "FFFF00",
    "yellowGreen": "9ACD32",
}


def _with_short_forms(colors: dict[str, str]) -> dict[str, str]:
    # The schema also spells dark/light/medium as dk/lt/med (dkBlue, ltGray).
    result = dict(colors)
    for name, value in colors.items():
        for long, short in (("dark", "dk"), ("light", "lt"), ("medium", "med")):
            if name.startswith(long):
                result[short + name[len(long):]] = value
    return result


PRESET_COLORS = _with_short_forms(_NAMED_COLORS)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorRef:
    """An unresolved color reference as written in the XML."""
    kind: ColorType
    value: str                      # hex, system name, preset name or scheme token
    last_color: str | None = None   # a:sysClr/@lastClr

    @classmethod
    def rgb(cls, hex_color: str) -> "ColorRef":
        return cls(ColorType.RGB, normalize_hex(hex_color))

    @classmethod
    def scheme(cls, token: str) -> "ColorRef":
        return cls(ColorType.THEME, token)

    @classmethod
    def from_element(cls, element) -> "ColorRef | None":
        """Parse the first color choice child of ``element`` (e.g. a:solidFill)."""
        if element is None:
            return None
        for child in element:
            if not isinstance(child.tag, str):
                continue
            kind = _REF_TAGS.get(localname(child))
            if kind is None:
                continue
            if kind is ColorType.STANDARD:
                return cls(kind, child.get("val", ""), child.get("lastClr"))
            return cls(kind, child.get("val", ""))
        return None

    def to_element(self):
        """Build the DrawingML color choice element for this reference."""
        tag = {v: k for k, v in _REF_TAGS.items()}[self.kind]
        element = new_element(f"a:{tag}", val=self.value)
        if self.last_color:
            element.set("lastClr", self.last_color)
        return element

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"kind": self.kind.value, "value": self.value}
        if self.last_color:
            d["last_color"] = self.last_color
        return d


@dataclass(frozen=True)
class ResolvedColor:
    hex: str
    color_type: ColorType
    alpha: float = 1.0

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"hex": self.hex, "type": self.color_type.value}
        if self.alpha != 1.0:
            d["alpha"] = self.alpha
        return d


def normalize_hex(hex_color: str) -> str:
    """``'#1f497d'`` -> ``'1F497D'``; raises ValueError on anything else."""
    h = hex_color.lstrip("#").upper()
    if len(h) != 6:
        raise ValueError(f"expected a 6-digit hex color, got {hex_color!r}")
    int(h, 16)
    return h


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_direct(ref: ColorRef | None) -> ResolvedColor | None:
    """Resolve a reference that needs no theme, else ``None``."""
    if ref is None:
        return None
    if ref.kind is ColorType.RGB:
        return ResolvedColor(ref.value.upper(), ColorType.RGB)
    if ref.kind is ColorType.STANDARD:
        if ref.last_color is None:
            return None
        return ResolvedColor(ref.last_color.upper(), ColorType.STANDARD)
    if ref.kind is ColorType.PRESET:
        hex_value = PRESET_COLORS.get(ref.value)
        return ResolvedColor(hex_value, ColorType.PRESET) if hex_value else None
    return None


def resolve_color(ref: ColorRef | None, scheme: dict[str, str | None],
                  color_map: dict[str, str] | None = None) -> ResolvedColor | None:
    """Resolve ``ref`` against a theme color scheme and a master color map.

    ``scheme`` maps scheme tokens (``dk1``, ``accent1``...) to hex values;
    ``color_map`` is the master's ``p:clrMap`` (``tx1 -> dk1``...). Returns
    ``None`` when nothing in the chain yields a value.
    """
    direct = resolve_direct(ref)
    if direct is not None or ref is None or ref.kind is not ColorType.THEME:
        return direct
    hex_value = scheme.get(ref.value)
    if hex_value is None and color_map:
        mapped = color_map.get(ref.value)
        if mapped is not None:
            hex_value = scheme.get(mapped)
    if hex_value is None:
        return None
    return ResolvedColor(hex_value.upper(), ColorType.THEME)


def solid_fill(ref: ColorRef):
    fill = new_element("a:solidFill")
    fill.append(ref.to_element())
    return fill


def find_solid_fill(parent):
    if parent is None:
        return None
    return parent.find(qn("a:solidFill"))
