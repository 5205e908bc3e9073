"""Partially-specified font properties and their merge rule."""

from dataclasses import dataclass, fields
from typing import Any

from deckgraph.opc.oxml import qn

from .colors import ColorRef, ResolvedColor, find_solid_fill

_TRUE = {"1", "true", "on"}


def parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.lower() in _TRUE


@dataclass(frozen=True)
class FontData:
    """Font fields that are either set or inherited (``None``).

    ``merged_with`` only fills fields that are still unset, so the more
    specific level of the cascade always wins.
    """
    size_pt: float | None = None
    typeface: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    color: ColorRef | None = None

    @classmethod
    def from_rpr(cls, rpr) -> "FontData":
        """Read an ``a:rPr``, ``a:defRPr`` or ``a:endParaRPr`` element."""
        if rpr is None:
            return cls()
        sz = rpr.get("sz")
        latin = rpr.find(qn("a:latin"))
        return cls(
            size_pt=int(sz) / 100 if sz is not None else None,
            typeface=latin.get("typeface") if latin is not None else None,
            bold=parse_bool(rpr.get("b")),
            italic=parse_bool(rpr.get("i")),
            color=ColorRef.from_element(find_solid_fill(rpr)),
        )

    def merged_with(self, parent: "FontData") -> "FontData":
        values = {}
        for f in fields(self):
            own = getattr(self, f.name)
            values[f.name] = own if own is not None else getattr(parent, f.name)
        return FontData(**values)

    def is_filled(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self))

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            d[f.name] = value.to_dict() if isinstance(value, ColorRef) else value
        return d


@dataclass(frozen=True)
class ResolvedFont:
    """A font with every field filled in."""
    size_pt: float
    typeface: str
    bold: bool
    italic: bool
    color: ColorRef
    color_hex: str | None = None

    @classmethod
    def from_data(cls, data: FontData, color: ResolvedColor | None) -> "ResolvedFont":
        return cls(
            size_pt=data.size_pt,
            typeface=data.typeface,
            bold=data.bold,
            italic=data.italic,
            color=data.color,
            color_hex=color.hex if color is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            "size_pt": self.size_pt,
            "typeface": self.typeface,
            "bold": self.bold,
            "italic": self.italic,
            "color": self.color_hex,
        }
