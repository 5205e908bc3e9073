"""Tests for color references and their resolution (deckgraph.style.colors)."""

import pytest

from deckgraph.opc.oxml import parse
from deckgraph.style.colors import (
    ColorRef,
    ColorType,
    normalize_hex,
    resolve_color,
    resolve_direct,
)

A = 'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main"'

SCHEME = {"dk1": "000000", "lt1": "FFFFFF", "accent1": "4F81BD"}
COLOR_MAP = {"tx1": "dk1", "bg1": "lt1"}


def fill(inner: str):
    return parse(f"<a:solidFill {A}>{inner}</a:solidFill>".encode())


class TestColorRef:
    def test_from_srgb(self):
        ref = ColorRef.from_element(fill('<a:srgbClr val="1f497d"/>'))
        assert ref == ColorRef(ColorType.RGB, "1f497d")

    def test_from_sys_color(self):
        ref = ColorRef.from_element(fill('<a:sysClr val="windowText" lastClr="000000"/>'))
        assert ref.kind is ColorType.STANDARD
        assert ref.last_color == "000000"

    def test_from_empty_fill(self):
        assert ColorRef.from_element(fill("")) is None
        assert ColorRef.from_element(None) is None

    def test_to_element_round_trip(self):
        ref = ColorRef.scheme("accent1")
        element = ref.to_element()
        assert element.get("val") == "accent1"
        assert element.tag.endswith("}schemeClr")


class TestResolve:
    def test_rgb(self):
        assert resolve_direct(ColorRef.rgb("#ff0000")).hex == "FF0000"

    def test_system_color_uses_last_color(self):
        ref = ColorRef(ColorType.STANDARD, "window", "ffffff")
        assert resolve_direct(ref).hex == "FFFFFF"

    @pytest.mark.parametrize("name", ["darkRed", "dkRed"])
    def test_preset(self, name):
        assert resolve_direct(ColorRef(ColorType.PRESET, name)).hex == "8B0000"

    def test_scheme_member(self):
        resolved = resolve_color(ColorRef.scheme("accent1"), SCHEME, COLOR_MAP)
        assert resolved.hex == "4F81BD"
        assert resolved.color_type is ColorType.THEME

    def test_mapped_through_color_map(self):
        assert resolve_color(ColorRef.scheme("tx1"), SCHEME, COLOR_MAP).hex == "000000"
        assert resolve_color(ColorRef.scheme("bg1"), SCHEME, COLOR_MAP).hex == "FFFFFF"

    def test_unresolvable(self):
        assert resolve_color(ColorRef.scheme("tx2"), SCHEME, COLOR_MAP) is None
        assert resolve_color(None, SCHEME) is None


class TestNormalizeHex:
    def test_normalizes(self):
        assert normalize_hex("#1f497d") == "1F497D"

    @pytest.mark.parametrize("bad", ["#12345", "GGGGGG", ""])
    def test_rejects(self, bad):
        with pytest.raises(ValueError):
            normalize_hex(bad)
