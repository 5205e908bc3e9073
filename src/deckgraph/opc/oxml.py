"""Namespace helpers shared by every module that touches part XML.

Parsing and serialization are done by python-pptx; these helpers only cover
lookups by prefixed tag and the relationship-reference scan used by the
copy and removal code.
"""

from typing import Iterator

from lxml import etree
from pptx.oxml import parse_xml
from pptx.oxml.xmlchemy import OxmlElement

NS = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "c": "http://schemas.openxmlformats.org/drawingml/2006/chart",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "p14": "http://schemas.microsoft.com/office/powerpoint/2010/main",
    "asvg": "http://schemas.microsoft.com/office/drawing/2016/SVG/main",
}

CHART_URI = "http://schemas.openxmlformats.org/drawingml/2006/chart"
TABLE_URI = "http://schemas.openxmlformats.org/drawingml/2006/table"

# Elements that only exist to carry a relationship reference and can be
# dropped together with the relationship.
DETACHABLE_TAGS = {
    "{%s}sldId" % NS["p"],
    "{%s}sldMasterId" % NS["p"],
    "{%s}sldLayoutId" % NS["p"],
    "{%s}notesMasterId" % NS["p"],
    "{%s}sld" % NS["p"],
    "{%s}hlinkClick" % NS["a"],
    "{%s}hlinkHover" % NS["a"],
}

_R_PREFIX = "{%s}" % NS["r"]


def qn(tag: str) -> str:
    """Turn a prefixed tag like ``"p:sp"`` into Clark notation."""
    prefix, local = tag.split(":")
    return "{%s}%s" % (NS[prefix], local)


def localname(element) -> str:
    return etree.QName(element).localname


def new_element(tag: str, **attrs: str):
    """Create a python-pptx oxml element, setting plain attributes."""
    element = OxmlElement(tag)
    for name, value in attrs.items():
        element.set(name, str(value))
    return element


def parse(blob: bytes):
    return parse_xml(blob)


def to_bytes(element) -> bytes:
    return etree.tostring(element, encoding="UTF-8", standalone=True)


def iter_rel_refs(element) -> Iterator[tuple]:
    """Yield ``(element, attribute, rId)`` for every r:* attribute below element."""
    for el in element.iter():
        if not isinstance(el.tag, str):
            continue
        for attr, value in el.attrib.items():
            if attr.startswith(_R_PREFIX):
                yield el, attr, value


def remap_rel_refs(element, rid_map: dict[str, str]) -> None:
    """Rewrite r:* attributes in place according to ``rid_map``."""
    for el, attr, value in list(iter_rel_refs(element)):
        if value in rid_map:
            el.set(attr, rid_map[value])


def r_attr(name: str = "id") -> str:
    return _R_PREFIX + name


def xpath(element, expr: str) -> list:
    """Evaluate ``expr`` against element with the deckgraph prefixes bound."""
    return etree.XPath(expr, namespaces=NS)(element)


def insert_in_order(parent, child, successors: tuple[str, ...]):
    """Insert ``child`` before the first existing child tagged in ``successors``.

    ``successors`` are prefixed tags of the elements the schema places after
    ``child``; with none present the child is appended.
    """
    tags = {qn(tag) for tag in successors}
    for existing in parent:
        if existing.tag in tags:
            existing.addprevious(child)
            return child
    parent.append(child)
    return child


def get_or_add(parent, tag: str, successors: tuple[str, ...] = ()):
    child = parent.find(qn(tag))
    if child is None:
        child = insert_in_order(parent, new_element(tag), successors)
    return child
