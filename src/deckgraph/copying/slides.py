"""Slide-level structure: copy, duplicate, remove, move, insert, add empty.

Every operation validates its arguments before touching the package and,
where several parts are involved, stages the complete set of new parts
first and only then splices them into the presentation's id lists.
"""

import copy
import logging

from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.oxml import parse_xml
from pptx.oxml.ns import nsdecls

from deckgraph.errors import InvalidArgumentError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import get_or_add, new_element, qn, r_attr

logger = logging.getLogger(__name__)

SLIDE_ID_MIN = 256
MASTER_ID_MIN = 2147483648

# Children of p:presentation that follow each id list, in schema order.
_PRESENTATION_ORDER = (
    "p:sldMasterIdLst", "p:notesMasterIdLst", "p:handoutMasterIdLst", "p:sldIdLst", "p:sldSz",
    "p:notesSz", "p:smartTags", "p:embeddedFontLst", "p:custShowLst", "p:photoAlbum",
    "p:custDataLst", "p:kinsoku", "p:defaultTextStyle", "p:modifyVerifier", "p:extLst",
)

# Targets a duplicated slide keeps pointing at instead of copying.
_SHARED_ON_DUPLICATE = {RT.SLIDE_LAYOUT, RT.IMAGE, RT.SLIDE, RT.MEDIA, RT.VIDEO, RT.AUDIO}

_EMPTY_SLIDE_XML = (
    "<p:sld %s><p:cSld><p:spTree/></p:cSld>"
    "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr></p:sld>"
)


# ---------------------------------------------------------------------------
# Id lists
# ---------------------------------------------------------------------------

def _id_list(prs, tag: str):
    successors = _PRESENTATION_ORDER[_PRESENTATION_ORDER.index(tag) + 1:]
    return get_or_add(prs.element, tag, successors)


def slide_id_entries(prs) -> list:
    lst = prs.element.find(qn("p:sldIdLst"))
    return lst.findall(qn("p:sldId")) if lst is not None else []


def _append_slide_id(prs, rId: str) -> int:
    lst = _id_list(prs, "p:sldIdLst")
    ids = [int(entry.get("id")) for entry in lst.findall(qn("p:sldId"))]
    slide_id = max(ids, default=SLIDE_ID_MIN - 1) + 1
    entry = new_element("p:sldId", id=slide_id)
    entry.set(r_attr("id"), rId)
    lst.append(entry)
    return slide_id


def _append_master_id(prs, rId: str) -> int:
    lst = _id_list(prs, "p:sldMasterIdLst")
    ids = [int(entry.get("id")) for entry in lst.findall(qn("p:sldMasterId"))]
    master_id = max(ids, default=MASTER_ID_MIN - 1) + 1
    entry = new_element("p:sldMasterId", id=master_id)
    entry.set(r_attr("id"), rId)
    lst.append(entry)
    return master_id


def _renumber_layout_ids(prs, master_id: int) -> None:
    """Give every layout id of every master a value above ``master_id``.

    Master and layout ids share one id space; renumbering all of them in
    master order keeps them unique after a new master has been added.
    """
    next_id = master_id
    for master in prs.slide_masters:
        lst = master.element.find(qn("p:sldLayoutIdLst"))
        if lst is None:
            continue
        for entry in lst.findall(qn("p:sldLayoutId")):
            next_id += 1
            entry.set("id", str(next_id))


def _prune_layout_ids(master_part) -> None:
    lst = master_part._element.find(qn("p:sldLayoutIdLst"))
    if lst is None:
        return
    for entry in lst.findall(qn("p:sldLayoutId")):
        rId = entry.get(r_attr("id"))
        if rId not in master_part.rels:
            logger.warning("Pruned layout id %s of %s: no layout part behind %s",
                           entry.get("id"), master_part.partname, rId)
            lst.remove(entry)


def _check_position(position: int, upper: int) -> None:
    if not isinstance(position, int) or not 1 <= position <= upper:
        raise InvalidArgumentError(f"slide position must be between 1 and {upper}, got {position!r}")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def duplicate_slide(slide):
    """Append a copy of ``slide`` to its own presentation.

    The copy keeps the layout, images and slide links of the original,
    drops its notes and gets its own copy of everything else (charts and
    their workbooks, embedded objects).
    """
    prs = slide.presentation
    graph = prs.graph
    clone = graph.clone_part(
        slide.part,
        follow=lambda rel: rel.reltype != RT.NOTES_SLIDE,
        share=lambda rel: rel.reltype in _SHARED_ON_DUPLICATE,
    )
    rId = graph.relate(prs.part, clone, PartKind.SLIDE)
    slide_id = _append_slide_id(prs, rId)
    prs.touch()
    logger.debug("Duplicated slide %d as slide id %d", slide.number, slide_id)
    return prs.view(clone)


def import_slide(slide, target):
    """Append a copy of ``slide`` from another presentation to ``target``.

    The slide brings its layout, master, theme and media along; the copied
    master only lists the one layout that came with it.
    """
    if slide.presentation is target:
        return duplicate_slide(slide)
    source_graph = slide.presentation.graph
    graph = target.graph
    layout_part = slide.layout.part
    master_part = slide.master.part

    def follow(rel) -> bool:
        if rel.reltype in (RT.NOTES_SLIDE, RT.SLIDE):
            return False
        if rel.reltype == RT.SLIDE_LAYOUT:
            return rel.target is layout_part
        return True

    memo: dict = {}
    slide_clone = graph.clone_part(slide.part, follow=follow, memo=memo, source_graph=source_graph)
    master_clone = memo[id(master_part)]
    _prune_layout_ids(master_clone)

    master_rId = graph.relate(target.part, master_clone, PartKind.SLIDE_MASTER)
    slide_rId = graph.relate(target.part, slide_clone, PartKind.SLIDE)
    master_id = _append_master_id(target, master_rId)
    _renumber_layout_ids(target, master_id)
    slide_id = _append_slide_id(target, slide_rId)
    target.touch()
    logger.debug("Imported slide as slide id %d with master id %d (%d part(s) copied)",
                 slide_id, master_id, len(memo))
    return target.view(slide_clone)


def remove_slide(prs, position: int):
    """Remove the slide at 1-based ``position``; returns the applied plan.

    Layouts and masters left unused are kept.
    """
    entries = slide_id_entries(prs)
    _check_position(position, len(entries))
    rId = entries[position - 1].get(r_attr("id"))
    part = prs.graph.resolve(prs.part, rId)
    plan = prs.graph.plan_removal(part)
    prs.graph.apply_removal(plan)
    prs.touch()
    logger.debug("Removed slide %d (%s)", position, rId)
    return plan


def move_slide(prs, slide, position: int) -> None:
    """Move ``slide`` to 1-based ``position`` with a single list move."""
    if slide.presentation is not prs:
        raise InvalidArgumentError("the slide belongs to another presentation")
    entries = slide_id_entries(prs)
    _check_position(position, len(entries))
    entry = slide.id_entry
    lst = entry.getparent()
    lst.remove(entry)
    lst.insert(position - 1, entry)
    prs.touch()


def insert_slide(prs, position: int, slide):
    """Add a copy of ``slide`` so it ends up at 1-based ``position``."""
    _check_position(position, len(slide_id_entries(prs)) + 1)
    added = import_slide(slide, prs)
    move_slide(prs, added, position)
    return added


def add_empty_slide(prs, layout):
    """Append a slide whose shapes are the layout's empty placeholders."""
    if layout.presentation is not prs:
        raise InvalidArgumentError("the layout belongs to another presentation")
    element = parse_xml(_EMPTY_SLIDE_XML % nsdecls("a", "p", "r"))
    sp_tree = element.find(f"{qn('p:cSld')}/{qn('p:spTree')}")
    layout_tree = layout.shapes.element
    for tag in ("p:nvGrpSpPr", "p:grpSpPr"):
        source = layout_tree.find(qn(tag))
        sp_tree.append(copy.deepcopy(source) if source is not None else new_element(tag))
    for shape in layout.shapes:
        if shape.element.tag != qn("p:sp") or not shape.is_placeholder:
            continue
        sp = new_element("p:sp")
        sp.append(copy.deepcopy(shape.element.find(qn("p:nvSpPr"))))
        sp.append(new_element("p:spPr"))
        tx_body = new_element("p:txBody")
        tx_body.append(new_element("a:bodyPr"))
        tx_body.append(new_element("a:lstStyle"))
        tx_body.append(new_element("a:p"))
        sp.append(tx_body)
        sp_tree.append(sp)

    graph = prs.graph
    part = graph.add_part(PartKind.SLIDE, element, links=[(PartKind.SLIDE_LAYOUT, layout.part)])
    rId = graph.relate(prs.part, part, PartKind.SLIDE)
    _append_slide_id(prs, rId)
    prs.touch()
    return prs.view(part)
