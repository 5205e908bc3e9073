"""Copying shapes within a tree, across slides and across presentations.

The copied element gets the next free id of the destination part and a
suffixed name when its own is taken. Relationships it refers to are
re-homed onto the destination part:

- images always get a fresh image part and a fresh relationship id, so the
  copy can later change its picture without affecting the original;
- charts get a copy of the chart part together with its embedded workbook;
- external targets (hyperlinks) are related again from the destination;
- other internal targets are shared inside one package and copied across
  packages; slide jump links that cannot be honoured are dropped.
"""

import copy
import logging

from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import DETACHABLE_TAGS, iter_rel_refs, qn, remap_rel_refs

from .naming import next_copy_name

logger = logging.getLogger(__name__)


def duplicate_shape(shape, tree=None):
    """Copy ``shape`` into ``tree`` (its own tree by default)."""
    return copy_shape(shape, tree if tree is not None else shape.tree)


def copy_shape(shape, target_tree):
    source_owner = shape.owner
    target_owner = target_tree.owner
    clone = copy.deepcopy(shape.element)

    _assign_ids(clone, target_tree.next_id())
    c_nv_pr = clone.find(f".//{qn('p:cNvPr')}")
    c_nv_pr.set("name", next_copy_name(shape.name, target_tree.names()))

    rid_map = _rehome_rels(clone, source_owner, target_owner)
    remap_rel_refs(clone, rid_map)

    copied = target_tree.append_element(clone)
    logger.debug("Copied shape %r (id %d) to %s as %r (id %d)", shape.name, shape.id,
                 target_owner.part.partname, copied.name, copied.id)
    return copied


def _assign_ids(clone, first_id: int) -> None:
    """Number every shape in the clone from ``first_id``, root first.

    Connector glue (``stCxn``/``endCxn``) inside a copied group follows the
    renumbering of the shapes it points at.
    """
    id_map = {}
    next_id = first_id
    for c_nv_pr in clone.iter(qn("p:cNvPr")):
        id_map[c_nv_pr.get("id")] = str(next_id)
        c_nv_pr.set("id", str(next_id))
        next_id += 1
    for tag in ("a:stCxn", "a:endCxn"):
        for glue in clone.iter(qn(tag)):
            if glue.get("id") in id_map:
                glue.set("id", id_map[glue.get("id")])


def _rehome_rels(clone, source_owner, target_owner) -> dict[str, str]:
    source_part = source_owner.part
    target_part = target_owner.part
    source_graph = source_owner.presentation.graph
    target_graph = target_owner.presentation.graph
    same_part = source_part is target_part
    same_package = source_part.package is target_part.package

    rid_map: dict[str, str] = {}
    dropped: set[str] = set()
    for _element, _attr, rId in list(iter_rel_refs(clone)):
        if rId in rid_map or rId in dropped:
            continue
        rel = source_part.rels.get(rId)
        if rel is None:
            logger.warning("Shape refers to unknown relationship %s of %s", rId, source_part.partname)
            dropped.add(rId)
            continue
        if rel.is_external:
            if not same_part:
                rid_map[rId] = target_graph.relate_external(target_part, rel.target_ref, rel.reltype)
            continue
        target = rel.target_part
        if rel.reltype == RT.IMAGE:
            image = target_graph.stage_part(PartKind.IMAGE, target.blob, content_type=target.content_type)
            rid_map[rId] = target_graph.relate(target_part, image, PartKind.IMAGE)
        elif rel.reltype == RT.CHART:
            chart = target_graph.clone_part(target, follow=lambda _rel: True, source_graph=source_graph)
            rid_map[rId] = target_graph.relate(target_part, chart, PartKind.CHART)
        elif same_package:
            if not same_part:
                rid_map[rId] = target_graph.relate(target_part, target, rel.reltype)
        elif rel.reltype == RT.SLIDE:
            dropped.add(rId)
        else:
            other = target_graph.clone_part(target, follow=lambda _rel: True, source_graph=source_graph)
            rid_map[rId] = target_graph.relate(target_part, other, rel.reltype)

    if dropped:
        _drop_refs(clone, dropped)
    return rid_map


def _drop_refs(clone, rIds: set[str]) -> None:
    for element, attr, value in list(iter_rel_refs(clone)):
        if value not in rIds:
            continue
        if element.tag in DETACHABLE_TAGS and element is not clone:
            element.getparent().remove(element)
        else:
            del element.attrib[attr]
