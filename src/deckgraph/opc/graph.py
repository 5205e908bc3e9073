"""Part graph: typed parts of a package and the relationships between them.

Wraps a python-pptx ``OpcPackage`` and owns every structural mutation of it:
part creation, relationship allocation, relationship resolution and part
removal. Everything above this layer (slides, shapes, the copy engine) goes
through a ``PartGraph`` rather than touching ``part.rels`` directly, so that
relationship ids stay unique and are never recycled.

Usage::

    from deckgraph.opc.graph import PartGraph
    from deckgraph.opc.kinds import PartKind

    graph = PartGraph(prs.part.package)
    slide = graph.add_part(PartKind.SLIDE, xml, links=[(PartKind.SLIDE_LAYOUT, layout)])
    rId = graph.relate(prs.part, slide, PartKind.SLIDE)

    plan = graph.plan_removal(slide)   # pure, nothing changes yet
    graph.apply_removal(plan)
"""

import logging
import re
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from pptx.opc.constants import RELATIONSHIP_TARGET_MODE as RTM
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.opc.package import Part, PartFactory, XmlPart, _Relationship
from pptx.opc.packuri import PackURI
from pptx.oxml import parse_xml
from pptx.parts.image import Image as ImageInfo

from deckgraph.errors import (
    DanglingRelationshipError,
    InvalidArgumentError,
    PackageCorruptError,
)

from .kinds import (
    CONTENT_TYPES,
    IMAGE_EXTENSIONS,
    PARTNAME_TEMPLATES,
    REQUIRED_LINKS,
    PartKind,
    kind_of,
    reltype_for,
)
from .oxml import DETACHABLE_TAGS, iter_rel_refs, qn, to_bytes, xpath

logger = logging.getLogger(__name__)

_RID_RE = re.compile(r"^rId(\d+)$")
_PARTNAME_RE = re.compile(r"^(?P<prefix>.*?)(?P<idx>\d*)(?P<ext>\.[^./]+)$")

# Decides, per outgoing relationship of a part being cloned, what the clone
# gets: ``True`` means "do it" (follow / share), anything else means "don't".
RelPredicate = Callable[["Relationship"], bool]


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Relationship:
    """One outgoing edge of a part."""
    rId: str
    reltype: str
    target: Any                 # Part, or the URL string of an external target
    is_external: bool = False

    @property
    def kind(self) -> PartKind | None:
        if self.is_external:
            return None
        return kind_of(self.target)

    @property
    def target_part(self) -> Part:
        if self.is_external:
            raise InvalidArgumentError(f"relationship {self.rId} targets an external URL")
        return self.target

    def to_dict(self) -> dict:
        target = self.target if self.is_external else str(self.target.partname)
        d: dict[str, Any] = {"rId": self.rId, "reltype": self.reltype.rsplit("/", 1)[-1],
                             "target": target}
        if self.is_external:
            d["external"] = True
        return d


@dataclass
class RemovalPlan:
    """Everything that has to go when ``part`` is removed.

    Computed by :meth:`PartGraph.plan_removal` without touching the package,
    so the cleanup contract can be inspected before it is applied.
    """
    part: Part
    incoming: list[tuple[Part, str]] = field(default_factory=list)
    outgoing: list[str] = field(default_factory=list)
    references: list[tuple[Part, Any]] = field(default_factory=list)

    def describe(self) -> list[str]:
        lines = [f"remove {self.part.partname}"]
        for source, rId in self.incoming:
            lines.append(f"  drop {source.partname} -> {rId}")
        for owner, element in self.references:
            tag = element.tag.rsplit("}", 1)[-1]
            lines.append(f"  detach <{tag}> in {owner.partname}")
        return lines


# ---------------------------------------------------------------------------
# PartGraph
# ---------------------------------------------------------------------------

class PartGraph:
    """Mutation rules for the parts and relationships of one package.

    Parameters
    ----------
    package : pptx.opc.package.OpcPackage
        The loaded python-pptx package. Parts are whatever is reachable from
        its package-level relationships, which is also what gets written on
        save; a part that loses its last incoming relationship is gone.
    """

    def __init__(self, package) -> None:
        self._package = package
        self._generation = 0
        self._high_water: "weakref.WeakKeyDictionary[Part, int]" = weakref.WeakKeyDictionary()
        self._reserved: set[str] = set()

    @property
    def package(self):
        return self._package

    # -- generation ---------------------------------------------------------

    @property
    def generation(self) -> int:
        """Counter bumped by every structural or style mutation."""
        return self._generation

    def touch(self) -> int:
        self._generation += 1
        return self._generation

    # -- queries ------------------------------------------------------------

    def parts(self) -> list[Part]:
        return list(self._package.iter_parts())

    def parts_of_kind(self, kind: PartKind) -> list[Part]:
        return [part for part in self._package.iter_parts() if kind_of(part) is kind]

    def kind_of(self, part: Part) -> PartKind:
        return kind_of(part)

    def contains(self, part: Part) -> bool:
        return any(p is part for p in self._package.iter_parts())

    def relationships(self, source: Part) -> list[Relationship]:
        result = []
        for rId, rel in source.rels.items():
            target = rel.target_ref if rel.is_external else rel.target_part
            result.append(Relationship(rId, rel.reltype, target, rel.is_external))
        return result

    def related(self, source: Part, kind: PartKind | str) -> list[Part]:
        """Targets of every internal relationship of ``kind`` from source."""
        reltype = reltype_for(kind)
        return [rel.target_part for rel in source.rels.values()
                if not rel.is_external and rel.reltype == reltype]

    def related_one(self, source: Part, kind: PartKind | str) -> Part:
        """The single required target of ``kind``; corrupt package otherwise."""
        targets = self.related(source, kind)
        if not targets:
            label = kind.value if isinstance(kind, PartKind) else kind
            raise PackageCorruptError(f"{source.partname} has no {label} relationship")
        return targets[0]

    def resolve(self, source: Part, rId: str) -> Part:
        rel = source.rels.get(rId)
        if rel is None or rel.is_external:
            raise DanglingRelationshipError(source.partname, rId)
        return rel.target_part

    def rel_id_of(self, source: Part, target: Part) -> str | None:
        for rId, rel in source.rels.items():
            if not rel.is_external and rel.target_part is target:
                return rId
        return None

    def incoming(self, target: Part) -> list[tuple[Part, str]]:
        """Every ``(source, rId)`` pair whose relationship points at target."""
        result = []
        for part in self._package.iter_parts():
            for rId, rel in part.rels.items():
                if not rel.is_external and rel.target_part is target:
                    result.append((part, rId))
        return result

    def reference_count(self, target: Part) -> int:
        """How many XML references (across all sources) reach ``target``.

        A relationship with no XML reference (e.g. slide → layout) counts once.
        """
        count = 0
        for source, rId in self.incoming(target):
            if isinstance(source, XmlPart):
                refs = sum(1 for _, _, value in iter_rel_refs(source._element) if value == rId)
                count += max(refs, 1)
            else:
                count += 1
        return count

    # -- partnames ----------------------------------------------------------

    def next_partname(self, kind_or_template: PartKind | str, reserved: Iterable[str] = ()) -> PackURI:
        """First free partname for a kind or a ``%d`` template."""
        if isinstance(kind_or_template, PartKind):
            try:
                template = PARTNAME_TEMPLATES[kind_or_template]
            except KeyError:
                raise InvalidArgumentError(
                    f"no partname template for part kind {kind_or_template.value!r}") from None
        else:
            template = kind_or_template
        taken = {str(p.partname) for p in self._package.iter_parts()}
        taken |= self._reserved
        taken |= {str(name) for name in reserved}
        n = 1
        while template % n in taken:
            n += 1
        return PackURI(template % n)

    @staticmethod
    def template_for(part: Part) -> str:
        """Turn ``/ppt/slideLayouts/slideLayout12.xml`` into a ``%d`` template."""
        match = _PARTNAME_RE.match(str(part.partname))
        if match is None:
            raise InvalidArgumentError(f"cannot derive a partname template from {part.partname}")
        return f"{match.group('prefix')}%d{match.group('ext')}"

    # -- part creation ------------------------------------------------------

    def stage_part(self, kind: PartKind, content, partname: str | None = None,
                   content_type: str | None = None) -> Part:
        """Create a part without linking it anywhere.

        ``content`` is either serialized bytes or an XML element. The part is
        unreachable (and will not be saved) until something relates to it;
        its partname is reserved so later allocations do not collide.
        """
        blob = to_bytes(content) if not isinstance(content, (bytes, bytearray)) else bytes(content)
        if kind is PartKind.IMAGE and content_type is None:
            info = ImageInfo.from_blob(blob)
            content_type = info.content_type
        if content_type is None:
            content_type = CONTENT_TYPES.get(kind)
        if content_type is None:
            raise InvalidArgumentError(f"a content type is required for part kind {kind.value!r}")
        if partname is None:
            if kind is PartKind.IMAGE:
                ext = IMAGE_EXTENSIONS.get(content_type, content_type.rsplit("/", 1)[-1])
                partname = self.next_partname(f"/ppt/media/image%d.{ext}")
            else:
                partname = self.next_partname(kind)
        partname = PackURI(str(partname))
        self._reserved.add(str(partname))
        part = PartFactory(partname, content_type, self._package, blob)
        logger.debug("Staged %s part %s", kind.value, partname)
        return part

    def add_part(self, kind: PartKind, content, links: Iterable[tuple[PartKind, Part]] = (),
                 content_type: str | None = None) -> Part:
        """Create a part of ``kind`` with its outgoing ``links``.

        Raises PackageCorruptError, before anything is created, when a
        required companion link is missing.
        """
        links = list(links)
        present = {link_kind for link_kind, _ in links}
        missing = [k.value for k in REQUIRED_LINKS.get(kind, ()) if k not in present]
        if missing:
            raise PackageCorruptError(
                f"a {kind.value} part requires a {', '.join(missing)} relationship")
        for link_kind, target in links:
            if kind_of(target) is not link_kind:
                raise InvalidArgumentError(
                    f"link target {target.partname} is not a {link_kind.value} part")
        part = self.stage_part(kind, content, content_type=content_type)
        for link_kind, target in links:
            self.relate(part, target, link_kind)
        self.touch()
        return part

    # -- relationships ------------------------------------------------------

    def _next_rId(self, source: Part) -> str:
        highest = self._high_water.get(source, 0)
        for rId in source.rels:
            match = _RID_RE.match(rId)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"rId{highest + 1}"

    def _record(self, source: Part, rId: str) -> None:
        match = _RID_RE.match(rId)
        if match:
            self._high_water[source] = max(self._high_water.get(source, 0), int(match.group(1)))

    def _insert(self, source: Part, rId: str | None, reltype: str, target, external: bool) -> str:
        rels = source.rels
        if rId is None:
            rId = self._next_rId(source)
        elif rId in rels:
            raise InvalidArgumentError(f"{source.partname} already has a relationship {rId!r}")
        rels._rels[rId] = _Relationship(
            base_uri=rels._base_uri,
            rId=rId,
            reltype=reltype,
            target_mode=RTM.EXTERNAL if external else RTM.INTERNAL,
            target=target,
        )
        self._record(source, rId)
        self.touch()
        return rId

    def relate(self, source: Part, target: Part, kind: PartKind | str, rId: str | None = None) -> str:
        """Add ``source -> target`` and return its relationship id.

        Ids are allocated as ``rId{max + 1}`` over every id the source has
        ever held, so a freed id is never handed out again. An explicit
        ``rId`` is honoured when it is not in use.
        """
        rId = self._insert(source, rId, reltype_for(kind), target, external=False)
        logger.debug("Related %s -[%s]-> %s", source.partname, rId, target.partname)
        return rId

    def relate_external(self, source: Part, url: str, kind: PartKind | str = RT.HYPERLINK,
                        rId: str | None = None) -> str:
        rId = self._insert(source, rId, reltype_for(kind), url, external=True)
        logger.debug("Related %s -[%s]-> %s (external)", source.partname, rId, url)
        return rId

    def unrelate(self, source: Part, rId: str) -> None:
        if rId not in source.rels:
            raise DanglingRelationshipError(source.partname, rId)
        self._record(source, rId)
        source.rels.pop(rId)
        self.touch()

    def release(self, source: Part, rId: str) -> None:
        """Drop ``rId`` from ``source`` once nothing in its XML refers to it."""
        if rId not in source.rels:
            return
        if isinstance(source, XmlPart) and any(
                value == rId for _, _, value in iter_rel_refs(source._element)):
            return
        self.unrelate(source, rId)

    # -- content ------------------------------------------------------------

    def replace_blob(self, part: Part, blob: bytes) -> None:
        """Swap a part's content in place, keeping its partname and edges."""
        if isinstance(part, XmlPart):
            part._element = parse_xml(blob)
        else:
            part._blob = bytes(blob)
        self.touch()

    # -- removal ------------------------------------------------------------

    def plan_removal(self, part: Part) -> RemovalPlan:
        """Compute what removing ``part`` entails without changing anything.

        Covers every incoming relationship, the XML elements that only exist
        to carry one of those relationship ids (presentation ``sldId``,
        custom-show ``sld``, hyperlinks), and section entries that list the
        slide by its numeric id. An incoming reference that cannot simply be
        detached (e.g. a picture's ``r:embed``) makes the part non-removable.
        """
        if kind_of(part) is PartKind.PRESENTATION:
            raise InvalidArgumentError("the presentation part cannot be removed")
        plan = RemovalPlan(part=part, outgoing=list(part.rels))
        blocking = []
        for source, rId in self.incoming(part):
            plan.incoming.append((source, rId))
            if not isinstance(source, XmlPart):
                continue
            for element, _attr, value in iter_rel_refs(source._element):
                if value != rId:
                    continue
                if element.tag in DETACHABLE_TAGS:
                    plan.references.append((source, element))
                    if element.tag == qn("p:sldId"):
                        plan.references.extend(
                            (source, entry) for entry in self._section_entries(source, element))
                else:
                    blocking.append(f"<{element.tag.rsplit('}', 1)[-1]}> in {source.partname}")
        if blocking:
            raise InvalidArgumentError(
                f"{part.partname} is still referenced by {', '.join(blocking)}")
        return plan

    @staticmethod
    def _section_entries(owner: Part, sld_id) -> list:
        slide_id = sld_id.get("id")
        return xpath(owner._element, f".//p14:sectionLst//p14:sldId[@id='{slide_id}']")

    def apply_removal(self, plan: RemovalPlan) -> None:
        """Apply a removal plan as one batch."""
        for _owner, element in plan.references:
            parent = element.getparent()
            if parent is not None:
                parent.remove(element)
        for source, rId in plan.incoming:
            self.unrelate(source, rId)
        for rId in plan.outgoing:
            if rId in plan.part.rels:
                self.unrelate(plan.part, rId)
        self._reserved.discard(str(plan.part.partname))
        self.touch()
        logger.debug("Removed %s (%d incoming, %d references)",
                     plan.part.partname, len(plan.incoming), len(plan.references))

    def remove_part(self, part: Part) -> RemovalPlan:
        plan = self.plan_removal(part)
        self.apply_removal(plan)
        return plan

    # -- cloning ------------------------------------------------------------

    def clone_part(self, part: Part, follow: RelPredicate | None = None,
                   share: RelPredicate | None = None, memo: dict | None = None,
                   source_graph: "PartGraph | None" = None) -> Part:
        """Copy ``part`` (from this or another package) into this package.

        Outgoing relationships keep their ids so references inside the copied
        XML stay valid. Per relationship: external targets are re-created;
        targets already copied in this pass (``memo``) are reused; ``share``
        relates the copy to the very same target part (same package only);
        ``follow`` copies the target recursively. Anything else is dropped
        and the XML elements referring to it are scrubbed from the copy.
        """
        memo = {} if memo is None else memo
        if id(part) in memo:
            return memo[id(part)]
        source_graph = source_graph or self
        same_package = part.package is self._package
        kind = kind_of(part)

        clone = self.stage_part(kind, part.blob, partname=self.next_partname(self.template_for(part)),
                                content_type=part.content_type)
        memo[id(part)] = clone

        dropped = []
        for rel in source_graph.relationships(part):
            if rel.is_external:
                self.relate_external(clone, rel.target, rel.reltype, rId=rel.rId)
            elif id(rel.target) in memo:
                self.relate(clone, memo[id(rel.target)], rel.reltype, rId=rel.rId)
            elif same_package and share is not None and share(rel):
                self.relate(clone, rel.target, rel.reltype, rId=rel.rId)
            elif follow is not None and follow(rel):
                target = self.clone_part(rel.target, follow, share, memo, source_graph)
                self.relate(clone, target, rel.reltype, rId=rel.rId)
            else:
                dropped.append(rel.rId)
                self._record(clone, rel.rId)

        if dropped:
            self._scrub(clone, set(dropped))
        logger.debug("Cloned %s as %s (%d relationship(s) dropped)",
                     part.partname, clone.partname, len(dropped))
        return clone

    def _scrub(self, part: Part, rIds: set[str]) -> None:
        """Remove XML references to relationship ids that no longer exist."""
        if not isinstance(part, XmlPart):
            return
        for element, attr, value in list(iter_rel_refs(part._element)):
            if value not in rIds:
                continue
            if element.tag in DETACHABLE_TAGS:
                parent = element.getparent()
                if parent is not None:
                    parent.remove(element)
            else:
                logger.warning("Dropped dangling reference %s on <%s> in %s",
                               value, element.tag.rsplit("}", 1)[-1], part.partname)
                del element.attrib[attr]
