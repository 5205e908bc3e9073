"""Connectors (``p:cxnSp``)."""

from deckgraph.opc.oxml import qn

from .base import Shape, ShapeKind


class Connector(Shape):
    kind = ShapeKind.CONNECTOR
    _nv_tag = "p:nvCxnSpPr"

    def _connection(self, tag: str) -> int | None:
        props = self._nv.find(qn("p:cNvCxnSpPr"))
        node = props.find(qn(tag)) if props is not None else None
        return int(node.get("id")) if node is not None else None

    @property
    def begin_id(self) -> int | None:
        """Id of the shape the connector starts at, if it is glued to one."""
        return self._connection("a:stCxn")

    @property
    def end_id(self) -> int | None:
        return self._connection("a:endCxn")
