"""Group shapes (``p:grpSp``) and their nested trees."""

from .base import Shape, ShapeKind


class GroupShape(Shape):
    kind = ShapeKind.GROUP
    _nv_tag = "p:nvGrpSpPr"
    _props_tag = "p:grpSpPr"

    @property
    def shapes(self):
        from .tree import ShapeTree
        return ShapeTree(self.owner, self._element)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["shapes"] = [shape.to_dict() for shape in self.shapes]
        return d
