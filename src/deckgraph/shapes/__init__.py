from .autoshape import AutoShape, Fill, Outline
from .base import Shape, ShapeKind
from .connector import Connector
from .graphicframe import Chart, GraphicFrame, Table
from .group import GroupShape
from .image import Image
from .picture import Picture
from .placeholder import PlaceholderKey, PlaceholderType
from .tree import ShapeTree

__all__ = [
    "AutoShape",
    "Chart",
    "Connector",
    "Fill",
    "GraphicFrame",
    "GroupShape",
    "Image",
    "Outline",
    "Picture",
    "PlaceholderKey",
    "PlaceholderType",
    "Shape",
    "ShapeKind",
    "ShapeTree",
    "Table",
]
