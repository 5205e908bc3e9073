"""Package / part / relationship layer on top of python-pptx's OPC package."""

from .graph import PartGraph, Relationship, RemovalPlan
from .kinds import PartKind, kind_of, reltype_for

__all__ = [
    "PartGraph",
    "PartKind",
    "Relationship",
    "RemovalPlan",
    "kind_of",
    "reltype_for",
]
