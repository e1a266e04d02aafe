"""Chart layout engines.

Both engines are pure functions of a `FamilyGraph` and return a
`LayoutResult` of positioned nodes and edges.
"""

from .descendants import compute_descendants_layout
from .models import (
    DescendantOptions,
    EdgeKind,
    LayoutEdge,
    LayoutNode,
    LayoutResult,
    NodeKind,
    PedigreeOptions,
)
from .pedigree import compute_pedigree_layout

__all__ = [
    "compute_pedigree_layout",
    "compute_descendants_layout",
    "PedigreeOptions",
    "DescendantOptions",
    "LayoutResult",
    "LayoutNode",
    "LayoutEdge",
    "NodeKind",
    "EdgeKind",
]
