"""
hierarchy package

In-memory forest of labeled boxes with structural editing and a deterministic
2D layout for whatever is currently visible.

Public API:
- Node, Edge, Position, NodeKind
- build_relationships, find_roots
- descendants_of, filter_visible
- LayoutConfig, compute_layout, resolve_collisions
- HierarchyModel, IdGenerator
- HeightTable
- recompute, LayoutResult
- HierarchyEditor
"""

from .editor import HierarchyEditor
from .heights import HeightTable
from .layout import LayoutConfig, compute_layout, resolve_collisions
from .model import (
    Edge,
    HierarchySnapshot,
    Node,
    NodeKind,
    Position,
    create_initial_edges,
    create_initial_nodes,
    edge_id,
    make_empty_placeholder,
)
from .mutations import HierarchyModel, IdGenerator
from .pipeline import LayoutResult, recompute
from .tree import TreeRelationships, build_relationships, find_roots
from .visibility import VisibleForest, descendants_of, filter_visible

__all__ = [
    "Edge",
    "HeightTable",
    "HierarchyEditor",
    "HierarchyModel",
    "HierarchySnapshot",
    "IdGenerator",
    "LayoutConfig",
    "LayoutResult",
    "Node",
    "NodeKind",
    "Position",
    "TreeRelationships",
    "VisibleForest",
    "build_relationships",
    "compute_layout",
    "create_initial_edges",
    "create_initial_nodes",
    "descendants_of",
    "edge_id",
    "filter_visible",
    "find_roots",
    "make_empty_placeholder",
    "recompute",
    "resolve_collisions",
]
