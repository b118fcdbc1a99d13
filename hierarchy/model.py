"""
model.py

Data shapes shared by every stage of the hierarchy core.

This file defines: NodeKind, Position, Node, Edge, HierarchySnapshot.
It does NOT compute layout and it does NOT mutate anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


DEFAULT_ROOT_LABEL = "Root"
CHILD_LABEL_PREFIX = "Child"

# Where a freshly created root sits before the first layout pass.
ROOT_START_POSITION = (400.0, 50.0)

# Where the display layer puts the "create root" affordance.
EMPTY_STATE_ID = "empty-state"
EMPTY_STATE_POSITION = (400.0, 300.0)


class NodeKind(str, Enum):
    HIERARCHY = "hierarchy"
    EMPTY_PLACEHOLDER = "empty-placeholder"


@dataclass(frozen=True)
class Position:
    # Top-left corner of the node box in layout space.
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Node:
    """
    One box in the forest.

    - id: opaque unique string
    - label: display text
    - position: last layout position (or the creation default)
    - is_collapsed: hides every descendant when True
    - child_count: derived from edges on each layout pass, never authoritative
    - kind: hierarchy node or the empty-state placeholder
    """

    id: str
    label: str = ""
    position: Position = field(default_factory=Position)
    is_collapsed: bool = False
    child_count: int = 0
    kind: NodeKind = NodeKind.HIERARCHY


def edge_id(source: str, target: str) -> str:
    # Deterministic from the pair, so reusing it deduplicates parallel edges.
    return f"e-{source}-{target}"


@dataclass(frozen=True)
class Edge:
    """
    A directed parent -> child relation.

    The forest rule: a target has exactly one incoming edge.
    """

    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> "Edge":
        return cls(id=edge_id(source, target), source=source, target=target)


@dataclass(frozen=True)
class HierarchySnapshot:
    """Immutable view of the model at one instant."""

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()


def create_initial_nodes() -> List[Node]:
    """The single root node a new document starts with."""
    x, y = ROOT_START_POSITION
    return [Node(id="root", label=DEFAULT_ROOT_LABEL, position=Position(x, y))]


def create_initial_edges() -> List[Edge]:
    return []


def make_empty_placeholder() -> Node:
    x, y = EMPTY_STATE_POSITION
    return Node(
        id=EMPTY_STATE_ID,
        position=Position(x, y),
        kind=NodeKind.EMPTY_PLACEHOLDER,
    )
