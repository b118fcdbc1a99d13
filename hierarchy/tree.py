"""
tree.py

Stage: flat node/edge arrays -> parent/child lookup tables

Goal:
- children_of: node_id -> ordered list of child ids (edge order = sibling order)
- parent_of:   node_id -> parent id (roots are absent)
- by_id:       node_id -> Node

Nothing here raises. Edges that point at unknown ids are skipped so the
builder stays total on malformed input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .model import Edge, Node


@dataclass(frozen=True)
class TreeRelationships:
    children_of: Dict[str, List[str]]
    parent_of: Dict[str, str]
    by_id: Dict[str, Node]


def build_relationships(nodes: Iterable[Node], edges: Iterable[Edge]) -> TreeRelationships:
    """
    Build lookup tables for one layout pass.

    Every node id gets a children_of entry, even when it has no children.
    """
    children_of: Dict[str, List[str]] = {}
    parent_of: Dict[str, str] = {}
    by_id: Dict[str, Node] = {}

    for node in nodes:
        children_of[node.id] = []
        by_id[node.id] = node

    for edge in edges:
        if edge.source not in by_id or edge.target not in by_id:
            continue
        children_of[edge.source].append(edge.target)
        parent_of[edge.target] = edge.source

    return TreeRelationships(children_of=children_of, parent_of=parent_of, by_id=by_id)


def find_roots(nodes: Iterable[Node], edges: Iterable[Edge]) -> List[Node]:
    # Roots are the nodes nobody points at, kept in array order.
    has_incoming = {e.target for e in edges}
    return [n for n in nodes if n.id not in has_incoming]


def outgoing_count(node_id: str, edges: Iterable[Edge]) -> int:
    return sum(1 for e in edges if e.source == node_id)
