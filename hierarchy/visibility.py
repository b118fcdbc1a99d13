"""
visibility.py

Stage: full forest -> the part of it that is currently shown

A collapsed node stays visible; everything below it is hidden, and so is the
edge leaving it. Nested collapse needs no special casing: a descendant's own
flag is kept and applies again once its ancestor is expanded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .model import Edge, Node


@dataclass(frozen=True)
class VisibleForest:
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    hidden_ids: frozenset


def _outgoing_index(edges: Iterable[Edge]) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for e in edges:
        out.setdefault(e.source, []).append(e.target)
    return out


def descendants_of(node_id: str, edges: Iterable[Edge]) -> Set[str]:
    """
    Every id reachable from node_id by following edges outward.

    The visited set means a malformed cycle still terminates; node_id itself
    is never part of the result.
    """
    out = _outgoing_index(edges)
    found: Set[str] = set()
    stack = list(out.get(node_id, []))

    while stack:
        current = stack.pop()
        if current == node_id or current in found:
            continue
        found.add(current)
        stack.extend(out.get(current, []))

    return found


def collapsed_ids(nodes: Iterable[Node]) -> Set[str]:
    return {n.id for n in nodes if n.is_collapsed}


def filter_visible(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    collapsed: Optional[Iterable[str]] = None,
) -> VisibleForest:
    """
    Split the forest into what layout and display may see.

    collapsed defaults to the nodes' own collapse flags.
    """
    collapsed_set = set(collapsed) if collapsed is not None else collapsed_ids(nodes)

    hidden: Set[str] = set()
    for node in nodes:
        if node.id in collapsed_set:
            hidden |= descendants_of(node.id, edges)

    visible_nodes = tuple(n for n in nodes if n.id not in hidden)
    visible_edges = tuple(
        e
        for e in edges
        if e.source not in collapsed_set and e.source not in hidden and e.target not in hidden
    )

    return VisibleForest(nodes=visible_nodes, edges=visible_edges, hidden_ids=frozenset(hidden))
