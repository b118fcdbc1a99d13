"""
pipeline.py

Stage: node/edge collections -> laid out, annotated collections

The single recompute path. Mutations, collapse toggles and height updates all
end up here:

  filter_visible -> compute_layout -> annotate every node

Annotating means:
- visible nodes get their new position
- hidden nodes keep the position they had when they were last shown
- child_count is the number of outgoing edges in the full edge list
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .layout import LayoutConfig, compute_layout
from .model import Edge, Node, NodeKind, Position, make_empty_placeholder
from .visibility import filter_visible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutResult:
    """
    What the display layer consumes after one pass.

    - nodes: every hierarchy node, annotated (or the empty-state placeholder)
    - edges: the full edge list
    - visible_nodes / visible_edges: what should actually be drawn
    - positions: node_id -> Position for the visible nodes
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    visible_nodes: Tuple[Node, ...] = ()
    visible_edges: Tuple[Edge, ...] = ()
    positions: Mapping[str, Position] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_empty(self) -> bool:
        return all(n.kind == NodeKind.EMPTY_PLACEHOLDER for n in self.nodes)


def recompute(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    heights: Optional[Mapping[str, float]] = None,
    cfg: Optional[LayoutConfig] = None,
) -> LayoutResult:
    hierarchy_nodes = [n for n in nodes if n.kind == NodeKind.HIERARCHY]
    edges = tuple(edges)

    if not hierarchy_nodes:
        # Nothing to lay out; the display shows a "create root" affordance.
        placeholder = next(
            (n for n in nodes if n.kind == NodeKind.EMPTY_PLACEHOLDER),
            None,
        ) or make_empty_placeholder()
        return LayoutResult(nodes=(placeholder,), edges=edges)

    visible = filter_visible(hierarchy_nodes, edges)
    positions = compute_layout(visible.nodes, visible.edges, heights, cfg)

    child_counts: Dict[str, int] = {}
    for e in edges:
        child_counts[e.source] = child_counts.get(e.source, 0) + 1

    annotated = tuple(
        _annotate(
            node,
            node.position if node.id in visible.hidden_ids else positions.get(node.id),
            child_counts.get(node.id, 0),
        )
        for node in hierarchy_nodes
    )
    by_id = {n.id: n for n in annotated}

    logger.debug(
        "Recomputed layout: %d node(s), %d visible, %d hidden",
        len(annotated), len(visible.nodes), len(visible.hidden_ids),
    )

    return LayoutResult(
        nodes=annotated,
        edges=edges,
        visible_nodes=tuple(by_id[n.id] for n in visible.nodes),
        visible_edges=visible.edges,
        positions=MappingProxyType(positions),
    )


def _annotate(node: Node, position: Optional[Position], child_count: int) -> Node:
    # Unreachable nodes get no position from the solver; keep the old one.
    position = position or node.position
    is_collapsed = bool(node.is_collapsed)

    if (
        position == node.position
        and child_count == node.child_count
        and is_collapsed == node.is_collapsed
    ):
        return node

    return replace(node, position=position, child_count=child_count, is_collapsed=is_collapsed)
