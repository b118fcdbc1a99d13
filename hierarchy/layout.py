"""
Tree layout for hierarchy nodes.

Computes deterministic x/y positions for the visible forest in two phases:
- Placement: depth-first preorder. Depth controls x, document order controls y.
- Collision resolution: bounded pairwise relaxation plus a same-row spacing pass.

The default "stacked" arrangement gives one row per node, so phase two leaves it
untouched. The "side_by_side" arrangement puts siblings next to each other in a
row under their parent and relies on phase two to pull colliding subtrees apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .model import Edge, Node, Position
from .tree import build_relationships, find_roots

logger = logging.getLogger(__name__)

STACKED = "stacked"
SIDE_BY_SIDE = "side_by_side"
ARRANGEMENTS = (STACKED, SIDE_BY_SIDE)


@dataclass(frozen=True)
class LayoutConfig:
    # Fixed box width in pixels (credit card proportions, shrunk by 20%).
    node_width: float = 280

    # Height used for any node that has not been measured yet.
    node_height: float = 141

    # Gap between one row and the next.
    vertical_offset: float = 32

    # How far each depth level is shifted right.
    indent_offset: float = 32

    # Horizontal gap the same-row pass enforces between neighbours.
    min_sibling_spacing: float = 40

    # Margin on both axes when testing two boxes for overlap.
    min_node_spacing: float = 30

    # Where the first row starts.
    start_y: float = 50
    base_x: float = 100

    # "stacked" (one row per node) or "side_by_side" (siblings share a row).
    arrangement: str = STACKED

    # Collision resolution budget. Relaxation ends after the first sweep that
    # finds no overlapping pair and no row spacing violation.
    max_iterations: int = 50

    # Two boxes whose y differ by less than this are in the same row.
    row_tolerance: float = 1.0

    def __post_init__(self) -> None:
        if self.arrangement not in ARRANGEMENTS:
            raise ValueError(f"Unknown arrangement: {self.arrangement!r}")
        if self.node_width <= 0 or self.node_height <= 0:
            raise ValueError("node_width and node_height must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        for name in ("vertical_offset", "indent_offset", "min_sibling_spacing",
                     "min_node_spacing", "row_tolerance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


def node_height(heights: Mapping[str, float], node_id: str, cfg: LayoutConfig) -> float:
    # Missing, zero or negative measurements fall back to the nominal height.
    h = heights.get(node_id)
    if not h or h <= 0:
        return float(cfg.node_height)
    return float(h)


def compute_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    heights: Optional[Mapping[str, float]] = None,
    cfg: Optional[LayoutConfig] = None,
) -> Dict[str, Position]:
    """
    Compute a position for every visible node reachable from a root.

    Expects the output of filter_visible. A collapsed node's children are never
    descended into, even if the edges still contain them.

    Returns:
      node_id -> Position, in placement (preorder) order
    """
    cfg = cfg or LayoutConfig()
    heights = heights or {}

    if cfg.arrangement == SIDE_BY_SIDE:
        positions, order = _place_side_by_side(nodes, edges, heights, cfg)
    else:
        positions, order = _place_stacked(nodes, edges, heights, cfg)

    positions, converged = resolve_collisions(positions, order, heights, cfg)

    logger.debug(
        "Laid out %d of %d nodes (%s, converged=%s)",
        len(positions), len(nodes), cfg.arrangement, converged,
    )
    return positions


def _place_stacked(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    heights: Mapping[str, float],
    cfg: LayoutConfig,
) -> Tuple[Dict[str, Position], List[str]]:
    rel = build_relationships(nodes, edges)
    positions: Dict[str, Position] = {}
    order: List[str] = []
    cursor = float(cfg.start_y)

    for root in find_roots(nodes, edges):
        stack: List[Tuple[str, int]] = [(root.id, 0)]

        while stack:
            node_id, depth = stack.pop()
            if node_id in positions:
                continue

            positions[node_id] = Position(x=cfg.base_x + depth * cfg.indent_offset, y=cursor)
            order.append(node_id)
            cursor += node_height(heights, node_id, cfg) + cfg.vertical_offset

            if rel.by_id[node_id].is_collapsed:
                continue

            # Reversed so the first child is popped first.
            for child_id in reversed(rel.children_of.get(node_id, [])):
                stack.append((child_id, depth + 1))

    return positions, order


def _place_side_by_side(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    heights: Mapping[str, float],
    cfg: LayoutConfig,
) -> Tuple[Dict[str, Position], List[str]]:
    rel = build_relationships(nodes, edges)
    positions: Dict[str, Position] = {}
    order: List[str] = []
    cursor = float(cfg.start_y)
    column_step = cfg.node_width + cfg.min_sibling_spacing

    for root in find_roots(nodes, edges):
        stack: List[Tuple[str, float, float]] = [(root.id, float(cfg.base_x), cursor)]
        bottom = cursor

        while stack:
            node_id, x, y = stack.pop()
            if node_id in positions:
                continue

            h = node_height(heights, node_id, cfg)
            positions[node_id] = Position(x=x, y=y)
            order.append(node_id)
            bottom = max(bottom, y + h)

            if rel.by_id[node_id].is_collapsed:
                continue

            kids = rel.children_of.get(node_id, [])
            row_y = y + h + cfg.vertical_offset
            for i in reversed(range(len(kids))):
                stack.append((kids[i], x + cfg.indent_offset + i * column_step, row_y))

        cursor = bottom + cfg.vertical_offset

    return positions, order


def _overlaps(
    a: List[float], a_h: float,
    b: List[float], b_h: float,
    width: float, margin: float,
) -> bool:
    # Both boxes grown by margin on the right and bottom edges.
    return (
        a[0] < b[0] + width + margin
        and b[0] < a[0] + width + margin
        and a[1] < b[1] + b_h + margin
        and b[1] < a[1] + a_h + margin
    )


def resolve_collisions(
    positions: Mapping[str, Position],
    order: Sequence[str],
    heights: Mapping[str, float],
    cfg: LayoutConfig,
) -> Tuple[Dict[str, Position], bool]:
    """
    Push overlapping boxes apart until no pair overlaps or the budget runs out.

    order decides which box of a pair is the later one. Boxes only ever move
    right or down.

    Returns:
      positions: node_id -> Position (best found)
      converged: False when max_iterations was exhausted
    """
    ids = [nid for nid in order if nid in positions]
    pos: Dict[str, List[float]] = {nid: [positions[nid].x, positions[nid].y] for nid in ids}
    h = {nid: node_height(heights, nid, cfg) for nid in ids}
    width = cfg.node_width
    margin = cfg.min_node_spacing

    converged = False
    for _ in range(cfg.max_iterations):
        pushes = 0

        for i, a in enumerate(ids):
            for b in ids[i + 1:]:
                pa, pb = pos[a], pos[b]
                if not _overlaps(pa, h[a], pb, h[b], width, margin):
                    continue

                if abs(pa[1] - pb[1]) < cfg.row_tolerance:
                    pb[0] = pa[0] + width + margin
                    pushes += 1
                elif pa[1] < pb[1]:
                    pb[1] = pa[1] + h[a] + margin
                    pushes += 1
                else:
                    pa[1] = pb[1] + h[b] + margin
                    pushes += 1

        pushes += _space_rows(pos, ids, cfg)

        # A push can open a new overlap with a pair already checked this
        # sweep, so only a sweep that changed nothing counts.
        if not pushes:
            converged = True
            break

    if not converged:
        logger.warning(
            "Collision resolution hit the %d sweep limit; returning best positions",
            cfg.max_iterations,
        )

    return {nid: Position(x=pos[nid][0], y=pos[nid][1]) for nid in ids}, converged


def _space_rows(pos: Dict[str, List[float]], ids: Sequence[str], cfg: LayoutConfig) -> int:
    """
    Enforce min_sibling_spacing between neighbours that share a row.

    Returns the number of boxes moved.
    """
    rows: List[List[str]] = []
    for nid in ids:
        y = pos[nid][1]
        for row in rows:
            if abs(pos[row[0]][1] - y) < cfg.row_tolerance:
                row.append(nid)
                break
        else:
            rows.append([nid])

    pushes = 0
    step = cfg.node_width + cfg.min_sibling_spacing
    for row in rows:
        if len(row) < 2:
            continue
        # sorted() is stable, so placement order breaks ties.
        row = sorted(row, key=lambda nid: pos[nid][0])
        for left, right in zip(row, row[1:]):
            min_x = pos[left][0] + step
            if pos[right][0] < min_x:
                pushes += 1
                pos[right][0] = min_x

    return pushes
