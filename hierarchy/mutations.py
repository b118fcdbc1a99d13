"""
mutations.py

The only legal ways to change node identity or topology.

HierarchyModel owns the node and edge collections. Each mutator builds new
tuples and swaps them in with one assignment, so nobody ever observes a
half-applied change. Calls that reference an unknown id are no-ops, because
the interaction layer may fire them after a racing deletion.

Cycles cannot appear: edges are only ever added from an existing node to a
brand new one, and only ever removed.
"""

from __future__ import annotations

import logging
import random
import string
import time
from dataclasses import replace
from typing import Callable, Iterable, Optional, Set, Tuple

from .model import (
    CHILD_LABEL_PREFIX,
    DEFAULT_ROOT_LABEL,
    ROOT_START_POSITION,
    Edge,
    HierarchySnapshot,
    Node,
    NodeKind,
    Position,
)
from .tree import outgoing_count
from .visibility import descendants_of

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


class IdGenerator:
    """
    Produces ids like "node-1712345678901-k3j9x0q2a".

    The millisecond part never goes backwards even if the wall clock does;
    the random suffix keeps two ids from the same millisecond apart.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
        suffix_length: int = 9,
    ) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._suffix_length = suffix_length
        self._last_ms = 0

    def _millis(self) -> int:
        now = int(self._clock() * 1000)
        self._last_ms = max(self._last_ms, now)
        return self._last_ms

    def _suffix(self) -> str:
        return "".join(self._rng.choice(_SUFFIX_ALPHABET) for _ in range(self._suffix_length))

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{self._millis()}-{self._suffix()}"


class HierarchyModel:
    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._edges: Tuple[Edge, ...] = tuple(edges)
        self._ids = id_generator or IdGenerator()

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def snapshot(self) -> HierarchySnapshot:
        return HierarchySnapshot(nodes=self._nodes, edges=self._edges)

    def is_empty(self) -> bool:
        return not self._nodes

    def get(self, node_id: str) -> Optional[Node]:
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def _has(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self._nodes)

    # ---------- mutators ----------

    def add_root(self) -> str:
        """Start over with a single fresh root."""
        root_id = self._ids.new_id("root")
        x, y = ROOT_START_POSITION
        root = Node(id=root_id, label=DEFAULT_ROOT_LABEL, position=Position(x, y))

        self._nodes, self._edges = (root,), ()
        logger.debug("Created root %s", root_id)
        return root_id

    def add_child(self, parent_id: str) -> Optional[str]:
        """
        Append a new child under parent_id and return its id.

        The label number is the parent's current child count plus one, so
        numbers can repeat after a deletion.
        """
        if not self._has(parent_id):
            logger.debug("add_child ignored: unknown parent %s", parent_id)
            return None

        child_id = self._ids.new_id("node")
        number = outgoing_count(parent_id, self._edges) + 1
        child = Node(id=child_id, label=f"{CHILD_LABEL_PREFIX} {number}")

        self._nodes, self._edges = (
            self._nodes + (child,),
            self._edges + (Edge.between(parent_id, child_id),),
        )
        return child_id

    def remove_subtree(self, node_id: str) -> Set[str]:
        """Remove node_id, every descendant, and every edge touching them."""
        if not self._has(node_id):
            logger.debug("remove_subtree ignored: unknown node %s", node_id)
            return set()

        doomed = descendants_of(node_id, self._edges) | {node_id}

        self._nodes, self._edges = (
            tuple(n for n in self._nodes if n.id not in doomed),
            tuple(e for e in self._edges if e.source not in doomed and e.target not in doomed),
        )
        logger.debug("Removed %d node(s) under %s", len(doomed), node_id)
        return doomed

    def toggle_collapse(self, node_id: str) -> bool:
        # Only this node's flag flips; descendants keep theirs.
        if not self._has(node_id):
            logger.debug("toggle_collapse ignored: unknown node %s", node_id)
            return False

        self._nodes = tuple(
            replace(n, is_collapsed=not n.is_collapsed) if n.id == node_id else n
            for n in self._nodes
        )
        return True

    def relabel(self, node_id: str, new_label: str) -> bool:
        """
        Set a new label. Blank labels and labels equal to the current one are
        ignored. Returns True when the label actually changed.
        """
        node = self.get(node_id)
        if node is None:
            logger.debug("relabel ignored: unknown node %s", node_id)
            return False

        label = (new_label or "").strip()
        if not label or label == node.label:
            return False

        self._nodes = tuple(replace(n, label=label) if n.id == node_id else n for n in self._nodes)
        return True

    # ---------- layout write-back ----------

    def apply_layout(self, annotated: Iterable[Node]) -> None:
        """
        Store positions and derived fields computed by a layout pass.

        Records must describe exactly the current hierarchy nodes. Anything
        else is stale (a mutation happened in between) and is dropped.
        """
        by_id = {n.id: n for n in annotated if n.kind == NodeKind.HIERARCHY}
        if set(by_id) != {n.id for n in self._nodes}:
            logger.debug("Stale layout dropped (%d records)", len(by_id))
            return

        self._nodes = tuple(_merge_layout(n, by_id[n.id]) for n in self._nodes)


def _merge_layout(current: Node, laid_out: Node) -> Node:
    # Unchanged records keep their identity.
    if laid_out.position == current.position and laid_out.child_count == current.child_count:
        return current
    return replace(current, position=laid_out.position, child_count=laid_out.child_count)
