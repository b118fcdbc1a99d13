"""
editor.py

HierarchyEditor is the single owner of the model, the height table and the
latest layout. The interaction layer calls it; it never calls back.

Every change goes through one recompute path, synchronously:
- a structural mutation or relabel
- a collapse toggle
- a flushed burst of height measurements
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Set

from .heights import HeightTable
from .layout import LayoutConfig
from .model import Edge, Node, create_initial_edges, create_initial_nodes
from .mutations import HierarchyModel, IdGenerator
from .pipeline import LayoutResult, recompute


class HierarchyEditor:
    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        cfg: Optional[LayoutConfig] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.cfg = cfg or LayoutConfig()
        self.model = HierarchyModel(nodes, edges, id_generator=id_generator)
        self.heights = HeightTable(nominal_height=self.cfg.node_height)
        self._result = LayoutResult()
        self.relayout()

    @classmethod
    def new_document(
        cls,
        cfg: Optional[LayoutConfig] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "HierarchyEditor":
        """An editor holding the single default root."""
        return cls(create_initial_nodes(), create_initial_edges(), cfg=cfg, id_generator=id_generator)

    @property
    def result(self) -> LayoutResult:
        return self._result

    @property
    def positions(self) -> Mapping:
        return self._result.positions

    def relayout(self) -> LayoutResult:
        snap = self.model.snapshot()
        self._result = recompute(snap.nodes, snap.edges, self.heights.as_mapping(), self.cfg)
        self.model.apply_layout(self._result.nodes)
        return self._result

    # ---------- mutations ----------

    def add_root(self) -> str:
        root_id = self.model.add_root()
        self.heights.prune([root_id])
        self.relayout()
        return root_id

    def add_child(self, parent_id: str) -> Optional[str]:
        child_id = self.model.add_child(parent_id)
        if child_id is not None:
            self.relayout()
        return child_id

    def remove_subtree(self, node_id: str) -> Set[str]:
        removed = self.model.remove_subtree(node_id)
        if removed:
            self.heights.prune(n.id for n in self.model.nodes)
            self.relayout()
        return removed

    def toggle_collapse(self, node_id: str) -> bool:
        changed = self.model.toggle_collapse(node_id)
        if changed:
            self.relayout()
        return changed

    def relabel(self, node_id: str, new_label: str) -> bool:
        changed = self.model.relabel(node_id, new_label)
        if changed:
            # The new text usually changes the rendered height too; that
            # arrives later through report_height().
            self.relayout()
        return changed

    # ---------- height feed ----------

    def report_height(self, node_id: str, height: float) -> None:
        self.heights.record(node_id, height)

    def flush_heights(self) -> bool:
        """Apply buffered measurements; lay out once if any height changed."""
        if not self.heights.flush():
            return False
        self.relayout()
        return True
