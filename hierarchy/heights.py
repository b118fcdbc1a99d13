"""
heights.py

Last known rendered height of every node.

Node height depends on content, so the display layer measures it after a paint
and reports back here. Measurements arrive in bursts (one per node after every
render), so they are buffered with record() and applied together with flush().
A flush that changed anything bumps generation, which is the signal to lay out
again.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

logger = logging.getLogger(__name__)


class HeightTable:
    def __init__(self, nominal_height: float = 141, change_threshold: float = 1.0) -> None:
        self.nominal_height = float(nominal_height)
        # Differences up to this many pixels are treated as rounding noise.
        self.change_threshold = float(change_threshold)
        self.generation = 0
        self._heights: Dict[str, float] = {}
        self._pending: Dict[str, float] = {}

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._heights

    def __len__(self) -> int:
        return len(self._heights)

    def get(self, node_id: str) -> float:
        return self._heights.get(node_id, self.nominal_height)

    def as_mapping(self) -> Mapping[str, float]:
        return MappingProxyType(self._heights)

    def record(self, node_id: str, height: Any) -> None:
        # Later measurements of the same node replace earlier ones.
        try:
            value = float(height)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric height %r for %s", height, node_id)
            return
        if value <= 0:
            return
        self._pending[node_id] = value

    def flush(self) -> bool:
        """
        Apply buffered measurements.

        Returns True (and bumps generation) when any stored height changed.
        """
        pending, self._pending = self._pending, {}
        changed = False

        for node_id, measured in pending.items():
            # Never shorter than the nominal box.
            value = max(measured, self.nominal_height)
            current = self._heights.get(node_id)
            if current is not None and abs(value - current) <= self.change_threshold:
                continue
            self._heights[node_id] = value
            changed = True

        if changed:
            self.generation += 1
            logger.debug("Heights updated (generation %d)", self.generation)
        return changed

    def prune(self, live_ids: Iterable[str]) -> None:
        live = set(live_ids)
        self._heights = {k: v for k, v in self._heights.items() if k in live}
        self._pending = {k: v for k, v in self._pending.items() if k in live}
