"""
Pytest configuration and fixtures for the hierarchy core.

This module provides:
- A deterministic id generator (fixed clock, seeded random suffix)
- The small reference tree used across tests:

    R
    ├── C1 ("Child 1")
    │   └── G1 ("Child 1")
    └── C2 ("Child 2")
"""

import random
from types import SimpleNamespace

import pytest

from hierarchy import HierarchyModel, IdGenerator


@pytest.fixture
def id_generator():
    """Fixed clock and seeded suffixes so ids are reproducible."""
    return IdGenerator(clock=lambda: 1_700_000_000.0, rng=random.Random(42))


@pytest.fixture
def model(id_generator):
    """A model holding a single root and nothing else."""
    m = HierarchyModel(id_generator=id_generator)
    m.add_root()
    return m


@pytest.fixture
def scenario(model):
    """The R / C1 / G1 / C2 tree built through the public mutators."""
    root = model.nodes[0].id
    c1 = model.add_child(root)
    c2 = model.add_child(root)
    g1 = model.add_child(c1)
    return SimpleNamespace(model=model, root=root, c1=c1, c2=c2, g1=g1)
