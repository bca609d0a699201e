"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from deepclone import CapabilityCache, Copier, CopySettings, StatePool


@pytest.fixture
def settings():
    """Default settings, isolated from DEEPCLONE_* environment variables."""
    return CopySettings(_env_file=None, cycle_detection_depth=100, include_private=False)


@pytest.fixture
def cache():
    """Fresh CapabilityCache instance."""
    return CapabilityCache()


@pytest.fixture
def copier(settings, cache):
    """Copier with its own cache and pool."""
    return Copier(settings, cache=cache, pool=StatePool(max_size=4))


@dataclass
class FixtureLeaf:
    ints: list[int] = field(default_factory=list)


@dataclass
class FixtureNode:
    name: str
    next: "FixtureNode | None" = None
    children: list["FixtureNode"] = field(default_factory=list)


@pytest.fixture
def leaf_cls():
    return FixtureLeaf


@pytest.fixture
def node_cls():
    return FixtureNode
