"""
Pytest configuration and shared fixtures for svm_merkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from svm_merkle.config import set_default_config  # noqa: E402
from svm_merkle.crypto import HashingAlgorithm  # noqa: E402
from svm_merkle.merkle import MerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def make_tree():
    """Factory: build and seal a tree from raw leaves."""
    def _make(leaves, algorithm=HashingAlgorithm.SHA256, hash_size=32):
        tree = MerkleTree(algorithm, hash_size)
        tree.add_leaves(leaves)
        tree.merklize()
        return tree
    return _make


@pytest.fixture
def letter_tree(make_tree):
    """SHA-256/32 tree over a, b, c, d."""
    return make_tree([b"a", b"b", b"c", b"d"])


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Keep env-derived defaults from leaking between tests."""
    for var in ("SVM_MERKLE_ALGORITHM", "SVM_MERKLE_HASH_SIZE", "SVM_MERKLE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)
