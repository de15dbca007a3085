"""
Pytest configuration and fixtures.

This file ensures proper path setup for imports and shares key material
between tests, since prime generation dominates test time.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from cryptalearn.he.keys import generate_keypair  # noqa: E402

TEST_KEY_BITS = 512


@pytest.fixture(scope="session")
def keypair():
    """A 512-bit Paillier key pair shared by the whole session."""
    return generate_keypair(TEST_KEY_BITS)


@pytest.fixture
def pk(keypair):
    return keypair[0]


@pytest.fixture
def sk(keypair):
    return keypair[1]
