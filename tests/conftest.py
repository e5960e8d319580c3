from __future__ import annotations

import pytest

from tests.utils.backend import FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    """In-memory stand-in for BackendClient that records every call."""
    return FakeBackend()
