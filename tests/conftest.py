from __future__ import annotations

import pytest

from curia import RegistryState, empty_state


@pytest.fixture
def initial_state() -> RegistryState:
    """Three users, 100 tokens each, nothing pending or admitted."""
    return empty_state({"alice": 100, "bob": 100, "charlie": 100})
