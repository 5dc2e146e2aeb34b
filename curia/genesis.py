"""
Genesis State Loading
Starting balances for a registry, read from a JSON file.

The bundled genesis.json funds three users with 100 tokens each.
CURIA_GENESIS_PATH points the loader at a different file.
"""

from __future__ import annotations

import json
import os
from typing import Optional

from pydantic import ValidationError

from curia.models import RegistryState, User

# ---------------------------------------------------------------------------
# Configuration (from env vars with defaults)
# ---------------------------------------------------------------------------

_DEFAULT_GENESIS_PATH = os.path.join(os.path.dirname(__file__), "genesis.json")
GENESIS_PATH = os.environ.get("CURIA_GENESIS_PATH", _DEFAULT_GENESIS_PATH)

_cache: dict[str, RegistryState] = {}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def empty_state(balances: Optional[dict[User, int]] = None) -> RegistryState:
    """A state with the given balances and no proposals."""
    return RegistryState(balances=dict(balances or {}))


def load_genesis(path: Optional[str] = None) -> RegistryState:
    """Load the genesis state. Raises ValueError on a malformed file.

    Each call returns a fresh copy, so callers may mutate the result.
    """
    path = path or GENESIS_PATH
    if path not in _cache:
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict) or "balances" not in data:
            raise ValueError(f"Genesis file {path} has no 'balances' table")
        try:
            _cache[path] = RegistryState.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid genesis file {path}: {e}") from e
    return _cache[path].model_copy(deep=True)


def reload_genesis(path: Optional[str] = None) -> RegistryState:
    """Drop cached genesis states and load again from disk."""
    _cache.clear()
    return load_genesis(path)
