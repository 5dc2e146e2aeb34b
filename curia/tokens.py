"""
Token Arithmetic
Unsigned token amounts with saturating add/sub/div.

Balances and stakes never wrap and never go negative: subtraction clamps at
zero, addition clamps at TOKEN_MAX, division by zero yields zero.
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Configuration (from env vars with defaults)
# ---------------------------------------------------------------------------

TOKEN_BITS = int(os.environ.get("CURIA_TOKEN_BITS", "32"))
if TOKEN_BITS <= 0:
    raise ValueError(f"CURIA_TOKEN_BITS must be positive, got {TOKEN_BITS}")

TOKEN_MAX = 2**TOKEN_BITS - 1

Tokens = int


# ---------------------------------------------------------------------------
# Saturating operations
# ---------------------------------------------------------------------------

def saturating_add(a: Tokens, b: Tokens) -> Tokens:
    return min(a + b, TOKEN_MAX)


def saturating_sub(a: Tokens, b: Tokens) -> Tokens:
    return max(a - b, 0)


def saturating_div(a: Tokens, b: Tokens) -> Tokens:
    """Floor division; a zero divisor yields 0 instead of raising."""
    if b == 0:
        return 0
    return a // b


def checked_tokens(value: object) -> Tokens:
    """Validate an amount is an int in [0, TOKEN_MAX]. Raises ValueError if not."""
    # bool is an int subclass; True is not a stake
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Token amount must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"Token amount cannot be negative, got {value}")
    if value > TOKEN_MAX:
        raise ValueError(f"Token amount {value} exceeds TOKEN_MAX ({TOKEN_MAX})")
    return value
