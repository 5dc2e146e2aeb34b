"""
Curia — Token-Curated Registry state machine.
"""

from __future__ import annotations

from curia.genesis import empty_state, load_genesis, reload_genesis
from curia.models import (
    ProposalState,
    RegistryState,
    Resolve,
    SubmitProposal,
    Transition,
    VoteAgainst,
    VoteFor,
    parse_transition,
)
from curia.state_machine import (
    InvariantViolation,
    Outcome,
    Rejection,
    Resolution,
    TransitionResult,
    apply_transition,
    next_state,
    run,
)
from curia.tokens import TOKEN_MAX

__all__ = [
    "InvariantViolation",
    "Outcome",
    "ProposalState",
    "RegistryState",
    "Rejection",
    "Resolution",
    "Resolve",
    "SubmitProposal",
    "TOKEN_MAX",
    "Transition",
    "TransitionResult",
    "VoteAgainst",
    "VoteFor",
    "apply_transition",
    "empty_state",
    "load_genesis",
    "next_state",
    "parse_transition",
    "reload_genesis",
    "run",
]
