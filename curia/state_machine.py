"""
Registry State Machine
Deterministic reducer for the Token-Curated Registry.

Consumes a RegistryState and a Transition and produces the next state.
All work happens on a scratch copy; when any precondition fails the copy is
discarded and the input state comes back unchanged. Rejections are reported
as a typed outcome on TransitionResult, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from curia.models import (
    Proposal,
    ProposalState,
    RegistryState,
    Resolve,
    SubmitProposal,
    Transition,
    User,
    VoteAgainst,
    VoteFor,
)
from curia.tokens import Tokens, saturating_add, saturating_div, saturating_sub

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Domain types
# ---------------------------------------------------------------------------

class Outcome(str, Enum):
    APPLIED = "APPLIED"
    REJECTED = "REJECTED"


class Rejection(str, Enum):
    DUPLICATE_PROPOSAL = "DUPLICATE_PROPOSAL"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    UNKNOWN_OR_RESOLVED_PROPOSAL = "UNKNOWN_OR_RESOLVED_PROPOSAL"
    DUPLICATE_VOTE = "DUPLICATE_VOTE"


class Resolution(str, Enum):
    TIE = "TIE"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class InvariantViolation(RuntimeError):
    """Internal state contradicts a check the reducer already made."""


@dataclass
class TransitionResult:
    """Next state plus what happened. dropped is the payout remainder lost
    to floor division on resolve."""
    state: RegistryState
    outcome: Outcome
    transition: Optional[Transition] = None
    reason: Optional[Rejection] = None
    resolution: Optional[Resolution] = None
    payouts: dict[User, Tokens] = field(default_factory=dict)
    dropped: Tokens = 0

    @property
    def applied(self) -> bool:
        return self.outcome == Outcome.APPLIED

    def summary(self) -> str:
        lines = [f"Outcome:    {self.outcome.value}"]
        if self.transition is not None:
            lines.append(f"Transition: {self.transition.kind} {self.transition.proposal}")
        if self.reason is not None:
            lines.append(f"Reason:     {self.reason.value}")
        if self.resolution is not None:
            lines.append(f"Resolution: {self.resolution.value}")
        if self.payouts:
            lines.append("Payouts:")
            for user, amount in sorted(self.payouts.items()):
                lines.append(f"  {user}: {amount}")
        if self.dropped:
            lines.append(f"Dropped:    {self.dropped}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Balance helpers
# ---------------------------------------------------------------------------

def _covers(state: RegistryState, user: User, stake: Tokens) -> bool:
    """True when user has a balance entry of at least stake."""
    return user in state.balances and state.balances[user] >= stake


def _debit(state: RegistryState, user: User, stake: Tokens) -> bool:
    """Take stake from user's balance. Fails closed (no change) for a
    missing user or a short balance."""
    if not _covers(state, user, stake):
        return False
    state.balances[user] = saturating_sub(state.balances[user], stake)
    return True


def _credit(state: RegistryState, user: User, amount: Tokens) -> bool:
    """Add amount to user's balance. Users without a balance entry are skipped."""
    if user not in state.balances:
        logger.warning("Credit of %s skipped: no balance entry for %s", amount, user)
        return False
    state.balances[user] = saturating_add(state.balances[user], amount)
    return True


def _is_open(state: RegistryState, proposal: Proposal) -> bool:
    return state.is_pending(proposal) and not state.is_admitted(proposal)


# ---------------------------------------------------------------------------
# Transition handlers (mutate the scratch copy)
# ---------------------------------------------------------------------------

def _submit_proposal(scratch: RegistryState, t: SubmitProposal) -> Optional[Rejection]:
    if scratch.is_pending(t.proposal) or scratch.is_admitted(t.proposal):
        return Rejection.DUPLICATE_PROPOSAL

    if not _debit(scratch, t.user, t.stake):
        return Rejection.INSUFFICIENT_BALANCE

    scratch.proposals[t.proposal] = ProposalState(votes_for={t.user: t.stake})
    return None


def _vote(scratch: RegistryState, t: VoteFor | VoteAgainst) -> Optional[Rejection]:
    if not _is_open(scratch, t.proposal):
        return Rejection.UNKNOWN_OR_RESOLVED_PROPOSAL

    votes = scratch.proposals[t.proposal]
    if votes.has_voted(t.user):
        return Rejection.DUPLICATE_VOTE

    if not _covers(scratch, t.user, t.stake):
        return Rejection.INSUFFICIENT_BALANCE

    side = votes.votes_for if isinstance(t, VoteFor) else votes.votes_against
    side[t.user] = t.stake

    if not _debit(scratch, t.user, t.stake):
        logger.error(
            "Debit failed after balance check: proposal=%s user=%s stake=%s",
            t.proposal, t.user, t.stake,
        )
        raise InvariantViolation(
            f"Balance of {t.user!r} could not cover a stake of {t.stake} "
            f"that was already validated"
        )
    return None


def _split(winners: dict[User, Tokens], losing_pool: Tokens) -> tuple[dict[User, Tokens], Tokens]:
    """Stake back plus an even share of the losing pool. Returns (payouts, dropped)."""
    share = saturating_div(losing_pool, len(winners))
    payouts = {user: saturating_add(stake, share) for user, stake in winners.items()}
    dropped = losing_pool - share * len(winners)
    return payouts, dropped


def _resolve(
    scratch: RegistryState,
    t: Resolve,
    snapshot: ProposalState,
) -> tuple[Resolution, dict[User, Tokens], Tokens]:
    total_for = snapshot.total_for
    total_against = snapshot.total_against

    if total_for == total_against:
        resolution = Resolution.TIE
        payouts = {**snapshot.votes_for, **snapshot.votes_against}
        dropped = 0
    elif total_for > total_against:
        resolution = Resolution.ACCEPTED
        payouts, dropped = _split(snapshot.votes_for, total_against)
    else:
        resolution = Resolution.REJECTED
        payouts, dropped = _split(snapshot.votes_against, total_for)

    payouts = {
        user: amount for user, amount in payouts.items()
        if _credit(scratch, user, amount)
    }

    del scratch.proposals[t.proposal]
    if resolution == Resolution.ACCEPTED:
        scratch.registry.append(t.proposal)

    logger.info(
        "Resolved %s: %s (for=%s against=%s payouts=%s dropped=%s)",
        t.proposal, resolution.value, total_for, total_against, payouts, dropped,
    )
    return resolution, payouts, dropped


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def apply_transition(state: RegistryState, transition: Transition) -> TransitionResult:
    """
    Apply one transition and report what happened.

    The input state is never mutated. On rejection the returned result
    carries the input state itself and the rejection reason.
    """
    scratch = state.model_copy(deep=True)
    resolution: Optional[Resolution] = None
    payouts: dict[User, Tokens] = {}
    dropped: Tokens = 0

    if isinstance(transition, SubmitProposal):
        reason = _submit_proposal(scratch, transition)
    elif isinstance(transition, (VoteFor, VoteAgainst)):
        reason = _vote(scratch, transition)
    elif isinstance(transition, Resolve):
        if _is_open(state, transition.proposal):
            reason = None
            resolution, payouts, dropped = _resolve(
                scratch, transition, state.proposals[transition.proposal]
            )
        else:
            reason = Rejection.UNKNOWN_OR_RESOLVED_PROPOSAL
    else:
        raise TypeError(f"Unsupported transition type: {type(transition).__name__}")

    if reason is not None:
        logger.debug(
            "Rejected %s on %s: %s",
            transition.kind, transition.proposal, reason.value,
        )
        return TransitionResult(
            state=state,
            outcome=Outcome.REJECTED,
            transition=transition,
            reason=reason,
        )

    logger.debug(
        "Applied %s on %s by %s",
        transition.kind, transition.proposal, getattr(transition, "user", "-"),
    )
    return TransitionResult(
        state=scratch,
        outcome=Outcome.APPLIED,
        transition=transition,
        resolution=resolution,
        payouts=payouts,
        dropped=dropped,
    )


def next_state(state: RegistryState, transition: Transition) -> RegistryState:
    """Pure transition function: the next state, or the input state on rejection."""
    return apply_transition(state, transition).state


def run(state: RegistryState, transitions: Iterable[Transition]) -> RegistryState:
    """Fold an ordered sequence of transitions over a starting state."""
    for transition in transitions:
        state = next_state(state, transition)
    return state
