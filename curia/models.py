"""
Registry Data Model
Proposal votes, the full registry state, and the transitions that act on it.

Every record is a pydantic model: construction validates token amounts and
the structural invariants (a user on at most one side of a proposal, a
proposal never both pending and admitted), equality is by value, and
states deep-copy cleanly for the scratch-copy reducer.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    model_validator,
)

from curia.tokens import Tokens, checked_tokens, saturating_add

# ---------------------------------------------------------------------------
# Identifiers and amounts
# ---------------------------------------------------------------------------

Proposal = str
User = str

TokenAmount = Annotated[StrictInt, AfterValidator(checked_tokens)]
Votes = dict[User, TokenAmount]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class ProposalState(BaseModel):
    """Stakes recorded for one pending proposal, split by side."""
    votes_for: Votes = Field(default_factory=dict)
    votes_against: Votes = Field(default_factory=dict)

    @model_validator(mode="after")
    def _sides_are_exclusive(self) -> ProposalState:
        both = self.votes_for.keys() & self.votes_against.keys()
        if both:
            raise ValueError(
                f"Users voted on both sides of a proposal: {sorted(both)}"
            )
        return self

    @property
    def total_for(self) -> Tokens:
        return _sum_tokens(self.votes_for.values())

    @property
    def total_against(self) -> Tokens:
        return _sum_tokens(self.votes_against.values())

    @property
    def voters(self) -> set[User]:
        return set(self.votes_for) | set(self.votes_against)

    def has_voted(self, user: User) -> bool:
        return user in self.votes_for or user in self.votes_against


class RegistryState(BaseModel):
    """
    Full machine state.

    balances:  spendable tokens per user (staked tokens excluded)
    proposals: pending proposals and their votes
    registry:  admitted proposals, in admission order
    """
    balances: dict[User, TokenAmount] = Field(default_factory=dict)
    proposals: dict[Proposal, ProposalState] = Field(default_factory=dict)
    registry: list[Proposal] = Field(default_factory=list)

    @model_validator(mode="after")
    def _pending_and_admitted_are_disjoint(self) -> RegistryState:
        if len(set(self.registry)) != len(self.registry):
            raise ValueError("Registry contains duplicate proposals")
        overlap = self.proposals.keys() & set(self.registry)
        if overlap:
            raise ValueError(
                f"Proposals both pending and admitted: {sorted(overlap)}"
            )
        return self

    def balance_of(self, user: User) -> Tokens:
        return self.balances.get(user, 0)

    def is_pending(self, proposal: Proposal) -> bool:
        return proposal in self.proposals

    def is_admitted(self, proposal: Proposal) -> bool:
        return proposal in self.registry

    def total_staked(self) -> int:
        return sum(p.total_for + p.total_against for p in self.proposals.values())

    def total_supply(self) -> int:
        """Spendable balances plus every stake held by pending proposals."""
        return sum(self.balances.values()) + self.total_staked()


def _sum_tokens(amounts) -> Tokens:
    total = 0
    for amount in amounts:
        total = saturating_add(total, amount)
    return total


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

class _Transition(BaseModel):
    model_config = ConfigDict(frozen=True)


class SubmitProposal(_Transition):
    kind: Literal["submit_proposal"] = "submit_proposal"
    proposal: Proposal
    user: User
    stake: TokenAmount


class VoteFor(_Transition):
    kind: Literal["vote_for"] = "vote_for"
    proposal: Proposal
    user: User
    stake: TokenAmount


class VoteAgainst(_Transition):
    kind: Literal["vote_against"] = "vote_against"
    proposal: Proposal
    user: User
    stake: TokenAmount


class Resolve(_Transition):
    kind: Literal["resolve"] = "resolve"
    proposal: Proposal


Transition = Annotated[
    Union[SubmitProposal, VoteFor, VoteAgainst, Resolve],
    Field(discriminator="kind"),
]

_transition_adapter: TypeAdapter[Transition] = TypeAdapter(Transition)


def parse_transition(data: dict[str, Any] | str | bytes) -> Transition:
    """Build a transition from a dict or a JSON document, keyed on ``kind``."""
    if isinstance(data, (str, bytes)):
        return _transition_adapter.validate_json(data)
    return _transition_adapter.validate_python(data)
