"""
VoteFor / VoteAgainst Test Suite
"""

from __future__ import annotations

import pytest

from curia import (
    Outcome,
    ProposalState,
    Rejection,
    Resolve,
    SubmitProposal,
    VoteAgainst,
    VoteFor,
    apply_transition,
    next_state,
    run,
)


@pytest.fixture
def submitted(initial_state):
    """alice has submitted prop1 with a stake of 50."""
    return next_state(
        initial_state, SubmitProposal(proposal="prop1", user="alice", stake=50)
    )


@pytest.mark.parametrize("vote", [VoteFor, VoteAgainst])
class TestVoteRejections:

    def test_fails_unknown_proposal(self, initial_state, vote):
        result = apply_transition(initial_state, vote(proposal="prop1", user="bob", stake=10))
        assert result.reason == Rejection.UNKNOWN_OR_RESOLVED_PROPOSAL
        assert result.state == initial_state

    def test_fails_resolved_proposal(self, submitted, vote):
        resolved = next_state(submitted, Resolve(proposal="prop1"))
        assert resolved.registry == ["prop1"]
        result = apply_transition(resolved, vote(proposal="prop1", user="bob", stake=10))
        assert result.reason == Rejection.UNKNOWN_OR_RESOLVED_PROPOSAL
        assert result.state == resolved

    def test_fails_submitter_votes_again(self, submitted, vote):
        result = apply_transition(submitted, vote(proposal="prop1", user="alice", stake=10))
        assert result.reason == Rejection.DUPLICATE_VOTE
        assert result.state == submitted

    def test_fails_insufficient_balance(self, submitted, vote):
        result = apply_transition(submitted, vote(proposal="prop1", user="bob", stake=101))
        assert result.reason == Rejection.INSUFFICIENT_BALANCE
        assert result.state == submitted

    def test_fails_unknown_user_with_stake(self, submitted, vote):
        result = apply_transition(submitted, vote(proposal="prop1", user="dave", stake=1))
        assert result.reason == Rejection.INSUFFICIENT_BALANCE
        assert result.state == submitted

    def test_fails_unknown_user_zero_stake(self, submitted, vote):
        result = apply_transition(submitted, vote(proposal="prop1", user="dave", stake=0))
        assert result.reason == Rejection.INSUFFICIENT_BALANCE
        assert result.state == submitted
        assert "dave" not in result.state.balances

    def test_fails_pending_and_admitted(self, initial_state, vote):
        initial_state.balances["alice"] = 90
        initial_state.proposals["prop1"] = ProposalState(votes_for={"alice": 10})
        initial_state.registry.append("prop1")
        result = apply_transition(initial_state, vote(proposal="prop1", user="bob", stake=10))
        assert result.reason == Rejection.UNKNOWN_OR_RESOLVED_PROPOSAL
        assert result.state == initial_state


class TestVoteFor:

    def test_records_vote_and_debits(self, submitted):
        end = next_state(submitted, VoteFor(proposal="prop1", user="bob", stake=20))
        assert end.proposals["prop1"].votes_for == {"alice": 50, "bob": 20}
        assert end.proposals["prop1"].votes_against == {}
        assert end.balances["bob"] == 80

    def test_cannot_switch_sides(self, submitted):
        voted = next_state(submitted, VoteFor(proposal="prop1", user="bob", stake=20))
        result = apply_transition(voted, VoteAgainst(proposal="prop1", user="bob", stake=20))
        assert result.reason == Rejection.DUPLICATE_VOTE
        assert result.state == voted

    def test_cannot_increase_stake(self, submitted):
        voted = next_state(submitted, VoteFor(proposal="prop1", user="bob", stake=20))
        result = apply_transition(voted, VoteFor(proposal="prop1", user="bob", stake=30))
        assert result.reason == Rejection.DUPLICATE_VOTE


class TestVoteAgainst:

    def test_records_vote_and_debits(self, submitted):
        result = apply_transition(submitted, VoteAgainst(proposal="prop1", user="bob", stake=30))
        assert result.outcome == Outcome.APPLIED
        assert result.state.proposals["prop1"].votes_against == {"bob": 30}
        assert result.state.balances["bob"] == 70

    def test_vote_whole_balance(self, submitted):
        end = next_state(submitted, VoteAgainst(proposal="prop1", user="bob", stake=100))
        assert end.balances["bob"] == 0

    def test_votes_on_separate_proposals(self, initial_state):
        end = run(initial_state, [
            SubmitProposal(proposal="prop1", user="alice", stake=10),
            SubmitProposal(proposal="prop2", user="bob", stake=10),
            VoteAgainst(proposal="prop1", user="charlie", stake=10),
            VoteAgainst(proposal="prop2", user="charlie", stake=10),
        ])
        assert end.balances == {"alice": 90, "bob": 90, "charlie": 80}
        assert end.proposals["prop1"].votes_against == {"charlie": 10}
        assert end.proposals["prop2"].votes_against == {"charlie": 10}
