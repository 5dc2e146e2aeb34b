#!/usr/bin/env python3
"""
Curia — Registry Walkthrough

Replays three short registry histories against the bundled genesis state
(alice, bob and charlie with 100 tokens each): a tie, a win for the
proposer, and a double vote that bounces.

Usage:
    python scripts/demo.py
"""

from __future__ import annotations

import logging

from curia import (
    Resolve,
    SubmitProposal,
    VoteAgainst,
    VoteFor,
    apply_transition,
    load_genesis,
)

# ---------------------------------------------------------------------------
# Terminal colors (ANSI)
# ---------------------------------------------------------------------------

class C:
    RESET   = "\033[0m"
    BOLD    = "\033[1m"
    DIM     = "\033[2m"
    RED     = "\033[91m"
    GREEN   = "\033[92m"
    CYAN    = "\033[96m"
    MAGENTA = "\033[95m"
    WHITE   = "\033[97m"


def banner(text: str, color: str = C.CYAN):
    width = 64
    print()
    print(f"{color}{C.BOLD}{'=' * width}{C.RESET}")
    print(f"{color}{C.BOLD}  {text}{C.RESET}")
    print(f"{color}{C.BOLD}{'=' * width}{C.RESET}")
    print()


def info(text: str):
    print(f"  {C.DIM}{text}{C.RESET}")


def play(transitions):
    state = load_genesis()
    for n, transition in enumerate(transitions, start=1):
        result = apply_transition(state, transition)
        color = C.GREEN if result.applied else C.RED
        print(f"  {C.BOLD}{C.WHITE}[Step {n}]{C.RESET} {color}{result.outcome.value}{C.RESET}")
        for line in result.summary().splitlines()[1:]:
            info(line)
        state = result.state
    print()
    print(f"  {C.BOLD}Balances:{C.RESET} {state.balances}")
    print(f"  {C.BOLD}Pending:{C.RESET}  {sorted(state.proposals)}")
    print(f"  {C.BOLD}Registry:{C.RESET} {state.registry}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    banner("CURIA  --  Token-Curated Registry", C.MAGENTA)

    banner("1. Tie: every stake refunded")
    play([
        SubmitProposal(proposal="prop1", user="alice", stake=50),
        VoteAgainst(proposal="prop1", user="bob", stake=50),
        Resolve(proposal="prop1"),
    ])

    banner("2. Proposer wins the losing pool")
    play([
        SubmitProposal(proposal="prop1", user="alice", stake=60),
        VoteAgainst(proposal="prop1", user="bob", stake=40),
        Resolve(proposal="prop1"),
    ])

    banner("3. Double vote rejected")
    play([
        SubmitProposal(proposal="prop1", user="alice", stake=50),
        VoteFor(proposal="prop1", user="alice", stake=10),
    ])


if __name__ == "__main__":
    main()
