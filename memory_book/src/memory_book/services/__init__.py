"""
Services for the memory book.

This module provides the memory store, the guess/reveal state machine,
identity management, guess submission and scoreboard calculations.
"""

from .guess_state import GameState, GuessState, reduce
from .identity import IdentityManager, InvalidIdentity
from .memory_store import MemoryStore
from .scoreboard import guess_history, summarize_guesses
from .submission import SubmissionOutcome, submit_guess

__all__ = [
    "GameState",
    "GuessState",
    "IdentityManager",
    "InvalidIdentity",
    "MemoryStore",
    "SubmissionOutcome",
    "guess_history",
    "reduce",
    "submit_guess",
    "summarize_guesses",
]
