"""
Guess submission flow.

A guess is recorded locally first and then written to the memory source. A
failed write never rolls the local guess back; it only produces a message
for the page to show.
"""

from typing import NamedTuple, Optional

from loguru import logger

from ..api import MemorySourceClient, SubmissionFailed
from ..models import GuessSubmission, Identity, Memory
from .guess_state import GameState, SubmissionFinished, SubmitGuess, reduce

SUBMISSION_ERROR_MESSAGE = "Failed to submit guess. Please try again."


class SubmissionOutcome(NamedTuple):
    state: GameState
    error: Optional[str] = None


def submit_guess(
    api_client: MemorySourceClient,
    state: GameState,
    memory: Memory,
    guess: str,
    identity: Identity
) -> SubmissionOutcome:
    """
    Record a guess and send it to the memory source.

    Args:
        api_client: Client used for the write
        state: Current game state
        memory: Memory being guessed
        guess: Raw guess text
        identity: Player making the guess

    Returns:
        SubmissionOutcome: The state with the guess recorded and no write in
        flight, plus an error message when the write failed
    """
    if not state.can_submit(memory.id, guess):
        return SubmissionOutcome(state)

    state = reduce(state, SubmitGuess(memory_id=memory.id, author_name=memory.author_name, text=guess))
    guess_state = state.guess_for(memory.id)

    error = None
    submission = GuessSubmission.for_guess(memory, guess, guess_state.is_correct, identity)
    try:
        api_client.submit_guess(submission)
        logger.info(f"Guess submitted for memory {memory.id}")
    except SubmissionFailed as e:
        logger.error(f"Error submitting guess: {e.message}")
        error = SUBMISSION_ERROR_MESSAGE

    return SubmissionOutcome(reduce(state, SubmissionFinished(memory_id=memory.id)), error)
