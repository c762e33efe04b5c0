"""
Reveal/guess state machine for the memory book.

All per-session guess and reveal state lives in one immutable ``GameState``.
It only changes through ``reduce`` applied to one of the typed actions below,
so the page controller never edits the individual collections directly.

Per memory the lifecycle is Hidden -> Guessed. Guessed is final for the
guess and its correctness; only the collapsed flag keeps changing. The
global RevealAll flag shows every answer without recording a guess, and
while it is on collapse toggles go to a separate overlay that is thrown away
when it is turned off again.

Guess writes are optimistic: ``SubmitGuess`` records the guess locally before
the remote write happens, and ``SubmissionFinished`` only clears the
in-flight marker, whether or not the write succeeded.
"""

import re
from typing import Dict, FrozenSet, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..models import Memory

WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lowercase and strip every whitespace character."""
    return WHITESPACE.sub("", name.lower())


def is_correct_guess(guess: str, author_name: str) -> bool:
    return normalize_name(guess) == normalize_name(author_name)


class GuessState(BaseModel):
    """One memory's recorded guess."""
    guess_text: str = ""
    is_correct: bool = False
    is_collapsed: bool = False

    model_config = ConfigDict(frozen=True)


class GameState(BaseModel):
    """Every piece of guess/reveal state for one session."""
    guesses: Dict[str, GuessState] = Field(default_factory=dict)
    reveal_all: bool = False
    reveal_collapsed: FrozenSet[str] = frozenset()
    guessed_expanded: bool = True
    submitting: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def guess_for(self, memory_id: str) -> GuessState:
        return self.guesses.get(memory_id, GuessState())

    def is_guessed(self, memory_id: str) -> bool:
        """True once a guess has been recorded for the memory."""
        return bool(self.guess_for(memory_id).guess_text)

    def has_guessed(self, memory_id: str) -> bool:
        """True when the memory's answer is showing, by guess or by RevealAll."""
        return self.is_guessed(memory_id) or self.reveal_all

    def is_collapsed(self, memory_id: str) -> bool:
        if self.reveal_all:
            return memory_id in self.reveal_collapsed
        return self.guess_for(memory_id).is_collapsed

    def can_submit(self, memory_id: str, text: str) -> bool:
        return (
            not self.is_guessed(memory_id)
            and bool(text.strip())
            and self.submitting is None
        )

    def show_image(self, memory: Memory) -> bool:
        """Images show up front when flagged, otherwise once answered and expanded."""
        if memory.show_image_upfront:
            return True
        return self.has_guessed(memory.id) and not self.is_collapsed(memory.id)

    @property
    def guessed_count(self) -> int:
        return sum(1 for guess in self.guesses.values() if guess.guess_text)


class SubmitGuess(BaseModel):
    memory_id: str
    author_name: str
    text: str


class SubmissionFinished(BaseModel):
    memory_id: str


class ToggleCollapse(BaseModel):
    memory_id: str


class ToggleRevealAll(BaseModel):
    pass


class ToggleExpandGuessed(BaseModel):
    pass


Action = Union[SubmitGuess, SubmissionFinished, ToggleCollapse, ToggleRevealAll, ToggleExpandGuessed]


def _with_guess(state: GameState, memory_id: str, guess: GuessState) -> Dict[str, GuessState]:
    guesses = dict(state.guesses)
    guesses[memory_id] = guess
    return guesses


def _submit_guess(state: GameState, action: SubmitGuess) -> GameState:
    if not state.can_submit(action.memory_id, action.text):
        logger.debug(f"Ignoring guess for {action.memory_id!r}: not accepting a guess right now")
        return state

    guess = GuessState(
        guess_text=action.text,
        is_correct=is_correct_guess(action.text, action.author_name),
        is_collapsed=False,
    )
    return state.model_copy(update={
        "guesses": _with_guess(state, action.memory_id, guess),
        "submitting": action.memory_id,
    })


def _submission_finished(state: GameState, action: SubmissionFinished) -> GameState:
    if state.submitting != action.memory_id:
        return state
    return state.model_copy(update={"submitting": None})


def _toggle_collapse(state: GameState, action: ToggleCollapse) -> GameState:
    memory_id = action.memory_id

    if state.reveal_all:
        return state.model_copy(update={"reveal_collapsed": state.reveal_collapsed ^ {memory_id}})

    if not state.is_guessed(memory_id):
        return state

    guess = state.guess_for(memory_id)
    toggled = guess.model_copy(update={"is_collapsed": not guess.is_collapsed})
    return state.model_copy(update={"guesses": _with_guess(state, memory_id, toggled)})


def _toggle_reveal_all(state: GameState, action: ToggleRevealAll) -> GameState:
    return state.model_copy(update={
        "reveal_all": not state.reveal_all,
        "reveal_collapsed": frozenset(),
    })


def _toggle_expand_guessed(state: GameState, action: ToggleExpandGuessed) -> GameState:
    expanded = not state.guessed_expanded
    guesses = {
        memory_id: guess.model_copy(update={"is_collapsed": not expanded}) if guess.guess_text else guess
        for memory_id, guess in state.guesses.items()
    }
    return state.model_copy(update={"guesses": guesses, "guessed_expanded": expanded})


_HANDLERS = {
    SubmitGuess: _submit_guess,
    SubmissionFinished: _submission_finished,
    ToggleCollapse: _toggle_collapse,
    ToggleRevealAll: _toggle_reveal_all,
    ToggleExpandGuessed: _toggle_expand_guessed,
}


def reduce(state: GameState, action: Action) -> GameState:
    """
    Apply one action to the game state.

    Actions that are not valid in the current state return it unchanged.

    Args:
        state: Current state
        action: Action to apply

    Returns:
        The next state
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {type(action).__name__}")
    return handler(state, action)
