"""
Scoreboard calculations for the current session's guesses.
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from ..models import Memory
from .guess_state import GameState

PREVIEW_LENGTH = 60


def _guess_frame(memories: Sequence[Memory], state: GameState) -> pd.DataFrame:
    rows = []
    for memory in memories:
        guess = state.guess_for(memory.id)
        rows.append({
            "memory_id": memory.id,
            "text": memory.text,
            "author_name": memory.author_name,
            "guess_text": guess.guess_text,
            "guessed": bool(guess.guess_text),
            "is_correct": bool(guess.guess_text) and guess.is_correct,
        })
    return pd.DataFrame(
        rows,
        columns=["memory_id", "text", "author_name", "guess_text", "guessed", "is_correct"]
    )


def summarize_guesses(memories: Sequence[Memory], state: GameState) -> Dict[str, Any]:
    """
    Calculate score statistics for the session.

    Args:
        memories: Visible memories
        state: Current game state

    Returns:
        Dictionary with totals and accuracy
    """
    if not memories:
        return {
            "total_memories": 0,
            "guessed": 0,
            "correct": 0,
            "incorrect": 0,
            "remaining": 0,
            "accuracy": 0.0
        }

    df = _guess_frame(memories, state)

    total = len(df)
    guessed = int(df["guessed"].sum())
    correct = int(df["is_correct"].sum())

    return {
        "total_memories": total,
        "guessed": guessed,
        "correct": correct,
        "incorrect": guessed - correct,
        "remaining": total - guessed,
        "accuracy": correct / guessed if guessed else 0.0
    }


def guess_history(memories: Sequence[Memory], state: GameState) -> List[Dict[str, str]]:
    """
    Prepare the guessed memories for display in table format.

    Args:
        memories: Visible memories
        state: Current game state

    Returns:
        List of formatted rows, one per guessed memory
    """
    if not memories:
        return []

    df = _guess_frame(memories, state)
    df = df[df["guessed"]]

    display_data = []
    for _, row in df.iterrows():
        text = row["text"]
        display_data.append({
            "Memory": text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text,
            "Your Guess": row["guess_text"],
            "Written By": row["author_name"],
            "Result": "✓" if row["is_correct"] else "✗",
        })

    return display_data
