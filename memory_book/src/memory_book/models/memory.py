"""
Pydantic models for the memory book.

These models are the canonical shapes the rest of the service works with,
whatever form revision the underlying spreadsheet rows came from.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.images import resolve_image_url


class Memory(BaseModel):
    """
    One submitted memory, normalized from a raw spreadsheet record.

    ``id`` is the submission timestamp, or a positional fallback when the
    record has none.
    """
    id: str
    text: str = "No memory text available"
    author_name: str = "Anonymous"
    image_refs: List[str] = Field(default_factory=list)
    excluded: bool = False
    show_image_upfront: bool = False
    email: str = ""
    timestamp_raw: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def image_urls(self) -> List[str]:
        """Directly embeddable URLs for every resolvable image reference."""
        urls = []
        for ref in self.image_refs:
            url = resolve_image_url(ref)
            if url:
                urls.append(url)
        return urls


class Identity(BaseModel):
    """Self-reported name/email pair identifying the current player."""
    name: str
    email: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return bool(self.name.strip()) and "@" in self.email


class GuessSubmission(BaseModel):
    """Guess record written back to the memory source."""
    memory_id: str = Field(alias="memoryId")
    guessed_name: str = Field(alias="guessedName")
    actual_name: str = Field(alias="actualName")
    is_correct: bool = Field(alias="isCorrect")
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    guesser_name: str = Field(alias="guesserName")
    guesser_email: str = Field(alias="guesserEmail")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def for_guess(
        cls,
        memory: Memory,
        guess: str,
        is_correct: bool,
        identity: Identity,
        timestamp: Optional[datetime] = None
    ) -> "GuessSubmission":
        """Build the submission for a guess made by ``identity`` on ``memory``."""
        submitted_at = timestamp or datetime.now(timezone.utc)
        return cls(
            memory_id=memory.id,
            guessed_name=guess,
            actual_name=memory.author_name,
            is_correct=is_correct,
            timestamp=submitted_at.isoformat(),
            guesser_name=identity.name,
            guesser_email=identity.email,
        )

    def to_payload(self) -> dict:
        """JSON body in the camelCase shape the endpoint expects."""
        return self.model_dump(by_alias=True)
