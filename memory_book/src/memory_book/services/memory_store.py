"""
Memory store for the memory book.

Loads raw records through the API client, normalizes them, hides excluded
ones and shuffles the rest once per fetch so that browsing order says nothing
about submission order.
"""

import random
from typing import List, Optional, Sequence, Set, TypeVar

from loguru import logger

from ..api import FetchFailed, MemorySourceClient
from ..models import Memory, records_to_memories

T = TypeVar("T")


def fisher_yates_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly shuffled copy of ``items``.

    Args:
        items: Items to shuffle
        rng: Random source; pass a seeded instance for a reproducible order

    Returns:
        New list holding the same items in random order
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def visible_memories(memories: Sequence[Memory]) -> List[Memory]:
    """
    Drop excluded memories and repeated ids (first occurrence wins).

    Empty ids are never treated as duplicates.

    Args:
        memories: Normalized memories in source order

    Returns:
        Memories that may be shown, in source order
    """
    visible: List[Memory] = []
    seen: Set[str] = set()
    for memory in memories:
        if memory.excluded:
            continue
        if memory.id and memory.id in seen:
            logger.warning(f"Dropping memory with duplicate id {memory.id!r}")
            continue
        seen.add(memory.id)
        visible.append(memory)
    return visible


class MemoryStore:
    """
    Session memory collection.

    The collection is replaced wholesale by each successful ``load``; a failed
    load leaves no partial list behind.
    """

    def __init__(self, api_client: MemorySourceClient, rng: Optional[random.Random] = None):
        """
        Initialize memory store.

        Args:
            api_client: Memory source client instance
            rng: Random source used for shuffling
        """
        self.api_client = api_client
        self.rng = rng or random.Random()
        self._memories: List[Memory] = []

    @property
    def memories(self) -> List[Memory]:
        return list(self._memories)

    def load(self) -> List[Memory]:
        """
        Fetch, normalize, filter and shuffle the memories.

        Returns:
            The visible memories in their shuffled order

        Raises:
            FetchFailed: If the memory source could not be read
        """
        try:
            records = self.api_client.fetch_records()
        except FetchFailed:
            self._memories = []
            raise

        memories = records_to_memories(records)
        visible = visible_memories(memories)
        self._memories = fisher_yates_shuffle(visible, self.rng)

        logger.info(
            f"Loaded {len(self._memories)} memories "
            f"({len(records)} records, {len(memories) - len(visible)} hidden or duplicate)"
        )
        return self.memories

    def get(self, memory_id: str) -> Optional[Memory]:
        """Look up a visible memory by id."""
        for memory in self._memories:
            if memory.id == memory_id:
                return memory
        return None

    def __len__(self) -> int:
        return len(self._memories)
