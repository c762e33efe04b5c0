"""Data models for the memory book."""

from .mapping import MEMORY_FIELDS, FieldSpec, RawRecord, record_to_memory, records_to_memories, resolve_field
from .memory import GuessSubmission, Identity, Memory

__all__ = [
    "MEMORY_FIELDS",
    "FieldSpec",
    "GuessSubmission",
    "Identity",
    "Memory",
    "RawRecord",
    "record_to_memory",
    "records_to_memories",
    "resolve_field",
]
