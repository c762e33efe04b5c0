"""Mapping functions to convert raw spreadsheet records to Memory models.

Different revisions of the submission form produced different column names
for the same logical field, so every field is described once here as an
ordered alias list plus a default and a coercion rule.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Sequence, Tuple

from loguru import logger
from pydantic import ValidationError

from .memory import Memory

RawRecord = Dict[str, Any]

TRUTHY_STRINGS = frozenset({"true", "yes", "Yes", "TRUE", "1"})

IMAGE_SEPARATORS = re.compile(r"[,\n]")


def to_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def to_flag(value: Any) -> bool:
    """Permissive boolean: checkbox and free-text columns disagree on spelling."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value in TRUTHY_STRINGS


def to_image_refs(value: Any) -> List[str]:
    """Split a comma/newline delimited image column, preserving order."""
    if isinstance(value, (list, tuple)):
        parts = [to_text(item) for item in value]
    else:
        parts = IMAGE_SEPARATORS.split(to_text(value))
    return [part.strip() for part in parts if part.strip()]


class FieldSpec(NamedTuple):
    """Where to find one canonical field in a raw record."""
    name: str
    aliases: Tuple[str, ...]
    default: Any
    coerce: Callable[[Any], Any]


MEMORY_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec(
        "text",
        (
            "What is one of your fondest memories of Beth? Where and when did this "
            "memory occur? Try not to give away details about who you are in your response!",
            "memory",
            "text",
            "content",
        ),
        "No memory text available",
        to_text,
    ),
    FieldSpec(
        "image_refs",
        (
            "Share a picture, drawing, or other image that you'd like to include with your memory.",
            "image",
            "picture",
            "photo",
            "image_refs",
        ),
        "",
        to_image_refs,
    ),
    FieldSpec("author_name", ("What's your name?", "name", "author", "writer", "author_name"), "Anonymous", to_text),
    FieldSpec("excluded", ("exclude", "Exclude", "excluded"), False, to_flag),
    FieldSpec("timestamp_raw", ("Timestamp", "timestamp", "date", "time", "timestamp_raw"), "", to_text),
    FieldSpec("email", ("Email Address", "email", "emailAddress"), "", to_text),
    FieldSpec(
        "show_image_upfront",
        ("Show Image?", "showImage", "showImageBeforeGuess", "show_image_upfront"),
        False,
        to_flag,
    ),
)

FIELDS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in MEMORY_FIELDS}


def resolve_field(record: Mapping[str, Any], spec: FieldSpec) -> Any:
    """
    Return the first present alias value for a field, coerced.

    A key holding None counts as absent.

    Args:
        record: Raw record to probe
        spec: Field description

    Returns:
        The coerced value, or the coerced default when no alias is present
    """
    for key in spec.aliases:
        value = record.get(key)
        if value is not None:
            return spec.coerce(value)
    return spec.coerce(spec.default)


def get_field_value(record: Mapping[str, Any], field_name: str) -> Any:
    """Resolve a field by its canonical name."""
    return resolve_field(record, FIELDS_BY_NAME[field_name])


def record_to_memory(record: Mapping[str, Any], fallback_id: str = "") -> Memory:
    """
    Convert a raw spreadsheet record to a Memory.

    Pure and idempotent: ``record_to_memory(m.model_dump())`` equals ``m``.
    The timestamp doubles as the id; records without one keep an existing
    ``id`` key or take ``fallback_id``.

    Args:
        record: Raw record as returned by the memory source
        fallback_id: Id to use when the record has no timestamp

    Returns:
        The normalized Memory
    """
    values = {spec.name: resolve_field(record, spec) for spec in MEMORY_FIELDS}
    memory_id = values["timestamp_raw"] or to_text(record.get("id") or fallback_id)
    return Memory(id=memory_id, **values)


def records_to_memories(records: Sequence[Any]) -> List[Memory]:
    """
    Convert raw records to Memories, skipping ones that cannot be converted.

    Args:
        records: Raw records as returned by the memory source

    Returns:
        List of Memory models, in input order
    """
    memories = []

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping record {index}: expected an object, got {type(record).__name__}")
            continue
        try:
            memories.append(record_to_memory(record, fallback_id=f"record-{index}"))
        except ValidationError as e:
            logger.warning(f"Failed to convert record {index}: {str(e)}")

    return memories
