"""Decode one record block into a NoteRecord."""

from dataclasses import dataclass

from notes_emitter.channels.apple_notes import FIELD_DELIMITER
from notes_emitter.errors import NoteParseError

# (attribute, context label, field name) in wire order
FIELDS = (
    ("id", "reading note id", "id"),
    ("name", "reading note name", "name"),
    ("body_markup", "reading note body", "body"),
    ("created", "reading creation date", "creation date"),
    ("modified", "reading modification date", "modification date"),
    ("folder", "reading folder name", "folder"),
    ("account", "reading account name", "account"),
)


@dataclass(frozen=True)
class NoteRecord:
    id: str
    name: str
    body_markup: str
    created: str
    modified: str
    folder: str
    account: str


def decode_record(block: str) -> NoteRecord:
    """Read the seven fields of a block, trimming each.

    Fields are taken one at a time; anything after the seventh is ignored.
    Timestamps are kept as the text AppleScript produced.

    Raises:
        NoteParseError: naming the first field the block is missing.
    """
    parts = iter(block.split(FIELD_DELIMITER))
    values = {}
    for attr, context, field in FIELDS:
        value = next(parts, None)
        if value is None:
            raise NoteParseError(context, f"missing {field} field")
        values[attr] = value.strip()
    return NoteRecord(**values)
