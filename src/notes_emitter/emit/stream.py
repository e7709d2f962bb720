"""Write documents to a sink as newline-delimited JSON."""

import json
import logging
from collections.abc import Iterable
from typing import TextIO

from notes_emitter.errors import NotesIOError, NoteSerializationError

logger = logging.getLogger(__name__)


def encode_document(document: dict) -> str:
    """Encode a document as one compact line of JSON (no trailing newline)."""
    try:
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise NoteSerializationError("writing JSON to stdout", e) from e


def _write_all(documents: Iterable[dict], sink: TextIO) -> int:
    count = 0
    for document in documents:
        line = encode_document(document)
        try:
            sink.write(line)
        except OSError as e:
            raise NotesIOError("writing note to stdout", e) from e
        try:
            sink.write("\n")
        except OSError as e:
            raise NotesIOError("writing newline to stdout", e) from e
        count += 1
    return count


def emit_documents(documents: Iterable[dict], sink: TextIO) -> int:
    """Write each document on its own line, then flush once.

    Documents are pulled from the iterable one at a time, so an upstream
    failure stops the run with everything before it already written. The
    sink is flushed on that path too, and the original error is re-raised;
    a flush failure there is only logged.

    Returns the number of documents written.
    """
    try:
        count = _write_all(documents, sink)
    except Exception:
        try:
            sink.flush()
        except OSError as e:
            logger.warning("flushing stdout after a failed run: %s", e)
        raise

    try:
        sink.flush()
    except OSError as e:
        raise NotesIOError("flushing stdout", e) from e
    return count
