"""Tests for the error taxonomy and exit-code mapping."""

import pytest

from notes_emitter.errors import (
    EX_DATAERR,
    EX_IOERR,
    EX_UNAVAILABLE,
    BridgeInvocationError,
    NoteParseError,
    NotesError,
    NoteSerializationError,
    NotesIOError,
    exit_code_for,
)


@pytest.mark.parametrize(
    "err, code, message",
    [
        (
            NotesIOError("flushing stdout", OSError("disk full")),
            EX_IOERR,
            "I/O error while flushing stdout",
        ),
        (
            BridgeInvocationError(1, "execution error"),
            EX_UNAVAILABLE,
            "failed to talk to Apple Notes (osascript)",
        ),
        (
            NoteParseError("reading note id", "missing id field"),
            EX_DATAERR,
            "failed to parse Apple Notes output while reading note id",
        ),
        (
            NoteSerializationError("writing JSON to stdout", TypeError("not serializable")),
            EX_DATAERR,
            "failed to serialize JSON while writing JSON to stdout",
        ),
    ],
)
def test_exit_codes_and_messages(err, code, message):
    assert isinstance(err, NotesError)
    assert exit_code_for(err) == code
    assert str(err) == message


def test_details_carry_payload():
    assert BridgeInvocationError(1, "denied").details() == {"returncode": 1, "stderr": "denied"}
    assert NoteParseError("reading note name", "missing name field").details() == {
        "context": "reading note name",
        "message": "missing name field",
    }
    assert NotesIOError("writing newline to stdout", BrokenPipeError("closed")).details() == {
        "context": "writing newline to stdout",
        "error": "closed",
    }
