"""Tests for the newline-delimited JSON emitter."""

import io
import json
import logging

import pytest

from notes_emitter.emit.stream import emit_documents, encode_document
from notes_emitter.errors import NotesIOError, NoteSerializationError


class _RecordingSink(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


class _FailingSink(io.StringIO):
    """Raises OSError on the Nth write call, or on flush."""

    def __init__(self, fail_on_write=None, fail_on_flush=False):
        super().__init__()
        self.writes = 0
        self.fail_on_write = fail_on_write
        self.fail_on_flush = fail_on_flush

    def write(self, s):
        self.writes += 1
        if self.writes == self.fail_on_write:
            raise BrokenPipeError("pipe closed")
        return super().write(s)

    def flush(self):
        if self.fail_on_flush:
            self.fail_on_flush = False
            raise OSError("disk full")
        super().flush()


def test_encode_document_is_compact_single_line():
    line = encode_document({"@type": "CreativeWork", "text": "a\nb", "name": "Café"})
    assert line == '{"@type":"CreativeWork","text":"a\\nb","name":"Café"}'


def test_encode_document_failure():
    with pytest.raises(NoteSerializationError) as excinfo:
        encode_document({"bad": object()})
    assert excinfo.value.context == "writing JSON to stdout"
    assert isinstance(excinfo.value.source, TypeError)


def test_emit_writes_one_line_per_document():
    sink = _RecordingSink()
    docs = [{"n": 1}, {"n": 2}, {"n": 3}]
    count = emit_documents(docs, sink)
    assert count == 3
    assert sink.getvalue() == '{"n":1}\n{"n":2}\n{"n":3}\n'
    assert [json.loads(line) for line in sink.getvalue().splitlines()] == docs


def test_emit_flushes_exactly_once():
    sink = _RecordingSink()
    emit_documents(iter([{"n": 1}, {"n": 2}]), sink)
    assert sink.flushes == 1


def test_emit_nothing():
    sink = _RecordingSink()
    assert emit_documents([], sink) == 0
    assert sink.getvalue() == ""
    assert sink.flushes == 1


def test_emit_note_write_failure():
    sink = _FailingSink(fail_on_write=1)
    with pytest.raises(NotesIOError) as excinfo:
        emit_documents([{"n": 1}], sink)
    assert excinfo.value.context == "writing note to stdout"


def test_emit_newline_write_failure():
    sink = _FailingSink(fail_on_write=2)
    with pytest.raises(NotesIOError) as excinfo:
        emit_documents([{"n": 1}], sink)
    assert excinfo.value.context == "writing newline to stdout"
    assert str(excinfo.value) == "I/O error while writing newline to stdout"


def test_emit_flush_failure():
    sink = _FailingSink(fail_on_flush=True)
    with pytest.raises(NotesIOError) as excinfo:
        emit_documents([{"n": 1}], sink)
    assert excinfo.value.context == "flushing stdout"
    assert sink.getvalue() == '{"n":1}\n'


def test_emit_keeps_output_written_before_upstream_failure():
    def documents():
        yield {"n": 1}
        raise RuntimeError("upstream")

    sink = _RecordingSink()
    with pytest.raises(RuntimeError):
        emit_documents(documents(), sink)
    assert sink.getvalue() == '{"n":1}\n'
    assert sink.flushes == 1


def test_emit_flushes_after_write_failure():
    class _BrokenSink(_RecordingSink):
        def write(self, s):
            if s == '{"n":2}':
                raise BrokenPipeError("pipe closed")
            return super().write(s)

    sink = _BrokenSink()
    with pytest.raises(NotesIOError) as excinfo:
        emit_documents([{"n": 1}, {"n": 2}], sink)
    assert excinfo.value.context == "writing note to stdout"
    assert sink.getvalue() == '{"n":1}\n'
    assert sink.flushes == 1


def test_emit_failed_flush_after_upstream_failure_keeps_original_error(caplog):
    def documents():
        yield {"n": 1}
        raise NoteSerializationError("writing JSON to stdout", TypeError("bad"))

    sink = _FailingSink(fail_on_flush=True)
    with caplog.at_level(logging.WARNING, logger="notes_emitter.emit.stream"):
        with pytest.raises(NoteSerializationError):
            emit_documents(documents(), sink)
    assert sink.getvalue() == '{"n":1}\n'
    assert sink.fail_on_flush is False
    assert any("flushing stdout after a failed run" in m for m in caplog.messages)
