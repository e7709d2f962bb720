"""Pipeline driver: bridge → frame → decode → convert → build → emit.

Notes are processed one at a time, in the order the bridge returned them.
By default the first failure ends the run; documents already written stay
written. With ``skip_invalid`` a note that fails to decode or convert is
counted and skipped instead.
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TextIO

from notes_emitter.channels.apple_notes import APPLESCRIPT_VERSION, BridgeOutput, run_bridge
from notes_emitter.config import EmitterConfig
from notes_emitter.emit.stream import emit_documents
from notes_emitter.errors import BridgeInvocationError, NoteParseError, NotesIOError
from notes_emitter.intake.decoder import NoteRecord, decode_record
from notes_emitter.intake.framer import frame_records
from notes_emitter.transform.document import build_document
from notes_emitter.transform.markup import html_to_text

logger = logging.getLogger(__name__)

Bridge = Callable[[str], BridgeOutput]


@dataclass(frozen=True)
class RunSummary:
    emitted: int = 0
    skipped: int = 0


class PipelineObserver:
    """Checkpoint hooks called by run_pipeline. This base class ignores them."""

    def on_start(self) -> None:
        pass

    def on_bridge_complete(self, output: BridgeOutput) -> None:
        pass

    def on_empty(self) -> None:
        pass

    def on_note(self, record: NoteRecord) -> None:
        pass

    def on_skip(self, index: int, error: NoteParseError) -> None:
        pass

    def on_finish(self, summary: RunSummary) -> None:
        pass


class LoggingObserver(PipelineObserver):
    """Report pipeline checkpoints through the logging module."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def on_start(self) -> None:
        self.log.info("starting apple notes emitter")

    def on_bridge_complete(self, output: BridgeOutput) -> None:
        self.log.debug(
            "osascript completed: status=%s stdout_len=%d stderr_len=%d script_version=%d",
            output.returncode,
            len(output.stdout),
            len(output.stderr),
            APPLESCRIPT_VERSION,
        )

    def on_empty(self) -> None:
        self.log.info("no notes returned from Apple Notes")

    def on_note(self, record: NoteRecord) -> None:
        self.log.debug(
            "emitting note: id=%s account=%s folder=%s name=%s",
            record.id,
            record.account,
            record.folder,
            record.name,
        )

    def on_skip(self, index: int, error: NoteParseError) -> None:
        self.log.warning("skipping note #%d: %s (%s)", index, error, error.message)

    def on_finish(self, summary: RunSummary) -> None:
        self.log.info(
            "finished apple notes emitter: notes=%d skipped=%d",
            summary.emitted,
            summary.skipped,
        )


def _documents(
    payload: str,
    config: EmitterConfig,
    observer: PipelineObserver,
    tally: Counter,
) -> Iterator[dict]:
    for index, block in enumerate(frame_records(payload)):
        try:
            record = decode_record(block)
            text = html_to_text(record.body_markup, config.wrap_width)
        except NoteParseError as e:
            if not config.skip_invalid:
                raise
            tally["skipped"] += 1
            observer.on_skip(index, e)
            continue

        observer.on_note(record)
        yield build_document(record, text)


def run_pipeline(
    config: EmitterConfig,
    sink: TextIO,
    bridge: Bridge = run_bridge,
    observer: PipelineObserver | None = None,
) -> RunSummary:
    """Export every note and write it to ``sink``.

    Args:
        config: Effective settings (wrap width, skip mode, osascript path).
        sink: Text stream receiving one JSON document per line.
        bridge: Callable taking the osascript command and returning its output.
        observer: Checkpoint hooks; None disables them.

    Raises:
        NotesIOError: osascript could not be launched, or the sink failed.
        BridgeInvocationError: osascript exited non-zero.
        NoteParseError: a note could not be decoded or converted.
        NoteSerializationError: a document could not be encoded.
    """
    observer = observer or PipelineObserver()
    observer.on_start()

    try:
        output = bridge(config.osascript)
    except OSError as e:
        raise NotesIOError("invoking osascript", e) from e
    observer.on_bridge_complete(output)

    if not output.ok:
        stderr = output.stderr.decode("utf-8", errors="replace")
        raise BridgeInvocationError(output.returncode, stderr)

    payload = output.stdout.decode("utf-8", errors="replace")
    if not payload.strip():
        observer.on_empty()
        summary = RunSummary()
        observer.on_finish(summary)
        return summary

    tally = Counter()
    emitted = emit_documents(_documents(payload, config, observer, tally), sink)

    summary = RunSummary(emitted=emitted, skipped=tally["skipped"])
    observer.on_finish(summary)
    return summary
