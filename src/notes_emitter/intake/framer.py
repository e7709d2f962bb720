"""Split the bridge payload into one text block per note."""

from collections.abc import Iterator

from notes_emitter.channels.apple_notes import RECORD_DELIMITER


def frame_records(payload: str) -> Iterator[str]:
    """Yield each record block of the payload, in order.

    Blocks that are empty or whitespace-only (a trailing delimiter, an
    empty payload) are skipped silently.
    """
    for block in payload.split(RECORD_DELIMITER):
        if not block.strip():
            continue
        yield block
