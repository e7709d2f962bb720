"""Map a decoded note onto the emitted JSON-LD-style document."""

from notes_emitter.intake.decoder import NoteRecord

DOCUMENT_TYPE = "CreativeWork"
ID_PREFIX = "urn:apple:notes:note:"
SOURCE = "apple-notes"


def build_document(record: NoteRecord, text: str) -> dict:
    """Return the output document for a note. Key order is fixed."""
    return {
        "@type": DOCUMENT_TYPE,
        "@id": f"{ID_PREFIX}{record.id}",
        "name": record.name,
        "text": text,
        "dateCreated": record.created,
        "dateModified": record.modified,
        "isPartOf": record.folder,
        "account": record.account,
        "source": SOURCE,
    }
