"""Errors raised by the emitter pipeline, and their process exit codes.

One class per failure kind. The CLI maps each class to a sysexits code:
    NotesIOError            → EX_IOERR
    BridgeInvocationError   → EX_UNAVAILABLE
    NoteParseError          → EX_DATAERR
    NoteSerializationError  → EX_DATAERR
"""

# sysexits.h
EX_OK = 0
EX_DATAERR = 65
EX_UNAVAILABLE = 69
EX_IOERR = 74
EX_CONFIG = 78


class NotesError(Exception):
    """Base error for this package."""

    exit_code = EX_DATAERR

    def details(self) -> dict:
        """Structured fields for the debug log."""
        return {}


class NotesIOError(NotesError):
    """Raised when reading or writing bytes fails."""

    exit_code = EX_IOERR

    def __init__(self, context: str, source: OSError):
        self.context = context
        self.source = source
        super().__init__(f"I/O error while {context}")

    def details(self) -> dict:
        return {"context": self.context, "error": str(self.source)}


class BridgeInvocationError(NotesError):
    """Raised when osascript exits with a non-zero status."""

    exit_code = EX_UNAVAILABLE

    def __init__(self, returncode: int, stderr: str):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__("failed to talk to Apple Notes (osascript)")

    def details(self) -> dict:
        return {"returncode": self.returncode, "stderr": self.stderr}


class NoteParseError(NotesError):
    """Raised when a record block or a note body cannot be parsed."""

    exit_code = EX_DATAERR

    def __init__(self, context: str, message: str):
        self.context = context
        self.message = message
        super().__init__(f"failed to parse Apple Notes output while {context}")

    def details(self) -> dict:
        return {"context": self.context, "message": self.message}


class NoteSerializationError(NotesError):
    """Raised when a document cannot be encoded as JSON."""

    exit_code = EX_DATAERR

    def __init__(self, context: str, source: Exception):
        self.context = context
        self.source = source
        super().__init__(f"failed to serialize JSON while {context}")

    def details(self) -> dict:
        return {"context": self.context, "error": str(self.source)}


def exit_code_for(err: NotesError) -> int:
    """Return the sysexits code for an error, by class."""
    return type(err).exit_code
