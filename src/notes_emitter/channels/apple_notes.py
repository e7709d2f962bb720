"""Apple Notes bridge: dump every note via AppleScript.

The script below is the other half of a private wire format. Each note is
written as seven fields joined by FIELD_DELIMITER, in this order:

    id ||| name ||| body (HTML) ||| created ||| modified ||| folder ||| account

and terminated by RECORD_DELIMITER. There is no escaping: a note whose own
text contains either token will be framed incorrectly.
"""

import subprocess
from dataclasses import dataclass

FIELD_DELIMITER = "|||"
RECORD_DELIMITER = "~~~"

# Bump when the script's output format changes.
APPLESCRIPT_VERSION = 1

APPLESCRIPT = """
    set output to ""
    tell application "Notes"
        set theAccounts to every account
        repeat with acc in theAccounts
            set accName to the name of acc
            set foldersList to every folder of acc
            repeat with f in foldersList
                set folderName to the name of f
                set notesList to every note of f
                repeat with n in notesList
                    set noteId to the id of n
                    set noteName to the name of n
                    set noteBody to the body of n
                    set noteCreated to the creation date of n
                    set noteModified to the modification date of n
                    set output to output & noteId & "|||"
                    set output to output & noteName & "|||"
                    set output to output & noteBody & "|||"
                    set output to output & noteCreated & "|||"
                    set output to output & noteModified & "|||"
                    set output to output & folderName & "|||"
                    set output to output & accName & "~~~"
                end repeat
            end repeat
        end repeat
    end tell
    return output
"""


@dataclass(frozen=True)
class BridgeOutput:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_bridge(osascript: str = "osascript") -> BridgeOutput:
    """Run the export script and capture its raw output.

    No timeout is applied: if Notes never answers, neither does this call.

    Raises:
        OSError: if the osascript executable cannot be launched.
    """
    result = subprocess.run(
        [osascript, "-e", APPLESCRIPT],
        capture_output=True,
    )
    return BridgeOutput(
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )
