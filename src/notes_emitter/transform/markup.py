"""Convert a note's HTML body to wrapped plain text."""

import re
import textwrap

import html2text

from notes_emitter.errors import NoteParseError

DEFAULT_WRAP_WIDTH = 80

# leading indent plus an optional list marker ("* ", "- ", "+ ", "12. ")
_HANGING_INDENT = re.compile(r"^\s*(?:(?:[*+-]|\d+\.)\s+)?")


class _PlainText(html2text.HTML2Text):
    """html2text that leaves the note's own text unescaped.

    html2text Markdown-escapes text data ("1." → "1\\.", "-" → "\\-") unless
    it came from an entity; every text node is passed through as one.
    """

    def handle_data(self, data, entity_char=False):
        super().handle_data(data, entity_char=True)


def _rewrap(text: str, width: int) -> str:
    """Wrap any line html2text left longer than ``width``.

    html2text never wraps some paragraphs (ordered list items, table rows).
    Continuation lines hang under the list marker.
    """
    lines = []
    for line in text.splitlines():
        if len(line) <= width:
            lines.append(line)
            continue
        indent = _HANGING_INDENT.match(line).group(0)
        subsequent = " " * len(indent) if len(indent) < width else ""
        wrapped = textwrap.wrap(
            line,
            width,
            subsequent_indent=subsequent,
            break_long_words=False,
            break_on_hyphens=False,
        )
        lines.extend(wrapped or [line.strip()])
    return "\n".join(lines)


def html_to_text(markup: str, wrap_width: int = DEFAULT_WRAP_WIDTH) -> str:
    """Render HTML as plain text wrapped at ``wrap_width`` columns.

    Headings, emphasis and lists come out Markdown-flavoured, which is how
    html2text renders them; the note's own characters are never escaped.
    No line is longer than ``wrap_width`` unless a single word is.
    Leading and trailing whitespace is stripped.

    Raises:
        ValueError: if wrap_width is not a positive integer.
        NoteParseError: if html2text rejects the markup.
    """
    if isinstance(wrap_width, bool) or not isinstance(wrap_width, int) or wrap_width < 1:
        raise ValueError(f"wrap width must be a positive integer, got {wrap_width!r}")

    converter = _PlainText(bodywidth=wrap_width)
    converter.unicode_snob = True
    converter.wrap_list_items = True
    try:
        text = converter.handle(markup)
    except Exception as e:
        raise NoteParseError("converting note body from HTML to text", str(e)) from e
    return _rewrap(text, wrap_width).strip()
