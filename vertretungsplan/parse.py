"""
Parsing (HTML -> replacements + messages).

The substitution page has no machine-readable structure we could rely on,
but a handful of textual markers are unique on it:

- "<b>"                    opens the day name ("<b>Montag 12.10.</b>")
- "list odd" / "list even" marks one replacement row
- "rules"                  marks a "Nachrichten zum Tag" table
- "</table>"               closes that table

The page is therefore scanned line by line instead of being parsed as HTML.

Important rules (DO NOT CHANGE):
- 1 row line = 1 Replacement, always 7 cells
- a malformed row fails the whole page, there are no partial results
- a message table that is never closed produces no Message
"""

from __future__ import annotations

from typing import List, Sequence

from vertretungsplan.errors import ParseError
from vertretungsplan.logging import get_logger
from vertretungsplan.model import FIELD_COUNT, ExtractionResult, Message, Replacement


logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

DATE_MARKER = "<b>"
ROW_MARKERS = ("list odd", "list even")
PAYLOAD_MARKER = '">'
CELL_DELIMITER = '</td><td class="list" align="center">'
ROW_END = "</td></tr>"
MESSAGE_OPEN_MARKER = "rules"
MESSAGE_CLOSE_MARKER = "</table>"
LINE_BREAK = "<br>"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def strip_tags(text: str) -> str:
    """
    Removes every <...> span from the text.

    A "<" without a following ">" is kept as it is.
    """
    while True:
        start = text.find("<")
        if start == -1:
            return text
        end = text.find(">", start)
        if end == -1:
            return text
        text = text[:start] + text[end + 1 :]


def _index_after(line: str, marker: str, line_no: int) -> int:
    """
    Position directly behind the first occurrence of marker.
    """
    pos = line.find(marker)
    if pos == -1:
        raise ParseError(f"Marker {marker!r} not found", context={"line_no": line_no, "line": line})
    return pos + len(marker)


def _index_of(line: str, needle: str, start: int, line_no: int) -> int:
    pos = line.find(needle, start)
    if pos == -1:
        raise ParseError(
            f"Expected {needle!r} after position {start}",
            context={"line_no": line_no, "line": line},
        )
    return pos


def _split_lines(document: str) -> List[str]:
    # The site is usually served with CRLF; fall back to LF otherwise
    separator = "\r\n" if "\r\n" in document else "\n"
    return document.split(separator)


# ---------------------------------------------------------------------------
# Record builder
# ---------------------------------------------------------------------------


def build_replacement(fields: Sequence[str]) -> Replacement:
    """
    Creates one Replacement from the already split cells of a row.

    Raises ParseError if the row has fewer than 7 cells. Surplus cells are
    ignored (logged as a warning).
    """
    if len(fields) < FIELD_COUNT:
        raise ParseError(
            f"Replacement row has {len(fields)} cells, expected {FIELD_COUNT}",
            context={"fields": list(fields)},
        )
    if len(fields) > FIELD_COUNT:
        logger.warning("surplus_row_cells", cells=len(fields), ignored=list(fields[FIELD_COUNT:]))

    return Replacement(data=tuple(fields[:FIELD_COUNT]))


def _parse_row(line: str, line_no: int) -> Replacement:
    # Everything before the first '">' is the <tr ...><td ...> prefix
    start = _index_after(line, PAYLOAD_MARKER, line_no)
    fields = line[start:].split(CELL_DELIMITER)

    if len(fields) >= FIELD_COUNT:
        fields[FIELD_COUNT - 1] = fields[FIELD_COUNT - 1].replace(ROW_END, "")

    try:
        return build_replacement(fields)
    except ParseError as exc:
        exc.context.update(line_no=line_no, line=line)
        raise


def _parse_date(line: str, line_no: int) -> str:
    # "<b>Montag 12.10.</b>" -> "Montag"
    start = _index_after(line, DATE_MARKER, line_no)
    end = _index_of(line, " ", start, line_no)
    return line[start:end]


# ---------------------------------------------------------------------------
# Message accumulator
# ---------------------------------------------------------------------------


class MessageAccumulator:
    """
    Collects the cleaned lines of one message table until it is closed.
    """

    def __init__(self) -> None:
        self._parts: List[str] = []

    @staticmethod
    def clean(line: str) -> str:
        text = line.replace(LINE_BREAK, " ").replace("\r", "")
        text = strip_tags(text).strip()
        # Single pass: "   " becomes "  ", not " "
        return text.replace("  ", " ")

    def feed(self, line: str) -> None:
        self._parts.append(self.clean(line))

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def reset(self) -> None:
        self._parts = []

    def finish(self, date: str) -> Message:
        message = Message(text=self.text, date=date)
        self.reset()
        return message


# ---------------------------------------------------------------------------
# Extraction (CORE LOGIC)
# ---------------------------------------------------------------------------


def extract(document: str) -> ExtractionResult:
    """
    Scans the page once and returns all replacements and messages
    in document order.

    Raises ParseError on the first line that does not have the expected
    shape; nothing is returned in that case.
    """
    replacements: List[Replacement] = []
    messages: List[Message] = []

    lines = _split_lines(document)
    accumulator = MessageAccumulator()
    current_date = ""
    in_message = False
    skip_next = False

    for line_no, line in enumerate(lines, start=1):
        if skip_next:
            # Header row of the message table
            skip_next = False
            continue

        if DATE_MARKER in line:
            current_date = _parse_date(line, line_no)
            continue

        if any(marker in line for marker in ROW_MARKERS):
            replacements.append(_parse_row(line, line_no))
            continue

        if in_message and MESSAGE_CLOSE_MARKER in line:
            in_message = False
            messages.append(accumulator.finish(current_date))
            continue

        if in_message:
            accumulator.feed(line)
            continue

        if MESSAGE_OPEN_MARKER in line:
            in_message = True
            skip_next = True

    if in_message:
        logger.debug("unclosed_message_discarded", pending=accumulator.text)

    logger.debug(
        "document_extracted",
        lines=len(lines),
        replacements=len(replacements),
        messages=len(messages),
    )
    return ExtractionResult(replacements=replacements, messages=messages)
