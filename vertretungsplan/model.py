"""
Central data model definitions used across the project.

- Replacement: one row of the substitution table (always 7 columns)
- Message: one "Nachrichten zum Tag" announcement with its date
- ReplacementFilter: the 7 column roles, in the order they appear on the page
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Tuple


FIELD_COUNT = 7


class ReplacementFilter(Enum):
    """
    Column roles of a replacement row.

    The declaration order is the column order on the page, so ``ordinal``
    is the index into ``Replacement.data``.
    """

    CLASS = "class"
    PERIOD = "period"
    SUBJECT = "subject"
    TEACHER = "teacher"
    ROOM = "room"
    TYPE = "type"
    NOTE = "note"

    @property
    def ordinal(self) -> int:
        return list(ReplacementFilter).index(self)


@dataclass(frozen=True)
class Replacement:
    """
    Represents one schedule change (one "list odd"/"list even" table row).
    """

    data: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.data) != FIELD_COUNT:
            raise ValueError(f"Replacement needs {FIELD_COUNT} fields, got {len(self.data)}")

    def get(self, key: ReplacementFilter) -> str:
        return self.data[key.ordinal]

    @property
    def school_class(self) -> str:
        return self.data[0]

    @property
    def period(self) -> str:
        return self.data[1]

    @property
    def subject(self) -> str:
        return self.data[2]

    @property
    def teacher(self) -> str:
        return self.data[3]

    @property
    def room(self) -> str:
        return self.data[4]

    @property
    def type(self) -> str:
        return self.data[5]

    @property
    def note(self) -> str:
        return self.data[6]

    def to_dict(self) -> Dict[str, str]:
        return {key.value: self.get(key) for key in ReplacementFilter}


@dataclass(frozen=True)
class Message:
    """
    Represents one free-text announcement.

    ``date`` is the text that followed the last <b> marker before the
    message table (e.g. "Montag"), it is not validated as a calendar date.
    """

    text: str
    date: str

    def to_dict(self) -> Dict[str, str]:
        return {"date": self.date, "text": self.text}


class ExtractionResult(NamedTuple):
    """Output of one extraction pass over a document."""

    replacements: List[Replacement]
    messages: List[Message]
