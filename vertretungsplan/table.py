"""
Replacement table (query surface).

A ReplacementTable is created from one complete extraction and is read-only
afterwards. To look at another week, load a new table.

Filter semantics:
    {CLASS: ["7a", "7b"], TEACHER: ["Mü"]}
    -> class column contains "7a" OR "7b"
       AND teacher column contains "Mü"
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Mapping, Sequence, Tuple, Union

from vertretungsplan.model import Message, Replacement, ReplacementFilter
from vertretungsplan.parse import extract


FilterValues = Union[str, Iterable[str]]
FilterMapping = Mapping[ReplacementFilter, FilterValues]


def _normalize_filter(filter_mapping: FilterMapping) -> List[Tuple[ReplacementFilter, Tuple[str, ...]]]:
    out: List[Tuple[ReplacementFilter, Tuple[str, ...]]] = []
    for key, values in filter_mapping.items():
        # A single string is one value, not a sequence of characters
        if isinstance(values, str):
            out.append((key, (values,)))
        else:
            out.append((key, tuple(values)))
    return out


def _matches(replacement: Replacement, criteria: List[Tuple[ReplacementFilter, Tuple[str, ...]]]) -> bool:
    for key, values in criteria:
        field = replacement.get(key)
        if not any(value in field for value in values):
            return False
    return True


def filter_replacements(replacements: Iterable[Replacement], filter_mapping: FilterMapping) -> List[Replacement]:
    """
    Returns the replacements that satisfy every key of the filter.

    A key is satisfied if its column contains at least one of the key's
    values as a substring (case-sensitive). An empty filter returns all
    replacements.
    """
    criteria = _normalize_filter(filter_mapping)
    return [r for r in replacements if _matches(r, criteria)]


class ReplacementTable:
    """
    Holds the replacements and messages of one page.
    """

    def __init__(self, replacements: Sequence[Replacement], messages: Sequence[Message]) -> None:
        self._replacements: Tuple[Replacement, ...] = tuple(replacements)
        self._messages: Tuple[Message, ...] = tuple(messages)

    @classmethod
    def from_html(cls, html: str) -> "ReplacementTable":
        """
        Parses a downloaded page. Raises ParseError on malformed input.
        """
        replacements, messages = extract(html)
        return cls(replacements, messages)

    def all_replacements(self) -> Tuple[Replacement, ...]:
        return self._replacements

    def all_messages(self) -> Tuple[Message, ...]:
        return self._messages

    def filtered_replacements(self, filter_mapping: FilterMapping) -> List[Replacement]:
        return filter_replacements(self._replacements, filter_mapping)

    def __len__(self) -> int:
        return len(self._replacements)

    def __iter__(self) -> Iterator[Replacement]:
        return iter(self._replacements)

    def __repr__(self) -> str:
        return f"ReplacementTable(replacements={len(self._replacements)}, messages={len(self._messages)})"
