"""
Grades and their web codes.

Every grade has its own page on the substitution site. The page name is
built from a two-digit code that the site assigns per grade, in ascending
order starting at grade 5.
"""

from __future__ import annotations

from enum import Enum


class Grade(Enum):
    GRADE_5 = "01"
    GRADE_6 = "02"
    GRADE_7 = "03"
    GRADE_8 = "04"
    GRADE_9 = "05"
    GRADE_10 = "06"
    GRADE_11 = "07"
    GRADE_12 = "08"

    @property
    def web_code(self) -> str:
        return self.value

    @property
    def number(self) -> int:
        return int(self.name.split("_")[1])

    @classmethod
    def parse(cls, text: str) -> "Grade":
        """
        Accepts "7", "grade_7" or "GRADE_7".
        """
        raw = text.strip().upper()
        if raw.isdigit():
            raw = f"GRADE_{int(raw)}"
        try:
            return cls[raw]
        except KeyError:
            raise ValueError(f"Unknown grade: {text!r}") from None
