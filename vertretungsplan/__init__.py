"""
Vertretungsplan - replacements and messages from the school's substitution page.

Usage:
    from vertretungsplan import Grade, ReplacementFilter, download_table

    table = download_table(Grade.GRADE_7)
    for r in table.filtered_replacements({ReplacementFilter.CLASS: ["7a"]}):
        print(r.period, r.subject, r.teacher)
"""

from vertretungsplan.errors import ParseError, TransportError, VertretungsplanError
from vertretungsplan.grades import Grade
from vertretungsplan.model import ExtractionResult, Message, Replacement, ReplacementFilter
from vertretungsplan.parse import extract, strip_tags
from vertretungsplan.scrape import download_table, download_table_async, load_table
from vertretungsplan.table import ReplacementTable, filter_replacements

__version__ = "0.1.0"

__all__ = [
    "ExtractionResult",
    "Grade",
    "Message",
    "ParseError",
    "Replacement",
    "ReplacementFilter",
    "ReplacementTable",
    "TransportError",
    "VertretungsplanError",
    "download_table",
    "download_table_async",
    "extract",
    "filter_replacements",
    "load_table",
    "strip_tags",
]
