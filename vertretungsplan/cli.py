"""
CLI (Command Line Interface).

Quick terminal commands, e.g.:

    vertretungsplan grades
    vertretungsplan show 7 --class 7a --class 7b
    vertretungsplan show 10 --weeks 1 --teacher Mü --json
    vertretungsplan messages 7
    vertretungsplan parse saved_page.htm --room 104

Note:
- Output is plain text (or JSON with --json)
- Logs go to stderr, configured from VERTRETUNGSPLAN_LOG_LEVEL / _LOG_JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Dict, List, Sequence

from vertretungsplan.config import get_settings
from vertretungsplan.errors import ParseError, TransportError
from vertretungsplan.grades import Grade
from vertretungsplan.logging import get_logger, setup_logging
from vertretungsplan.model import Message, Replacement, ReplacementFilter
from vertretungsplan.scrape import download_table, load_table
from vertretungsplan.table import ReplacementTable


logger = get_logger(__name__)


def _filter_from_args(args: argparse.Namespace) -> Dict[ReplacementFilter, List[str]]:
    """
    Collect the repeatable --class/--teacher/... options into a filter mapping.
    Options that were not given are left out (no restriction).
    """
    out: Dict[ReplacementFilter, List[str]] = {}
    for key in ReplacementFilter:
        values = getattr(args, f"filter_{key.value}", None)
        if values:
            out[key] = list(values)
    return out


def _print_replacements(replacements: Sequence[Replacement], as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in replacements], ensure_ascii=False, indent=2))
        return

    if not replacements:
        print("No replacements.")
        return

    for r in replacements:
        print(" | ".join(r.data))
    print(f"{len(replacements)} replacement(s)")


def _print_messages(messages: Sequence[Message], as_json: bool) -> None:
    if as_json:
        print(json.dumps([m.to_dict() for m in messages], ensure_ascii=False, indent=2))
        return

    if not messages:
        print("No messages.")
        return

    for m in messages:
        print(f"[{m.date}] {m.text}")


def _download(args: argparse.Namespace) -> ReplacementTable:
    try:
        grade = Grade.parse(args.grade)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from None
    return download_table(grade, plus_weeks=args.weeks)


def _cmd_grades(args: argparse.Namespace) -> int:
    for grade in Grade:
        print(f"{grade.number:>2} | {grade.web_code}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    table = _download(args)
    _print_replacements(table.filtered_replacements(_filter_from_args(args)), args.json)
    return 0


def _cmd_messages(args: argparse.Namespace) -> int:
    table = _download(args)
    _print_messages(table.all_messages(), args.json)
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Parse a saved page instead of downloading it.
    """
    try:
        table = load_table(args.file, encoding=args.encoding)
    except OSError as exc:
        print(f"Cannot read {args.file}: {exc}")
        return 1

    if args.messages:
        _print_messages(table.all_messages(), args.json)
    else:
        _print_replacements(table.filtered_replacements(_filter_from_args(args)), args.json)
    return 0


def _add_filter_options(p: argparse.ArgumentParser) -> None:
    for key in ReplacementFilter:
        p.add_argument(
            f"--{key.value}",
            dest=f"filter_{key.value}",
            action="append",
            metavar="TEXT",
            help=f"Only rows whose {key.value} column contains TEXT (repeatable)",
        )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="vertretungsplan", description="School substitution plan CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("grades", help="List grades and their web codes")

    p_show = sub.add_parser("show", help="Download and show replacements")
    p_show.add_argument("grade", type=str, help="Grade (e.g. 7)")
    p_show.add_argument("--weeks", type=int, default=0, help="Week offset (default: current week)")
    p_show.add_argument("--json", action="store_true", help="Print JSON")
    _add_filter_options(p_show)

    p_messages = sub.add_parser("messages", help="Download and show messages")
    p_messages.add_argument("grade", type=str, help="Grade (e.g. 7)")
    p_messages.add_argument("--weeks", type=int, default=0, help="Week offset (default: current week)")
    p_messages.add_argument("--json", action="store_true", help="Print JSON")

    p_parse = sub.add_parser("parse", help="Parse a saved HTML page")
    p_parse.add_argument("file", type=str, help="Path to the .htm file")
    p_parse.add_argument("--encoding", type=str, default=None, help="File encoding (default: site encoding)")
    p_parse.add_argument("--messages", action="store_true", help="Show messages instead of replacements")
    p_parse.add_argument("--json", action="store_true", help="Print JSON")
    _add_filter_options(p_parse)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(json_output=settings.log_json, log_level=settings.log_level)

    handlers = {
        "grades": _cmd_grades,
        "show": _cmd_show,
        "messages": _cmd_messages,
        "parse": _cmd_parse,
    }
    handler = handlers.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        raise SystemExit(handler(args))
    except TransportError as exc:
        logger.error("download_failed", **exc.context)
        print(f"Couldn't download replacement table: {exc.message}", file=sys.stderr)
        raise SystemExit(1)
    except ParseError as exc:
        logger.error("parse_failed", reason=exc.message, line_no=exc.context.get("line_no"))
        print(f"Couldn't parse replacement table: {exc.message}", file=sys.stderr)
        raise SystemExit(1)
