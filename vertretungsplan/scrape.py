"""
Download of the weekly substitution page.

The page address contains the ISO week number (two digits, zero-padded,
the site answers 404 for "w/7/...") and the web code of the grade:

    http://mpg-vertretungsplan.de/w/07/w00003.htm

Downloads are never retried here; a failed download is reported to the
caller as TransportError.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Optional

import requests

from vertretungsplan.config import Settings, get_settings
from vertretungsplan.errors import ParseError, TransportError
from vertretungsplan.grades import Grade
from vertretungsplan.logging import get_logger
from vertretungsplan.table import ReplacementTable


logger = get_logger(__name__)

DOWNLOAD_FAILED = "Couldn't download replacement table"
PARSE_FAILED = "Couldn't parse replacement table"


# ---------------------------------------------------------------------------
# Address
# ---------------------------------------------------------------------------


def week_number(plus_weeks: int = 0, today: Optional[date] = None) -> str:
    """
    ISO week number of today (+ offset) as two-digit string, e.g. "07".
    """
    day = (today or date.today()) + timedelta(weeks=plus_weeks)
    return f"{day.isocalendar()[1]:02d}"


def build_url(
    grade: Grade,
    plus_weeks: int = 0,
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    return settings.download_url.format(week=week_number(plus_weeks, today), code=grade.web_code)


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


def fetch_html(
    url: str,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """
    GET the page and return its text. Raises TransportError on any
    connection problem or HTTP error status.
    """
    settings = settings or get_settings()
    http = session or requests

    logger.info("fetch_page", url=url)
    try:
        resp = http.get(url, timeout=settings.request_timeout, headers={"User-Agent": settings.user_agent})
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("fetch_failed", url=url, error=str(exc))
        raise TransportError(f"Download of {url} failed: {exc}", context={"url": url}) from exc

    resp.encoding = settings.encoding
    return resp.text


def download_table(
    grade: Grade,
    plus_weeks: int = 0,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> ReplacementTable:
    """
    Downloads and parses the table of one grade for the current week
    (or a week offset). Raises TransportError or ParseError.
    """
    url = build_url(grade, plus_weeks, settings=settings)
    html = fetch_html(url, settings=settings, session=session)
    return ReplacementTable.from_html(html)


def load_table(path: str | Path, encoding: Optional[str] = None) -> ReplacementTable:
    """
    Parses a saved copy of the page.
    """
    text = Path(path).read_text(encoding=encoding or get_settings().encoding)
    return ReplacementTable.from_html(text)


# ---------------------------------------------------------------------------
# Background download
# ---------------------------------------------------------------------------

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _default_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="vertretungsplan")
        return _executor


def download_table_async(
    grade: Grade,
    on_finished: Callable[[ReplacementTable], None],
    on_failed: Callable[[str], None],
    plus_weeks: int = 0,
    executor: Optional[ThreadPoolExecutor] = None,
    settings: Optional[Settings] = None,
) -> "Future[ReplacementTable]":
    """
    Runs download_table() on a worker thread and reports the outcome
    through the callbacks.

    The returned future holds the table or the original exception, so
    callers that need to tell transport and parse failures apart can
    inspect it. There is no cancellation.
    """
    pool = executor or _default_executor()
    future = pool.submit(download_table, grade, plus_weeks, settings)

    def _done(fut: "Future[ReplacementTable]") -> None:
        exc = fut.exception()
        try:
            if exc is None:
                on_finished(fut.result())
            elif isinstance(exc, TransportError):
                on_failed(DOWNLOAD_FAILED)
            elif isinstance(exc, ParseError):
                on_failed(PARSE_FAILED)
            else:
                logger.error("download_task_crashed", grade=grade.name, error=repr(exc))
                on_failed(DOWNLOAD_FAILED)
        except Exception:
            logger.exception("download_callback_failed", grade=grade.name)

    future.add_done_callback(_done)
    return future
