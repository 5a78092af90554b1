"""
Tests for page address building, retrieval and the background download.

No network access: requests is replaced with mocks.
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from pathlib import Path
from unittest import mock

import requests

from vertretungsplan.config import Settings
from vertretungsplan.errors import ParseError, TransportError
from vertretungsplan.grades import Grade
from vertretungsplan.scrape import (
    DOWNLOAD_FAILED,
    PARSE_FAILED,
    build_url,
    download_table,
    download_table_async,
    fetch_html,
    load_table,
    week_number,
)
from vertretungsplan.table import ReplacementTable


DATA_PATH = Path(__file__).resolve().parent / "data" / "w00003.htm"
SETTINGS = Settings(download_url="http://example.test/w/{week}/w000{code}.htm", request_timeout=5)


def _response(text: str = "", error: Exception | None = None) -> mock.Mock:
    resp = mock.Mock()
    resp.text = text
    if error is not None:
        resp.raise_for_status.side_effect = error
    return resp


class TestAddress(unittest.TestCase):
    def test_week_number_is_zero_padded(self) -> None:
        self.assertEqual(week_number(today=date(2026, 1, 1)), "01")
        self.assertEqual(week_number(today=date(2026, 10, 19)), "43")

    def test_week_offset(self) -> None:
        self.assertEqual(week_number(1, today=date(2026, 1, 1)), "02")
        self.assertEqual(week_number(-1, today=date(2026, 1, 8)), "01")

    def test_iso_week_at_year_end(self) -> None:
        # 2027-01-01 belongs to ISO week 53 of 2026
        self.assertEqual(week_number(today=date(2027, 1, 1)), "53")

    def test_build_url(self) -> None:
        url = build_url(Grade.GRADE_7, today=date(2026, 2, 16), settings=SETTINGS)
        self.assertEqual(url, "http://example.test/w/08/w00003.htm")

    def test_default_url_template(self) -> None:
        url = build_url(Grade.GRADE_5, today=date(2026, 2, 16), settings=Settings())
        self.assertEqual(url, "http://mpg-vertretungsplan.de/w/08/w00001.htm")


class TestFetch(unittest.TestCase):
    def test_fetch_returns_text(self) -> None:
        session = mock.Mock()
        session.get.return_value = _response("<html></html>")

        html = fetch_html("http://example.test/x.htm", settings=SETTINGS, session=session)

        self.assertEqual(html, "<html></html>")
        _, kwargs = session.get.call_args
        self.assertEqual(kwargs["timeout"], 5)
        self.assertIn("User-Agent", kwargs["headers"])

    def test_http_error_becomes_transport_error(self) -> None:
        session = mock.Mock()
        session.get.return_value = _response(error=requests.HTTPError("404 Not Found"))

        with self.assertRaises(TransportError) as ctx:
            fetch_html("http://example.test/x.htm", settings=SETTINGS, session=session)
        self.assertEqual(ctx.exception.context["url"], "http://example.test/x.htm")

    def test_connection_error_becomes_transport_error(self) -> None:
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(TransportError):
            fetch_html("http://example.test/x.htm", settings=SETTINGS, session=session)

    def test_download_table(self) -> None:
        session = mock.Mock()
        session.get.return_value = _response(DATA_PATH.read_text(encoding="utf-8"))

        table = download_table(Grade.GRADE_7, settings=SETTINGS, session=session)

        self.assertIsInstance(table, ReplacementTable)
        self.assertEqual(len(table), 3)

    def test_load_table(self) -> None:
        table = load_table(DATA_PATH, encoding="utf-8")
        self.assertEqual(len(table.all_messages()), 2)


class TestDownloadAsync(unittest.TestCase):
    def _run(self, fetch: mock.Mock) -> tuple[list, list, object]:
        finished: list = []
        failed: list = []
        done = threading.Event()

        def on_finished(table: ReplacementTable) -> None:
            finished.append(table)
            done.set()

        def on_failed(reason: str) -> None:
            failed.append(reason)
            done.set()

        with mock.patch("vertretungsplan.scrape.fetch_html", fetch):
            with ThreadPoolExecutor(max_workers=1) as pool:
                future = download_table_async(
                    Grade.GRADE_7, on_finished, on_failed, executor=pool, settings=SETTINGS
                )
                self.assertTrue(done.wait(timeout=5))

        return finished, failed, future

    def test_success_calls_on_finished(self) -> None:
        fetch = mock.Mock(return_value=DATA_PATH.read_text(encoding="utf-8"))
        finished, failed, future = self._run(fetch)

        self.assertEqual(failed, [])
        self.assertEqual(len(finished), 1)
        self.assertIs(future.result(), finished[0])

    def test_transport_failure_calls_on_failed(self) -> None:
        fetch = mock.Mock(side_effect=TransportError("offline"))
        finished, failed, future = self._run(fetch)

        self.assertEqual(finished, [])
        self.assertEqual(failed, [DOWNLOAD_FAILED])
        self.assertIsInstance(future.exception(), TransportError)

    def test_parse_failure_is_reported_distinctly(self) -> None:
        fetch = mock.Mock(return_value="<b>Montag</b>")
        finished, failed, future = self._run(fetch)

        self.assertEqual(finished, [])
        self.assertEqual(failed, [PARSE_FAILED])
        self.assertIsInstance(future.exception(), ParseError)


if __name__ == "__main__":
    unittest.main()
