import tempfile
import unittest
from pathlib import Path

import requests

from judgeview.errors import FetchFailure
from judgeview.fetch import HttpFetcher, LocalFetcher, MemoryFetcher, make_fetcher


def _response(status: int, body: bytes = b"", url: str = "http://data.test/x") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body
    r.url = url
    return r


class StubSession:
    """Stands in for requests.Session; records requested URLs."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.urls: list[str] = []
        self.kwargs: list[dict] = []

    def get(self, url, **kwargs):
        self.urls.append(url)
        self.kwargs.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class LocalFetcherTests(unittest.TestCase):
    def test_reads_utf8_text(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "demo.tsv").write_text("5\tcafé\n", encoding="utf-8")
            self.assertEqual(LocalFetcher(td).fetch_text("demo.tsv"), "5\tcafé\n")

    def test_missing_file_is_local_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FetchFailure) as ctx:
                LocalFetcher(td).fetch_text("nope.tsv")
        self.assertEqual(ctx.exception.kind, "local")
        self.assertEqual(ctx.exception.name, "nope.tsv")
        self.assertIn("--source", ctx.exception.hint())

    def test_invalid_utf8_bytes_are_replaced(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "d.tsv").write_bytes(b"5\tcaf\xe9\n7\tdogs\n")
            text = LocalFetcher(td).fetch_text("d.tsv")
        self.assertEqual(text, "5\tcaf\ufffd\n7\tdogs\n")


class HttpFetcherTests(unittest.TestCase):
    def test_joins_base_url_and_decodes_body(self) -> None:
        stub = StubSession(_response(200, "5\tcafé\n".encode("utf-8")))
        fetcher = HttpFetcher("http://data.test/sets", timeout=5, session=stub)
        self.assertEqual(fetcher.fetch_text("demo.tsv"), "5\tcafé\n")
        self.assertEqual(stub.urls, ["http://data.test/sets/demo.tsv"])
        self.assertEqual(stub.kwargs[0]["timeout"], 5)

    def test_http_status_failure(self) -> None:
        stub = StubSession(_response(404))
        with self.assertRaises(FetchFailure) as ctx:
            HttpFetcher("http://data.test/", session=stub).fetch_text("demo.tsv")
        self.assertEqual(ctx.exception.kind, "http")
        self.assertIn("404", str(ctx.exception))
        self.assertTrue(ctx.exception.hint().startswith("Error:"))

    def test_connection_failure_suggests_http_server(self) -> None:
        stub = StubSession(requests.ConnectionError("refused"))
        with self.assertRaises(FetchFailure) as ctx:
            HttpFetcher("http://localhost:8000", session=stub).fetch_text("demo.tsv")
        self.assertEqual(ctx.exception.kind, "connection")
        self.assertIn("http.server", ctx.exception.hint())


class MakeFetcherTests(unittest.TestCase):
    def test_choice_by_source(self) -> None:
        self.assertIsInstance(make_fetcher("https://example.org/data"), HttpFetcher)
        self.assertIsInstance(make_fetcher("data"), LocalFetcher)
        self.assertIsInstance(make_fetcher(Path("data")), LocalFetcher)

    def test_memory_fetcher(self) -> None:
        fetcher = MemoryFetcher({"a.tsv": "x"})
        self.assertEqual(fetcher.fetch_text("a.tsv"), "x")
        with self.assertRaises(FetchFailure):
            fetcher.fetch_text("b.tsv")


if __name__ == "__main__":
    unittest.main()
