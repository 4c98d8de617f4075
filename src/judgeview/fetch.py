# src/judgeview/fetch.py
"""
Text fetchers: the only I/O the session performs.

A fetcher resolves a file name ("trecvid.tsv") against its source and
returns the complete decoded text, or raises FetchFailure. Three sources:
  - LocalFetcher: a directory on disk
  - HttpFetcher: a base URL (static file server), via requests
  - MemoryFetcher: an in-memory {name: text} mapping
No retries: one failed attempt is one FetchFailure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import urljoin

import requests

from judgeview.errors import FetchFailure

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "judgeview/0.1 (relevance judgment browser)"


class TextFetcher(Protocol):
    def fetch_text(self, name: str) -> str: ...


class LocalFetcher:
    def __init__(self, root: str | Path, encoding: str = "utf-8") -> None:
        self.root = Path(root)
        self.encoding = encoding

    def fetch_text(self, name: str) -> str:
        path = self.root / name
        logger.debug("Reading %s", path)
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise FetchFailure(name, f"no such file: {path}", kind="local") from e
        except OSError as e:
            raise FetchFailure(name, str(e), kind="local") from e
        return data.decode(self.encoding, errors="replace")

    def __repr__(self) -> str:
        return f"LocalFetcher({str(self.root)!r})"


class HttpFetcher:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def url_for(self, name: str) -> str:
        return urljoin(self.base_url, name)

    def fetch_text(self, name: str) -> str:
        url = self.url_for(name)
        headers = {"User-Agent": self.user_agent, "Accept": "text/plain, */*;q=0.8"}
        logger.debug("GET %s", url)
        try:
            r = self.session.get(url, headers=headers, timeout=self.timeout)
            r.raise_for_status()
        except (requests.ConnectionError, requests.Timeout) as e:
            raise FetchFailure(name, f"cannot reach {url}", kind="connection") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise FetchFailure(name, f"HTTP {status} for {url}", kind="http") from e
        except requests.RequestException as e:
            raise FetchFailure(name, str(e), kind="http") from e
        return r.content.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"HttpFetcher({self.base_url!r})"


class MemoryFetcher:
    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})

    def fetch_text(self, name: str) -> str:
        try:
            return self.files[name]
        except KeyError:
            raise FetchFailure(name, "not found", kind="local") from None


def make_fetcher(source: str | Path, *, timeout: float | None = None) -> TextFetcher:
    """Pick a fetcher from a directory path or an http(s) URL."""
    s = str(source)
    if s.startswith(("http://", "https://")):
        return HttpFetcher(s, timeout=timeout)
    return LocalFetcher(s)
