"""
Parsers for the two dataset files: the query catalog (`{dataset}.tsv`) and
the per-shot judgments (`{dataset}_result.tsv`).

Both are total over malformed lines unless called with strict=True.
"""

from .judgments import parse_judgments
from .queries import parse_query_catalog

__all__ = ["parse_judgments", "parse_query_catalog"]
