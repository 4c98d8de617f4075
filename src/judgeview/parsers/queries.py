# src/judgeview/parsers/queries.py
"""
Query file parser.

Format: one query per line, `query_id<TAB>query text`. Lines without a tab
fall back to the first space as separator. Blank lines and lines starting
with '#' are ignored. Only all-digit ids are kept; a repeated id overwrites
the earlier text.
"""

from __future__ import annotations

import logging

from judgeview.errors import StrictParseError
from judgeview.types import LineDiagnostic, QueryCatalog, is_query_id

logger = logging.getLogger(__name__)


def _split_query_line(line: str) -> tuple[str, str] | None:
    if "\t" in line:
        qid, text = line.split("\t", 1)
    elif " " in line:
        qid, text = line.split(" ", 1)
    else:
        return None
    return qid.strip(), text.strip()


def parse_query_catalog(
    text: str, *, strict: bool = False, source: str = "<queries>"
) -> QueryCatalog:
    """
    Decode a query file into an ordered {query_id: query_text} mapping.

    Lenient by default: malformed lines are skipped. With strict=True every
    rejected non-comment line is reported through StrictParseError.
    """
    catalog: QueryCatalog = {}
    problems: list[LineDiagnostic] = []

    for line_no, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = _split_query_line(line)
        if parts is None:
            problems.append(LineDiagnostic(line_no, raw, "no separator"))
            continue

        qid, query_text = parts
        if not qid or not query_text:
            problems.append(LineDiagnostic(line_no, raw, "empty id or text"))
            continue
        if not is_query_id(qid):
            problems.append(LineDiagnostic(line_no, raw, f"non-numeric query id {qid!r}"))
            continue

        if qid in catalog:
            logger.debug("Query %s redefined at line %d", qid, line_no)
        catalog[qid] = query_text

    if problems:
        if strict:
            raise StrictParseError(source, problems)
        logger.debug("Skipped %d malformed line(s) in %s", len(problems), source)

    logger.info("Loaded queries: %d", len(catalog))
    return catalog
