# src/judgeview/parsers/judgments.py
"""
Judgment file parser.

Format: whitespace-separated columns, one judged shot per line:
  prefixed_query_id junk shot_id stratum judgement [ignored ...]

The query id column holds "1" + catalog id ("5" is written as "15"), so the
parser matches the prefixed form by exact string equality. Rows for other
queries are dropped silently; they are not malformed.
"""

from __future__ import annotations

import logging

from judgeview.errors import StrictParseError
from judgeview.types import JudgmentRecord, LineDiagnostic, prefixed_query_id

logger = logging.getLogger(__name__)

N_FIELDS = 5


def parse_judgments(
    text: str,
    target_query_id: str,
    *,
    strict: bool = False,
    source: str = "<judgments>",
) -> list[JudgmentRecord]:
    """
    Decode the rows of a judgment file that belong to target_query_id.

    Returns records in file order. An empty list means "no judgments for
    this query", never a failure. In strict mode, rows with fewer than five
    columns raise StrictParseError (after the whole text is scanned).
    """
    target = prefixed_query_id(target_query_id)
    records: list[JudgmentRecord] = []
    problems: list[LineDiagnostic] = []

    for line_no, raw in enumerate(text.split("\n"), start=1):
        parts = raw.split()
        if not parts:
            continue
        if len(parts) < N_FIELDS:
            problems.append(
                LineDiagnostic(line_no, raw, f"expected {N_FIELDS} columns, got {len(parts)}")
            )
            continue
        if parts[0] != target:
            continue

        query_id, junk, shot_id, stratum, judgement = parts[:N_FIELDS]
        records.append(
            JudgmentRecord(
                query_id=query_id,
                junk=junk,
                shot_id=shot_id,
                stratum=stratum,
                judgement=judgement,
            )
        )

    if problems:
        if strict:
            raise StrictParseError(source, problems)
        logger.debug("Skipped %d short row(s) in %s", len(problems), source)

    logger.info("Loaded %d judgment(s) for query %s", len(records), target_query_id)
    return records
