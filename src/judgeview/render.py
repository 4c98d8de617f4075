# src/judgeview/render.py
"""
Plain-text presentation of a filtered judgment view.

Renderers take a sequence of JudgmentRecord and return a string; the CLI
decides where it goes.
"""

from __future__ import annotations

import csv
import io
import json
from collections import Counter
from collections.abc import Sequence

from judgeview.types import JudgmentRecord

COLUMNS = ("Query ID", "Junk", "Shot ID", "Stratum", "Judgement")
EMPTY_MESSAGE = "No results match the current filters"


def render_table(records: Sequence[JudgmentRecord]) -> str:
    if not records:
        return EMPTY_MESSAGE

    rows = [r.as_row() for r in records]
    widths = [max(len(COLUMNS[i]), *(len(row[i]) for row in rows)) for i in range(len(COLUMNS))]

    def fmt(cells: Sequence[str]) -> str:
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    lines = [fmt(COLUMNS), fmt(["-" * w for w in widths])]
    lines.extend(fmt(row) for row in rows)
    return "\n".join(lines)


def render_jsonl(records: Sequence[JudgmentRecord]) -> str:
    return "".join(json.dumps(r.to_dict(), ensure_ascii=False) + "\n" for r in records)


def render_tsv(records: Sequence[JudgmentRecord]) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, delimiter="\t", lineterminator="\n")
    for r in records:
        w.writerow(r.as_row())
    return buf.getvalue()


def render_label_counts(counts: Counter[tuple[str, str]]) -> str:
    """judgement x stratum grid with row and column totals."""
    if not counts:
        return EMPTY_MESSAGE
    judgements = sorted({j for j, _ in counts})
    strata = sorted({s for _, s in counts})

    header = ["judgement", *strata, "total"]
    body = []
    for j in judgements:
        row = [counts.get((j, s), 0) for s in strata]
        body.append([j, *map(str, row), str(sum(row))])
    col_totals = [sum(counts.get((j, s), 0) for j in judgements) for s in strata]
    body.append(["total", *map(str, col_totals), str(sum(col_totals))])

    widths = [max(len(r[i]) for r in [header, *body]) for i in range(len(header))]
    return "\n".join(
        "  ".join(c.rjust(w) if i else c.ljust(w) for i, (c, w) in enumerate(zip(r, widths)))
        for r in [header, *body]
    )
