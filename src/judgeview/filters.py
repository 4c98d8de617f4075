# src/judgeview/filters.py
"""
Filter engine and label helpers.

Filtering is deterministic and side-effect free: apply_filters builds a new
list and never touches its input, so the session can re-run it against the
same judgments for every change of criteria.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from judgeview.types import FilterCriteria, JudgmentRecord


def apply_filters(
    records: Sequence[JudgmentRecord], criteria: FilterCriteria
) -> list[JudgmentRecord]:
    """Keep records whose judgement AND stratum are both accepted."""
    if criteria.is_empty():
        return []
    return [
        r for r in records if r.judgement in criteria.judgements and r.stratum in criteria.strata
    ]


def known_labels(records: Iterable[JudgmentRecord]) -> tuple[list[str], list[str]]:
    """Sorted (judgement labels, strata) present in records."""
    judgements: set[str] = set()
    strata: set[str] = set()
    for r in records:
        judgements.add(r.judgement)
        strata.add(r.stratum)
    return sorted(judgements), sorted(strata)


def label_counts(records: Iterable[JudgmentRecord]) -> Counter[tuple[str, str]]:
    """Number of records per (judgement, stratum)."""
    return Counter((r.judgement, r.stratum) for r in records)
