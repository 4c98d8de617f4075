# src/judgeview/types.py
"""
judgeview — canonical dataclasses and enums.

This module defines the data contracts shared by the parsers, the filter
engine and the session:
- QueryCatalog: ordered mapping query_id -> query text (query file)
- JudgmentRecord: one judged shot for one query (judgment file)
- FilterCriteria: accepted judgement labels x accepted strata
- FilterOutcome: filtered view plus the counts shown to the operator
- LineDiagnostic: one rejected line, reported by the parsers in strict mode

Design rules:
- Query ids are decimal digit strings; judgment rows carry them with a
  literal "1" prepended (JUDGMENT_ID_PREFIX).
- Records and criteria are immutable; derived views are rebuilt, never patched.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

QueryCatalog = dict[str, str]

QUERY_ID_RE = re.compile(r"^\d+$")
JUDGMENT_ID_PREFIX = "1"


def is_query_id(value: str | None) -> bool:
    return bool(value) and QUERY_ID_RE.match(value) is not None


def prefixed_query_id(query_id: str) -> str:
    """
    Judgment-file encoding of a catalog query id ("5" -> "15").

    Only catalog ids (all digits) have a well-defined prefixed form.
    """
    if not is_query_id(query_id):
        raise ValueError(f"Query id must be all digits, got: {query_id!r}")
    return JUDGMENT_ID_PREFIX + query_id


# ---------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------
class SessionPhase(str, Enum):
    NO_DATASET = "no_dataset"
    QUERIES_LOADING = "queries_loading"
    QUERIES_LOADED = "queries_loaded"
    RESULTS_LOADING = "results_loading"
    RESULTS_LOADED = "results_loaded"
    ERROR = "error"


# ---------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class JudgmentRecord:
    """
    One judged shot for one query.

    query_id is the prefixed id exactly as it appears in the judgment file.
    junk is an opaque flag column carried through for display.
    """

    query_id: str
    junk: str
    shot_id: str
    stratum: str
    judgement: str

    def to_dict(self) -> dict[str, str]:
        return {
            "query_id": self.query_id,
            "junk": self.junk,
            "shot_id": self.shot_id,
            "stratum": self.stratum,
            "judgement": self.judgement,
        }

    def as_row(self) -> tuple[str, str, str, str, str]:
        return (self.query_id, self.junk, self.shot_id, self.stratum, self.judgement)


@dataclass(frozen=True)
class FilterCriteria:
    """Accepted judgement labels and accepted strata; a record must match both."""

    judgements: frozenset[str]
    strata: frozenset[str]

    @classmethod
    def from_labels(cls, judgements: Iterable[str], strata: Iterable[str]) -> FilterCriteria:
        return cls(judgements=frozenset(judgements), strata=frozenset(strata))

    @classmethod
    def accept_all(cls, records: Iterable[JudgmentRecord]) -> FilterCriteria:
        """Criteria selecting every label present in records."""
        records = list(records)
        return cls(
            judgements=frozenset(r.judgement for r in records),
            strata=frozenset(r.stratum for r in records),
        )

    def is_empty(self) -> bool:
        return not self.judgements or not self.strata


@dataclass(frozen=True)
class FilterOutcome:
    records: tuple[JudgmentRecord, ...]
    total_count: int

    @property
    def filtered_count(self) -> int:
        return len(self.records)

    def summary(self) -> str:
        return f"Showing {self.filtered_count} of {self.total_count} results"


@dataclass(frozen=True)
class LineDiagnostic:
    line_no: int  # 1-based
    line: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.reason} ({self.line!r})"
