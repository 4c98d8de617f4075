# src/judgeview/session.py
"""
Browser session: the state machine between the parsers and the presentation.

Phases:
  NO_DATASET -> QUERIES_LOADING -> QUERIES_LOADED -> RESULTS_LOADING -> RESULTS_LOADED
  any *_LOADING phase -> ERROR on a file-level failure

Every load is split in two halves around the fetch:
  ticket = begin_...()            (under the lock: bump generation, reset state)
  text = fetcher.fetch_text(...)  (no lock held)
  complete_...(ticket, text)      (under the lock: applied only if still current)
The load_dataset/select_query helpers run both halves for synchronous callers;
hosts that fetch elsewhere (threads, an event loop) can drive the halves
themselves. A completion whose ticket generation is no longer current is
discarded, so a superseded load can never overwrite newer state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from judgeview.errors import (
    CatalogLoadError,
    EmptyCatalog,
    FetchFailure,
    JudgeviewError,
    SessionStateError,
)
from judgeview.fetch import TextFetcher, make_fetcher
from judgeview.filters import apply_filters, known_labels
from judgeview.parsers import parse_judgments, parse_query_catalog
from judgeview.types import (
    FilterCriteria,
    FilterOutcome,
    JudgmentRecord,
    QueryCatalog,
    SessionPhase,
    prefixed_query_id,
)

if TYPE_CHECKING:
    from judgeview.config import BrowserConfig

logger = logging.getLogger(__name__)

QUERY_FILE_TEMPLATE = "{dataset}.tsv"
RESULT_FILE_TEMPLATE = "{dataset}_result.tsv"


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    dataset: str
    file_name: str
    query_id: str | None = None


class BrowserSession:
    """
    All state of one operator session. Independent sessions share nothing.

    default_judgements / default_strata are the label sets selected before the
    operator changes anything; when None, every label found in the loaded
    judgments is selected.
    """

    def __init__(
        self,
        fetcher: TextFetcher,
        *,
        query_file_template: str = QUERY_FILE_TEMPLATE,
        result_file_template: str = RESULT_FILE_TEMPLATE,
        default_judgements: list[str] | None = None,
        default_strata: list[str] | None = None,
        strict: bool = False,
    ) -> None:
        self.fetcher = fetcher
        self.query_file_template = query_file_template
        self.result_file_template = result_file_template
        self.default_judgements = default_judgements
        self.default_strata = default_strata
        self.strict = strict

        self._lock = threading.Lock()
        self.generation = 0
        self.phase = SessionPhase.NO_DATASET
        self.dataset: str | None = None
        self.catalog: QueryCatalog = {}
        self.query_id: str | None = None
        # None = not chosen by the operator; filled from the defaults on every recompute
        self.judgement_filter: frozenset[str] | None = None
        self.stratum_filter: frozenset[str] | None = None
        self.all_results: tuple[JudgmentRecord, ...] = ()
        self.filtered_results: tuple[JudgmentRecord, ...] = ()
        self.error: JudgeviewError | None = None

    @classmethod
    def from_config(cls, cfg: BrowserConfig) -> BrowserSession:
        return cls(
            make_fetcher(cfg.source, timeout=cfg.http_timeout),
            query_file_template=cfg.query_file_template,
            result_file_template=cfg.result_file_template,
            default_judgements=cfg.judgements,
            default_strata=cfg.strata,
            strict=cfg.strict,
        )

    # -----------------------------------------------------------------
    # Read-only views
    # -----------------------------------------------------------------
    @property
    def query_text(self) -> str:
        if self.query_id is None:
            return ""
        return self.catalog.get(self.query_id, "N/A")

    @property
    def outcome(self) -> FilterOutcome:
        return FilterOutcome(records=self.filtered_results, total_count=len(self.all_results))

    def available_labels(self) -> tuple[list[str], list[str]]:
        """Judgement and stratum labels the operator can choose from."""
        data_judgements, data_strata = known_labels(self.all_results)
        judgements = (
            list(self.default_judgements) if self.default_judgements is not None else []
        )
        strata = list(self.default_strata) if self.default_strata is not None else []
        judgements += [j for j in data_judgements if j not in judgements]
        strata += [s for s in data_strata if s not in strata]
        return judgements, strata

    def default_criteria(self) -> FilterCriteria:
        data_judgements, data_strata = known_labels(self.all_results)
        return FilterCriteria.from_labels(
            self.default_judgements if self.default_judgements is not None else data_judgements,
            self.default_strata if self.default_strata is not None else data_strata,
        )

    def active_criteria(self) -> FilterCriteria:
        default = self.default_criteria()
        return FilterCriteria(
            judgements=(
                self.judgement_filter if self.judgement_filter is not None else default.judgements
            ),
            strata=self.stratum_filter if self.stratum_filter is not None else default.strata,
        )

    def dismiss_error(self) -> None:
        with self._lock:
            self.error = None

    # -----------------------------------------------------------------
    # Dataset (query catalog) load
    # -----------------------------------------------------------------
    def begin_dataset(self, dataset: str) -> LoadTicket:
        with self._lock:
            self.generation += 1
            self.dataset = dataset
            self.catalog = {}
            self.judgement_filter = None
            self.stratum_filter = None
            self._clear_results()
            self.error = None
            self.phase = SessionPhase.QUERIES_LOADING
            return LoadTicket(
                generation=self.generation,
                dataset=dataset,
                file_name=self.query_file_template.format(dataset=dataset),
            )

    def complete_dataset(self, ticket: LoadTicket, text: str) -> bool:
        """Apply a fetched query file. Returns False if the ticket was superseded."""
        try:
            catalog = parse_query_catalog(text, strict=self.strict, source=ticket.file_name)
        except JudgeviewError as e:
            if self.fail(ticket, e):
                raise
            return False
        if not catalog:
            err = EmptyCatalog(ticket.file_name)
            if self.fail(ticket, err):
                raise err
            return False

        with self._lock:
            if not self._is_current(ticket):
                return False
            self.catalog = catalog
            self.phase = SessionPhase.QUERIES_LOADED
        logger.info("Dataset %s: %d queries", ticket.dataset, len(catalog))
        return True

    def load_dataset(self, dataset: str) -> QueryCatalog:
        """Fetch and parse the query file of dataset; raises CatalogLoadError."""
        ticket = self.begin_dataset(dataset)
        logger.info("Loading queries for dataset %s (%s)", dataset, ticket.file_name)
        try:
            text = self.fetcher.fetch_text(ticket.file_name)
        except FetchFailure as e:
            err = CatalogLoadError(f"No usable queries for dataset {dataset!r}: {e}")
            err.__cause__ = e
            if self.fail(ticket, err):
                raise err from e
            return self.catalog
        self.complete_dataset(ticket, text)
        return self.catalog

    # -----------------------------------------------------------------
    # Query (judgments) load
    # -----------------------------------------------------------------
    def begin_query(self, query_id: str) -> LoadTicket:
        with self._lock:
            if self.dataset is None or not self.catalog:
                raise SessionStateError("No query catalog loaded; select a dataset first.")
            if self.phase == SessionPhase.QUERIES_LOADING:
                raise SessionStateError("Query catalog is still loading.")
            if query_id not in self.catalog:
                raise SessionStateError(f"Unknown query id {query_id!r} in dataset {self.dataset}")
            self.generation += 1
            self.query_id = query_id
            self._clear_results()
            self.error = None
            self.phase = SessionPhase.RESULTS_LOADING
            return LoadTicket(
                generation=self.generation,
                dataset=self.dataset,
                file_name=self.result_file_template.format(dataset=self.dataset),
                query_id=query_id,
            )

    def complete_query(self, ticket: LoadTicket, text: str) -> bool:
        """Apply a fetched judgment file. Returns False if the ticket was superseded."""
        if ticket.query_id is None:
            raise SessionStateError(f"Not a query load ticket: {ticket}")
        try:
            records = parse_judgments(
                text, ticket.query_id, strict=self.strict, source=ticket.file_name
            )
        except JudgeviewError as e:
            if self.fail(ticket, e):
                raise
            return False

        with self._lock:
            if not self._is_current(ticket):
                return False
            self.all_results = tuple(records)
            self._recompute()
            self.phase = SessionPhase.RESULTS_LOADED
        logger.info(
            "Query %s (%s): %d judgments",
            ticket.query_id,
            prefixed_query_id(ticket.query_id),
            len(records),
        )
        return True

    def select_query(self, query_id: str | None) -> FilterOutcome:
        """
        Load the judgments of query_id and filter them with the active criteria.
        An empty/None id clears the selection instead. Raises LoadError on
        fetch failure; the catalog is kept.
        """
        if not query_id:
            self.clear_query()
            return self.outcome

        ticket = self.begin_query(query_id)
        try:
            text = self.fetcher.fetch_text(ticket.file_name)
        except FetchFailure as e:
            if self.fail(ticket, e):
                raise
            return self.outcome
        self.complete_query(ticket, text)
        return self.outcome

    def clear_query(self) -> None:
        with self._lock:
            # nothing selected yet; must not cancel a catalog load in flight
            if not self.catalog:
                return
            self.generation += 1
            self.query_id = None
            self._clear_results()
            self.error = None
            self.phase = SessionPhase.QUERIES_LOADED

    # -----------------------------------------------------------------
    # Filtering
    # -----------------------------------------------------------------
    def set_criteria(self, criteria: FilterCriteria | None) -> FilterOutcome:
        """Replace both filter dimensions (None restores the defaults) and recompute."""
        with self._lock:
            self.judgement_filter = criteria.judgements if criteria is not None else None
            self.stratum_filter = criteria.strata if criteria is not None else None
            self._recompute()
            return self.outcome

    def update_filters(
        self,
        *,
        judgements: Iterable[str] | None = None,
        strata: Iterable[str] | None = None,
    ) -> FilterOutcome:
        """
        Set only the given dimension(s); a dimension left as None keeps its
        current choice, or keeps following the defaults if never chosen.
        """
        with self._lock:
            if judgements is not None:
                self.judgement_filter = frozenset(judgements)
            if strata is not None:
                self.stratum_filter = frozenset(strata)
            self._recompute()
            return self.outcome

    # -----------------------------------------------------------------
    # Failure / internals
    # -----------------------------------------------------------------
    def fail(self, ticket: LoadTicket, error: JudgeviewError) -> bool:
        """Record error for ticket's load. Returns False if the ticket was superseded."""
        with self._lock:
            if not self._is_current(ticket):
                return False
            self.error = error
            self.phase = SessionPhase.ERROR
        logger.error("Load of %s failed: %s", ticket.file_name, error)
        return True

    def _is_current(self, ticket: LoadTicket) -> bool:
        if ticket.generation != self.generation:
            logger.warning(
                "Discarding stale load of %s (generation %d, current %d)",
                ticket.file_name,
                ticket.generation,
                self.generation,
            )
            return False
        return True

    def _clear_results(self) -> None:
        self.all_results = ()
        self.filtered_results = ()

    def _recompute(self) -> None:
        self.filtered_results = tuple(apply_filters(self.all_results, self.active_criteria()))
