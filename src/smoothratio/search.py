# src/smoothratio/search.py
"""
Streaming search controller.

One run walks the candidate sequence in fixed-size batches. Every candidate
is factorized and evaluated to completion; between batches the controller
emits a ProgressEvent and yields to the event loop, which is also the only
place a cancellation request is honoured.

    controller = SearchController(mode="spikes")
    async for event in controller.start(10**9, "medium"):
        ...                      # render progress, maybe controller.cancel()
    outcome = controller.outcome

Lifecycle: IDLE -> RUNNING -> COMPLETED | CANCELLED. start() only prepares the
run; it turns RUNNING when the stream is first iterated. Only the task
driving the stream writes to SearchState.
"""

from __future__ import annotations

import asyncio
import heapq
import logging
import math
import statistics
from collections.abc import AsyncIterator, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice

from smoothratio.candidates import CandidateBounds, CandidateGenerator
from smoothratio.ratio import compute_record
from smoothratio.records import ResultRecord, Summary, thin
from smoothratio.utility import (
    DegenerateCandidate,
    InvalidSearchInput,
    NonFiniteResult,
    validate_max_n,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500
DEFAULT_TOP_K = 50
MODES = ("spikes", "top")


class SearchStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProgressEvent:
    processed: int
    total_estimate: int
    percent: int                 # 0..99 while running, 100 once completed
    current_n: int | None


@dataclass
class SearchState:
    status: SearchStatus = SearchStatus.IDLE
    processed_count: int = 0
    total_estimate: int = 0
    running_max: float = -math.inf
    spike_history: list[ResultRecord] = field(default_factory=list)
    top_k: list[tuple[float, int, ResultRecord]] = field(default_factory=list)  # min-heap
    results: list[ResultRecord] = field(default_factory=list)
    skipped: int = 0
    current_n: int | None = None
    cancelled: bool = False

    def percent(self) -> int:
        if self.status is SearchStatus.COMPLETED:
            return 100
        denom = max(self.total_estimate, self.processed_count, 1)
        return min(99, 100 * self.processed_count // denom)

    def event(self) -> ProgressEvent:
        return ProgressEvent(
            processed=self.processed_count,
            total_estimate=self.total_estimate,
            percent=self.percent(),
            current_n=self.current_n,
        )


@dataclass
class SearchOutcome:
    status: SearchStatus
    results: list[ResultRecord]          # ascending n
    spikes_or_top: list[ResultRecord]    # discovery order (spikes) or best-first (top)
    summary: Summary
    mode: str
    state: SearchState

    @property
    def cancelled(self) -> bool:
        return self.status is SearchStatus.CANCELLED

    def ranked(self) -> list[ResultRecord]:
        """Results by descending log ratio (ties broken by ascending n)."""
        return sorted(self.results, key=lambda r: (-r.log_ratio, r.n))

    def thinned(self, limit: int = 5000) -> list[ResultRecord]:
        return thin(self.results, limit)

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "mode": self.mode,
            "results": [r.as_dict() for r in self.results],
            "spikes_or_top": [r.as_dict() for r in self.spikes_or_top],
            "summary": self.summary.as_dict(),
        }


def summarize(results: list[ResultRecord]) -> Summary:
    if not results:
        return Summary(count=0)
    best = max(results, key=lambda r: (r.log_ratio, -r.n))
    logs = [r.log_ratio for r in results]
    return Summary(
        count=len(results),
        max_log_ratio=best.log_ratio,
        max_ratio=best.ratio,
        max_n=best.n,
        median_log_ratio=statistics.median(logs),
        min_log_ratio=min(logs),
        largest_n_processed=max(r.n for r in results),
    )


def _batched(values: Iterable[int], size: int):
    it = iter(values)
    while batch := list(islice(it, size)):
        yield batch


class SearchController:
    """Drives one search run at a time; see module docstring."""

    def __init__(
        self,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        mode: str = "spikes",
        top_k: int = DEFAULT_TOP_K,
        bounds: CandidateBounds | None = None,
    ):
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise InvalidSearchInput(f"batch size must be a positive integer, got {batch_size!r}.")
        if mode not in MODES:
            raise InvalidSearchInput(f"unknown mode {mode!r}; expected 'spikes' or 'top'.")
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
            raise InvalidSearchInput(f"top-K must be a positive integer, got {top_k!r}.")
        self.batch_size = batch_size
        self.mode = mode
        self.top_k = top_k
        self.bounds = bounds or CandidateBounds()
        self.state = SearchState()
        self.outcome: SearchOutcome | None = None
        self._pending: SearchState | None = None      # prepared by start(), not yet iterated

    @property
    def status(self) -> SearchStatus:
        return self.state.status

    # ---------- control ----------

    def start(self, max_n: int, density: str = "medium") -> AsyncIterator[ProgressEvent]:
        """
        Validate, reset state and return the progress stream for a new run.
        Raises InvalidSearchInput (run not started) on bad configuration.

        The run becomes RUNNING when the stream is first iterated; a stream
        that is never iterated leaves the controller IDLE and is superseded
        by the next start().
        """
        if self.state.status is SearchStatus.RUNNING:
            raise InvalidSearchInput("a search is already running; cancel it first.")
        max_n = validate_max_n(max_n)
        candidates = CandidateGenerator(max_n, density, self.bounds)

        self.state = SearchState()
        self.outcome = None
        self._pending = self.state
        logger.debug("search prepared: max_n=%d density=%s mode=%s", max_n, density, self.mode)
        return self._drive(candidates, self.state)

    def cancel(self) -> None:
        """Request cooperative cancellation; idempotent."""
        st = self.state
        if st.cancelled:
            return
        if st.status is SearchStatus.RUNNING or self._pending is st:
            st.cancelled = True
            logger.debug("cancellation requested at processed=%d", st.processed_count)

    async def run(
        self,
        max_n: int,
        density: str = "medium",
        on_progress: Callable[[ProgressEvent], object] | None = None,
    ) -> SearchOutcome:
        async for event in self.start(max_n, density):
            if on_progress is not None:
                on_progress(event)
        assert self.outcome is not None
        return self.outcome

    # ---------- internals ----------

    async def _drive(self, candidates: CandidateGenerator, st: SearchState) -> AsyncIterator[ProgressEvent]:
        if self._pending is not st:
            return                      # superseded by a later start()
        self._pending = None
        st.status = SearchStatus.RUNNING
        try:
            # Building the sorted candidate set can take a second at 10^15;
            # keep the event loop (and SIGINT) responsive meanwhile.
            st.total_estimate = await asyncio.to_thread(len, candidates)
            for batch in _batched(candidates, self.batch_size):
                if st.cancelled:
                    break
                for n in batch:
                    self._process(n)
                yield st.event()
                await asyncio.sleep(0)
            else:
                # Sequence exhausted: a cancel that arrived after the last batch is moot.
                self._finish(SearchStatus.COMPLETED)
                yield st.event()
                return
            self._finish(SearchStatus.CANCELLED)
        finally:
            # Consumer stopped iterating (aclose / garbage collection).
            if st.status is SearchStatus.RUNNING:
                st.cancelled = True
                self._finish(SearchStatus.CANCELLED)

    def _process(self, n: int) -> None:
        st = self.state
        st.processed_count += 1
        st.current_n = n
        try:
            rec = compute_record(n)
        except DegenerateCandidate:
            st.skipped += 1
            logger.debug("skipping degenerate candidate n=%d", n)
            return
        except NonFiniteResult as e:
            st.skipped += 1
            logger.warning("skipping n=%d: %s", n, e)
            return
        except Exception as e:
            st.skipped += 1
            logger.warning("error evaluating n=%d: %s: %s", n, e.__class__.__name__, e)
            return
        self._accumulate(rec)

    def _accumulate(self, rec: ResultRecord) -> None:
        st = self.state
        st.results.append(rec)
        if rec.log_ratio > st.running_max:
            st.running_max = rec.log_ratio
            if self.mode == "spikes":
                st.spike_history.append(rec)
        if self.mode == "top":
            entry = (rec.log_ratio, -rec.n, rec)
            if len(st.top_k) < self.top_k:
                heapq.heappush(st.top_k, entry)
            elif entry[:2] > st.top_k[0][:2]:
                heapq.heapreplace(st.top_k, entry)

    def _finish(self, status: SearchStatus) -> None:
        st = self.state
        st.status = status
        st.results.sort(key=lambda r: r.n)
        if self.mode == "spikes":
            chosen = list(st.spike_history)
        else:
            chosen = [e[2] for e in sorted(st.top_k, key=lambda e: e[:2], reverse=True)]
        self.outcome = SearchOutcome(
            status=status,
            results=st.results,
            spikes_or_top=chosen,
            summary=summarize(st.results),
            mode=self.mode,
            state=st,
        )
        logger.debug(
            "search %s: processed=%d/%d kept=%d skipped=%d",
            status.value, st.processed_count, st.total_estimate, len(st.results), st.skipped,
        )


def run_search(
    max_n: int,
    density: str = "medium",
    *,
    mode: str = "spikes",
    top_k: int = DEFAULT_TOP_K,
    batch_size: int = DEFAULT_BATCH_SIZE,
    bounds: CandidateBounds | None = None,
    on_progress: Callable[[ProgressEvent], object] | None = None,
) -> SearchOutcome:
    """Blocking convenience wrapper around SearchController.run()."""
    controller = SearchController(batch_size=batch_size, mode=mode, top_k=top_k, bounds=bounds)
    return asyncio.run(controller.run(max_n, density, on_progress))
