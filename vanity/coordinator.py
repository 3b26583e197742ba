"""
Search coordinator: runs vanity workers in parallel and assembles the result.

The coordinator validates the suffix, splits the attempt budget across a pool
of worker processes, lets the first worker that finds a match win, and falls
back to a random keypair whenever the vanity constraint cannot be met. It
never raises for vanity-related failures; callers always get a keypair.
"""

import logging
import math
import queue
import threading
import time
from concurrent.futures import FIRST_COMPLETED, CancelledError, ProcessPoolExecutor, wait
from dataclasses import dataclass, replace
from multiprocessing import Manager
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config_utils import SearchConfig
from .fallback import FallbackReason, fallback
from .keygen import KeyPair, generate_keypair
from .probability import calculate_suffix_probability, expected_attempts, format_probability
from .progress import PerformanceTracker, ProgressBar
from .suffix import InvalidSuffixError, NormalizedSuffix, validate_suffix
from .system_utils import get_worker_count
from .worker import MatchKind, WorkerResult, run_worker

logger = logging.getLogger(__name__)

PROGRESS_LOG_INTERVAL = 1.0  # seconds between progress log lines / bar refreshes


@dataclass
class SearchOutcome:
    """Result of a vanity search. keypair is always usable."""
    keypair: KeyPair
    matched: bool = False
    attempts: int = 0
    elapsed_ms: int = 0
    match_kind: Optional[MatchKind] = None
    fallback_reason: Optional[FallbackReason] = None
    reason: Optional[str] = None
    workers: int = 0

    @property
    def rate(self) -> float:
        """Keys per second, for diagnostics only."""
        if self.elapsed_ms <= 0:
            return 0.0
        return self.attempts / (self.elapsed_ms / 1000)

    def diagnostics(self) -> Dict[str, Any]:
        return {
            'matched': self.matched,
            'attempts': self.attempts,
            'elapsed_ms': self.elapsed_ms,
            'match_kind': self.match_kind.value if self.match_kind else None,
        }


def split_budget(total_budget: int, num_workers: int) -> List[int]:
    """Give every worker ceil(total / workers) attempts."""
    if num_workers < 1:
        raise ValueError("num_workers must be at least 1")
    per_worker = math.ceil(total_budget / num_workers)
    return [per_worker] * num_workers


class _ProgressSink:
    """Queue-like adapter so the in-process worker can report progress directly."""

    def __init__(self, coordinator: 'SearchCoordinator'):
        self.coordinator = coordinator

    def put(self, update: Tuple[int, int]):
        worker_id, attempts = update
        self.coordinator._record_progress(worker_id, attempts)


class SearchCoordinator:
    """Coordinates a first-match-wins vanity search across worker processes."""

    def __init__(self, config: Optional[SearchConfig] = None,
                 generator: Callable[[], KeyPair] = generate_keypair,
                 executor_class=ProcessPoolExecutor):
        self.config = config or SearchConfig()
        self.generator = generator
        self.executor_class = executor_class
        self.start_time = None
        self.worker_progress: Dict[int, int] = {}
        self._tracker = None
        self._progress_bar = None
        self._last_progress_log = 0.0

    def search(self, suffix: Optional[str] = None, total_budget: Optional[int] = None,
               max_workers: Optional[int] = None) -> SearchOutcome:
        """
        Search for a keypair whose address ends with suffix.

        Args:
            suffix: Target suffix (defaults to config.suffix); empty means no constraint
            total_budget: Total attempts across all workers (defaults to config.total_budget)
            max_workers: Optional cap on worker processes (defaults to config.max_workers)

        Returns:
            SearchOutcome holding the vanity keypair or a fallback keypair
        """
        suffix = self.config.suffix if suffix is None else suffix
        total_budget = self.config.total_budget if total_budget is None else max(0, total_budget)
        max_workers = self.config.max_workers if max_workers is None else max_workers

        self.start_time = time.time()
        self.worker_progress = {}

        if not suffix:
            return self._fallback_outcome(FallbackReason.NO_SUFFIX)

        try:
            target = validate_suffix(suffix)
        except InvalidSuffixError as e:
            logger.warning(str(e))
            return self._fallback_outcome(FallbackReason.INVALID_SUFFIX, detail=str(e))

        if not self.config.allow_case_insensitive:
            target = replace(target, case_insensitive=False)

        num_workers = get_worker_count(max_workers)

        # Short suffixes and disabled parallelism get the lower single-worker ceiling
        if not self.config.enable_parallel or len(target) < self.config.min_parallel_length:
            budget = min(total_budget, self.config.single_thread_budget)
            self._log_search_info(target, budget, 1)
            return self._search_single(target, budget)

        # Only one CPU available: same search, no pool
        if num_workers == 1:
            self._log_search_info(target, total_budget, 1)
            return self._search_single(target, total_budget)

        self._log_search_info(target, total_budget, num_workers)
        return self._search_parallel(target, total_budget, num_workers)

    def _log_search_info(self, target: NormalizedSuffix, budget: int, num_workers: int):
        probability = calculate_suffix_probability(target.value, target.case_insensitive)
        mode = "case-insensitive allowed" if target.case_insensitive else "exact only"
        logger.info(f"Searching for address suffix '{target.value}' ({mode}) with {num_workers} "
                    f"worker{'s' if num_workers != 1 else ''}, budget {budget:,} attempts")
        logger.info(f"Probability per key: {format_probability(probability)}")

        self._tracker = PerformanceTracker(expected_attempts(probability))
        self._last_progress_log = time.time()
        self._progress_bar = None
        if self.config.show_progress:
            self._progress_bar = ProgressBar(total_attempts=budget)

    def _record_progress(self, worker_id: int, attempts: int):
        """Store a progress update and refresh the display at most once per interval."""
        self.worker_progress[worker_id] = max(attempts, self.worker_progress.get(worker_id, 0))

        now = time.time()
        if now - self._last_progress_log < PROGRESS_LOG_INTERVAL:
            return
        self._last_progress_log = now

        total_attempts = sum(self.worker_progress.values())
        if self._tracker is not None:
            self._tracker.log_progress(total_attempts, len(self.worker_progress))
            if self._progress_bar is not None:
                self._progress_bar.update(total_attempts, self._tracker.rate(total_attempts))

    def _close_progress(self):
        if self._progress_bar is not None:
            self._progress_bar.close()
            self._progress_bar = None

    def _run_single_worker(self, target: NormalizedSuffix, budget: int) -> WorkerResult:
        return run_worker(
            0, target.value, target.lower, target.case_insensitive, budget,
            progress_queue=_ProgressSink(self),
            batch_size=self.config.batch_size,
            progress_interval=self.config.progress_interval,
            max_time=self.config.max_time,
            generator=self.generator,
        )

    def _search_single(self, target: NormalizedSuffix, budget: int, prior_attempts: int = 0) -> SearchOutcome:
        """Run one worker in this process."""
        try:
            result = self._run_single_worker(target, budget)
        except Exception as e:
            logger.error(f"Single-worker vanity search failed: {e}")
            return self._fallback_outcome(FallbackReason.WORKER_FAILURE, detail=str(e),
                                          attempts=prior_attempts + self._progress_total(), workers=1)
        finally:
            self._close_progress()

        return self._finish(result, prior_attempts + result.attempts, 1)

    def _search_parallel(self, target: NormalizedSuffix, total_budget: int, num_workers: int) -> SearchOutcome:
        """Race num_workers workers; fall back to a single worker if the pool fails."""
        try:
            winner, attempts, failure, timed_out = self._run_pool(target, total_budget, num_workers)
        except Exception as e:
            # Pool could not be started or torn down cleanly
            winner, attempts, failure, timed_out = None, self._progress_total(), e, False
        finally:
            self._close_progress()

        if failure is not None:
            retry_budget = min(total_budget, self.config.single_thread_budget)
            logger.error(f"Vanity worker failed ({failure}), retrying with a single worker "
                         f"and {retry_budget:,} attempts")
            self.worker_progress = {}
            return self._search_single(target, retry_budget, prior_attempts=attempts)

        if winner is not None:
            return self._finish(winner, attempts, num_workers)

        return self._finish(WorkerResult(worker_id=-1, attempts=attempts, timed_out=timed_out),
                            attempts, num_workers)

    def _run_pool(self, target: NormalizedSuffix, total_budget: int,
                  num_workers: int) -> Tuple[Optional[WorkerResult], int, Optional[BaseException], bool]:
        budgets = split_budget(total_budget, num_workers)
        logger.debug(f"Per-worker budget: {budgets[0]:,} attempts")

        winner = None
        failure = None
        timed_out = False
        final_attempts: Dict[int, int] = {}

        with Manager() as manager:
            stop_event = manager.Event()
            progress_queue = manager.Queue()
            stop_monitor = threading.Event()

            def progress_monitor():
                """Drain progress updates from workers until told to stop."""
                while not stop_monitor.is_set():
                    try:
                        worker_id, attempts = progress_queue.get(timeout=0.25)
                    except queue.Empty:
                        continue
                    except (EOFError, OSError):
                        break
                    self._record_progress(worker_id, attempts)

            monitor_thread = threading.Thread(target=progress_monitor, daemon=True)
            monitor_thread.start()

            try:
                with self.executor_class(max_workers=num_workers) as executor:
                    pending = set()
                    for worker_id, budget in enumerate(budgets):
                        pending.add(executor.submit(
                            run_worker, worker_id, target.value, target.lower, target.case_insensitive,
                            budget, stop_event, progress_queue, self.config.batch_size,
                            self.config.progress_interval, self.config.max_time, self.generator,
                        ))

                    while pending:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)

                        for future in done:
                            try:
                                result = future.result()
                            except CancelledError:
                                continue
                            except Exception as e:
                                if winner is None and failure is None:
                                    failure = e
                                    stop_event.set()
                                    for f in pending:
                                        f.cancel()
                                else:
                                    logger.debug(f"Ignoring worker error after search ended: {e}")
                                continue

                            final_attempts[result.worker_id] = result.attempts
                            timed_out = timed_out or result.timed_out

                            if not result.found:
                                continue

                            if winner is None and failure is None:
                                winner = result
                                # Signal all other workers to stop
                                stop_event.set()
                                for f in pending:
                                    f.cancel()
                            else:
                                logger.debug(f"Worker {result.worker_id} also matched after "
                                             f"{result.attempts:,} attempts, discarding")
            finally:
                stop_monitor.set()
                monitor_thread.join()

        # Workers that never returned are counted from their last progress update
        attempts_by_worker = dict(self.worker_progress)
        attempts_by_worker.update(final_attempts)
        return winner, sum(attempts_by_worker.values()), failure, timed_out

    def _progress_total(self) -> int:
        return sum(self.worker_progress.values())

    def _elapsed_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)

    def _finish(self, result: WorkerResult, attempts: int, num_workers: int) -> SearchOutcome:
        elapsed_ms = self._elapsed_ms()

        if result.found:
            outcome = SearchOutcome(
                keypair=result.keypair,
                matched=True,
                attempts=attempts,
                elapsed_ms=elapsed_ms,
                match_kind=result.match_kind,
                workers=num_workers,
            )
            logger.info(f"Found vanity address {result.keypair.address} ({result.match_kind.value} match) "
                        f"after {attempts:,} attempts in {elapsed_ms / 1000:.1f}s "
                        f"({outcome.rate:,.0f} keys/sec)")
            return outcome

        detail = f"{attempts:,} attempts in {elapsed_ms / 1000:.1f}s"
        if result.timed_out:
            detail = f"time limit reached after {detail}"
        return self._fallback_outcome(FallbackReason.BUDGET_EXHAUSTED, detail=detail,
                                      attempts=attempts, workers=num_workers)

    def _fallback_outcome(self, reason: FallbackReason, detail: Optional[str] = None,
                          attempts: int = 0, workers: int = 0) -> SearchOutcome:
        return SearchOutcome(
            keypair=fallback(reason, detail),
            matched=False,
            attempts=attempts,
            elapsed_ms=self._elapsed_ms(),
            fallback_reason=reason,
            reason=detail,
            workers=workers,
        )


def generate_vanity_keypair(suffix: str, total_budget: Optional[int] = None,
                            enable_parallel: bool = True, **overrides) -> SearchOutcome:
    """Search for a vanity keypair with default settings plus any overrides."""
    # Budget and worker cap go to search(), which clamps them
    max_workers = overrides.pop('max_workers', None)
    config = SearchConfig(suffix=suffix, enable_parallel=enable_parallel)
    try:
        config = config.with_overrides(**overrides)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring invalid search settings {overrides}: {e}")

    return SearchCoordinator(config).search(total_budget=total_budget, max_workers=max_workers)
