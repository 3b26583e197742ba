"""
Search worker: brute-force key generation against a target suffix.

run_worker is executed inside a ProcessPoolExecutor for parallel searches and
called directly for the single-worker path. It shares nothing with other
workers except the stop event and the progress queue.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .keygen import KeyPair, generate_keypair

DEFAULT_BATCH_SIZE = 100
DEFAULT_PROGRESS_INTERVAL = 5000


class MatchKind(Enum):
    """How a found address satisfied the suffix."""
    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"


@dataclass
class WorkerResult:
    """Result from a single worker run."""
    worker_id: int
    attempts: int
    keypair: Optional[KeyPair] = None
    match_kind: Optional[MatchKind] = None
    cancelled: bool = False
    timed_out: bool = False

    @property
    def found(self) -> bool:
        return self.keypair is not None


def match_address(address: str, suffix: str, suffix_lower: str, case_insensitive: bool) -> Optional[MatchKind]:
    """Check an address against the suffix; an exact match always wins."""
    if address.endswith(suffix):
        return MatchKind.EXACT
    if case_insensitive and address.lower().endswith(suffix_lower):
        return MatchKind.CASE_INSENSITIVE
    return None


def run_worker(worker_id: int,
               suffix: str,
               suffix_lower: str,
               case_insensitive: bool,
               attempt_budget: int,
               stop_event=None,
               progress_queue=None,
               batch_size: int = DEFAULT_BATCH_SIZE,
               progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
               max_time: Optional[float] = None,
               generator: Callable[[], KeyPair] = generate_keypair) -> WorkerResult:
    """
    Generate keys until one ends with the suffix or the budget is spent.

    Args:
        worker_id: Identifier reported back with results and progress
        suffix: Target suffix, already validated
        suffix_lower: Lowercased suffix for case-insensitive matching
        case_insensitive: Whether a case-insensitive match is acceptable
        attempt_budget: Maximum number of keys this worker may generate
        stop_event: Event set by the coordinator once any worker has won
        progress_queue: Queue receiving (worker_id, attempts) updates
        batch_size: Keys generated between stop-event checks
        progress_interval: Attempts between progress updates
        max_time: Optional wall-clock limit in seconds
        generator: Key factory, replaceable for testing

    Returns:
        WorkerResult with the matching keypair, or just the attempt count
    """
    start_time = time.time()
    attempts = 0
    next_progress = progress_interval

    while attempts < attempt_budget:
        # Another worker found a key
        if stop_event is not None and stop_event.is_set():
            return WorkerResult(worker_id=worker_id, attempts=attempts, cancelled=True)

        if max_time is not None and time.time() - start_time > max_time:
            return WorkerResult(worker_id=worker_id, attempts=attempts, timed_out=True)

        # Never let a batch overrun the budget
        for _ in range(min(batch_size, attempt_budget - attempts)):
            keypair = generator()
            attempts += 1

            match_kind = match_address(keypair.address, suffix, suffix_lower, case_insensitive)
            if match_kind is not None:
                return WorkerResult(worker_id=worker_id, attempts=attempts,
                                    keypair=keypair, match_kind=match_kind)

        if progress_queue is not None and attempts >= next_progress:
            progress_queue.put((worker_id, attempts))
            next_progress = (attempts // progress_interval + 1) * progress_interval

    return WorkerResult(worker_id=worker_id, attempts=attempts)
