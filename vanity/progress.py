"""
Progress display for running searches.

ProgressBar wraps tqdm for interactive use; PerformanceTracker computes the
rate and ETA strings used in log lines. Both are advisory only.
"""

import logging
import time
from typing import Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


def format_count(count: int) -> str:
    """Format a key count with M/k suffixes."""
    if count >= 1000000:
        return f"{count/1000000:.2f}M"
    elif count >= 1000:
        return f"{count/1000:.0f}k"
    return f"{count:,}"


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.0f}s"
    elif seconds < 3600:
        return f"{seconds/60:.1f}m"
    return f"{seconds/3600:.1f}h"


class ProgressBar:
    """Progress bar using tqdm, bounded by the attempt budget."""

    def __init__(self, total_attempts: int, enabled: bool = True):
        self.start_time = time.time()
        self.tqdm_bar = None
        if enabled:
            self.tqdm_bar = tqdm(
                total=total_attempts,
                unit='keys',
                unit_scale=True,
                desc='Searching keys',
                bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]'
            )

    def update(self, attempts: int, rate: Optional[float] = None):
        """Update the progress bar to an absolute attempt count."""
        if self.tqdm_bar is None:
            return
        self.tqdm_bar.n = min(attempts, self.tqdm_bar.total or attempts)
        if rate:
            self.tqdm_bar.set_postfix({'rate': f'{rate:,.0f}/s'})
        self.tqdm_bar.refresh()

    def write(self, message: str):
        """Write a message without interfering with the progress bar."""
        if self.tqdm_bar is not None:
            self.tqdm_bar.write(message)

    def close(self):
        if self.tqdm_bar is not None:
            self.tqdm_bar.close()
            self.tqdm_bar = None


class PerformanceTracker:
    """Tracks throughput and estimates time to a likely match."""

    def __init__(self, expected_attempts: Optional[int] = None):
        self.start_time = time.time()
        self.expected_attempts = expected_attempts

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def rate(self, attempts: int) -> float:
        elapsed = self.elapsed()
        return attempts / elapsed if elapsed > 0 else 0.0

    def estimate_eta(self, attempts: int) -> str:
        """Estimate time remaining until the expected number of attempts."""
        rate = self.rate(attempts)
        if attempts == 0 or rate == 0:
            return "Calculating..."
        if not self.expected_attempts:
            return "Unknown"

        remaining_attempts = max(0, self.expected_attempts - attempts)
        return format_duration(remaining_attempts / rate)

    def log_progress(self, attempts: int, workers: int):
        logger.debug(f"{format_count(attempts)} attempts across {workers} workers | "
                     f"{self.rate(attempts):,.0f} keys/sec | {self.elapsed():.1f}s | "
                     f"ETA: {self.estimate_eta(attempts)}")
