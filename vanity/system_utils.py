"""
System information helpers: worker counts and resource status.
"""

import logging
import multiprocessing as mp
import os
from typing import Any, Dict, Optional

import psutil

logger = logging.getLogger(__name__)

# Upper bound on search workers regardless of host size
MAX_WORKERS = 8


def get_available_parallelism() -> int:
    """Number of CPUs this process may run on."""
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return max(1, mp.cpu_count())


def get_worker_count(max_workers: Optional[int] = None) -> int:
    """Worker processes to use: available CPUs, capped at MAX_WORKERS and max_workers."""
    count = min(get_available_parallelism(), MAX_WORKERS)
    if max_workers is not None:
        count = min(count, max_workers)
    return max(1, count)


def get_system_resources() -> Dict[str, Any]:
    """Get current system resource usage."""
    try:
        memory = psutil.virtual_memory()
        return {
            'cpu_percent': psutil.cpu_percent(interval=0.1),
            'cpu_logical': psutil.cpu_count(logical=True),
            'cpu_physical': psutil.cpu_count(logical=False),
            'memory_percent': memory.percent,
            'memory_available': memory.available,
            'memory_total': memory.total,
        }
    except Exception as e:
        logger.warning(f"Could not get system resources: {e}")
        return {}


def log_system_status():
    """Log current system status."""
    resources = get_system_resources()
    if not resources:
        return
    logger.info(f"CPU: {resources.get('cpu_percent', 0):.1f}% used, "
                f"{resources.get('cpu_logical')} logical / {resources.get('cpu_physical')} physical cores")
    logger.info(f"Memory: {resources.get('memory_percent', 0):.1f}% used "
                f"({resources.get('memory_available', 0) / 1024 / 1024 / 1024:.1f}GB available)")
