"""
Configuration for vanity searches.

SearchConfig is passed explicitly to the coordinator; load_config and
search_config_from_parser read it from a config.ini [vanity] section.
"""

import configparser
import logging
import os
import sys
from dataclasses import dataclass, fields, replace
from typing import Optional

from .worker import DEFAULT_BATCH_SIZE, DEFAULT_PROGRESS_INTERVAL

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_BUDGET = 1000000
DEFAULT_SINGLE_THREAD_BUDGET = 300000
DEFAULT_MIN_PARALLEL_LENGTH = 3


@dataclass
class SearchConfig:
    """Configuration for a vanity key search."""
    suffix: str = ""
    total_budget: int = DEFAULT_TOTAL_BUDGET
    single_thread_budget: int = DEFAULT_SINGLE_THREAD_BUDGET
    enable_parallel: bool = True
    max_workers: Optional[int] = None  # None = all available cores (still capped at 8)
    min_parallel_length: int = DEFAULT_MIN_PARALLEL_LENGTH  # Shorter suffixes use one worker
    allow_case_insensitive: bool = True
    batch_size: int = DEFAULT_BATCH_SIZE
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    max_time: Optional[float] = None  # Wall-clock safety net in seconds
    show_progress: bool = False

    def __post_init__(self):
        if self.total_budget < 0 or self.single_thread_budget < 0:
            raise ValueError("Attempt budgets cannot be negative")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.progress_interval < 1:
            raise ValueError("progress_interval must be at least 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    def with_overrides(self, **overrides) -> 'SearchConfig':
        """Copy of this config with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_file="config.ini"):
    """
    Load configuration from config.ini file

    Args:
        config_file (str): Path to the configuration file

    Returns:
        configparser.ConfigParser: Loaded configuration object

    Raises:
        SystemExit: If configuration cannot be parsed
    """
    config = configparser.ConfigParser()
    if not os.path.exists(config_file):
        logger.info(f"No configuration file at {config_file}, using defaults")
        return config
    try:
        config.read(config_file)
        logger.info("Configuration loaded successfully")
        return config
    except configparser.Error as e:
        logger.error(f"Failed to load configuration: {str(e)}")
        sys.exit(1)


def search_config_from_parser(config: configparser.ConfigParser, section: str = "vanity") -> SearchConfig:
    """Build a SearchConfig from a config.ini section, falling back to defaults."""
    if not config.has_section(section):
        return SearchConfig()

    values = {}
    for item in fields(SearchConfig):
        if not config.has_option(section, item.name):
            continue
        raw = config.get(section, item.name).strip()
        if item.name == "suffix":
            values[item.name] = raw
        elif item.name in ("enable_parallel", "allow_case_insensitive", "show_progress"):
            values[item.name] = config.getboolean(section, item.name)
        elif item.name in ("max_workers", "max_time"):
            # Empty means "no limit"
            if raw:
                values[item.name] = int(raw) if item.name == "max_workers" else float(raw)
        else:
            values[item.name] = config.getint(section, item.name)

    return SearchConfig(**values)
