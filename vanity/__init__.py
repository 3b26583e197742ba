"""
Solana Vanity Keypair Search

This package contains the vanity search engine organized by functionality:
- suffix: Base58 suffix validation
- keygen: Ed25519 keypair generation and Base58 encoding
- worker: Per-worker brute-force search loop
- coordinator: Parallel first-match-wins search and result assembly
- fallback: Random keypair fallback when no vanity key can be produced
- config_utils: Search configuration and config.ini loading
"""

from .suffix import BASE58_ALPHABET, InvalidSuffixError, NormalizedSuffix, is_base58, validate_suffix
from .keygen import (
    KeyPair,
    encode_public_key,
    generate_keypair,
    keypair_from_secret,
    keypair_from_seed,
    verify_keypair
)
from .worker import MatchKind, WorkerResult, match_address, run_worker
from .fallback import FallbackReason, fallback
from .config_utils import SearchConfig, load_config, search_config_from_parser
from .coordinator import SearchCoordinator, SearchOutcome, generate_vanity_keypair, split_budget

__all__ = [
    # Suffix validation
    'BASE58_ALPHABET',
    'InvalidSuffixError',
    'NormalizedSuffix',
    'is_base58',
    'validate_suffix',

    # Key generation
    'KeyPair',
    'encode_public_key',
    'generate_keypair',
    'keypair_from_secret',
    'keypair_from_seed',
    'verify_keypair',

    # Workers
    'MatchKind',
    'WorkerResult',
    'match_address',
    'run_worker',

    # Fallback
    'FallbackReason',
    'fallback',

    # Configuration
    'SearchConfig',
    'load_config',
    'search_config_from_parser',

    # Coordinator
    'SearchCoordinator',
    'SearchOutcome',
    'generate_vanity_keypair',
    'split_budget'
]
