"""
Fallback to an unconstrained random keypair when a vanity search cannot finish.
"""

import logging
from enum import Enum
from typing import Optional

from .keygen import KeyPair, generate_keypair

logger = logging.getLogger(__name__)


class FallbackReason(Enum):
    """Why a search ended with a random (non-vanity) key."""
    NO_SUFFIX = "no_suffix"
    INVALID_SUFFIX = "invalid_suffix"
    BUDGET_EXHAUSTED = "budget_exhausted"
    WORKER_FAILURE = "worker_failure"


_MESSAGES = {
    FallbackReason.NO_SUFFIX: "No vanity suffix requested, using a random keypair",
    FallbackReason.INVALID_SUFFIX: "Vanity suffix is invalid, using a random keypair",
    FallbackReason.BUDGET_EXHAUSTED: "No vanity match within the attempt budget, using a random keypair",
    FallbackReason.WORKER_FAILURE: "Vanity search failed, using a random keypair",
}


def fallback(reason: FallbackReason, detail: Optional[str] = None) -> KeyPair:
    """Return a random keypair, logging why the vanity constraint was dropped."""
    message = _MESSAGES[reason]
    if detail:
        message = f"{message} ({detail})"

    if reason == FallbackReason.NO_SUFFIX:
        logger.debug(message)
    else:
        logger.warning(message)

    return generate_keypair()
