"""
Match probability estimates for vanity suffixes.
"""

import math

from .suffix import BASE58_ALPHABET

ALPHABET_SIZE = len(BASE58_ALPHABET)


def _case_variants(char: str) -> int:
    """Number of Base58 characters that lowercase to the same character."""
    lower = char.lower()
    return sum(1 for candidate in BASE58_ALPHABET if candidate.lower() == lower)


def calculate_suffix_probability(suffix: str, case_insensitive: bool = False) -> float:
    """Calculate the chance that a single random address matches the suffix."""
    if not suffix:
        return 1.0

    if not case_insensitive:
        # Each Base58 position is (close to) uniform over 58 characters
        return 1.0 / (ALPHABET_SIZE ** len(suffix))

    probability = 1.0
    for char in suffix:
        probability *= _case_variants(char) / ALPHABET_SIZE
    return probability


def expected_attempts(probability: float, confidence: float = 0.5) -> int:
    """Attempts needed to find a match with the given confidence (ln(2) / p for 50%)."""
    if probability <= 0:
        return 0
    if probability >= 1:
        return 1
    return int(math.ceil(-math.log(1 - confidence) / probability))


def format_probability(probability: float) -> str:
    """Format probability in a human-readable way."""
    if probability >= 0.1:
        return f"{probability:.1%} (1 in {int(1/probability):,})"
    elif probability >= 0.01:
        return f"{probability:.2%} (1 in {int(1/probability):,})"
    elif probability >= 0.001:
        return f"{probability:.3%} (1 in {int(1/probability):,})"
    else:
        # For very small probabilities, show scientific notation
        return f"{probability:.2e} (1 in {int(1/probability):,})"
