"""
Suffix validation for vanity searches.

Solana addresses are Base58 text, so a suffix is only searchable when every
character belongs to the Base58 alphabet.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Bitcoin/Solana Base58 alphabet (no 0, O, I, l)
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_SET = frozenset(BASE58_ALPHABET)


class InvalidSuffixError(ValueError):
    """Raised when a requested suffix contains characters outside Base58."""

    def __init__(self, suffix: str, invalid_chars: str):
        self.suffix = suffix
        self.invalid_chars = invalid_chars
        super().__init__(
            f"Invalid vanity suffix {suffix!r}: characters {invalid_chars!r} are not valid Base58 "
            f"(allowed: {BASE58_ALPHABET})"
        )


@dataclass(frozen=True)
class NormalizedSuffix:
    """A validated suffix plus its case-insensitive variant."""
    value: str
    lower: str
    case_insensitive: bool

    def __len__(self) -> int:
        return len(self.value)


def is_base58(text: str) -> bool:
    """Check if every character of text is in the Base58 alphabet."""
    return all(char in _BASE58_SET for char in text)


def validate_suffix(suffix: Optional[str]) -> Optional[NormalizedSuffix]:
    """
    Validate a requested vanity suffix.

    Args:
        suffix: Requested suffix; empty or None means no constraint

    Returns:
        NormalizedSuffix, or None when no suffix was requested

    Raises:
        InvalidSuffixError: If any character is outside the Base58 alphabet
    """
    if not suffix:
        return None

    # Keep order and drop duplicates so the error message stays readable
    invalid_chars = "".join(dict.fromkeys(char for char in suffix if char not in _BASE58_SET))
    if invalid_chars:
        raise InvalidSuffixError(suffix, invalid_chars)

    lower = suffix.lower()
    return NormalizedSuffix(value=suffix, lower=lower, case_insensitive=lower != suffix)
