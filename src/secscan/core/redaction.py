# SPDX-License-Identifier: MIT
"""
Central masking utilities for secscan.

Every excerpt that leaves the scanner goes through :func:`mask_secret`,
so raw values never reach reports or logs.
"""

from __future__ import annotations

# Characters of context kept on each side of a match in an excerpt.
EXCERPT_CONTEXT = 20


def mask_secret(secret: str) -> str:
    """
    Mask a secret showing the first 4 and last 4 characters.

    Strings of 8 characters or fewer are fully masked.

    Args:
        secret: The string to mask

    Returns:
        Masked string of the same length as the input
    """
    if len(secret) <= 8:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 8) + secret[-4:]


def excerpt_around(line: str, start: int, end: int, context: int = EXCERPT_CONTEXT) -> str:
    """
    Return the match plus up to ``context`` characters on each side, stripped.

    Invalid spans fall back to the whole stripped line.
    """
    if start < 0 or end > len(line) or start >= end:
        return line.strip()
    lo = max(0, start - context)
    hi = min(len(line), end + context)
    return line[lo:hi].strip()


def masked_excerpt(line: str, start: int, end: int) -> str:
    """Excerpt around a match, masked for output."""
    return mask_secret(excerpt_around(line, start, end))
