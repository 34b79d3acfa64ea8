# SPDX-License-Identifier: MIT
"""
Shannon entropy heuristics for secrets that no rule names.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from typing import List

HIGH_ENTROPY_RULE = "high_entropy"
MIN_TOKEN_LENGTH = 20
MIN_CHAR_CLASSES = 3

_TOKEN_RE = re.compile(r"\S{%d,}" % MIN_TOKEN_LENGTH)


def shannon_entropy(s: str) -> float:
    """Bits per code point over the string's own frequency distribution."""
    if not s:
        return 0.0
    length = len(s)
    return -sum(
        (count / length) * math.log2(count / length) for count in Counter(s).values()
    )


def char_class_count(s: str) -> int:
    """Count of {lowercase, uppercase, digit, symbol} present (ASCII classes)."""
    lower = upper = digit = symbol = False
    for ch in s:
        if "a" <= ch <= "z":
            lower = True
        elif "A" <= ch <= "Z":
            upper = True
        elif "0" <= ch <= "9":
            digit = True
        else:
            symbol = True
    return sum((lower, upper, digit, symbol))


def is_high_entropy(s: str, threshold: float) -> bool:
    """
    Classify a token as a likely secret.

    Requires at least 20 code points, 3 of 4 character classes and an
    entropy strictly above ``threshold``.
    """
    if len(s) < MIN_TOKEN_LENGTH:
        return False
    if char_class_count(s) < MIN_CHAR_CLASSES:
        return False
    return shannon_entropy(s) > threshold


def extract_tokens(line: str) -> List[str]:
    """All maximal whitespace-free runs of at least 20 characters."""
    return _TOKEN_RE.findall(line)
