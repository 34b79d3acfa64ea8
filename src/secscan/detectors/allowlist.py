# SPDX-License-Identifier: MIT
"""
Allow-list of known-benign value shapes.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

from secscan.core.exceptions import SecscanConfigError

DEFAULT_ALLOW_PATTERNS: List[str] = [
    r"^[A-Z_]+$",  # all caps constants
    r"^[a-z_]+$",  # all lowercase
    r"(?i)^(true|false|null|undefined)$",
    r"^[\d.]+$",  # pure numbers
    r"^https?://",  # URLs without credentials
    r"^[A-Za-z]+\.[A-Za-z]+",  # class/module names
    r"(?i)^(test|example|sample|demo|placeholder|your[_-].*|my[_-].*)",
    r"^[*]+$",  # already masked
]


def compile_allow_patterns(patterns: Iterable[str]) -> Tuple[re.Pattern, ...]:
    """
    Compile allow patterns.

    Raises:
        SecscanConfigError: If any pattern fails to compile
    """
    out = []
    for p in patterns:
        try:
            out.append(re.compile(p))
        except re.error as e:
            raise SecscanConfigError(
                f"failed to compile allow pattern {p}: {e}", section="allow_patterns"
            )
    return tuple(out)


def is_allowed(value: str, allow_patterns: Sequence[re.Pattern]) -> bool:
    """True when any allow pattern matches somewhere in ``value``."""
    return any(p.search(value) for p in allow_patterns)
