# SPDX-License-Identifier: MIT
"""Finding data structures and utilities for secscan."""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

# Source marker used in place of a file path for findings from commit diffs.
HISTORY_SOURCE = "(git-history)"


def identity_hash(source: str, rule: str, value: str) -> str:
    """
    Fingerprint a secret occurrence for deduplication.

    Args:
        source: File path, or the commit id for history findings
        rule: Rule name that produced the candidate
        value: Raw matched value

    Returns:
        First 16 hex characters of the SHA-256 digest
    """
    h = hashlib.sha256()
    h.update("\x00".join((source, rule, value)).encode("utf-8", errors="surrogatepass"))
    return h.hexdigest()[:16]


@dataclass(frozen=True)
class Finding:
    """Represents one detected secret candidate."""

    file: str  # file path or HISTORY_SOURCE
    line: int  # 1-based line number (diff line number for history)
    pattern: str  # rule name, or 'high_entropy'
    excerpt: str  # masked excerpt
    raw_value: str = field(repr=False)  # never serialized
    confidence: float
    hash: str
    commit: Optional[str] = None
    verified: bool = False

    @classmethod
    def from_match(
        cls,
        source: str,
        line: int,
        pattern: str,
        excerpt: str,
        raw_value: str,
        confidence: float,
        commit: Optional[str] = None,
    ) -> "Finding":
        """Create a Finding and derive its identity hash.

        History findings are keyed by commit id rather than the shared
        history marker so the same value in two commits stays distinct.
        """
        return cls(
            file=source,
            line=line,
            pattern=pattern,
            excerpt=excerpt,
            raw_value=raw_value,
            confidence=confidence,
            hash=identity_hash(commit or source, pattern, raw_value),
            commit=commit,
        )

    @property
    def is_historical(self) -> bool:
        return self.commit is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert Finding to dictionary format, without the raw value."""
        result = {
            "file": self.file,
            "line": self.line,
            "pattern": self.pattern,
            "excerpt": self.excerpt,
            "confidence": self.confidence,
            "verified": self.verified,
            "hash": self.hash,
        }

        if self.commit:
            result["commit"] = self.commit

        return result


@dataclass
class ScanStats:
    """
    Counters for a single scan run.

    Only the orchestrating thread mutates an instance; workers hand their
    results back to it instead of touching the counters directly.
    """

    files_scanned: int = 0
    commits_scanned: int = 0
    findings_total: int = 0
    findings_unique: int = 0
    start_time: float = field(default_factory=time.monotonic)
    end_time: Optional[float] = None

    def record_file(self, findings_count: int = 0) -> None:
        self.files_scanned += 1
        self.findings_total += findings_count

    def record_commit(self, findings_count: int = 0) -> None:
        self.commits_scanned += 1
        self.findings_total += findings_count

    def finish(self, unique_count: int) -> None:
        self.findings_unique = unique_count
        self.end_time = time.monotonic()

    @property
    def duration_ms(self) -> int:
        end = self.end_time if self.end_time is not None else time.monotonic()
        return int((end - self.start_time) * 1000)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "commits_scanned": self.commits_scanned,
            "findings_total": self.findings_total,
            "findings_unique": self.findings_unique,
            "scan_duration_ms": self.duration_ms,
        }
