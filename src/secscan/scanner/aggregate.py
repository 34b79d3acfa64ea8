# SPDX-License-Identifier: MIT
"""
Deduplication and final ordering of findings.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from secscan.core.findings import Finding, ScanStats


def deduplicate(findings: Iterable[Finding]) -> List[Finding]:
    """Keep the first finding per identity hash, preserving first-seen order."""
    seen = set()
    unique: List[Finding] = []
    for f in findings:
        if f.hash in seen:
            continue
        seen.add(f.hash)
        unique.append(f)
    return unique


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Presentation order: source identifier, then line number."""
    return sorted(findings, key=lambda f: (f.file, f.line))


@dataclass
class ScanResult:
    """What a scan hands back to reporting."""

    findings: List[Finding]
    stats: ScanStats
    cancelled: bool = False
    history_error: Optional[str] = None

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)


def aggregate(
    live: Iterable[Finding],
    history: Iterable[Finding],
    stats: ScanStats,
) -> List[Finding]:
    """
    Merge both finding streams, deduplicate and sort.

    Stamps the unique count and end time on ``stats``.
    """
    unique = deduplicate(list(live) + list(history))
    stats.finish(len(unique))
    return sort_findings(unique)
