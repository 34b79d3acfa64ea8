# SPDX-License-Identifier: MIT
"""
JSON report for scan results.

Raw matched values never reach the report: records are built from
:meth:`Finding.to_dict`, which leaves them out.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from secscan import __version__
from secscan.scanner.aggregate import ScanResult


class FindingRecord(BaseModel):
    file: str
    line: int
    commit: Optional[str] = None
    pattern: str
    excerpt: str
    confidence: float
    verified: bool = False
    hash: str


class StatsRecord(BaseModel):
    files_scanned: int
    commits_scanned: int
    findings_total: int
    findings_unique: int
    scan_duration_ms: int


class ScanReport(BaseModel):
    findings: List[FindingRecord]
    stats: StatsRecord
    version: str = __version__


def build_report(result: ScanResult) -> ScanReport:
    return ScanReport(
        findings=[FindingRecord(**f.to_dict()) for f in result.findings],
        stats=StatsRecord(**result.stats.to_dict()),
    )


def write_json_report(result: ScanResult, path: str) -> None:
    """Write the report, omitting ``commit`` on live-file findings."""
    report = build_report(result)
    Path(path).write_text(report.model_dump_json(indent=2, exclude_none=True), encoding="utf-8")
