# SPDX-License-Identifier: MIT
"""Report rendering for scan results."""

from secscan.report.json_report import ScanReport, build_report, write_json_report

__all__ = ["ScanReport", "build_report", "write_json_report"]
