# SPDX-License-Identifier: MIT
"""Public API for secscan.

    from secscan.scanner import build_scan_config, run_scan

    config = build_scan_config(".")
    result = run_scan(".", config, history=False)
"""

from secscan.scanner.aggregate import ScanResult, deduplicate, sort_findings
from secscan.scanner.config import ScanConfig, ScanSettings, build_scan_config, default_scan_config, load_scan_settings
from secscan.scanner.engine import run_scan

__all__ = [
    "ScanConfig",
    "ScanResult",
    "ScanSettings",
    "build_scan_config",
    "deduplicate",
    "default_scan_config",
    "load_scan_settings",
    "run_scan",
    "sort_findings",
]
