# SPDX-License-Identifier: MIT
"""Detection primitives: regex rules, entropy heuristics, allow-list."""

from secscan.detectors.allowlist import DEFAULT_ALLOW_PATTERNS, compile_allow_patterns, is_allowed
from secscan.detectors.entropy import HIGH_ENTROPY_RULE, is_high_entropy, shannon_entropy
from secscan.detectors.line_scanner import scan_file, scan_line
from secscan.detectors.rules import DEFAULT_RULES, Rule, compile_rules, load_rules_file

__all__ = [
    "DEFAULT_ALLOW_PATTERNS",
    "DEFAULT_RULES",
    "HIGH_ENTROPY_RULE",
    "Rule",
    "compile_allow_patterns",
    "compile_rules",
    "is_allowed",
    "is_high_entropy",
    "load_rules_file",
    "scan_file",
    "scan_line",
    "shannon_entropy",
]
