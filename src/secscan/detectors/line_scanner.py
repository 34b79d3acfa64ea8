# SPDX-License-Identifier: MIT
"""
Per-line detection: regex rules, entropy tokens, allow-list suppression.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from secscan.core.findings import Finding
from secscan.core.redaction import mask_secret, masked_excerpt
from secscan.detectors.allowlist import is_allowed
from secscan.detectors.entropy import HIGH_ENTROPY_RULE, extract_tokens, is_high_entropy
from secscan.detectors.rules import Rule

if TYPE_CHECKING:
    from secscan.scanner.config import ScanConfig

LIVE_ENTROPY_CONFIDENCE = 0.6

COMMENT_PREFIXES = ("//", "#", "/*", "*")


def is_comment(stripped: str) -> bool:
    return stripped.startswith(COMMENT_PREFIXES)


def scan_line(
    line: str,
    line_no: int,
    source: str,
    rules: Sequence[Rule],
    allow_patterns: Sequence[re.Pattern],
    entropy_threshold: float,
    rule_confidence: Optional[float] = None,
    entropy_confidence: float = LIVE_ENTROPY_CONFIDENCE,
    commit: Optional[str] = None,
) -> List[Finding]:
    """
    Run every enabled rule and the entropy check over one line.

    Args:
        line: Raw line text
        line_no: 1-based line number to report
        source: File path or history marker
        rules: Rules to apply, each contributes at most one finding
        allow_patterns: Suppression patterns applied to raw values
        entropy_threshold: Entropy detection is off when <= 0
        rule_confidence: Overrides each rule's own confidence when set
        entropy_confidence: Confidence for high-entropy findings
        commit: Commit id for history findings

    Returns:
        Findings in rule order, then entropy tokens in line order
    """
    findings: List[Finding] = []

    for rule in rules:
        if not rule.enabled:
            continue
        m = rule.search(line)
        if m is None:
            continue
        raw = m.group(0)
        if is_allowed(raw, allow_patterns):
            continue
        findings.append(
            Finding.from_match(
                source=source,
                line=line_no,
                pattern=rule.name,
                excerpt=masked_excerpt(line, m.start(), m.end()),
                raw_value=raw,
                confidence=rule.confidence if rule_confidence is None else rule_confidence,
                commit=commit,
            )
        )

    if entropy_threshold > 0:
        for token in extract_tokens(line):
            if is_allowed(token, allow_patterns):
                continue
            if not is_high_entropy(token, entropy_threshold):
                continue
            findings.append(
                Finding.from_match(
                    source=source,
                    line=line_no,
                    pattern=HIGH_ENTROPY_RULE,
                    excerpt=mask_secret(token),
                    raw_value=token,
                    confidence=entropy_confidence,
                    commit=commit,
                )
            )

    return findings


def scan_lines(lines: Iterable[str], source: str, config: "ScanConfig") -> List[Finding]:
    """Scan file content line by line, skipping blanks and comment lines."""
    findings: List[Finding] = []
    for line_no, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or is_comment(stripped):
            continue
        findings.extend(
            scan_line(
                line,
                line_no,
                source,
                config.rules,
                config.allow_patterns,
                config.entropy_threshold,
            )
        )
    return findings


def scan_file(path: str, config: "ScanConfig") -> List[Finding]:
    """
    Scan a single file.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, "r", encoding="utf-8", errors="ignore", newline="\n") as f:
        return scan_lines(f, path, config)
