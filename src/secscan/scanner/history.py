# SPDX-License-Identifier: MIT
"""
Git history scanning.

Each commit reachable from any ref is diffed against its parents with zero
context, and the added/removed lines go through the same rules and
allow-list as live files. Diff failures and timeouts skip a commit; only a
missing git binary or a failed ``rev-list`` aborts the history phase.
"""
from __future__ import annotations

import logging
import shutil
import subprocess
from typing import TYPE_CHECKING, List, Optional

from secscan.core.exceptions import HistoryUnavailableError
from secscan.core.findings import HISTORY_SOURCE, Finding
from secscan.detectors.line_scanner import scan_line

if TYPE_CHECKING:
    from secscan.scanner.config import ScanConfig

logger = logging.getLogger(__name__)

HISTORY_RULE_CONFIDENCE = 0.85
HISTORY_ENTROPY_CONFIDENCE = 0.55
# Diff output carries +/- prefixes and hunk noise, so entropy is stricter.
HISTORY_ENTROPY_BOOST = 0.5

GIT = "git"


def git_available() -> bool:
    return shutil.which(GIT) is not None


def list_commits(repo: str, timeout: Optional[float] = None) -> List[str]:
    """
    Every commit reachable from all refs.

    Raises:
        HistoryUnavailableError: If git is missing or rev-list fails
    """
    if not git_available():
        raise HistoryUnavailableError("git not available in PATH", repo=repo)
    try:
        proc = subprocess.run(
            [GIT, "rev-list", "--all"],
            cwd=repo,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise HistoryUnavailableError(f"git rev-list failed: {e}", repo=repo)
    if proc.returncode != 0:
        raise HistoryUnavailableError(
            f"git rev-list failed ({proc.returncode}): {proc.stderr.strip()}", repo=repo
        )
    return proc.stdout.split()


def commit_diff(repo: str, commit: str, timeout: Optional[float] = None) -> Optional[str]:
    """Unified diff of ``commit`` with zero context, or None if it cannot be produced."""
    try:
        proc = subprocess.run(
            [GIT, "show", "--pretty=", "--unified=0", commit],
            cwd=repo,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("git show %s timed out after %ss", commit, timeout)
        return None
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git show %s failed: %s", commit, e)
        return None
    if proc.returncode != 0:
        logger.debug("git show %s exited with %d", commit, proc.returncode)
        return None
    return proc.stdout.decode("utf-8", errors="ignore")


def scan_diff(diff: str, commit: str, config: "ScanConfig") -> List[Finding]:
    """Scan the added and removed lines of one commit's diff."""
    threshold = config.entropy_threshold
    if threshold > 0:
        threshold += HISTORY_ENTROPY_BOOST

    findings: List[Finding] = []
    # "\n" only: form feeds and unicode separators stay inside the line.
    for line_no, line in enumerate(diff.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.startswith(("+", "-")):
            continue
        findings.extend(
            scan_line(
                line,
                line_no,
                HISTORY_SOURCE,
                config.rules,
                config.allow_patterns,
                threshold,
                rule_confidence=HISTORY_RULE_CONFIDENCE,
                entropy_confidence=HISTORY_ENTROPY_CONFIDENCE,
                commit=commit,
            )
        )
    return findings


def scan_commit(repo: str, commit: str, config: "ScanConfig") -> Optional[List[Finding]]:
    """
    Diff and scan a single commit.

    Returns:
        Findings for the commit, or None when the diff could not be retrieved
    """
    diff = commit_diff(repo, commit, timeout=config.commit_timeout)
    if diff is None:
        return None
    return scan_diff(diff, commit, config)
