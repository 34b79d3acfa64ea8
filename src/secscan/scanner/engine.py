# SPDX-License-Identifier: MIT
"""
Scan orchestration.

The walker runs on the calling thread and feeds a bounded thread pool;
commits are fanned out the same way. Workers only return findings. The
calling thread is the single owner of :class:`ScanStats` and of the merged
finding lists.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, Iterable, List, Optional

from secscan.core.exceptions import HistoryUnavailableError
from secscan.core.findings import Finding, ScanStats
from secscan.detectors.line_scanner import scan_file
from secscan.scanner.aggregate import ScanResult, aggregate
from secscan.scanner.config import ScanConfig
from secscan.scanner.history import list_commits, scan_commit
from secscan.scanner.walker import iter_files

logger = logging.getLogger(__name__)


def _run_bounded(
    fn: Callable[[Any], Optional[List[Finding]]],
    items: Iterable[Any],
    workers: int,
    cancel_event: threading.Event,
    on_result: Callable[[Any, Optional[List[Finding]]], None],
) -> None:
    """
    Apply ``fn`` to ``items`` with at most ``2 * workers`` tasks in flight.

    ``on_result`` is always called on this thread. Once ``cancel_event`` is
    set no new work is submitted and queued tasks are cancelled.
    """
    limit = max(1, workers) * 2
    futures: Dict[Future, Any] = {}

    def collect(done) -> None:
        for fut in done:
            item = futures.pop(fut)
            if not fut.cancelled():
                on_result(item, fut.result())

    with ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="secscan") as pool:
        for item in items:
            if cancel_event.is_set():
                break
            futures[pool.submit(fn, item)] = item
            if len(futures) >= limit:
                done, _ = wait(list(futures), return_when=FIRST_COMPLETED)
                collect(done)

        if cancel_event.is_set():
            for fut in futures:
                fut.cancel()
        done, _ = wait(list(futures))
        collect(done)


def scan_tree(
    root: str,
    config: ScanConfig,
    stats: ScanStats,
    cancel_event: threading.Event,
) -> List[Finding]:
    """Scan every eligible file under ``root``."""
    findings: List[Finding] = []

    def work(path: str) -> Optional[List[Finding]]:
        if cancel_event.is_set():
            return None
        try:
            return scan_file(path, config)
        except OSError as e:
            logger.debug("cannot read %s: %s", path, e)
            return None

    def done(path: str, result: Optional[List[Finding]]) -> None:
        if result is None:
            return
        stats.record_file(len(result))
        findings.extend(result)

    _run_bounded(work, iter_files(root, config), config.workers, cancel_event, done)
    logger.info("scanned %d files", stats.files_scanned)
    return findings


def scan_git_history(
    root: str,
    config: ScanConfig,
    stats: ScanStats,
    cancel_event: threading.Event,
) -> List[Finding]:
    """
    Scan every commit's diff.

    Raises:
        HistoryUnavailableError: If commits cannot be enumerated
    """
    commits = list_commits(root, timeout=config.commit_timeout)
    logger.info("scanning %d commits", len(commits))
    findings: List[Finding] = []

    def work(commit: str) -> Optional[List[Finding]]:
        if cancel_event.is_set():
            return None
        return scan_commit(root, commit, config)

    def done(commit: str, result: Optional[List[Finding]]) -> None:
        if result is None:
            return
        stats.record_commit(len(result))
        findings.extend(result)

    _run_bounded(work, commits, config.workers, cancel_event, done)
    return findings


def run_scan(
    root: str,
    config: ScanConfig,
    history: bool = True,
    cancel_event: Optional[threading.Event] = None,
) -> ScanResult:
    """
    Run a full scan: working tree, then optionally git history.

    A history failure is reported on the result and never discards the
    live-file findings. Cancellation stops submitting work and returns
    whatever was gathered so far.
    """
    cancel_event = cancel_event or threading.Event()
    stats = ScanStats()
    history_error: Optional[str] = None

    live = scan_tree(root, config, stats, cancel_event)

    past: List[Finding] = []
    if history and not cancel_event.is_set():
        try:
            past = scan_git_history(root, config, stats, cancel_event)
        except HistoryUnavailableError as e:
            history_error = str(e)
            logger.warning("git history scan failed: %s", e)

    cancelled = cancel_event.is_set()
    if cancelled:
        logger.warning("scan cancelled; reporting partial results")

    findings = aggregate(live, past, stats)
    return ScanResult(
        findings=findings,
        stats=stats,
        cancelled=cancelled,
        history_error=history_error,
    )
