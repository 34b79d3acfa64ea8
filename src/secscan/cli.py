# SPDX-License-Identifier: MIT
"""
secscan - Command Line Interface

    secscan --root .                      # scan working tree + git history
    secscan --root . --no-history         # scan only current files
    secscan --root . --json report.json   # also write a JSON report
    secscan --root . --rules rules.toml   # custom name = "regex" rules
    secscan --root . --entropy 5.5        # adjust entropy threshold

Exit codes: 0 no findings, 1 findings, 2 configuration error.
"""

import argparse
import logging
import signal
import sys
import threading

from . import __version__
from .core.exceptions import SecscanConfigError
from .report.json_report import write_json_report
from .scanner.config import build_scan_config, load_scan_settings
from .scanner.engine import run_scan

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2

MAX_FINDINGS_SHOWN = 100


def build_parser():
    p = argparse.ArgumentParser(prog="secscan", description="Scan source trees and git history for secrets")
    p.add_argument("--root", default=".", help="project root to scan")
    p.add_argument(
        "--history",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="scan git history (default: on)",
    )
    p.add_argument("--json", dest="json_out", help="path to write JSON report")
    p.add_argument("--quiet", action="store_true", help="suppress human output")
    p.add_argument("--verbose", action="store_true", help="show all findings and debug logs")
    p.add_argument("--config", help="path to YAML settings file (default: <root>/.secscan.yml)")
    p.add_argument("--rules", dest="rules_file", help='path to rules file of name = "regex" lines')
    p.add_argument("--entropy", type=float, default=None, help="entropy threshold (default 5.0)")
    p.add_argument("--no-entropy", action="store_true", help="disable entropy-based detection")
    p.add_argument(
        "--respect-gitignore",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="honour .gitignore files (default: on)",
    )
    p.add_argument("--workers", type=int, default=None, help="parallel file/commit workers")
    p.add_argument("--commit-timeout", type=float, default=None, help="seconds allowed per git diff")
    p.add_argument("-v", "--version", action="store_true", help="print version and exit")
    return p


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="[secscan] %(levelname)s: %(message)s", stream=sys.stderr)


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"secscan {__version__}")
        return EXIT_CLEAN

    configure_logging(args.verbose, args.quiet)

    overrides = {
        "history": args.history,
        "rules_file": args.rules_file,
        "entropy_threshold": 0.0 if args.no_entropy else args.entropy,
        "respect_gitignore": args.respect_gitignore,
        "workers": args.workers,
        "commit_timeout": args.commit_timeout,
    }

    try:
        settings = load_scan_settings(args.config, repo_root=args.root)
        config = build_scan_config(args.root, settings, overrides, verbose=args.verbose)
    except SecscanConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    history = settings.history if args.history is None else args.history

    if not args.quiet:
        print(f"secscan v{__version__}")
        print(f"Scanning: {args.root}")
        print(f"Entropy threshold: {config.entropy_threshold:.1f}")
        print(f"Rules loaded: {len(config.rules)}")
        if config.respect_gitignore:
            print(f"Gitignore: enabled ({len(config.gitignore_patterns)} patterns loaded)")
        else:
            print("Gitignore: disabled")
        if history:
            print("Git history: enabled")
        print()

    cancel_event = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: cancel_event.set())
    try:
        result = run_scan(args.root, config, history=history, cancel_event=cancel_event)
    finally:
        signal.signal(signal.SIGINT, previous)

    if args.json_out:
        write_json_report(result, args.json_out)
        if not args.quiet:
            print(f"JSON report written to: {args.json_out}\n")

    if not args.quiet:
        print_findings(result.findings, args.verbose)
        print_stats(result, history)

    return EXIT_FINDINGS if result.has_findings else EXIT_CLEAN


def severity_label(confidence):
    if confidence >= 0.9:
        return "CRITICAL"
    if confidence >= 0.8:
        return "HIGH"
    if confidence >= 0.6:
        return "MEDIUM"
    return "LOW"


def print_findings(findings, verbose=False):
    """Print findings grouped by confidence bucket."""
    if not findings:
        print("No secrets found")
        return

    counts = {"CRITICAL": 0, "HIGH": 0, "MEDIUM": 0, "LOW": 0}
    for f in findings:
        counts[severity_label(f.confidence)] += 1

    print("\nSecret Scan Results")
    print("=" * 51)
    print(f"Total findings: {len(findings)}")
    print(f"  Critical (>=0.9): {counts['CRITICAL']}")
    print(f"  High (>=0.8):     {counts['HIGH']}")
    print(f"  Medium (>=0.6):   {counts['MEDIUM']}")
    print(f"  Low (<0.6):       {counts['LOW']}")
    print("=" * 51)

    shown = findings
    if not verbose and len(findings) > MAX_FINDINGS_SHOWN:
        print(f"\nShowing first {MAX_FINDINGS_SHOWN} findings (use --verbose to see all)\n")
        shown = findings[:MAX_FINDINGS_SHOWN]

    for f in shown:
        location = f"{f.file}:{f.line}"
        if f.is_historical:
            location += f" (commit {f.commit[:8]})"
        print(f"[{severity_label(f.confidence)}] [{f.pattern.upper()}] {location}")
        print(f"  -> {f.excerpt} (confidence: {f.confidence:.2f})\n")


def print_stats(result, history=True):
    stats = result.stats
    print("\nScan Statistics")
    print("=" * 51)
    print(f"Files scanned:    {stats.files_scanned}")
    if history:
        print(f"Commits scanned:  {stats.commits_scanned}")
        if result.history_error:
            print(f"History skipped:  {result.history_error}")
    print(f"Total findings:   {stats.findings_total}")
    print(f"Unique findings:  {stats.findings_unique}")
    print(f"Scan duration:    {stats.duration_ms}ms")
    if result.cancelled:
        print("Scan cancelled: statistics are partial")
    print("=" * 51)


if __name__ == "__main__":
    raise SystemExit(main())
