# SPDX-License-Identifier: MIT
"""
Tree traversal and path filtering.
"""
from __future__ import annotations

import fnmatch
import logging
import os
from typing import TYPE_CHECKING, Callable, Iterator

from secscan.scanner.gitignore import is_gitignored

if TYPE_CHECKING:
    from secscan.scanner.config import ScanConfig

logger = logging.getLogger(__name__)

SKIP_DIRS = [
    "node_modules", ".git", "dist", "build", ".next", "venv", "target",
    "__pycache__", ".venv", "env", ".env", "vendor", "coverage",
    ".pytest_cache", ".mypy_cache", ".tox", "bin", "obj", ".gradle",
    ".idea", ".vscode", ".terraform", "*.egg-info", ".nuxt",
]

SKIP_EXTENSIONS = {
    ".jpg", ".jpeg", ".png", ".gif", ".ico", ".svg", ".webp",
    ".mp4", ".avi", ".mov", ".mp3", ".wav", ".pdf", ".zip",
    ".tar", ".gz", ".bz2", ".7z", ".rar", ".exe", ".dll",
    ".so", ".dylib", ".bin", ".db", ".sqlite", ".lock",
    ".map", ".woff", ".woff2", ".ttf", ".eot",
}

# Suffixes spanning more than one dot, checked against the whole name.
SKIP_COMPOUND_SUFFIXES = (".min.js", ".min.css")

LOCK_FILE_SUFFIXES = (".lock", "-lock.json", "go.sum")

ENV_FILE_EXCEPTIONS = {".env", ".env.example"}

TEXT_EXTENSIONS = {
    ".go", ".js", ".ts", ".tsx", ".jsx", ".java", ".py", ".rb", ".php",
    ".json", ".yaml", ".yml", ".env", ".cfg", ".toml", ".md", ".txt",
    ".sh", ".bash", ".zsh", ".ps1", ".sql", ".xml", ".html", ".css",
    ".c", ".cpp", ".h", ".hpp", ".cs", ".rs", ".kt", ".swift", ".scala",
    ".clj", ".ex", ".exs", ".erl", ".hrl", ".vim", ".lua", ".pl", ".r",
    ".dockerfile", ".tf", ".hcl", ".proto", ".graphql", ".vue", ".svelte",
}


def should_skip_dir(path: str) -> bool:
    """True for dependency caches, build output and VCS metadata."""
    base = os.path.basename(os.path.normpath(path))
    for name in SKIP_DIRS:
        if any(ch in name for ch in "*?["):
            if fnmatch.fnmatchcase(base, name):
                return True
        elif base.startswith(name):
            return True
    return False


def should_skip_file(path: str) -> bool:
    """True for hidden files, binary/media extensions and lock files."""
    base = os.path.basename(path)
    lowered = base.lower()

    if base.startswith(".") and base not in ENV_FILE_EXCEPTIONS:
        return True

    if os.path.splitext(lowered)[1] in SKIP_EXTENSIONS:
        return True
    if lowered.endswith(SKIP_COMPOUND_SUFFIXES):
        return True

    return base.endswith(LOCK_FILE_SUFFIXES)


def looks_like_text_file(path: str) -> bool:
    """Known source/config extensions, env files and extension-less scripts."""
    if should_skip_file(path):
        return False
    base = os.path.basename(path)
    if base in ENV_FILE_EXCEPTIONS:
        return True
    ext = os.path.splitext(base)[1].lower()
    return ext == "" or ext in TEXT_EXTENSIONS


def iter_files(root: str, config: "ScanConfig") -> Iterator[str]:
    """
    Yield scannable files under ``root`` depth-first.

    Ignored or skip-listed directories are pruned. Unreadable entries are
    silently dropped by ``os.walk``; they never abort the walk.
    """
    root_norm = os.path.normpath(root)
    use_gitignore = config.respect_gitignore and bool(config.gitignore_patterns)

    if use_gitignore and is_gitignored(root_norm, config.gitignore_patterns, True):
        logger.debug("skipping gitignored directory: %s", root_norm)
        return

    for dirpath, dirnames, filenames in os.walk(root_norm):
        kept = []
        for d in sorted(dirnames):
            full = os.path.join(dirpath, d)
            if use_gitignore and is_gitignored(full, config.gitignore_patterns, True):
                logger.debug("skipping gitignored directory: %s", full)
                continue
            if should_skip_dir(full):
                continue
            kept.append(d)
        dirnames[:] = kept

        for name in sorted(filenames):
            full = os.path.join(dirpath, name)
            if use_gitignore and is_gitignored(full, config.gitignore_patterns, False):
                logger.debug("skipping gitignored file: %s", full)
                continue
            if not looks_like_text_file(full):
                continue
            yield full


def walk_files(root: str, config: "ScanConfig", action: Callable[[str], None]) -> None:
    """Hand each scannable file to ``action`` one at a time."""
    for path in iter_files(root, config):
        action(path)
