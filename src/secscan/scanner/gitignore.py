# SPDX-License-Identifier: MIT
"""
.gitignore discovery and matching.

Patterns from every .gitignore in the tree are evaluated in discovery
order and the last matching pattern decides, negations included. There
is no "most specific pattern wins" rule.
"""
from __future__ import annotations

import functools
import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pathspec

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"
VCS_DIRS = {".git", ".hg", ".svn"}


@dataclass(frozen=True)
class GitignorePattern:
    """One parsed .gitignore line anchored at the directory that holds it."""

    pattern: str
    negation: bool
    directory: bool
    base_dir: str


def parse_gitignore_line(line: str, base_dir: str) -> Optional[GitignorePattern]:
    """Parse a single line; blanks and ``#`` comments yield None."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    negation = line.startswith("!")
    if negation:
        line = line[1:]

    directory = line.endswith("/")
    if directory:
        line = line[:-1]

    return GitignorePattern(pattern=line, negation=negation, directory=directory, base_dir=base_dir)


def load_gitignore(path: str) -> List[GitignorePattern]:
    """Load patterns from one .gitignore file.

    Raises:
        OSError: If the file cannot be read
    """
    base_dir = os.path.dirname(path) or "."
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        patterns = [parse_gitignore_line(line, base_dir) for line in f]
    return [p for p in patterns if p is not None]


def collect_gitignore_patterns(root: str) -> List[GitignorePattern]:
    """
    Find every .gitignore under ``root`` and load its patterns.

    Directories are visited depth-first in name order; version-control
    metadata directories are never entered. Unreadable files are skipped.
    """
    patterns: List[GitignorePattern] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in VCS_DIRS)
        if GITIGNORE_NAME not in filenames:
            continue
        path = os.path.join(dirpath, GITIGNORE_NAME)
        try:
            patterns.extend(load_gitignore(path))
        except OSError as e:
            logger.debug("cannot read %s: %s", path, e)
    return patterns


@functools.lru_cache(maxsize=1024)
def _wildmatch_spec(pattern: str) -> Optional[pathspec.PathSpec]:
    """Compile one gitignore glob; ``*`` and ``?`` never cross a ``/``."""
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, [pattern])
    except (ValueError, re.error) as e:
        logger.debug("unusable gitignore pattern %r: %s", pattern, e)
        return None


def match_glob(pattern: str, name: str) -> bool:
    """
    Glob match used for ignore patterns.

    A single ``**`` splits the pattern into a required prefix and suffix.
    Otherwise git wildmatch rules apply: a leading or inner ``/`` anchors
    the glob to ``name``, a glob without one matches any segment.
    """
    parts = pattern.split("**")
    if len(parts) == 2:
        prefix = parts[0].lstrip("/")
        prefix = prefix[:-1] if prefix.endswith("/") else prefix
        suffix = parts[1][1:] if parts[1].startswith("/") else parts[1]
        if prefix and not name.startswith(prefix):
            return False
        if suffix and not name.endswith(suffix):
            return False
        return True

    spec = _wildmatch_spec(pattern)
    return spec is not None and spec.match_file(name)


def _relative_to_base(path: str, base_dir: str) -> Optional[str]:
    """Path relative to ``base_dir`` using ``/``, or None if outside it."""
    try:
        rel = os.path.relpath(os.path.abspath(path), os.path.abspath(base_dir))
    except ValueError:
        # different drives on Windows
        return None
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return rel.replace(os.sep, "/")


def _match_relative(rel: str, pattern: str) -> bool:
    if "/" not in pattern and any(match_glob(pattern, part) for part in rel.split("/")):
        return True
    return match_glob(pattern, rel)


def _ancestors(rel: str) -> Iterable[str]:
    parts = rel.split("/")
    for k in range(1, len(parts)):
        yield "/".join(parts[:k])


def match_gitignore_pattern(path: str, pattern: GitignorePattern, is_dir: bool = False) -> bool:
    """
    Test one pattern against ``path``.

    A directory-only pattern never matches a file by the file's own name,
    but it does match a file that sits below a matching directory.
    """
    rel = _relative_to_base(path, pattern.base_dir)
    if rel is None:
        return False
    # Ancestor match keeps "build/" followed by "!build/keep.txt" ignoring every
    # other file under build/ while keep.txt is re-included.
    if pattern.directory and not is_dir:
        return any(_match_relative(a, pattern.pattern) for a in _ancestors(rel))
    return _match_relative(rel, pattern.pattern)


def is_gitignored(path: str, patterns: Sequence[GitignorePattern], is_dir: bool) -> bool:
    """Evaluate all patterns in load order; the last match wins."""
    ignored = False
    for pattern in patterns:
        if match_gitignore_pattern(path, pattern, is_dir):
            ignored = not pattern.negation
    return ignored
