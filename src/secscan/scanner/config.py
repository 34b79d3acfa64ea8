# SPDX-License-Identifier: MIT
"""
Scanner configuration for secscan.

Two sources feed a run:

* an optional YAML settings file (``.secscan.yml``) for scan options, and
* an optional rules file of ``name = "regex"`` lines.

Both are resolved once into an immutable :class:`ScanConfig` that is passed
to every component.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ValidationError

from secscan.core.exceptions import SecscanConfigError
from secscan.detectors.allowlist import DEFAULT_ALLOW_PATTERNS, compile_allow_patterns
from secscan.detectors.rules import Rule, compile_rules, load_rules_file
from secscan.scanner.gitignore import GitignorePattern, collect_gitignore_patterns

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAMES = (".secscan.yml", ".secscan.yaml")

DEFAULT_ENTROPY_THRESHOLD = 5.0
DEFAULT_WORKERS = 4
DEFAULT_COMMIT_TIMEOUT = 30.0


class ScanSettings(BaseModel):
    """Options read from a YAML settings file. Unknown keys are ignored."""

    entropy_threshold: float = DEFAULT_ENTROPY_THRESHOLD
    respect_gitignore: bool = True
    history: bool = True
    workers: int = DEFAULT_WORKERS
    commit_timeout: float = DEFAULT_COMMIT_TIMEOUT
    rules_file: Optional[str] = None
    disabled_rules: List[str] = []
    allow_patterns: List[str] = []


@dataclass(frozen=True)
class ScanConfig:
    """Immutable per-run configuration shared by all components."""

    rules: Tuple[Rule, ...]
    allow_patterns: Tuple[re.Pattern, ...]
    entropy_threshold: float = DEFAULT_ENTROPY_THRESHOLD
    respect_gitignore: bool = True
    gitignore_patterns: Tuple[GitignorePattern, ...] = field(default=())
    workers: int = DEFAULT_WORKERS
    commit_timeout: float = DEFAULT_COMMIT_TIMEOUT
    verbose: bool = False

    @property
    def entropy_enabled(self) -> bool:
        return self.entropy_threshold > 0


def load_scan_settings(config_path: Optional[str] = None, repo_root: str = ".") -> ScanSettings:
    """
    Load scan settings following the search order.

    1. ``config_path`` if given (must exist)
    2. ``.secscan.yml`` / ``.secscan.yaml`` at ``repo_root``
    3. built-in defaults

    Raises:
        SecscanConfigError: If a settings file is missing, malformed or invalid
    """
    if config_path:
        path = Path(config_path).resolve()
        if not path.exists():
            raise SecscanConfigError(
                f"Specified config file not found: {path}", config_path=str(path)
            )
        return _load_yaml_settings(path)

    repo_path = Path(repo_root).resolve()
    for name in SETTINGS_FILE_NAMES:
        candidate = repo_path / name
        if candidate.is_file():
            return _load_yaml_settings(candidate)

    logger.debug("using default scan settings")
    return ScanSettings()


def _load_yaml_settings(path: Path) -> ScanSettings:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SecscanConfigError(f"Failed to parse config file: {e}", config_path=str(path))

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SecscanConfigError("Config must be a mapping", config_path=str(path))

    try:
        settings = ScanSettings(**data)
    except ValidationError as e:
        raise SecscanConfigError(f"Invalid config values: {e}", config_path=str(path))

    logger.info("loaded config: %s", path)
    return settings


def build_scan_config(
    root: str,
    settings: Optional[ScanSettings] = None,
    overrides: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> ScanConfig:
    """
    Resolve settings into a :class:`ScanConfig`.

    Args:
        root: Scan root, searched for .gitignore files when enabled
        settings: Loaded settings; defaults when None
        overrides: Values that take precedence over ``settings``
            (CLI flags); ``None`` values are ignored
        verbose: Carried through for reporting

    Raises:
        SecscanConfigError: If a rule or allow pattern fails to compile
    """
    settings = settings or ScanSettings()
    if overrides:
        updates = {k: v for k, v in overrides.items() if v is not None}
        settings = settings.model_copy(update=updates)

    rules = compile_rules(load_rules_file(settings.rules_file), disabled=settings.disabled_rules)
    allow = compile_allow_patterns(list(DEFAULT_ALLOW_PATTERNS) + list(settings.allow_patterns))

    gitignore_patterns: Tuple[GitignorePattern, ...] = ()
    if settings.respect_gitignore:
        gitignore_patterns = tuple(collect_gitignore_patterns(root))
        if gitignore_patterns:
            logger.info("loaded %d .gitignore patterns", len(gitignore_patterns))

    return ScanConfig(
        rules=rules,
        allow_patterns=allow,
        entropy_threshold=settings.entropy_threshold,
        respect_gitignore=settings.respect_gitignore,
        gitignore_patterns=gitignore_patterns,
        workers=max(1, settings.workers),
        commit_timeout=settings.commit_timeout,
        verbose=verbose,
    )


def default_scan_config(entropy_threshold: float = DEFAULT_ENTROPY_THRESHOLD) -> ScanConfig:
    """Built-in rules and allow patterns, gitignore off. Handy for tests and embedding."""
    return ScanConfig(
        rules=compile_rules(load_rules_file(None)),
        allow_patterns=compile_allow_patterns(DEFAULT_ALLOW_PATTERNS),
        entropy_threshold=entropy_threshold,
        respect_gitignore=False,
    )
