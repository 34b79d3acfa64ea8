# SPDX-License-Identifier: MIT
"""secscan custom exceptions."""

from __future__ import annotations

from typing import Optional


class SecscanError(Exception):
    """Base class for errors raised by secscan."""


class SecscanConfigError(SecscanError):
    """
    Settings, rules or allow patterns could not be loaded.

    Always fatal: the CLI reports it and exits with status 2.
    """

    def __init__(self, message: str, config_path: Optional[str] = None, section: Optional[str] = None):
        self.config_path = config_path
        self.section = section
        super().__init__(message)

    def __str__(self):
        parts = [super().__str__()]
        if self.config_path:
            parts.append(f"(config: {self.config_path})")
        if self.section:
            parts.append(f"(section: {self.section})")
        return " ".join(parts)


class HistoryUnavailableError(SecscanError):
    """Commits of ``repo`` cannot be enumerated; live results still stand."""

    def __init__(self, message: str, repo: Optional[str] = None):
        self.repo = repo
        super().__init__(message)
