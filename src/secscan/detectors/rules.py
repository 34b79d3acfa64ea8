# SPDX-License-Identifier: MIT
"""
Regex rule definitions and loading.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from secscan.core.exceptions import SecscanConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.9
GENERIC_CONFIDENCE = 0.7


@dataclass(frozen=True)
class Rule:
    """A named regex detector with a static confidence score."""

    name: str
    pattern: re.Pattern
    confidence: float = DEFAULT_CONFIDENCE
    enabled: bool = True

    def search(self, line: str) -> Optional[re.Match]:
        return self.pattern.search(line)


# Ordered: rules are applied to each line in this order.
DEFAULT_RULES: Dict[str, str] = {
    "aws_access_key": r"AKIA[0-9A-Z]{16}",
    "aws_secret_key": r"(?i:aws(.{0,20})?)['\"][0-9a-zA-Z/+]{40}['\"]",
    "rsa_private": r"-----BEGIN(?: RSA)? PRIVATE KEY-----",
    "stripe_sk": r"sk_live_[0-9a-zA-Z]{24,}",
    "stripe_restricted": r"rk_live_[0-9a-zA-Z]{24,}",
    "supabase_jwt": r"eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+",
    "github_pat": r"ghp_[0-9a-zA-Z]{36}",
    "github_oauth": r"gho_[0-9a-zA-Z]{36}",
    "github_app": r"(ghu|ghs)_[0-9a-zA-Z]{36}",
    "slack_token": r"xox[baprs]-([0-9a-zA-Z]{10,48})",
    "slack_webhook": r"https://hooks\.slack\.com/services/T[a-zA-Z0-9_]+/B[a-zA-Z0-9_]+/[a-zA-Z0-9_]+",
    "google_api": r"AIza[0-9A-Za-z_\-]{35}",
    "heroku_api": r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}",
    "mailgun_api": r"key-[0-9a-zA-Z]{32}",
    "paypal_braintree": r"access_token\$production\$[0-9a-z]{16}\$[0-9a-f]{32}",
    "picatic_api": r"sk_live_[0-9a-z]{32}",
    "sendgrid_api": r"SG\.[0-9A-Za-z\-_]{22}\.[0-9A-Za-z\-_]{43}",
    "twilio_api": r"SK[0-9a-fA-F]{32}",
    "generic_api_key": r"(?i)(?:key|api[_-]?key|apikey)[\s]*[=:>][\s]*['\"]([a-zA-Z0-9_\-]{20,})['\"]",
    "generic_secret": r"(?i)(?:secret|password|passwd|pwd)[\s]*[=:>][\s]*['\"]([a-zA-Z0-9_\-!@#$%^&*]{8,})['\"]",
    "db_connection": r"(?i)(postgres|mysql|mongodb|redis)://[^\s'\":@]+:[^\s'\"@]+@[^\s'\"]+",
}


def confidence_for(name: str) -> float:
    """Vendor-specific rules score higher than generic ones."""
    if name.startswith("generic_"):
        return GENERIC_CONFIDENCE
    return DEFAULT_CONFIDENCE


def compile_rules(
    rules: Mapping[str, str], disabled: Iterable[str] = ()
) -> Tuple[Rule, ...]:
    """
    Compile a name -> regex mapping into Rule objects.

    Args:
        rules: Rule definitions, applied in mapping order
        disabled: Rule names to construct with ``enabled=False``

    Returns:
        Tuple of compiled rules

    Raises:
        SecscanConfigError: If any pattern fails to compile
    """
    disabled = set(disabled)
    compiled = []
    for name, expr in rules.items():
        try:
            pattern = re.compile(expr)
        except re.error as e:
            raise SecscanConfigError(f"failed to compile rule {name}: {e}", section="rules")
        compiled.append(
            Rule(
                name=name,
                pattern=pattern,
                confidence=confidence_for(name),
                enabled=name not in disabled,
            )
        )
    return tuple(compiled)


def parse_rules_text(text: str) -> Dict[str, str]:
    """
    Parse ``key = "regex"`` lines.

    Blank lines and ``#`` comments are ignored, lines without ``=`` are
    skipped. Surrounding spaces and double quotes are stripped from values.
    """
    rules: Dict[str, str] = {}
    for raw in text.split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        rules[key.strip()] = value.strip().strip(' "')
    return rules


def load_rules_file(path: Optional[str]) -> Dict[str, str]:
    """
    Load rule definitions from ``path``, falling back to the defaults.

    A missing or unreadable file is not fatal: a warning is logged and
    :data:`DEFAULT_RULES` is returned.
    """
    if not path:
        return dict(DEFAULT_RULES)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("failed to load rules file %s: %s; using default rules", path, e)
        return dict(DEFAULT_RULES)
    return parse_rules_text(text)
