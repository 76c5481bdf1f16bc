# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hard-coded secret and cleartext traffic detection."""

from __future__ import annotations

import re
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer

_SECRET_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"api[_-]?key.*=.*['\"][a-zA-Z0-9]{20,}['\"]",
        r"api[_-]?secret.*=.*['\"][a-zA-Z0-9]{20,}['\"]",
        r"access[_-]?token.*=.*['\"][a-zA-Z0-9]{20,}['\"]",
        r"auth[_-]?token.*=.*['\"][a-zA-Z0-9]{20,}['\"]",
        r"bearer.*['\"][a-zA-Z0-9]{20,}['\"]",
        r"AKIA[0-9A-Z]{16}",
        r"AIza[0-9A-Za-z\-_]{35}",
        r"gh[opsu]_[a-zA-Z0-9]{36}",
        r"password.*=.*['\"][^'\"]{8,}['\"]",
        r"secret.*=.*['\"][^'\"]{8,}['\"]",
        r"-----BEGIN (?:RSA|OPENSSH|DSA|EC|PGP) PRIVATE KEY",
        r"(?:postgres|mysql|mongodb|redis)://[^:]+:[^@]+@",
        r"xox[baprs]-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24,}",
        r"eyJ[A-Za-z0-9-_=]+\.[A-Za-z0-9-_=]+\.[A-Za-z0-9-_.+/=]*",
    )
)
_CLEARTEXT_URL: Final[re.Pattern[str]] = re.compile(r"[\"']http://(?!localhost|127\.0\.0\.1|10\.0\.2\.2)[^\"']+[\"']")


def match_secret(line: str) -> re.Pattern[str] | None:
    """Return the first secret pattern matching ``line``."""

    for pattern in _SECRET_PATTERNS:
        if pattern.search(line):
            return pattern
    return None


class SecurityAnalyzer(BaseAnalyzer):
    """Report credentials embedded in source and cleartext endpoints."""

    analyzer_id = "security"
    analyzer_name = "Security Analyzer"
    analyzer_category = Category.SECURITY

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        findings: list[Finding] = []
        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if stripped.startswith(("//", "*", "import ")):
                continue
            if match_secret(stripped) is not None:
                findings.append(
                    self.finding(
                        file,
                        number,
                        rule="hardcoded-secret",
                        title="Hard-coded Secret",
                        description="A credential or private key appears to be embedded in source code.",
                        priority=Priority.CRITICAL,
                        code_snippet=_redact(stripped),
                        recommendation=(
                            "Move the value to local.properties or a secrets manager and read it "
                            "through BuildConfig at build time."
                        ),
                        before_example='const val API_KEY = "sk_live_..."',
                        after_example="val apiKey = BuildConfig.API_KEY",
                        effort=Effort.SMALL,
                    )
                )
            if _CLEARTEXT_URL.search(stripped):
                findings.append(
                    self.finding(
                        file,
                        number,
                        rule="cleartext-url",
                        title="Cleartext HTTP URL",
                        description="An http:// endpoint sends traffic without transport encryption.",
                        priority=Priority.HIGH,
                        code_snippet=stripped,
                        recommendation="Use https:// and keep cleartext traffic disabled in the network security config.",
                        auto_fixable=True,
                        effort=Effort.TRIVIAL,
                        references=("https://developer.android.com/privacy-and-security/security-config",),
                    )
                )
        return findings


def _redact(line: str) -> str:
    return re.sub(r"(['\"])([^'\"]{4})[^'\"]*(['\"])", r"\1\2****\3", line)


__all__ = ["SecurityAnalyzer", "match_secret"]
