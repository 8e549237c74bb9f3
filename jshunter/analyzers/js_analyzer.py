"""
JavaScript detection engine.
Applies the pattern table to script content, drops excluded and too-short
candidates, removes duplicates within one scan and assigns severity.
"""

import re
from typing import List, Optional, Sequence, Set, Tuple

from jshunter.analyzers.patterns import DETECTION_PATTERNS, should_exclude
from jshunter.core.config import DetectionConfig
from jshunter.models import Category, Finding, PatternRule, Severity


CRITICAL_SECRET_MARKERS = ('AWS', 'Private Key', 'Database')
HIGH_SECRET_MARKERS = ('API Key', 'JWT', 'Token')

CATEGORY_SEVERITY = {
    Category.ENDPOINT: Severity.MEDIUM,
    Category.EMAIL: Severity.LOW,
    Category.IP_ADDRESS: Severity.INFO,
}

TYPE_ICONS = {
    Category.SECRET: '🔑',
    Category.ENDPOINT: '🌐',
    Category.EMAIL: '📧',
    Category.IP_ADDRESS: '🖥️',
}

_QUOTES = re.compile(r'["\']')


def get_severity(category: Category, pattern_name: str) -> Severity:
    if category == Category.SECRET:
        if any(marker in pattern_name for marker in CRITICAL_SECRET_MARKERS):
            return Severity.CRITICAL
        if any(marker in pattern_name for marker in HIGH_SECRET_MARKERS):
            return Severity.HIGH
        return Severity.MEDIUM
    return CATEGORY_SEVERITY.get(category, Severity.INFO)


def clean_match(raw: str) -> str:
    return _QUOTES.sub('', raw).strip()


class JsAnalyzer:

    def __init__(
        self,
        patterns: Optional[Sequence[PatternRule]] = None,
        config: Optional[DetectionConfig] = None
    ):
        self.patterns = tuple(patterns) if patterns is not None else DETECTION_PATTERNS
        self.config = config or DetectionConfig()

    def should_exclude(self, candidate: str) -> bool:
        return should_exclude(candidate)

    def _too_short(self, category: Category, candidate: str) -> bool:
        if category == Category.SECRET:
            return len(candidate) < self.config.min_secret_length
        if category == Category.ENDPOINT:
            return len(candidate) < self.config.min_endpoint_length
        return False

    def scan(
        self,
        content: str,
        file_url: str,
        origin_request_id: str = "",
        origin_url: str = ""
    ) -> List[Finding]:
        findings: List[Finding] = []
        if not content:
            return findings

        seen: Set[Tuple[str, Category]] = set()

        for rule in self.patterns:
            for match in rule.regex.finditer(content):
                candidate = clean_match(match.group(0))
                if not candidate:
                    continue

                if self.should_exclude(candidate):
                    continue

                if self._too_short(rule.category, candidate):
                    continue

                key = (candidate, rule.category)
                if key in seen:
                    continue
                seen.add(key)

                findings.append(Finding(
                    file_url=file_url,
                    category=rule.category,
                    value=candidate,
                    origin_request_id=origin_request_id,
                    origin_url=origin_url or file_url,
                    pattern_name=rule.name,
                    severity=get_severity(rule.category, rule.name)
                ))

        return findings
