"""
Data models for the passive JavaScript scanning pipeline.
Defines pattern rules, scan targets and the findings shared with UI and export consumers.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern
from enum import Enum
from datetime import datetime, timezone
import hashlib


INLINE_SCRIPT_MARKER = "#inline-script-"


class Category(Enum):
    ENDPOINT = "endpoint"
    SECRET = "secret"
    EMAIL = "email"
    IP_ADDRESS = "ip"


class Severity(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


@dataclass(frozen=True)
class PatternRule:
    name: str
    regex: Pattern
    category: Category
    description: str = ""


@dataclass
class ScanTarget:
    url: str
    content: str = ""
    origin_request_id: str = ""
    origin_url: str = ""


def is_inline_url(url: str) -> bool:
    return INLINE_SCRIPT_MARKER in url


def inline_script_url(page_url: str, index: int) -> str:
    return f"{page_url}{INLINE_SCRIPT_MARKER}{index}"


def make_finding_id(file_url: str, pattern_name: str, value: str) -> str:
    digest = hashlib.sha1(f"{file_url}\x00{pattern_name}\x00{value}".encode("utf-8"))
    return digest.hexdigest()[:16]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Finding:
    file_url: str
    category: Category
    value: str
    origin_request_id: str
    origin_url: str
    pattern_name: str
    severity: Severity
    discovered_at: str = field(default_factory=_utc_now)
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", make_finding_id(self.file_url, self.pattern_name, self.value))

    @property
    def dedup_key(self):
        return (self.file_url, self.category, self.value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_url": self.file_url,
            "category": self.category.value,
            "value": self.value,
            "origin_request_id": self.origin_request_id,
            "origin_url": self.origin_url,
            "pattern_name": self.pattern_name,
            "severity": self.severity.value,
            "discovered_at": self.discovered_at
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Finding":
        data = data.copy()
        if "category" in data:
            data["category"] = Category(data["category"])
        if "severity" in data:
            data["severity"] = Severity(data["severity"])
        return cls(**data)


@dataclass
class ScanStats:
    total: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    scanned_files: int = 0
    last_finding_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_category": self.by_category,
            "by_severity": self.by_severity,
            "scanned_files": self.scanned_files,
            "last_finding_at": self.last_finding_at
        }
