"""
In-memory session state for passive scanning.
Holds findings plus the processed-request, scanned-URL and content-cache
bookkeeping. Every check-then-set is a single locked step so concurrent
response tasks never scan the same resource twice.
"""

import threading
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from jshunter.models import Category, Finding, ScanStats
from jshunter.output.exporter import ResultExporter


FindingListener = Callable[[Finding], None]


class ResultStore:

    def __init__(self, exporter: Optional[ResultExporter] = None):
        self._lock = threading.Lock()
        self._findings: List[Finding] = []
        self._finding_keys: Set[Tuple[str, Category, str]] = set()
        self._processed_requests: Set[str] = set()
        self._scanned_urls: Set[str] = set()
        self._content_cache: Dict[str, str] = {}
        self._listeners: List[FindingListener] = []
        self._epoch = 0
        self.exporter = exporter if exporter is not None else ResultExporter()

    @property
    def epoch(self) -> int:
        return self._epoch

    def add_listener(self, callback: FindingListener):
        self._listeners.append(callback)

    def mark_request_processed(self, request_id: str) -> bool:
        """Record a request id; False when it was already recorded."""
        with self._lock:
            if request_id in self._processed_requests:
                return False
            self._processed_requests.add(request_id)
            return True

    def mark_scanned(self, url: str, epoch: Optional[int] = None) -> bool:
        """Record a scan-target URL; False when it was already scanned this session
        or when ``epoch`` belongs to a session that has since been cleared."""
        with self._lock:
            if epoch is not None and epoch != self._epoch:
                return False
            if url in self._scanned_urls:
                return False
            self._scanned_urls.add(url)
            return True

    def cache_get(self, url: str) -> Optional[str]:
        with self._lock:
            return self._content_cache.get(url)

    def cache_put(self, url: str, content: str):
        with self._lock:
            self._content_cache[url] = content

    def append(self, finding: Finding, epoch: Optional[int] = None) -> bool:
        with self._lock:
            if epoch is not None and epoch != self._epoch:
                return False
            if finding.dedup_key in self._finding_keys:
                return False
            self._finding_keys.add(finding.dedup_key)
            self._findings.append(finding)

        for callback in list(self._listeners):
            callback(finding)
        return True

    def extend(self, findings: Iterable[Finding], epoch: Optional[int] = None) -> List[Finding]:
        return [f for f in findings if self.append(f, epoch=epoch)]

    def all(self) -> List[Finding]:
        with self._lock:
            return list(self._findings)

    def by_category(self, category) -> List[Finding]:
        category = Category(category)
        return [f for f in self.all() if f.category == category]

    def __len__(self):
        with self._lock:
            return len(self._findings)

    def stats(self) -> ScanStats:
        with self._lock:
            findings = list(self._findings)
            scanned = len(self._scanned_urls)

        stats = ScanStats(total=len(findings), scanned_files=scanned)
        for finding in findings:
            cat = finding.category.value
            stats.by_category[cat] = stats.by_category.get(cat, 0) + 1
            sev = finding.severity.value
            stats.by_severity[sev] = stats.by_severity.get(sev, 0) + 1

        if findings:
            stats.last_finding_at = max(f.discovered_at for f in findings)
        return stats

    def clear(self):
        with self._lock:
            self._findings = []
            self._finding_keys = set()
            self._processed_requests = set()
            self._scanned_urls = set()
            self._content_cache = {}
            self._epoch += 1

    def export_json(self) -> str:
        return self.exporter.to_json(self.all())

    def export_csv(self) -> str:
        return self.exporter.to_csv(self.all())

    def export(self, fmt: str) -> str:
        return self.exporter.export(self.all(), fmt)
