"""
Passive Scan Runner - orchestrates discovery, retrieval and detection for one response.
Direct JavaScript responses are scanned as-is; HTML pages are mined for script
references which are fetched (or read from the inline cache) and scanned once per session.
"""

from typing import List, Optional

from jshunter.analyzers.js_analyzer import JsAnalyzer
from jshunter.collectors.js_fetcher import JsFetcher
from jshunter.collectors.script_extractor import ScriptExtractor
from jshunter.core.config import Config, get_default_config
from jshunter.core.logger import logger
from jshunter.models import Finding, ScanTarget
from jshunter.services.result_store import ResultStore


SCRIPT_CONTENT_TYPES = ('javascript', 'ecmascript')


def is_script_response(source_url: str, content_type: str) -> bool:
    path = source_url.split('#', 1)[0].split('?', 1)[0]
    if path.endswith('.js'):
        return True
    content_type = (content_type or '').lower()
    return any(marker in content_type for marker in SCRIPT_CONTENT_TYPES)


def is_html_response(content_type: str) -> bool:
    return 'html' in (content_type or '').lower()


class PassiveScanRunner:

    def __init__(
        self,
        store: Optional[ResultStore] = None,
        config: Optional[Config] = None,
        fetcher: Optional[JsFetcher] = None,
        analyzer: Optional[JsAnalyzer] = None
    ):
        self.config = config or get_default_config()
        self.store = store if store is not None else ResultStore()
        self.extractor = ScriptExtractor(self.store, self.config.detection)
        self.fetcher = fetcher if fetcher is not None else JsFetcher(self.store, self.config.fetch)
        self.analyzer = analyzer if analyzer is not None else JsAnalyzer(config=self.config.detection)

    def build_targets(
        self,
        body: str,
        source_url: str,
        origin_request_id: str,
        content_type: str
    ) -> List[ScanTarget]:
        if is_script_response(source_url, content_type):
            if not body:
                return []
            return [ScanTarget(
                url=source_url,
                content=body,
                origin_request_id=origin_request_id,
                origin_url=source_url
            )]

        if is_html_response(content_type):
            return self.extractor.extract(body, source_url, origin_request_id)

        return []

    async def process_target(self, target: ScanTarget, epoch: int) -> List[Finding]:
        if not self.store.mark_scanned(target.url, epoch=epoch):
            return []

        content = target.content or await self.fetcher.resolve_content(target)
        if not content:
            return []

        findings = self.analyzer.scan(
            content,
            target.url,
            target.origin_request_id,
            target.origin_url
        )
        stored = self.store.extend(findings, epoch=epoch)

        if stored:
            logger.debug(f"{target.url}: {len(stored)} new finding(s)")
        elif findings and epoch != self.store.epoch:
            logger.debug(f"Discarded {len(findings)} finding(s) for {target.url} from a cleared session")
        return stored

    async def process_response(
        self,
        body: str,
        source_url: str,
        origin_request_id: str,
        content_type: str = ""
    ) -> List[Finding]:
        epoch = self.store.epoch
        targets = self.build_targets(body, source_url, origin_request_id, content_type)

        stored: List[Finding] = []
        for target in targets:
            if self.store.epoch != epoch:
                logger.debug(f"Session cleared while processing {source_url}; stopping")
                break
            stored.extend(await self.process_target(target, epoch))
        return stored

    async def close(self):
        await self.fetcher.close()
