"""
Script discovery for observed HTML pages.
Finds external <script src> references and substantial inline script bodies.
Inline bodies are seeded into the content cache under a synthetic URL so the
fetcher can resolve them without re-parsing the page.
"""

import re
from typing import List, Optional

from jshunter.core.config import DetectionConfig
from jshunter.core.logger import logger
from jshunter.core.normalizer import resolve_url
from jshunter.models import ScanTarget, inline_script_url


class ScriptExtractor:

    SRC_ATTRIBUTE = r'(?<![\w-])src\s*='
    SCRIPT_SRC_PATTERN = re.compile(
        r'<script[^>]*?' + SRC_ATTRIBUTE + r'\s*["\']([^"\']+)["\'][^>]*>', re.IGNORECASE
    )
    INLINE_SCRIPT_PATTERN = re.compile(r'<script([^>]*)>([\s\S]*?)</script\s*>', re.IGNORECASE)
    SRC_ATTRIBUTE_PATTERN = re.compile(SRC_ATTRIBUTE, re.IGNORECASE)

    def __init__(self, cache, config: Optional[DetectionConfig] = None):
        self.cache = cache
        self.config = config or DetectionConfig()

    @staticmethod
    def _is_js_reference(src: str) -> bool:
        return src.endswith('.js') or '.js?' in src

    def extract_external(self, html: str, page_url: str) -> List[str]:
        urls = []
        for match in self.SCRIPT_SRC_PATTERN.finditer(html):
            src = match.group(1).strip()
            if not self._is_js_reference(src):
                continue

            absolute = resolve_url(src, page_url)
            if absolute is None:
                logger.debug(f"Could not resolve script reference {src!r} against {page_url}")
                continue
            urls.append(absolute)
        return urls

    def extract_inline(self, html: str, page_url: str) -> List[ScanTarget]:
        targets = []
        index = 0
        for match in self.INLINE_SCRIPT_PATTERN.finditer(html):
            attributes, body = match.group(1), match.group(2)
            if self.SRC_ATTRIBUTE_PATTERN.search(attributes):
                continue

            body = body.strip()
            if len(body) <= self.config.min_inline_script_length:
                continue

            url = inline_script_url(page_url, index)
            index += 1
            self.cache.cache_put(url, body)
            targets.append(ScanTarget(url=url, origin_url=page_url))
        return targets

    def extract(self, html: str, page_url: str, origin_request_id: str = "") -> List[ScanTarget]:
        """Return external script targets in document order, then inline ones."""
        targets = [
            ScanTarget(url=url, origin_request_id=origin_request_id, origin_url=page_url)
            for url in self.extract_external(html, page_url)
        ]
        for inline in self.extract_inline(html, page_url):
            inline.origin_request_id = origin_request_id
            targets.append(inline)

        logger.debug(f"Extracted {len(targets)} script target(s) from {page_url}")
        return targets
