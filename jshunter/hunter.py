"""
JS Endpoint & Secret Hunter.
Binds the passive scan pipeline to a host: filters responses by processed id and
scope, runs one task per response and exposes the command surface used by the
CLI and web UI (results, stats, clear, export, toggle).
"""

import asyncio
from typing import Dict, List, Optional, Set

from jshunter.analyzers.js_analyzer import TYPE_ICONS
from jshunter.core.config import Config, get_default_config
from jshunter.core.logger import logger
from jshunter.hosts.base import HostBridge, ResponseEvent
from jshunter.models import Finding
from jshunter.pipelines.passive_scan import PassiveScanRunner
from jshunter.services.result_store import ResultStore


class JsHunter:

    def __init__(
        self,
        host: Optional[HostBridge] = None,
        config: Optional[Config] = None,
        runner: Optional[PassiveScanRunner] = None
    ):
        self.config = config or get_default_config()
        self.runner = runner if runner is not None else PassiveScanRunner(config=self.config)
        self.store: ResultStore = self.runner.store
        self.enabled = self.config.enabled
        self.host: Optional[HostBridge] = None
        self._tasks: Set[asyncio.Task] = set()

        self.store.add_listener(self._log_finding)
        if host is not None:
            self.bind(host)

    def bind(self, host: HostBridge):
        if self.host is host:
            return
        if self.host is not None:
            raise RuntimeError("JsHunter is already bound to a host")

        self.host = host
        host.on_response(self.submit)
        host.on_scope_change(self._on_scope_change)
        self.store.add_listener(host.publish_finding)

    def _log_finding(self, finding: Finding):
        icon = TYPE_ICONS.get(finding.category, '🔍')
        logger.info(f"[JS Hunter] {icon} Found {finding.pattern_name}: {finding.value}")

    def _on_scope_change(self):
        self.clear_results()
        logger.info("Scope changed - results cleared")

    async def _is_in_scope(self, url: str) -> bool:
        try:
            return await self.host.is_in_scope(url)
        except Exception as e:
            logger.error(f"Error checking scope for {url}: {e}")
            return False

    async def handle_response(self, event: ResponseEvent):
        if not self.enabled:
            return

        try:
            if not self.store.mark_request_processed(event.request_id):
                return

            if self.host is not None and not await self._is_in_scope(event.url):
                logger.debug(f"Out of scope: {event.url}")
                return

            body = event.text()
            if not body:
                return

            content_type = event.header('content-type') or event.content_type
            await self.runner.process_response(body, event.url, event.request_id, content_type)

        except Exception as e:
            logger.error(f"Error processing response {event.url}: {e}")

    def submit(self, event: ResponseEvent) -> asyncio.Task:
        """Schedule handling of a response on the running loop."""
        task = asyncio.ensure_future(self.handle_response(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self):
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self):
        await self.drain()
        await self.runner.close()

    def get_results(self) -> Dict:
        return {
            'results': [f.to_dict() for f in self.store.all()],
            'stats': self.get_stats()
        }

    def get_stats(self) -> Dict:
        return self.store.stats().to_dict()

    def get_results_by_type(self, category) -> List[Finding]:
        return self.store.by_category(category)

    def clear_results(self) -> Dict:
        self.store.clear()
        return {'success': True}

    def export_results(self, fmt: str) -> str:
        return self.store.export(fmt)

    def toggle_enabled(self) -> Dict:
        self.enabled = not self.enabled
        logger.info(f"Scanner {'enabled' if self.enabled else 'disabled'}")
        return {'enabled': self.enabled}
