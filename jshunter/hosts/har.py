"""
HAR replay host.
Feeds the responses of a saved browser/proxy capture to the scanner as if they
were being observed live. Scope is a list of fnmatch host patterns.
"""

import asyncio
import base64
import binascii
import fnmatch
import json
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from jshunter.core.logger import logger
from jshunter.hosts.base import HostBridge, ResponseCallback, ResponseEvent, ScopeChangeCallback


class HarFormatError(ValueError):
    pass


def _decode_content(content: dict) -> bytes:
    text = content.get('text') or ''
    if content.get('encoding') == 'base64':
        try:
            return base64.b64decode(text)
        except (binascii.Error, ValueError) as e:
            raise HarFormatError(f"Invalid base64 response body: {e}") from e
    return text.encode('utf-8')


def parse_har(data: dict) -> List[ResponseEvent]:
    try:
        entries = data['log']['entries']
    except (KeyError, TypeError) as e:
        raise HarFormatError("HAR document has no log.entries") from e

    events = []
    for index, entry in enumerate(entries):
        request = entry.get('request') or {}
        response = entry.get('response') or {}
        url = request.get('url')
        if not url:
            logger.debug(f"Skipping HAR entry {index}: no request URL")
            continue

        headers = {h.get('name', ''): h.get('value', '') for h in response.get('headers', [])}
        content = response.get('content') or {}
        content_type = content.get('mimeType') or ''
        for name, value in headers.items():
            if name.lower() == 'content-type':
                content_type = value
                break

        events.append(ResponseEvent(
            request_id=str(entry.get('_id') or index),
            url=url,
            content_type=content_type,
            body=_decode_content(content),
            headers=headers
        ))
    return events


def load_har(path) -> List[ResponseEvent]:
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise HarFormatError(f"{path} is not valid JSON: {e}") from e
    return parse_har(data)


class HarReplayHost(HostBridge):

    def __init__(self, events: Iterable[ResponseEvent], scope: Optional[List[str]] = None):
        super().__init__()
        self.events = list(events)
        self.scope = [p.lower() for p in (scope or [])]
        self._response_callbacks: List[ResponseCallback] = []
        self._scope_callbacks: List[ScopeChangeCallback] = []

    @classmethod
    def from_file(cls, path, scope: Optional[List[str]] = None) -> "HarReplayHost":
        return cls(load_har(path), scope=scope)

    def on_response(self, callback: ResponseCallback):
        self._response_callbacks.append(callback)

    def on_scope_change(self, callback: ScopeChangeCallback):
        self._scope_callbacks.append(callback)

    async def is_in_scope(self, url: str) -> bool:
        if not self.scope:
            return True
        host = (urlsplit(url).hostname or '').lower()
        return any(fnmatch.fnmatch(host, pattern) for pattern in self.scope)

    def set_scope(self, patterns: List[str]):
        self.scope = [p.lower() for p in patterns]
        for callback in list(self._scope_callbacks):
            callback()

    async def replay(self):
        """Deliver every captured response concurrently and wait for the handlers."""
        tasks = [
            callback(event)
            for event in self.events
            for callback in self._response_callbacks
        ]
        if tasks:
            await asyncio.gather(*tasks)
        logger.debug(f"Replayed {len(self.events)} HAR entries")
