"""
Host integration contract.
A host delivers observed responses, answers scope questions and signals scope
changes; the scanner depends only on this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from jshunter.models import Finding


@dataclass
class ResponseEvent:
    request_id: str
    url: str
    content_type: str = ""
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None

    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')


ResponseCallback = Callable[[ResponseEvent], Awaitable[None]]
ScopeChangeCallback = Callable[[], None]
FindingCallback = Callable[[Finding], None]


class HostBridge(ABC):

    def __init__(self):
        self._finding_listeners: List[FindingCallback] = []

    @abstractmethod
    def on_response(self, callback: ResponseCallback):
        pass

    @abstractmethod
    async def is_in_scope(self, url: str) -> bool:
        pass

    @abstractmethod
    def on_scope_change(self, callback: ScopeChangeCallback):
        pass

    def register_listener(self, callback: FindingCallback):
        """Subscribe a UI or export consumer to findings published through this host."""
        self._finding_listeners.append(callback)

    def publish_finding(self, finding: Finding):
        for callback in list(self._finding_listeners):
            callback(finding)
