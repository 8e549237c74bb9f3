"""
DataStore service for persisting exported scan results.
Writes JSON/CSV exports into a per-session directory and reloads JSON exports.
"""

import json
from pathlib import Path
from typing import List, Optional
from datetime import datetime
import uuid

from jshunter.models import Finding
from jshunter.output.exporter import EXPORT_FORMATS
from jshunter.services.result_store import ResultStore


class DataStore:

    EXPORT_BASENAME = "js_findings"

    def __init__(self, output_dir: str = "jshunter_output"):
        self.base_dir = Path(output_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_scan_id(self) -> str:
        return f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"

    def _get_session_dir(self, label: str) -> Path:
        safe_label = label.replace("/", "_").replace(":", "_").replace(".", "_")
        session_dir = self.base_dir / safe_label
        session_dir.mkdir(parents=True, exist_ok=True)
        return session_dir

    def save_export(self, label: str, content: str, fmt: str) -> str:
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt!r}")

        filepath = self._get_session_dir(label) / f"{self.EXPORT_BASENAME}.{fmt}"
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content)

        return str(filepath)

    def save_results(self, store: ResultStore, label: str, formats: List[str]) -> List[str]:
        return [self.save_export(label, store.export(fmt), fmt) for fmt in formats]

    def get_export_path(self, session: str, fmt: str = "json") -> Path:
        return self.base_dir / session / f"{self.EXPORT_BASENAME}.{fmt}"

    def load_findings(self, filepath) -> Optional[List[Finding]]:
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return [Finding.from_dict(item) for item in data.get("results", [])]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError):
            return None

    def get_all_sessions(self) -> List[str]:
        sessions = []
        if self.base_dir.exists():
            for item in sorted(self.base_dir.iterdir()):
                if item.is_dir():
                    sessions.append(item.name)
        return sessions
