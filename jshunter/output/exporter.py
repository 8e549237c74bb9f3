"""
Export serialization for findings.
Produces the JSON report and the flat CSV consumed by download/export collaborators.
"""

import csv
import io
import json
from datetime import datetime, timezone
from typing import List

from jshunter.models import Finding


PLUGIN_NAME = "JS Endpoint & Secret Hunter v2.0.0"

CSV_HEADER = "ID,Type,Severity,Pattern,Value,FileURL,SourceURL,Timestamp"

EXPORT_FORMATS = ("json", "csv")


class ResultExporter:

    def to_json(self, findings: List[Finding]) -> str:
        report = {
            'metadata': {
                'exportTime': datetime.now(timezone.utc).isoformat(),
                'totalResults': len(findings),
                'plugin': PLUGIN_NAME
            },
            'results': [f.to_dict() for f in findings]
        }
        return json.dumps(report, indent=2)

    def to_csv(self, findings: List[Finding]) -> str:
        buffer = io.StringIO()
        buffer.write(CSV_HEADER + "\n")

        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
        for f in findings:
            writer.writerow([
                f.id,
                f.category.value,
                f.severity.value,
                f.pattern_name,
                f.value,
                f.file_url,
                f.origin_url,
                f.discovered_at
            ])

        return buffer.getvalue().rstrip('\n')

    def export(self, findings: List[Finding], fmt: str) -> str:
        fmt = (fmt or "").lower()
        if fmt == "json":
            return self.to_json(findings)
        if fmt == "csv":
            return self.to_csv(findings)
        raise ValueError(f"Unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")
