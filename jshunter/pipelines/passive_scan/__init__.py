"""
Passive scan pipeline.
Turns observed responses into scan targets, resolves their content and stores findings.
"""

from .runner import PassiveScanRunner

__all__ = ["PassiveScanRunner"]
