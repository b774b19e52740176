"""
Checks Layer - conformance checks

One check per conformance area; each produces a report section.
"""

from typo3_conformance.checks.base import (
    CheckRegistry,
    CheckResult,
    ConformanceCheck,
    Finding,
    Subsection,
)

__all__ = [
    "CheckRegistry",
    "CheckResult",
    "ConformanceCheck",
    "Finding",
    "Subsection",
]
