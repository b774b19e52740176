"""
Reporters Layer - terminal output of a conformance run

Contains the Rich terminal reporter and the JSON reporter.
"""

from typo3_conformance.reporters.base import Reporter
from typo3_conformance.reporters.rich_reporter import RichReporter
from typo3_conformance.reporters.json_reporter import JsonReporter

__all__ = [
    "Reporter",
    "RichReporter",
    "JsonReporter",
]
