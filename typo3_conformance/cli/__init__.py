"""
CLI Layer - command line interface
"""

from typo3_conformance.cli.app import app, baseline, check, report, version

__all__ = [
    "app",
    "baseline",
    "check",
    "report",
    "version",
]
