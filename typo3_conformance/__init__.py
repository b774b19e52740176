"""
TYPO3 Extension Conformance Checker

Audits a TYPO3 extension against the official extension architecture,
coding guidelines, PHP architecture and testing standards, and writes a
markdown scoring report.
"""

__version__ = "1.2.0"
