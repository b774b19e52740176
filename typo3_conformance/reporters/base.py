"""
Reporter base - reporter interface
"""

from typing import Protocol

from typo3_conformance.runner import ConformanceRun


class Reporter(Protocol):
    """Reporter protocol"""

    def report(self, run: ConformanceRun) -> None:
        """Render the outcome of a conformance run"""
        ...
