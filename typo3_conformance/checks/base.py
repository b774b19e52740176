"""Conformance check base classes.

This module provides the check architecture: every check inspects one
aspect of an extension and returns a CheckResult that renders as one
section of the markdown report.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal, Optional

from typo3_conformance.project import ExtensionProject


FindingStatus = Literal["pass", "fail", "warn", "info", "note"]


@dataclass
class Finding:
    """
    A single observation of a check

    Attributes:
        status: pass, fail, warn, info, or note (plain bullet)
        message: Markdown text of the bullet
        details: Nested observations rendered as sub-bullets
    """
    status: FindingStatus
    message: str
    details: list["Finding"] = field(default_factory=list)

    def add(self, status: FindingStatus, message: str) -> "Finding":
        child = Finding(status, message)
        self.details.append(child)
        return child


@dataclass
class Subsection:
    """A titled group of findings, optionally preceded by free text lines."""
    heading: str
    findings: list[Finding] = field(default_factory=list)
    preamble: list[str] = field(default_factory=list)

    def add(self, status: FindingStatus, message: str) -> Finding:
        finding = Finding(status, message)
        self.findings.append(finding)
        return finding


@dataclass
class CheckResult:
    """
    Outcome of one conformance check

    Attributes:
        key: Check identifier
        title: Report section heading
        passed: False when at least one blocking issue was found
        category: Scored category the outcome feeds, None for advisory checks
        subsections: Report content
        preamble: Free text lines between the heading and the first subsection
        metrics: Counters collected while checking
    """
    key: str
    title: str
    passed: bool = True
    category: Optional[str] = None
    subsections: list[Subsection] = field(default_factory=list)
    preamble: list[str] = field(default_factory=list)
    metrics: dict[str, int] = field(default_factory=dict)

    def section(self, heading: str) -> Subsection:
        subsection = Subsection(heading)
        self.subsections.append(subsection)
        return subsection

    def fail(self) -> None:
        self.passed = False

    def count(self, status: FindingStatus) -> int:
        """Number of findings with the given status, nested ones included."""
        def walk(findings: list[Finding]) -> int:
            return sum(
                (1 if f.status == status else 0) + walk(f.details)
                for f in findings
            )
        return sum(walk(s.findings) for s in self.subsections)


class ConformanceCheck(ABC):
    """Base class for conformance checks."""

    key: str = ""
    title: str = ""
    category: Optional[str] = None
    order: int = 100

    @abstractmethod
    def run(self, project: ExtensionProject) -> CheckResult:
        """Inspect the extension and return the result."""
        pass

    def new_result(self) -> CheckResult:
        return CheckResult(key=self.key, title=self.title, category=self.category)

    def add_summary(self, result: CheckResult, label: str) -> None:
        section = result.section("Summary")
        if result.passed:
            section.add("pass", f"**{label}: PASSED**")
        else:
            section.add("warn", f"**{label}: ISSUES FOUND**")


class CheckRegistry:
    """Registry for conformance checks.

    Checks register themselves when their module is imported; the built-in
    modules are imported lazily on first access.
    """

    _checks: dict[str, ConformanceCheck] = {}
    _initialized: bool = False

    @classmethod
    def register(cls, check: ConformanceCheck) -> ConformanceCheck:
        """Register a check by its key (prevents duplicates)."""
        if check.key not in cls._checks:
            cls._checks[check.key] = check
        return check

    @classmethod
    def unregister(cls, key: str) -> None:
        cls._checks.pop(key, None)

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure all built-in checks are loaded."""
        if cls._initialized:
            return
        cls._initialized = True

        import importlib
        check_modules = [
            "typo3_conformance.checks.file_structure",
            "typo3_conformance.checks.documentation",
            "typo3_conformance.checks.coding_standards",
            "typo3_conformance.checks.architecture",
            "typo3_conformance.checks.testing",
            "typo3_conformance.checks.phpstan_baseline",
        ]
        for module_name in check_modules:
            importlib.import_module(module_name)

    @classmethod
    def get(cls, key: str) -> Optional[ConformanceCheck]:
        cls._ensure_initialized()
        return cls._checks.get(key)

    @classmethod
    def get_all(cls) -> list[ConformanceCheck]:
        """All registered checks in execution order."""
        cls._ensure_initialized()
        return sorted(cls._checks.values(), key=lambda c: c.order)
