"""
Markdown rendering of the report header and check sections
"""

from datetime import datetime, timezone
from typing import Optional

from typo3_conformance.checks.base import CheckResult, Finding
from typo3_conformance.report.document import DEFAULT_TABLE_HEADER


STATUS_GLYPHS: dict[str, str] = {
    "pass": "✅ ",
    "fail": "❌ ",
    "warn": "⚠️  ",
    "info": "ℹ️  ",
    "note": "",
}

SECTION_SEPARATOR = "---"

STANDARDS: list[tuple[str, str]] = [
    ("TYPO3 Core", "12.4 LTS / 13.x"),
    ("PHP", "8.1 / 8.2 / 8.3 / 8.4"),
    ("Coding Style", "PSR-12 (Extended Coding Style)"),
    ("Architecture", "Dependency Injection (PSR-11), PSR-14 Events, PSR-15 Middleware"),
    ("Testing", "PHPUnit 10+, TYPO3 Testing Framework"),
    ("Documentation", "reStructuredText (RST), TYPO3 Documentation Standards"),
]

REFERENCE_LINKS: list[tuple[str, str]] = [
    ("TYPO3 Extension Architecture", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/ExtensionArchitecture/"),
    ("TYPO3 Coding Guidelines", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/CodingGuidelines/"),
    ("PHP Architecture", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/PhpArchitecture/"),
    ("Testing Standards", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/Testing/"),
]


def bullet(status: str, message: str, depth: int = 0) -> str:
    return f"{'  ' * depth}- {STATUS_GLYPHS[status]}{message}"


def _render_findings(findings: list[Finding], depth: int = 0) -> list[str]:
    lines: list[str] = []
    for finding in findings:
        lines.append(bullet(finding.status, finding.message, depth))
        lines.extend(_render_findings(finding.details, depth + 1))
    return lines


def render_check_result(result: CheckResult) -> str:
    """Render one check as a report section closed by a separator."""
    lines = [f"## {result.title}", ""]
    if result.preamble:
        lines.extend(result.preamble)
        lines.append("")

    for subsection in result.subsections:
        lines.append(f"### {subsection.heading}")
        lines.append("")
        if subsection.preamble:
            lines.extend(subsection.preamble)
        lines.extend(_render_findings(subsection.findings))
        lines.append("")

    lines.append(SECTION_SEPARATOR)
    return "\n".join(lines)


def render_report_header(project_name: str, generated: Optional[datetime] = None) -> str:
    """Report title, standards overview and the empty summary table."""
    generated = generated or datetime.now(timezone.utc)
    lines = [
        "# TYPO3 Extension Conformance Report",
        "",
        f"**Generated:** {generated.strftime('%Y-%m-%d %H:%M:%S UTC')}",
        f"**Project:** {project_name}",
        "",
        "## Standards Checked",
        "",
        "This conformance check validates your extension against the following standards:",
        "",
        "| Standard | Version/Specification |",
        "|----------|----------------------|",
    ]
    lines.extend(f"| **{name}** | {version} |" for name, version in STANDARDS)
    lines.extend(["", "**Reference Documentation:**"])
    lines.extend(f"- [{title}]({url})" for title, url in REFERENCE_LINKS)
    lines.extend(["", SECTION_SEPARATOR, "", "## Summary", ""])
    lines.extend(DEFAULT_TABLE_HEADER)
    return "\n".join(lines) + "\n"
