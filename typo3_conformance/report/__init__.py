"""
Report Layer - markdown report model, rendering and assembly
"""

from typo3_conformance.report.assembler import AssemblyResult, assemble_report
from typo3_conformance.report.document import ReportDocument, SummaryRow
from typo3_conformance.report.markdown import render_check_result, render_report_header

__all__ = [
    "AssemblyResult",
    "assemble_report",
    "ReportDocument",
    "SummaryRow",
    "render_check_result",
    "render_report_header",
]
