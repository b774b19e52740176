"""
JSON reporter - machine-readable run summary
"""

import json
import sys
from typing import Optional, TextIO

from typo3_conformance.runner import ConformanceRun


class JsonReporter:
    """JSON reporter"""

    def __init__(self, output: Optional[TextIO] = None):
        self.output = output or sys.stdout

    def report(self, run: ConformanceRun) -> None:
        card = run.card
        report_data = {
            "project": run.project.name,
            "report": str(run.report_path),
            "categories": [
                {
                    "key": category.key,
                    "label": category.label,
                    "score": score,
                    "max_score": category.max_score,
                    "passed": card.passed(category.key),
                }
                for category, score in card.rows()
            ],
            "checks": [
                {
                    "key": result.key,
                    "title": result.title,
                    "passed": result.passed,
                    "failures": result.count("fail"),
                    "warnings": result.count("warn"),
                    "metrics": result.metrics,
                }
                for result in run.results
            ],
            "summary": {
                "total": card.total,
                "max_total": card.max_total,
                "tier": card.tier.key,
                "summary_updated": run.assembly.summary_updated,
                "action_items": run.assembly.checklist.items,
                "passed": run.passed,
            },
        }

        json_str = json.dumps(report_data, indent=2, ensure_ascii=False)
        print(json_str, file=self.output)
