"""PHPStan baseline hygiene check.

The baseline exists only for legacy code: new code must not add errors to
it. The first ``count:`` entry of the baseline in HEAD is compared with the
working tree copy; an increase is a violation.
"""

import logging
import re
from typing import Optional

from git import GitCommandError

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject

logger = logging.getLogger(__name__)


BASELINE_CANDIDATES = [
    "Build/phpstan-baseline.neon",
    "phpstan-baseline.neon",
    ".phpstan/baseline.neon",
]

COUNT_PATTERN = re.compile(r"^\s+count:\s+(\d+)", re.MULTILINE)


def extract_error_count(content: str) -> int:
    """First error count of a baseline, 0 when none is present."""
    match = COUNT_PATTERN.search(content)
    return int(match.group(1)) if match else 0


class PhpstanBaselineCheck(ConformanceCheck):
    """Detects errors added to the PHPStan baseline by uncommitted changes."""

    key = "phpstan_baseline"
    title = "PHPStan Baseline Hygiene"
    order = 60

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()
        section = result.section("Baseline Status")

        if project.repo is None:
            section.add("warn", "Not a git repository - skipping baseline check")
            return result

        baseline = project.first_file(*BASELINE_CANDIDATES)
        if baseline is None:
            section.add("pass", "No baseline file found - all code passes PHPStan level 10!")
            return result

        section.preamble.append(f"Found baseline file: `{baseline}`")
        try:
            unstaged = project.repo.git.diff("--", baseline)
            staged = project.repo.git.diff("--cached", "--", baseline)
        except GitCommandError as e:
            logger.warning(f"git diff failed for {baseline}: {e}")
            section.add("warn", "git diff failed - skipping baseline check")
            return result

        if unstaged:
            before = extract_error_count(self._committed_content(project, baseline) or "")
            after = extract_error_count(project.read_text(baseline))
            result.metrics["baseline_before"] = before
            result.metrics["baseline_after"] = after

            if after > before:
                violation = section.add(
                    "fail",
                    f"**BASELINE VIOLATION DETECTED**: error count increased "
                    f"{before} → {after} (+{after - before} errors)",
                )
                violation.add("note", "All new code MUST pass PHPStan level 10 without baseline suppression")
                violation.add("note", "Run `composer ci:php:stan` and fix the reported errors")
                violation.add("note", f"Revert baseline changes: `git checkout {baseline}`")
                result.fail()
            elif after < before:
                section.add("pass", f"Baseline reduced by {before - after} errors")
            else:
                modified = section.add("warn", "Baseline modified but count unchanged")
                modified.add("note", f"Review the diff: `git diff {baseline}`")
        else:
            section.add("pass", "No changes to baseline file")

        if staged:
            staged_finding = section.add("warn", "Baseline file is staged for commit")
            staged_finding.add("note", f"Review staged changes: `git diff --cached {baseline}`")
        else:
            section.add("pass", "No baseline changes staged for commit")

        return result

    def _committed_content(self, project: ExtensionProject, baseline: str) -> Optional[str]:
        try:
            return project.repo.git.show(f"HEAD:{baseline}")
        except GitCommandError as e:
            logger.debug(f"No committed version of {baseline}: {e}")
            return None


CheckRegistry.register(PhpstanBaselineCheck())
