"""Coding standards check.

Validates PSR-12 compliance and TYPO3-specific code style of the PHP
sources in Classes/ with line-level pattern matching.
"""

import re
from collections import Counter
from pathlib import Path

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject


STRICT_TYPES = "declare(strict_types=1)"

# array( but not is_array(, in_array(, $array( or ->array(
OLD_ARRAY_PATTERN = re.compile(r"(?<![\w$>:])array\s*\(")
NAMESPACE_PATTERN = re.compile(r"^namespace ", re.MULTILINE)
CLASS_DECLARATION_PATTERN = re.compile(r"^(?:final |abstract |readonly )*class ")
SNAKE_CASE_CLASS_PATTERN = re.compile(r"^(?:final )?class [a-z][a-z0-9_]*")
USE_STATEMENT_PATTERN = re.compile(r"^use ")

# Lines searched above a class declaration for a doc comment
PHPDOC_LOOKBEHIND = 5


def _has_class_phpdoc(lines: list[str]) -> bool:
    """True unless a class declaration lacks a /** within the lines above it."""
    for index, line in enumerate(lines):
        if CLASS_DECLARATION_PATTERN.match(line):
            window = lines[max(0, index - PHPDOC_LOOKBEHIND):index + 1]
            if not any("/**" in w for w in window):
                return False
    return True


def _duplicate_use_count(lines: list[str]) -> int:
    counts = Counter(line.strip() for line in lines if USE_STATEMENT_PATTERN.match(line))
    return sum(1 for n in counts.values() if n > 1)


class CodingStandardsCheck(ConformanceCheck):
    """Strict types, syntax, namespaces, naming and indentation."""

    key = "coding_standards"
    title = "2. Coding Standards Conformance"
    category = "coding"
    order = 30

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()

        if not project.has_dir("Classes"):
            result.section("Sources").add("fail", "Classes/ directory not found")
            result.fail()
            return result

        php_files = project.php_files("Classes")
        if not php_files:
            result.section("Sources").add("warn", "No PHP files found in Classes/")
            return result

        result.metrics["php_files"] = len(php_files)
        result.preamble.append(f"**Total PHP files:** {len(php_files)}")

        sources: dict[Path, list[str]] = {
            f: project.read_text(f).splitlines() for f in php_files
        }

        self._check_strict_types(sources, result)
        self._check_array_syntax(sources, result)
        self._check_namespaces(sources, result)
        self._check_phpdoc(sources, result)
        self._check_naming(sources, result)
        self._check_indentation(sources, result)
        self._check_use_statements(sources, result)
        self.add_summary(result, "Coding standards")
        return result

    def _check_strict_types(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Strict Types Declaration")
        missing = sum(
            1 for lines in sources.values()
            if not any(STRICT_TYPES in line for line in lines)
        )
        result.metrics["missing_strict_types"] = missing
        if missing:
            section.add("fail", f"{missing} files missing {STRICT_TYPES}")
            result.fail()
        else:
            section.add("pass", f"All files have {STRICT_TYPES}")

    def _check_array_syntax(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Array Syntax")
        count = sum(
            1 for lines in sources.values() for line in lines
            if OLD_ARRAY_PATTERN.search(line)
        )
        result.metrics["old_array_syntax"] = count
        if count:
            section.add("fail", f"{count} instances of old array() syntax (should use [])")
            result.fail()
        else:
            section.add("pass", "No old array() syntax found")

    def _check_namespaces(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Namespace Structure")
        missing = sum(
            1 for lines in sources.values()
            if not NAMESPACE_PATTERN.search("\n".join(lines))
        )
        result.metrics["missing_namespace"] = missing
        if missing:
            section.add("fail", f"{missing} files missing namespace declaration")
            result.fail()
        else:
            section.add("pass", "All files have namespace declaration")

    def _check_phpdoc(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("PHPDoc Comments")
        missing = sum(1 for lines in sources.values() if not _has_class_phpdoc(lines))
        result.metrics["classes_without_phpdoc"] = missing
        if missing:
            section.add("warn", f"{missing} classes missing PHPDoc comments")
        else:
            section.add("pass", "All classes have PHPDoc comments")

    def _check_naming(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Naming Conventions")
        count = sum(
            1 for lines in sources.values() for line in lines
            if SNAKE_CASE_CLASS_PATTERN.match(line)
        )
        if count:
            section.add("fail", f"{count} classes using incorrect naming (should be UpperCamelCase)")
            result.fail()
        else:
            section.add("pass", "Class naming follows UpperCamelCase convention")

    def _check_indentation(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Indentation")
        count = sum(
            1 for lines in sources.values()
            if any("\t" in line for line in lines)
        )
        result.metrics["files_with_tabs"] = count
        if count:
            section.add("fail", f"{count} files using tabs instead of spaces")
            result.fail()
        else:
            section.add("pass", "No tabs found (using spaces for indentation)")

    def _check_use_statements(self, sources: dict[Path, list[str]], result: CheckResult) -> None:
        section = result.section("Use Statements")
        duplicates = sum(_duplicate_use_count(lines) for lines in sources.values())
        if duplicates:
            section.add("warn", f"{duplicates} duplicate use statements found")
        else:
            section.add("pass", "No duplicate use statements")


CheckRegistry.register(CodingStandardsCheck())
