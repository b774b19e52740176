"""File structure check.

Validates the extension directory layout and required files against the
TYPO3 extension architecture.
"""

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject


# Standard tool configurations allowed in the extension root
ALLOWED_ROOT_PHP: frozenset[str] = frozenset({
    ".php-cs-fixer.php",
    ".php-cs-fixer.dist.php",
    "php-cs-fixer.php",
    "rector.php",
    "fractor.php",
    "ecs.php",
    "phpstan.php",
    "phpunit.php",
    "captainhook.php",
    "grumphp.php",
    "pint.php",
    "scoper.inc.php",
})


class FileStructureCheck(ConformanceCheck):
    """Required files, directory structure and layout anti-patterns."""

    key = "file_structure"
    title = "1. File Structure Conformance"
    category = "structure"
    order = 10

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()
        self._check_required_files(project, result)
        self._check_directories(project, result)
        self._check_anti_patterns(project, result)
        return result

    def _check_required_files(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Required Files")

        if project.has_file("composer.json"):
            section.add("pass", "composer.json present")
        else:
            section.add("fail", "composer.json missing (CRITICAL)")
            result.fail()

        if project.has_file("ext_emconf.php"):
            section.add("pass", "ext_emconf.php present")
        else:
            section.add("warn", "ext_emconf.php missing (required for TER publication)")

        if project.has_dir("Documentation"):
            section.add("pass", "Documentation/ directory present (details in Documentation check)")
        else:
            section.add("warn", "Documentation/ directory missing")

    def _check_directories(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Directory Structure")

        if project.has_dir("Classes"):
            classes = section.add("pass", "Classes/ directory present")
            for subdir in ("Classes/Controller", "Classes/Domain/Model", "Classes/Domain/Repository"):
                if project.has_dir(subdir):
                    classes.add("pass", f"{subdir}/ found")
        else:
            section.add("fail", "Classes/ directory missing (CRITICAL)")
            result.fail()

        if project.has_dir("Configuration"):
            configuration = section.add("pass", "Configuration/ directory present")
            if project.has_dir("Configuration/TCA"):
                configuration.add("pass", "Configuration/TCA/ found")
            if project.has_file("Configuration/Services.yaml"):
                configuration.add("pass", "Configuration/Services.yaml found")
            else:
                configuration.add("warn", "Configuration/Services.yaml missing (recommended)")
            if project.has_dir("Configuration/Backend"):
                configuration.add("pass", "Configuration/Backend/ found")
        else:
            section.add("warn", "Configuration/ directory missing")

        if project.has_dir("Resources"):
            resources = section.add("pass", "Resources/ directory present")
            if project.has_dir("Resources/Private") and project.has_dir("Resources/Public"):
                resources.add("pass", "Resources/Private/ and Resources/Public/ properly separated")
            else:
                resources.add("warn", "Resources/ not properly separated into Private/ and Public/")
        else:
            section.add("warn", "Resources/ directory missing")

        if project.has_dir("Tests"):
            tests = section.add("pass", "Tests/ directory present")
            for subdir in ("Tests/Unit", "Tests/Functional"):
                if project.has_dir(subdir):
                    tests.add("pass", f"{subdir}/ found")
                else:
                    tests.add("warn", f"{subdir}/ missing")
        else:
            section.add("warn", "Tests/ directory missing")

    def _check_anti_patterns(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Anti-Patterns Check")

        root_php = sorted(
            p.name for p in project.path.glob("*.php")
            if p.is_file()
            and not p.name.startswith("ext_")
            and p.name not in ALLOWED_ROOT_PHP
        )
        tracked = [name for name in root_php if project.is_tracked(name)]
        untracked = [name for name in root_php if name not in tracked]
        result.metrics["root_php_files"] = len(tracked)

        if tracked:
            where = "committed to repository" if project.has_git else "found in root directory"
            finding = section.add("fail", f"{len(tracked)} PHP file(s) {where}:")
            for name in tracked:
                finding.add("note", f"{name} (ISSUE: should be in Classes/ or Build/)")
            result.fail()

        if untracked:
            finding = section.add(
                "info",
                f"{len(untracked)} untracked PHP file(s) in root (ignored, not committed):",
            )
            for name in untracked:
                finding.add("note", f"{name} (local file, not in repository)")

        if not root_php:
            section.add("pass", "No PHP files in root (except ext_* files)")

        if project.has_file("ext_tables.php"):
            section.add("warn", "ext_tables.php present (consider migrating to Configuration/Backend/)")

        if project.has_dir("Classes/Controllers"):
            section.add("fail", "Classes/Controllers/ found (should be Controller/ singular)")
            result.fail()

        if project.has_dir("Classes/Helpers"):
            section.add("warn", "Classes/Helpers/ found (should use Utility/ instead)")


CheckRegistry.register(FileStructureCheck())
