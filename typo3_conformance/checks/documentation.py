"""Documentation check.

Checks the documentation entry point, rendering configuration and
directory layout expected by docs.typo3.org. Documentation issues are
warnings, the check never fails.
"""

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject


IMAGE_PATTERNS = ("*.png", "*.jpg", "*.gif", "*.svg")

# Documentation subdirectories that need no Index file
SKIPPED_DOC_DIRS = frozenset({"Images"})


class DocumentationCheck(ConformanceCheck):
    """Documentation entry point, guides.xml and structure."""

    key = "documentation"
    title = "Documentation Conformance"
    order = 20

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()
        self._check_required_files(project, result)
        self._check_structure(project, result)
        return result

    def _check_required_files(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Required Documentation Files")

        if project.has_file("Documentation/Index.rst"):
            section.add("pass", "Documentation/Index.rst present")
        elif project.has_file("Documentation/Index.md"):
            section.add("pass", "Documentation/Index.md present (Markdown mode)")
        elif project.has_file("README.rst", "README.md"):
            section.add("warn", "Only README found (single-file documentation mode)")
        else:
            section.add("fail", "No documentation entry point (need Index.rst, Index.md, or README)")

        if project.has_file("Documentation/guides.xml"):
            guides = section.add("pass", "Documentation/guides.xml present (modern PHP-based rendering)")
            if project.file_contains("Documentation/guides.xml", 'theme="typo3docs"'):
                guides.add("pass", "Uses typo3docs theme")
            else:
                guides.add("warn", 'Should use theme="typo3docs"')
            if project.file_contains("Documentation/guides.xml", "<project"):
                guides.add("pass", "Has <project> element")
            else:
                guides.add("warn", "Missing <project> element")
        elif project.has_file("Documentation/Settings.cfg"):
            legacy = section.add("warn", "Documentation/Settings.cfg present (LEGACY)")
            legacy.add("info", "Migrate to guides.xml for modern PHP-based rendering")
            legacy.add("info", "See: https://docs.typo3.org/m/typo3/docs-how-to-document/main/en-us/")
        else:
            section.add("fail", "No documentation config (need Documentation/guides.xml)")

    def _check_structure(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Documentation Structure")

        if project.has_dir("Documentation"):
            missing_index = [
                d.name for d in project.subdirectories("Documentation")
                if not d.name.startswith("_")
                and d.name not in SKIPPED_DOC_DIRS
                and not (d / "Index.rst").is_file()
                and not (d / "Index.md").is_file()
            ]
            if missing_index:
                section.add("warn", f"Missing Index.rst in: {' '.join(missing_index)}")
            else:
                section.add("pass", "All subdirectories have Index.rst")

        if project.has_dir("Documentation/Images"):
            image_count = sum(
                project.count_files("Documentation/Images", pattern)
                for pattern in IMAGE_PATTERNS
            )
            result.metrics["images"] = image_count
            if image_count:
                section.add("pass", f"Documentation/Images/ present ({image_count} image(s))")
            else:
                section.add("warn", "Documentation/Images/ exists but empty")
        else:
            section.add("info", "No Documentation/Images/ (screenshots recommended)")

        if project.has_file("Documentation/.editorconfig"):
            section.add("pass", "Documentation/.editorconfig present")
        else:
            section.add("warn", "Documentation/.editorconfig missing (recommended for consistent formatting)")


CheckRegistry.register(DocumentationCheck())
