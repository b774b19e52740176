from git import Repo

from conftest import commit_all, php_class
from typo3_conformance.checks import CheckRegistry, ConformanceCheck
from typo3_conformance.checks.architecture import ArchitectureCheck
from typo3_conformance.checks.coding_standards import CodingStandardsCheck
from typo3_conformance.checks.documentation import DocumentationCheck
from typo3_conformance.checks.file_structure import FileStructureCheck
from typo3_conformance.checks.testing import TestingCheck
from typo3_conformance.project import load_project
from typo3_conformance.report.markdown import render_check_result


def messages(result, status=None):
    def walk(findings):
        for finding in findings:
            if status is None or finding.status == status:
                yield finding.message
            yield from walk(finding.details)
    return [m for s in result.subsections for m in walk(s.findings)]


def run_check(check, path):
    return check.run(load_project(path))


class TestRegistry:
    def test_all_checks_in_order(self):
        keys = [c.key for c in CheckRegistry.get_all()]
        assert keys == [
            "file_structure",
            "documentation",
            "coding_standards",
            "architecture",
            "testing",
            "phpstan_baseline",
        ]

    def test_get_by_key(self):
        assert isinstance(CheckRegistry.get("testing"), TestingCheck)
        assert CheckRegistry.get("unknown") is None

    def test_register_and_unregister_custom_check(self, extension):
        class LicenseHeaderCheck(ConformanceCheck):
            key = "license_header"
            title = "License Headers"
            order = 5

            def run(self, project):
                return self.new_result()

        CheckRegistry.register(LicenseHeaderCheck())
        try:
            first = CheckRegistry.get_all()[0]
            assert first.key == "license_header"
            assert first.run(load_project(extension)).title == "License Headers"
        finally:
            CheckRegistry.unregister("license_header")
        assert CheckRegistry.get("license_header") is None


class TestFileStructure:
    def test_exemplary_extension_passes(self, extension):
        result = run_check(FileStructureCheck(), extension)
        assert result.passed
        assert result.category == "structure"
        assert "No PHP files in root (except ext_* files)" in messages(result, "pass")

    def test_missing_critical_parts_fail(self, make_extension):
        path = make_extension({"composer.json": None, "ext_emconf.php": "<?php\n"}, exemplary=False)
        result = run_check(FileStructureCheck(), path)
        assert not result.passed
        failures = messages(result, "fail")
        assert "composer.json missing (CRITICAL)" in failures
        assert "Classes/ directory missing (CRITICAL)" in failures

    def test_root_php_without_git_fails(self, make_extension):
        path = make_extension({"helper.php": "<?php\n", "rector.php": "<?php\n"})
        result = run_check(FileStructureCheck(), path)
        assert not result.passed
        assert "1 PHP file(s) found in root directory:" in messages(result, "fail")
        assert "helper.php (ISSUE: should be in Classes/ or Build/)" in messages(result, "note")

    def test_untracked_root_php_is_informational(self, make_extension):
        path = make_extension()
        commit_all(Repo.init(path))
        (path / "scratch.php").write_text("<?php\n", encoding="utf-8")
        result = run_check(FileStructureCheck(), path)
        assert result.passed
        assert "1 untracked PHP file(s) in root (ignored, not committed):" in messages(result, "info")

    def test_committed_root_php_fails(self, make_extension):
        path = make_extension({"helper.php": "<?php\n"})
        commit_all(Repo.init(path))
        result = run_check(FileStructureCheck(), path)
        assert not result.passed
        assert "1 PHP file(s) committed to repository:" in messages(result, "fail")

    def test_layout_anti_patterns(self, make_extension):
        path = make_extension({
            "Classes/Controllers/PostController.php": php_class("Controllers", "PostController"),
            "Classes/Helpers/Format.php": php_class("Helpers", "Format"),
            "ext_tables.php": "<?php\n",
        })
        result = run_check(FileStructureCheck(), path)
        assert not result.passed
        assert "Classes/Controllers/ found (should be Controller/ singular)" in messages(result, "fail")
        warnings = messages(result, "warn")
        assert "Classes/Helpers/ found (should use Utility/ instead)" in warnings
        assert "ext_tables.php present (consider migrating to Configuration/Backend/)" in warnings


class TestDocumentation:
    def test_never_fails(self, minimal_extension):
        result = run_check(DocumentationCheck(), minimal_extension)
        assert result.passed
        assert result.category is None
        assert "No documentation entry point (need Index.rst, Index.md, or README)" in messages(result, "fail")

    def test_guides_xml(self, extension):
        result = run_check(DocumentationCheck(), extension)
        passes = messages(result, "pass")
        assert "Uses typo3docs theme" in passes
        assert "Has <project> element" in passes

    def test_legacy_settings_and_missing_index(self, make_extension):
        path = make_extension({
            "Documentation/guides.xml": None,
            "Documentation/Settings.cfg": "[general]\n",
            "Documentation/Installation/Setup.rst": "Setup\n",
            "Documentation/_includes/Links.rst": "",
            "Documentation/Images/screen.png": "png",
        })
        result = run_check(DocumentationCheck(), path)
        assert "Documentation/Settings.cfg present (LEGACY)" in messages(result, "warn")
        assert "Missing Index.rst in: Installation" in messages(result, "warn")
        assert "Documentation/Images/ present (1 image(s))" in messages(result, "pass")


class TestCodingStandards:
    def test_exemplary_sources_pass(self, extension):
        result = run_check(CodingStandardsCheck(), extension)
        assert result.passed
        assert result.preamble == ["**Total PHP files:** 3"]
        assert "**Coding standards: PASSED**" in messages(result, "pass")

    def test_violations(self, make_extension):
        path = make_extension({
            "Classes/Utility/legacy_helper.php": (
                "<?php\n"
                "class legacy_helper\n"
                "{\n"
                "\tpublic $items = array(1, 2);\n"
                "\tpublic function has($x) { return in_array($x, $this->items) || is_array($x); }\n"
                "}\n"
            ),
        })
        result = run_check(CodingStandardsCheck(), path)
        assert not result.passed
        assert result.metrics["missing_strict_types"] == 1
        assert result.metrics["old_array_syntax"] == 1
        assert result.metrics["missing_namespace"] == 1
        assert result.metrics["classes_without_phpdoc"] == 1
        assert result.metrics["files_with_tabs"] == 1
        assert "1 classes using incorrect naming (should be UpperCamelCase)" in messages(result, "fail")
        assert "**Coding standards: ISSUES FOUND**" in messages(result, "warn")

    def test_duplicate_use_statements_warn(self, make_extension):
        source = php_class("Service", "Mailer").replace(
            "/**", "use Foo\\Bar;\nuse Foo\\Bar;\n\n/**", 1
        )
        path = make_extension({"Classes/Service/Mailer.php": source})
        result = run_check(CodingStandardsCheck(), path)
        assert result.passed
        assert "1 duplicate use statements found" in messages(result, "warn")

    def test_ignored_sources_are_skipped(self, make_extension):
        path = make_extension({
            ".gitignore": "/Classes/Generated/\n",
            "Classes/Generated/bad.php": "<?php\n$a = array();\n",
        })
        result = run_check(CodingStandardsCheck(), path)
        assert result.passed
        assert result.metrics["php_files"] == 3

    def test_missing_classes_fails(self, minimal_extension):
        result = run_check(CodingStandardsCheck(), minimal_extension)
        assert not result.passed
        assert messages(result, "fail") == ["Classes/ directory not found"]


class TestArchitecture:
    def test_exemplary_extension_passes(self, extension):
        result = run_check(ArchitectureCheck(), extension)
        assert result.passed
        passes = messages(result, "pass")
        assert "Autowiring enabled" in passes
        assert "Autoconfiguration enabled" in passes
        assert "Repositories extend base Repository class" in passes
        assert "Controllers extend ActionController" in passes
        assert result.metrics["constructors"] == 1

    def test_missing_services_yaml_fails(self, make_extension):
        result = run_check(ArchitectureCheck(), make_extension({"Configuration/Services.yaml": None}))
        assert not result.passed
        assert "Configuration/Services.yaml missing (CRITICAL)" in messages(result, "fail")

    def test_deprecated_patterns_are_counted_recursively(self, make_extension):
        path = make_extension({
            "Classes/Service/Deep/Nested/Legacy.php": (
                "<?php\n"
                "$a = GeneralUtility::makeInstance(A::class);\n"
                "$b = GeneralUtility::makeInstance(B::class);\n"
                "$c = $GLOBALS['BE_USER'];\n"
            ),
        })
        result = run_check(ArchitectureCheck(), path)
        assert not result.passed
        assert result.metrics["make_instance"] == 2
        assert result.metrics["globals_access"] == 1
        assert "1 instances of $GLOBALS access found" in messages(result, "fail")

    def test_events_and_middleware(self, make_extension):
        path = make_extension({
            "Classes/Event/PostPublishedEvent.php": php_class("Event", "PostPublishedEvent"),
            "Classes/EventListener/NotifyListener.php": php_class("EventListener", "NotifyListener"),
            "Configuration/RequestMiddlewares.php": "<?php\n\nreturn [];\n",
            "Classes/Middleware/Auth.php": php_class("Middleware", "Auth"),
        })
        passes = messages(run_check(ArchitectureCheck(), path), "pass")
        assert "1 event classes found in Classes/Event/" in passes
        assert "1 event listeners found in Classes/EventListener/" in passes
        assert "1 middleware classes found" in passes


class TestTesting:
    def test_exemplary_extension_passes(self, extension):
        result = run_check(TestingCheck(), extension)
        assert result.passed
        assert result.metrics["unit_tests"] == 2
        assert result.metrics["functional_tests"] == 1
        assert result.metrics["test_ratio"] == 100
        assert "Good test coverage (≥70%)" in messages(result, "pass")

    def test_missing_tests_directory_fails(self, minimal_extension):
        result = run_check(TestingCheck(), minimal_extension)
        assert not result.passed
        assert messages(result) == ["Tests/ directory missing (CRITICAL)"]

    def test_low_ratio_fails(self, make_extension):
        path = make_extension({
            "Tests/Unit/Domain/Repository/PostRepositoryTest.php": None,
            "Tests/Functional/Domain/Repository/PostRepositoryTest.php": None,
        })
        result = run_check(TestingCheck(), path)
        assert not result.passed
        assert result.metrics["test_ratio"] == 33
        assert "Low test coverage (<50%)" in messages(result, "fail")

    def test_moderate_ratio_warns(self, make_extension):
        path = make_extension({"Tests/Functional/Domain/Repository/PostRepositoryTest.php": None})
        result = run_check(TestingCheck(), path)
        assert result.passed
        assert result.metrics["test_ratio"] == 66
        assert "Moderate test coverage (50-70%)" in messages(result, "warn")


def test_rendered_section_layout(extension):
    text = render_check_result(run_check(FileStructureCheck(), extension))
    lines = text.splitlines()
    assert lines[0] == "## 1. File Structure Conformance"
    assert "### Required Files" in lines
    assert "- ✅ composer.json present" in lines
    assert "  - ✅ Classes/Controller/ found" in lines
    assert lines[-1] == "---"
