"""Testing standards check.

Validates the PHPUnit / Codeception infrastructure, the presence of unit,
functional and acceptance tests, and estimates a test-to-class ratio.
"""

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject


# Classes/ subdirectories expected to be mirrored in Tests/Unit/
MIRRORED_DIRS = ("Controller", "Service", "Domain/Repository")

GOOD_RATIO = 70
MODERATE_RATIO = 50


class TestingCheck(ConformanceCheck):
    """Test infrastructure, test suites and coverage estimate."""

    # keep pytest from collecting this class
    __test__ = False

    key = "testing"
    title = "4. Testing Standards Conformance"
    category = "testing"
    order = 50

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()

        infrastructure = result.section("Test Infrastructure")
        if not project.has_dir("Tests"):
            infrastructure.add("fail", "Tests/ directory missing (CRITICAL)")
            result.fail()
            return result
        infrastructure.add("pass", "Tests/ directory present")

        self._check_phpunit_config(project, result)
        unit_count = self._check_unit_tests(project, result)
        functional_count = self._check_functional_tests(project, result)
        self._check_acceptance_tests(project, result)
        self._check_ratio(project, result, unit_count + functional_count)
        self._check_dependencies(project, result)
        self.add_summary(result, "Testing Standards")
        return result

    def _check_phpunit_config(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("PHPUnit Configuration")

        if project.has_file("Build/phpunit/UnitTests.xml", "phpunit.xml"):
            section.add("pass", "Unit test configuration found")
        else:
            section.add("fail", "No Unit test configuration (Build/phpunit/UnitTests.xml or phpunit.xml)")
            result.fail()

        if project.has_file("Build/phpunit/FunctionalTests.xml"):
            section.add("pass", "Functional test configuration found")
        else:
            section.add("warn", "No Functional test configuration (Build/phpunit/FunctionalTests.xml)")

    def _check_unit_tests(self, project: ExtensionProject, result: CheckResult) -> int:
        section = result.section("Unit Tests")

        if not project.has_dir("Tests/Unit"):
            section.add("fail", "Tests/Unit/ directory missing")
            result.fail()
            return 0

        count = project.count_files("Tests/Unit", "*Test.php")
        result.metrics["unit_tests"] = count
        unit = section.add("pass", "Tests/Unit/ directory present")
        unit.add("note", f"**{count} unit test files found**")
        if count == 0:
            unit.add("warn", "No unit tests found")

        for subdir in MIRRORED_DIRS:
            if project.has_dir(f"Classes/{subdir}") and not project.has_dir(f"Tests/Unit/{subdir}"):
                unit.add("warn", f"Tests/Unit/{subdir}/ missing (Classes/{subdir}/ exists)")
        return count

    def _check_functional_tests(self, project: ExtensionProject, result: CheckResult) -> int:
        section = result.section("Functional Tests")

        if not project.has_dir("Tests/Functional"):
            functional = section.add("warn", "Tests/Functional/ directory missing")
            functional.add("note", "Functional tests recommended for repository and database operations")
            return 0

        count = project.count_files("Tests/Functional", "*Test.php")
        result.metrics["functional_tests"] = count
        functional = section.add("pass", "Tests/Functional/ directory present")
        functional.add("note", f"**{count} functional test files found**")

        if project.has_dir("Tests/Functional/Fixtures"):
            fixtures = (
                project.count_files("Tests/Functional/Fixtures", "*.csv")
                + project.count_files("Tests/Functional/Fixtures", "*.xml")
            )
            functional.add("pass", f"Tests/Functional/Fixtures/ found ({fixtures} fixture files)")
        elif count:
            functional.add("warn", "No Tests/Functional/Fixtures/ (functional tests may need fixtures)")
        return count

    def _check_acceptance_tests(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Acceptance Tests")

        if not project.has_dir("Tests/Acceptance"):
            section.add("info", "Tests/Acceptance/ not found (optional for most extensions)")
            return

        count = project.count_files("Tests/Acceptance", "*Cest.php")
        result.metrics["acceptance_tests"] = count
        acceptance = section.add("pass", "Tests/Acceptance/ directory present")
        acceptance.add("note", f"**{count} acceptance test files found**")
        if project.has_file("Tests/codeception.yml"):
            acceptance.add("pass", "codeception.yml configuration found")
        else:
            acceptance.add("warn", "codeception.yml configuration missing")

    def _check_ratio(self, project: ExtensionProject, result: CheckResult, total_tests: int) -> None:
        if not project.has_dir("Classes"):
            return

        section = result.section("Test Coverage Estimate")
        class_count = len(project.php_files("Classes"))
        section.preamble.append(f"- **Total Classes:** {class_count}")
        section.preamble.append(f"- **Total Tests:** {total_tests}")
        if class_count == 0:
            return

        ratio = total_tests * 100 // class_count
        result.metrics["test_ratio"] = ratio
        section.preamble.append(f"- **Test Ratio:** {ratio}%")
        if ratio >= GOOD_RATIO:
            section.add("pass", f"Good test coverage (≥{GOOD_RATIO}%)")
        elif ratio >= MODERATE_RATIO:
            section.add("warn", f"Moderate test coverage ({MODERATE_RATIO}-{GOOD_RATIO}%)")
        else:
            section.add("fail", f"Low test coverage (<{MODERATE_RATIO}%)")
            result.fail()

    def _check_dependencies(self, project: ExtensionProject, result: CheckResult) -> None:
        if not project.has_file("composer.json"):
            return

        section = result.section("Testing Framework Dependency")
        for package in ("typo3/testing-framework", "phpunit/phpunit"):
            if project.file_contains("composer.json", package):
                section.add("pass", f"{package} in composer.json")
            else:
                section.add("warn", f"{package} not found in composer.json")


CheckRegistry.register(TestingCheck())
