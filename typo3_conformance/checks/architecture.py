"""PHP architecture check.

Validates dependency injection, PSR-14 events, Extbase patterns and PSR-15
middleware registration.
"""

import re

from typo3_conformance.checks.base import CheckRegistry, CheckResult, ConformanceCheck
from typo3_conformance.project import ExtensionProject


SERVICES_YAML = "Configuration/Services.yaml"
MIDDLEWARES_PHP = "Configuration/RequestMiddlewares.php"

# Anti-patterns that should be replaced by dependency injection
MAKE_INSTANCE = "GeneralUtility::makeInstance"
GLOBALS_ACCESS = "$GLOBALS["

CONSTRUCTOR_PATTERN = "public function __construct"
INJECT_METHOD_PATTERN = re.compile(r"public function inject[A-Z]")
REPOSITORY_EXTENDS_PATTERN = re.compile(r"extends.*Repository")
CONTROLLER_EXTENDS = "extends ActionController"


class ArchitectureCheck(ConformanceCheck):
    """Dependency injection, events, Extbase and middleware."""

    key = "architecture"
    title = "3. PHP Architecture Conformance"
    category = "architecture"
    order = 40

    def run(self, project: ExtensionProject) -> CheckResult:
        result = self.new_result()
        self._check_di_configuration(project, result)
        self._check_deprecated_patterns(project, result)
        self._check_injection_patterns(project, result)
        self._check_events(project, result)
        self._check_extbase(project, result)
        self._check_middleware(project, result)
        self.add_summary(result, "PHP Architecture")
        return result

    def _check_di_configuration(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Dependency Injection Configuration")

        if not project.has_file(SERVICES_YAML):
            section.add("fail", f"{SERVICES_YAML} missing (CRITICAL)")
            result.fail()
            return

        services = section.add("pass", f"{SERVICES_YAML} present")
        if project.file_contains(SERVICES_YAML, "autowire: true"):
            services.add("pass", "Autowiring enabled")
        else:
            services.add("warn", "Autowiring not enabled")
        if project.file_contains(SERVICES_YAML, "autoconfigure: true"):
            services.add("pass", "Autoconfiguration enabled")
        else:
            services.add("warn", "Autoconfiguration not enabled")

    def _check_deprecated_patterns(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Deprecated Pattern Detection")

        make_instance = project.count_matches("Classes", MAKE_INSTANCE)
        result.metrics["make_instance"] = make_instance
        if make_instance:
            finding = section.add("fail", f"{make_instance} instances of {MAKE_INSTANCE}() found")
            finding.add("note", "Should use constructor injection instead")
            result.fail()
        else:
            section.add("pass", f"No {MAKE_INSTANCE}() usage found")

        globals_access = project.count_matches("Classes", GLOBALS_ACCESS)
        result.metrics["globals_access"] = globals_access
        if globals_access:
            finding = section.add("fail", f"{globals_access} instances of $GLOBALS access found")
            finding.add("note", "Should use dependency injection instead")
            result.fail()
        else:
            section.add("pass", "No $GLOBALS access found")

    def _check_injection_patterns(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Dependency Injection Patterns")

        constructors = project.count_matches("Classes", CONSTRUCTOR_PATTERN)
        result.metrics["constructors"] = constructors
        if constructors:
            section.add("pass", f"{constructors} classes use constructors (potential DI)")
        else:
            section.add("warn", "No constructor injection found")

        inject_methods = project.count_matches("Classes", INJECT_METHOD_PATTERN)
        result.metrics["inject_methods"] = inject_methods
        if inject_methods:
            finding = section.add("warn", f"{inject_methods} method injection patterns found (inject*)")
            finding.add("note", "Consider using constructor injection instead (more modern)")

    def _check_events(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Event System")

        for dirname, noun in (("Event", "event classes"), ("EventListener", "event listeners")):
            directories = project.find_dirs("Classes", dirname)
            if directories:
                count = sum(len(project.php_files(str(d.relative_to(project.path)))) for d in directories)
                section.add("pass", f"{count} {noun} found in Classes/{dirname}/")
            else:
                section.add("warn", f"No Classes/{dirname}/ directory found")

    def _check_extbase(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Extbase Architecture")

        if project.has_dir("Classes/Domain/Model"):
            models = len(project.php_files("Classes/Domain/Model"))
            section.add("pass", f"{models} domain models found")
        else:
            section.add("info", "No Classes/Domain/Model/ (not using Extbase models)")

        if project.has_dir("Classes/Domain/Repository"):
            repositories = section.add(
                "pass", f"{len(project.php_files('Classes/Domain/Repository'))} repositories found"
            )
            if project.contains("Classes/Domain/Repository", REPOSITORY_EXTENDS_PATTERN):
                repositories.add("pass", "Repositories extend base Repository class")
        else:
            section.add("info", "No Classes/Domain/Repository/ (not using Extbase repositories)")

        if project.has_dir("Classes/Controller"):
            controllers = section.add(
                "pass", f"{len(project.php_files('Classes/Controller'))} controllers found"
            )
            if project.contains("Classes/Controller", CONTROLLER_EXTENDS):
                controllers.add("pass", "Controllers extend ActionController")

    def _check_middleware(self, project: ExtensionProject, result: CheckResult) -> None:
        section = result.section("Middleware")

        if not project.has_file(MIDDLEWARES_PHP):
            section.add("info", f"No {MIDDLEWARES_PHP} (not using custom middleware)")
            return

        middlewares = section.add("pass", f"{MIDDLEWARES_PHP} present")
        count = sum(
            len(project.php_files(str(d.relative_to(project.path))))
            for d in project.find_dirs("Classes", "Middleware")
        )
        if count:
            middlewares.add("pass", f"{count} middleware classes found")


CheckRegistry.register(ArchitectureCheck())
