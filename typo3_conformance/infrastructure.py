"""
Project infrastructure probes

Existence checks for the repository hygiene files, quality tool
configurations and CI pipelines reported in the Best Practices Assessment.
A file merely existing counts as "configured".
"""

from dataclasses import dataclass

from typo3_conformance.project import ExtensionProject
from typo3_conformance.scorer import scale_score


GROUP_PROJECT = "Project Infrastructure"
GROUP_QUALITY = "Code Quality Tools"
GROUP_CI = "CI/CD Pipeline"

GROUPS = (GROUP_PROJECT, GROUP_QUALITY, GROUP_CI)

# Quality tool configurations, root and Build/ layouts
PHP_CS_FIXER_CONFIGS = (
    ".php-cs-fixer.dist.php",
    ".php-cs-fixer.php",
    "Build/php-cs-fixer/php-cs-fixer.php",
)
PHPSTAN_CONFIGS = (
    "phpstan.neon",
    "phpstan.neon.dist",
    "Build/phpstan/phpstan.neon",
)
RECTOR_CONFIGS = (
    "rector.php",
    "Build/rector/rector.php",
)
GITHUB_WORKFLOWS = ".github/workflows"
GITLAB_CI = ".gitlab-ci.yml"


@dataclass(frozen=True)
class InfrastructureProbe:
    """
    One infrastructure item

    Attributes:
        group: Report subsection
        label: Bullet label
        files: Any of these files satisfies the probe
        dirs: Any of these directories satisfies the probe
        present_text: Status shown when satisfied
        missing_text: Status shown otherwise
    """
    group: str
    label: str
    files: tuple[str, ...] = ()
    dirs: tuple[str, ...] = ()
    present_text: str = "✅ Present"
    missing_text: str = "❌ Missing"

    def is_present(self, project: ExtensionProject) -> bool:
        return project.has_file(*self.files) or project.has_dir(*self.dirs)

    def status(self, project: ExtensionProject) -> str:
        return self.present_text if self.is_present(project) else self.missing_text


PROBES: tuple[InfrastructureProbe, ...] = (
    InfrastructureProbe(GROUP_PROJECT, "README.md", files=("README.md",)),
    InfrastructureProbe(GROUP_PROJECT, "LICENSE", files=("LICENSE",)),
    InfrastructureProbe(GROUP_PROJECT, ".editorconfig", files=(".editorconfig",), missing_text="⚠️  Missing"),
    InfrastructureProbe(GROUP_PROJECT, ".gitignore", files=(".gitignore",), missing_text="⚠️  Missing"),
    InfrastructureProbe(
        GROUP_QUALITY, "php-cs-fixer", files=PHP_CS_FIXER_CONFIGS,
        present_text="✅ Configured", missing_text="⚠️  Not configured",
    ),
    InfrastructureProbe(
        GROUP_QUALITY, "phpstan", files=PHPSTAN_CONFIGS,
        present_text="✅ Configured", missing_text="⚠️  Not configured",
    ),
    InfrastructureProbe(
        GROUP_QUALITY, "rector", files=RECTOR_CONFIGS,
        present_text="✅ Configured", missing_text="ℹ️  Not configured",
    ),
    InfrastructureProbe(
        GROUP_CI, "GitHub Actions", dirs=(GITHUB_WORKFLOWS,),
        present_text="✅ Configured", missing_text="⚠️  Not found",
    ),
    InfrastructureProbe(
        GROUP_CI, "GitLab CI", files=(GITLAB_CI,),
        present_text="✅ Configured", missing_text="ℹ️  Not found",
    ),
)


def probes_by_group() -> dict[str, list[InfrastructureProbe]]:
    grouped: dict[str, list[InfrastructureProbe]] = {group: [] for group in GROUPS}
    for probe in PROBES:
        grouped[probe.group].append(probe)
    return grouped


def best_practices_score(project: ExtensionProject, max_score: int) -> int:
    """
    Score the infrastructure on a 0..max_score scale

    Each non-CI probe counts once; any CI pipeline counts once.
    """
    items = [p.is_present(project) for p in PROBES if p.group != GROUP_CI]
    items.append(any(p.is_present(project) for p in PROBES if p.group == GROUP_CI))
    return scale_score(sum(items), len(items), max_score)
