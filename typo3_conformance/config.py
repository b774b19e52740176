"""
Scoring configuration - categories, thresholds and conformance tiers

Every number that drives the report lives here: the maximum score of each
category, the pass threshold that decides the status glyph, the default score
used when a caller omits one, and the tier thresholds applied to the total.

The built-in defaults can be overridden with a YAML file::

    categories:
      testing:
        pass_threshold: 12
    tiers:
      good: 55
    exit_threshold: 55
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from typo3_conformance.errors import ConfigError

logger = logging.getLogger(__name__)


# ============================================================
# Configuration constants
# ============================================================

# Looked up in the project directory when no --config is given
PROJECT_CONFIG_FILENAME = ".typo3-conformance.yaml"

# Category order is the row order of the summary table
CATEGORY_KEYS: tuple[str, ...] = (
    "structure",
    "coding",
    "architecture",
    "testing",
    "best_practices",
)

CATEGORY_FIELDS = (
    "label",
    "max_score",
    "pass_threshold",
    "default_score",
    "pass_score",
    "fail_score",
)


# ============================================================
# Data models
# ============================================================

@dataclass(frozen=True)
class CategoryConfig:
    """
    One scored category of the summary table

    Attributes:
        key: Stable identifier (structure, coding, ...)
        label: Row label in the summary table
        max_score: Maximum points of the category
        pass_threshold: Minimum score rendered as passed
        default_score: Score used when the caller omits it
        pass_score: Score the runner assigns when the category check passes
        fail_score: Score the runner assigns when the category check fails
    """
    key: str
    label: str
    max_score: int = 20
    pass_threshold: int = 15
    default_score: int = 15
    pass_score: int = 18
    fail_score: int = 10


@dataclass(frozen=True)
class Tier:
    """Conformance tier selected by the total score."""
    key: str
    threshold: int
    label: str
    glyph: str


DEFAULT_CATEGORIES: tuple[CategoryConfig, ...] = (
    CategoryConfig("structure", "Extension Architecture", pass_score=18, fail_score=10),
    CategoryConfig("coding", "Coding Guidelines", pass_score=18, fail_score=12),
    CategoryConfig("architecture", "PHP Architecture", pass_score=18, fail_score=10),
    CategoryConfig("testing", "Testing Standards", pass_score=16, fail_score=8),
    CategoryConfig("best_practices", "Best Practices", default_score=10, pass_score=20, fail_score=0),
)

# Ordered from the highest threshold down
DEFAULT_TIERS: tuple[Tier, ...] = (
    Tier("excellent", 80, "EXCELLENT", "✅ Excellent"),
    Tier("good", 60, "GOOD", "✅ Good"),
    Tier("fair", 0, "FAIR", "⚠️  Fair"),
)


@dataclass(frozen=True)
class ScoringConfig:
    """
    Complete scoring configuration

    Attributes:
        categories: Scored categories in summary table order
        tiers: Conformance tiers, highest threshold first
        exit_threshold: Minimum total for a zero exit status of a full check
    """
    categories: tuple[CategoryConfig, ...] = DEFAULT_CATEGORIES
    tiers: tuple[Tier, ...] = DEFAULT_TIERS
    exit_threshold: int = 60

    @property
    def max_total(self) -> int:
        return sum(c.max_score for c in self.categories)

    def category(self, key: str) -> CategoryConfig:
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(key)

    def tier_for(self, total: int) -> Tier:
        """Return the first tier whose threshold the total reaches."""
        for tier in self.tiers:
            if total >= tier.threshold:
                return tier
        return self.tiers[-1]


# ============================================================
# Loading
# ============================================================

def _check_int(value: Any, where: str) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    return value


def _apply_overrides(base: ScoringConfig, data: dict[str, Any], source: Path) -> ScoringConfig:
    """Merge a parsed YAML mapping onto a configuration."""
    unknown = set(data) - {"categories", "tiers", "exit_threshold"}
    if unknown:
        raise ConfigError(f"{source}: unknown keys {', '.join(sorted(unknown))}")

    categories = list(base.categories)
    for key, overrides in (data.get("categories") or {}).items():
        if key not in CATEGORY_KEYS:
            raise ConfigError(f"{source}: unknown category '{key}'")
        if not isinstance(overrides, dict):
            raise ConfigError(f"{source}: category '{key}' must be a mapping")
        changes: dict[str, Any] = {}
        for name, value in overrides.items():
            if name not in CATEGORY_FIELDS:
                raise ConfigError(f"{source}: unknown field '{name}' in category '{key}'")
            if name == "label":
                changes[name] = str(value)
            else:
                changes[name] = _check_int(value, f"{source}: categories.{key}.{name}")
        index = CATEGORY_KEYS.index(key)
        categories[index] = replace(categories[index], **changes)

    tiers = list(base.tiers)
    for key, threshold in (data.get("tiers") or {}).items():
        positions = [i for i, tier in enumerate(tiers) if tier.key == key]
        if not positions:
            raise ConfigError(f"{source}: unknown tier '{key}'")
        tiers[positions[0]] = replace(
            tiers[positions[0]],
            threshold=_check_int(threshold, f"{source}: tiers.{key}"),
        )
    tiers.sort(key=lambda t: t.threshold, reverse=True)

    exit_threshold = base.exit_threshold
    if "exit_threshold" in data:
        exit_threshold = _check_int(data["exit_threshold"], f"{source}: exit_threshold")

    return ScoringConfig(
        categories=tuple(categories),
        tiers=tuple(tiers),
        exit_threshold=exit_threshold,
    )


def load_config(
    config_path: Optional[Path] = None,
    project_dir: Optional[Path] = None,
) -> ScoringConfig:
    """
    Load the scoring configuration

    Lookup order: explicit config_path, then PROJECT_CONFIG_FILENAME in the
    project directory, then the built-in defaults.

    Args:
        config_path: Explicit YAML file (must exist)
        project_dir: Extension directory searched for a project config

    Returns:
        ScoringConfig

    Raises:
        ConfigError: File missing, unparsable or containing invalid values
    """
    if config_path is None and project_dir is not None:
        candidate = project_dir / PROJECT_CONFIG_FILENAME
        if candidate.is_file():
            config_path = candidate

    if config_path is None:
        return ScoringConfig()

    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    logger.debug(f"Loading scoring config from {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if data is None:
        return ScoringConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")

    return _apply_overrides(ScoringConfig(), data, config_path)
