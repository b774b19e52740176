"""
Score card - category scores, weighted total and conformance tier

Scoring rules:
- Each category contributes its score as-is (no clamping, no weighting
  beyond the category maximum)
- The total is the pure sum of all category scores
- A category passes when its score reaches the pass threshold
- The tier is the first tier whose threshold the total reaches
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from typo3_conformance.config import CategoryConfig, ScoringConfig, Tier

logger = logging.getLogger(__name__)


PASSED_GLYPH = "✅ Passed"
ISSUES_GLYPH = "⚠️  Issues"


@dataclass
class ScoreCard:
    """
    Category scores of one assessment

    Attributes:
        scores: Category key -> score
        config: Scoring configuration the scores refer to
    """
    scores: dict[str, int]
    config: ScoringConfig = field(default_factory=ScoringConfig)

    @property
    def total(self) -> int:
        return sum(self.scores.values())

    @property
    def max_total(self) -> int:
        return self.config.max_total

    @property
    def tier(self) -> Tier:
        return self.config.tier_for(self.total)

    def score(self, key: str) -> int:
        return self.scores[key]

    def passed(self, key: str) -> bool:
        return self.scores[key] >= self.config.category(key).pass_threshold

    def status_glyph(self, key: str) -> str:
        return PASSED_GLYPH if self.passed(key) else ISSUES_GLYPH

    def rows(self) -> list[tuple[CategoryConfig, int]]:
        """Categories with their scores in summary table order."""
        return [(c, self.scores[c.key]) for c in self.config.categories]


def build_score_card(
    structure: Optional[int] = None,
    coding: Optional[int] = None,
    architecture: Optional[int] = None,
    testing: Optional[int] = None,
    best_practices: Optional[int] = None,
    config: Optional[ScoringConfig] = None,
) -> ScoreCard:
    """
    Build a score card, filling omitted scores with the configured defaults

    Args:
        structure: Extension Architecture score
        coding: Coding Guidelines score
        architecture: PHP Architecture score
        testing: Testing Standards score
        best_practices: Best Practices score
        config: Scoring configuration (defaults when omitted)

    Returns:
        ScoreCard
    """
    config = config or ScoringConfig()
    given = {
        "structure": structure,
        "coding": coding,
        "architecture": architecture,
        "testing": testing,
        "best_practices": best_practices,
    }

    scores: dict[str, int] = {}
    for category in config.categories:
        value = given.get(category.key)
        if value is None:
            value = category.default_score
        if value > category.max_score:
            logger.warning(
                f"{category.label} score {value} exceeds maximum {category.max_score}"
            )
        scores[category.key] = value

    return ScoreCard(scores=scores, config=config)


def scale_score(present: int, total: int, max_score: int) -> int:
    """Scale a present/total ratio to a category score, rounded half up."""
    if total <= 0:
        return 0
    return (present * max_score * 2 + total) // (total * 2)
