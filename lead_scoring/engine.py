"""
Lead Scoring Engine - Main Orchestrator
=======================================
Combines the scoring stages:
  Person Scoring + Company Scoring -> Weighted Blend -> Tier -> Explanation

Every calculation reads one immutable configuration and touches no shared
mutable state, so calls may run concurrently from any number of threads or
tasks. Configuration updates swap in a new object (copy-on-write).
"""

import logging
from typing import Iterable, List, Optional, TypeVar

from .models.schemas import (
    PersonInput,
    CompanyInput,
    CompanyScoreResult,
    ScoreBreakdown,
    ScoringResult,
    BulkScoreItem,
    BulkScoringResult,
    Tier,
)
from .models.scoring_config import ScoringConfig, create_default_scoring_config
from .stages.person_scoring import PersonScoringStage
from .stages.company_scoring import CompanyScoringStage
from .stages.explanation import combined_reason
from .stages.factors import round_half_up

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _unique(*groups: Iterable[T]) -> List[T]:
    """Concatenate keeping first occurrences only"""
    seen = []
    for group in groups:
        for item in group:
            if item not in seen:
                seen.append(item)
    return seen


def determine_tier(score: int, config: ScoringConfig) -> Tier:
    """Inclusive lower bounds: gold, then silver, else bronze"""
    if score >= config.tiers.gold:
        return Tier.GOLD
    if score >= config.tiers.silver:
        return Tier.SILVER
    return Tier.BRONZE


class LeadScoringEngine:
    """
    Scores people, companies and batches against one scoring configuration.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize the scoring engine.

        Args:
            config: Validated scoring configuration (defaults if not provided)
        """
        self._bind(config or create_default_scoring_config())

    def _bind(self, config: ScoringConfig):
        # Config and stages are swapped as one tuple so a calculation never
        # mixes two configurations.
        self._stages = (
            config,
            PersonScoringStage(config),
            CompanyScoringStage(config),
        )

    @property
    def config(self) -> ScoringConfig:
        return self._stages[0]

    def score_company(self, company: CompanyInput) -> CompanyScoreResult:
        """Company-only score with Swedish explanation"""
        _, _, company_stage = self._stages
        result = company_stage.process(company)
        logger.debug("Company scored %s (factors: %s)", result.company_score, result.factors_used)
        return result

    def score_lead(self, person: PersonInput, company: CompanyInput) -> ScoringResult:
        """
        Score a person together with their company.

        Args:
            person: Person attributes
            company: Company attributes

        Returns:
            ScoringResult with the three scores, tier, breakdown, warnings,
            factors used and explanation
        """
        config, person_stage, company_stage = self._stages
        person_part = person_stage.process(person)
        company_part = company_stage.process(company)

        combined = round_half_up(
            person_part.person_score * config.weights.person
            + company_part.company_score * config.weights.company
        )
        tier = determine_tier(combined, config)

        breakdown = ScoreBreakdown(
            role_score=person_part.role_score,
            relationship_score=person_part.relationship_score,
            engagement_score=person_part.engagement_score,
            **company_part.breakdown.model_dump(),
        )

        reason = combined_reason(
            tier,
            person,
            person_part,
            company,
            company_part.breakdown,
            include_relationship=config.uses_relationship,
        )

        logger.debug(
            "Lead scored %s/%s -> %s (%s)",
            person_part.person_score,
            company_part.company_score,
            combined,
            tier.value,
        )

        return ScoringResult(
            person_score=person_part.person_score,
            company_score=company_part.company_score,
            combined_score=combined,
            tier=tier,
            breakdown=breakdown,
            factors_used=_unique(person_part.factors_used, company_part.factors_used),
            warnings=_unique(person_part.warnings, company_part.warnings),
            reason=reason,
        )

    def score_bulk(self, items: List[BulkScoreItem]) -> List[BulkScoringResult]:
        """
        Score each item in isolation, preserving order and ids.

        The caller is responsible for bounding the batch size.
        """
        results = [
            BulkScoringResult(
                id=item.id,
                **self.score_lead(item.person, item.company).model_dump(),
            )
            for item in items
        ]

        if results:
            tiers = [r.tier for r in results]
            logger.info(
                "Bulk scored %d leads (gold=%d silver=%d bronze=%d)",
                len(results),
                tiers.count(Tier.GOLD),
                tiers.count(Tier.SILVER),
                tiers.count(Tier.BRONZE),
            )
        return results

    def update_config(self, new_config: ScoringConfig):
        """Swap in a new configuration; in-flight calls keep the old one"""
        self._bind(new_config)
        logger.info("Scoring configuration updated: %s", new_config.name)


# =============================================================================
# Convenience Functions
# =============================================================================

def calculate_company_score(
    company: CompanyInput, config: Optional[ScoringConfig] = None
) -> CompanyScoreResult:
    return LeadScoringEngine(config).score_company(company)


def calculate_score(
    person: PersonInput,
    company: CompanyInput,
    config: Optional[ScoringConfig] = None,
) -> ScoringResult:
    return LeadScoringEngine(config).score_lead(person, company)


def calculate_bulk_scores(
    items: List[BulkScoreItem], config: Optional[ScoringConfig] = None
) -> List[BulkScoringResult]:
    return LeadScoringEngine(config).score_bulk(items)
