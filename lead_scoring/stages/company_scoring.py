"""
Company Scoring
===============
Weighted company score, usable standalone or as the company half of a
combined lead score. Both call paths go through this stage so the score and
breakdown are identical.

Factors:
- Revenue (SEK ladder)
- Growth (3-year CAGR ladder)
- Industry fit (target substring match)
- Distance to Gothenburg (ascending km ladder)
- Existing score (external 0-100 rating)

Employee count is carried on the input but not weighted.
"""

from typing import Optional

from ..models.schemas import CompanyInput, CompanyScoreBreakdown, CompanyScoreResult
from ..models.scoring_config import ScoringConfig
from ..config.settings import WARNING_NO_REVENUE
from .explanation import company_reason
from .factors import (
    round_half_up,
    score_revenue,
    score_growth,
    score_industry,
    score_distance,
    score_existing,
)


class CompanyScoringStage:
    """
    Calculate the company score with its Swedish explanation.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def process(self, company: CompanyInput) -> CompanyScoreResult:
        """
        Score one company.

        Args:
            company: Company attributes (any field may be missing)

        Returns:
            CompanyScoreResult with score, breakdown, reason, factors used
            and warnings
        """
        factors = self.config.company_factors
        factors_used = []
        warnings = []

        revenue_score = score_revenue(company.revenue, self.config)
        if company.revenue is not None:
            factors_used.append("revenue")
        else:
            warnings.append(WARNING_NO_REVENUE)

        growth_score = score_growth(company.cagr_3y, self.config)
        if company.cagr_3y is not None:
            factors_used.append("cagr_3y")

        industry_score = score_industry(company.industry, self.config)
        if company.industry:
            factors_used.append("industry")

        distance_score = score_distance(company.distance_km, self.config)
        if company.distance_km is not None:
            factors_used.append("distance_km")

        existing_score = score_existing(company.score, self.config)
        if company.score is not None:
            factors_used.append("company_score")

        weighted = (
            revenue_score * factors.revenue
            + growth_score * factors.growth
            + industry_score * factors.industry_fit
            + distance_score * factors.distance
            + existing_score * factors.existing_score
        )
        company_score = round_half_up(weighted)

        breakdown = CompanyScoreBreakdown(
            revenue_score=revenue_score,
            growth_score=growth_score,
            industry_score=industry_score,
            distance_score=distance_score,
            existing_score=existing_score,
        )

        return CompanyScoreResult(
            company_score=company_score,
            reason=company_reason(company_score, company, breakdown),
            breakdown=breakdown,
            factors_used=factors_used,
            warnings=warnings,
        )
