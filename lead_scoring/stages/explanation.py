"""
Explanation Generation
======================
Swedish score explanations built from ordered (predicate, template) rules.

Each factor has a rule table evaluated top to bottom against that factor's
sub-score; the first matching predicate picks the template. A table that
matches nothing omits the clause. The literal strings are part of the
public contract: CRM users read them and tests match them exactly.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from ..models.schemas import (
    CompanyInput,
    CompanyScoreBreakdown,
    PersonInput,
    PersonScore,
    Tier,
)
from .factors import round_half_up

Rule = Tuple[Callable[[float], bool], str]


def _always(score: float) -> bool:
    return True


# =============================================================================
# Rule tables
# =============================================================================

COMPANY_LABEL_RULES: Sequence[Rule] = (
    (lambda score: score >= 70, "Starkt företag:"),
    (lambda score: score >= 40, "Medelstarkt företag:"),
    (_always, "Svagare företag:"),
)

REVENUE_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "hög omsättning ({value})"),
    (lambda score: score >= 50, "omsättning {value}"),
    (_always, "låg omsättning ({value})"),
)

INDUSTRY_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "prioriterad bransch ({value})"),
    (_always, "bransch: {value}"),
)

GROWTH_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "stark tillväxt ({value}%)"),
    (lambda score: score <= 30, "negativ tillväxt ({value}%)"),
)

DISTANCE_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "nära ({value} km)"),
    (lambda score: score <= 30, "långt avstånd ({value} km)"),
)

ROLE_RULES: Sequence[Rule] = (
    (lambda score: score >= 90, "{value} (beslutsfattare)"),
    (lambda score: score >= 70, "{value}"),
    (_always, "{value} (lägre prioritet)"),
)

RELATIONSHIP_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "stark relation ({value})"),
    (lambda score: score <= 30, "svag relation ({value})"),
    (_always, "relation: {value}"),
)

ENGAGEMENT_RULES: Sequence[Rule] = (
    (lambda score: score >= 80, "hög aktivitet ({value} aktiviteter)"),
    (lambda score: score >= 40, "viss aktivitet ({value})"),
    (_always, "låg aktivitet"),
)

NO_ROLE_CLAUSE = "Roll saknas"
COMPANY_PREFIX = "Företag: "


def apply_rules(rules: Sequence[Rule], score: float, value: object = None) -> Optional[str]:
    """Render the template of the first rule whose predicate holds"""
    for predicate, template in rules:
        if predicate(score):
            return template.format(value=value)
    return None


# =============================================================================
# Value formatting
# =============================================================================

def format_revenue(revenue: float) -> str:
    """Whole millions (MSEK) from 1,000,000 upwards, whole thousands (TSEK) below"""
    if revenue >= 1_000_000:
        return f"{round_half_up(revenue / 1_000_000)} MSEK"
    return f"{round_half_up(revenue / 1_000)} TSEK"


def format_percent(fraction: float) -> int:
    return round_half_up(fraction * 100)


def format_distance(distance_km: float) -> int:
    return round_half_up(distance_km)


def _sentence(clauses: List[str]) -> str:
    return ", ".join(clauses) + "."


# =============================================================================
# Company explanations
# =============================================================================

def company_clauses(company: CompanyInput, breakdown: CompanyScoreBreakdown) -> List[str]:
    """One clause per company factor with real input, in fixed order"""
    candidates = []

    if company.revenue is not None:
        candidates.append(
            apply_rules(REVENUE_RULES, breakdown.revenue_score, format_revenue(company.revenue))
        )
    if company.industry:
        candidates.append(
            apply_rules(INDUSTRY_RULES, breakdown.industry_score, company.industry)
        )
    if company.cagr_3y is not None:
        candidates.append(
            apply_rules(GROWTH_RULES, breakdown.growth_score, format_percent(company.cagr_3y))
        )
    if company.distance_km is not None:
        candidates.append(
            apply_rules(
                DISTANCE_RULES, breakdown.distance_score, format_distance(company.distance_km)
            )
        )

    return [clause for clause in candidates if clause]


def company_reason(
    company_score: int,
    company: CompanyInput,
    breakdown: CompanyScoreBreakdown,
) -> str:
    """
    Standalone company explanation, e.g.
    "Starkt företag: hög omsättning (600 MSEK), prioriterad bransch (Tech)."
    """
    parts = [apply_rules(COMPANY_LABEL_RULES, company_score)]
    details = company_clauses(company, breakdown)
    if details:
        parts.append(_sentence(details))
    return " ".join(parts)


# =============================================================================
# Combined explanations
# =============================================================================

def person_clauses(
    person: PersonInput,
    person_score: PersonScore,
    include_relationship: bool,
) -> List[str]:
    clauses = []

    if person_score.top_role is None:
        clauses.append(NO_ROLE_CLAUSE)
    else:
        clauses.append(apply_rules(ROLE_RULES, person_score.role_score, person_score.top_role))

    if include_relationship and person.relationship_strength is not None:
        clauses.append(
            apply_rules(
                RELATIONSHIP_RULES,
                person_score.relationship_score,
                person.relationship_strength.value,
            )
        )

    if person.activities_90d is not None:
        clauses.append(
            apply_rules(ENGAGEMENT_RULES, person_score.engagement_score, person.activities_90d)
        )

    return clauses


def combined_reason(
    tier: Tier,
    person: PersonInput,
    person_score: PersonScore,
    company: CompanyInput,
    company_breakdown: CompanyScoreBreakdown,
    include_relationship: bool = False,
) -> str:
    """
    Tier-prefixed explanation covering person and company, e.g.
    "GOLD: CEO (beslutsfattare), hög aktivitet (25 aktiviteter). Företag: nära (30 km)."
    """
    parts = [f"{tier.value}:"]

    people = person_clauses(person, person_score, include_relationship)
    if people:
        parts.append(_sentence(people))

    details = company_clauses(company, company_breakdown)
    if details:
        parts.append(COMPANY_PREFIX + _sentence(details))

    return " ".join(parts)
