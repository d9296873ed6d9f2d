"""
Person Scoring
==============
Weighted person score from role, relationship strength and engagement.

Factors:
- Role: highest-scoring function wins
- Relationship: categorical strength (only when the profile weighs it)
- Engagement: activities in the trailing 90 days
"""

from typing import Optional

from ..models.schemas import PersonInput, PersonScore
from ..models.scoring_config import ScoringConfig
from ..config.settings import WARNING_NO_ROLE
from .factors import (
    round_half_up,
    score_role,
    score_relationship,
    score_engagement,
)


class PersonScoringStage:
    """
    Calculate the person half of a lead score.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def process(self, person: PersonInput) -> PersonScore:
        """
        Score one person.

        Args:
            person: Person attributes (any field may be missing)

        Returns:
            PersonScore with the weighted score, factor scores and the
            names of the attributes that carried real data
        """
        factors = self.config.person_factors
        factors_used = []
        warnings = []

        role_score, top_role = score_role(person.functions, self.config)
        if person.functions:
            factors_used.append("functions")
        else:
            warnings.append(WARNING_NO_ROLE)

        strength = person.relationship_strength.value if person.relationship_strength else None
        relationship_score = score_relationship(strength, self.config)
        if strength is not None and self.config.uses_relationship:
            factors_used.append("relationship_strength")

        engagement_score = score_engagement(person.activities_90d, self.config)
        if person.activities_90d is not None:
            factors_used.append("activities_90d")

        weighted = (
            role_score * factors.role
            + relationship_score * factors.relationship
            + engagement_score * factors.engagement
        )

        return PersonScore(
            person_score=round_half_up(weighted),
            role_score=role_score,
            relationship_score=relationship_score,
            engagement_score=engagement_score,
            top_role=top_role,
            factors_used=factors_used,
            warnings=warnings,
        )
