"""
Pydantic schemas for the Lead Scoring Engine
"""

from enum import Enum
from typing import List, Dict, Optional, Any, Union
from pydantic import BaseModel, ConfigDict, Field

from .scoring_config import ScoringConfig


# =============================================================================
# ENUMS
# =============================================================================

class Tier(str, Enum):
    """Lead tier derived from the combined score"""
    GOLD = "GOLD"
    SILVER = "SILVER"
    BRONZE = "BRONZE"


class RelationshipStrength(str, Enum):
    """How well the sales team knows the person"""
    KNOW_EACH_OTHER = "We know each other"
    HEARD_OF_EACH_OTHER = "We've heard of each other"
    WEAK = "Weak"
    NONE = "None"


class LeaderboardSort(str, Enum):
    """Metric used to rank sales reps"""
    TOTAL_WON_VALUE = "total_won_value"
    WON_DEALS = "won_deals"
    WIN_RATE = "win_rate"


# =============================================================================
# INPUT SCHEMAS
# =============================================================================

class PersonInput(BaseModel):
    """Person-side attributes; every field is optional"""
    model_config = ConfigDict(allow_inf_nan=False)

    functions: List[str] = Field(default_factory=list)
    relationship_strength: Optional[RelationshipStrength] = None
    activities_90d: Optional[int] = Field(None, ge=0)


class CompanyInput(BaseModel):
    """Company-side attributes; every field is optional, numbers must be finite"""
    model_config = ConfigDict(allow_inf_nan=False)

    revenue: Optional[float] = None
    cagr_3y: Optional[float] = None
    industry: Optional[str] = None
    distance_km: Optional[float] = None
    employees: Optional[int] = None
    score: Optional[float] = None


class BulkScoreItem(BaseModel):
    """One entry of a bulk scoring request"""
    id: Optional[Union[int, str]] = None
    person: PersonInput = Field(default_factory=PersonInput)
    company: CompanyInput = Field(default_factory=CompanyInput)


# =============================================================================
# RESULT SCHEMAS
# =============================================================================

class CompanyScoreBreakdown(BaseModel):
    """Company factor scores (0-100 each)"""
    revenue_score: int
    growth_score: int
    industry_score: int
    distance_score: int
    existing_score: int


class CompanyScoreResult(BaseModel):
    """Result of company-only scoring"""
    company_score: int
    reason: str
    breakdown: CompanyScoreBreakdown
    factors_used: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class PersonScore(BaseModel):
    """Person half of a combined calculation"""
    person_score: int
    role_score: int
    relationship_score: int
    engagement_score: int
    top_role: Optional[str] = None
    factors_used: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    """All factor scores (0-100 each), defaults filling gaps"""
    role_score: int
    relationship_score: int
    engagement_score: int
    revenue_score: int
    growth_score: int
    industry_score: int
    distance_score: int
    existing_score: int


class ScoringResult(BaseModel):
    """Combined person + company scoring result"""
    person_score: int
    company_score: int
    combined_score: int
    tier: Tier
    breakdown: ScoreBreakdown
    factors_used: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    reason: str


class BulkScoringResult(ScoringResult):
    """Scoring result carrying the caller's identifier"""
    id: Optional[Union[int, str]] = None


# =============================================================================
# RANKING SCHEMAS
# =============================================================================

class SalesRepPerformance(BaseModel):
    """Per-rep deal statistics computed upstream"""
    user_id: int
    user_name: str
    won_deals: int = 0
    lost_deals: int = 0
    open_deals: int = 0
    total_deals: int = 0
    win_rate: float = 0
    total_won_value: float = 0
    total_lost_value: float = 0
    total_open_value: float = 0
    avg_deal_size: float = 0
    avg_sales_cycle_days: float = 0
    currency: str = "SEK"

    @property
    def closed_deals(self) -> int:
        return self.won_deals + self.lost_deals


# =============================================================================
# API REQUEST SCHEMAS
# =============================================================================

class ScorePersonRequest(BaseModel):
    """Request to score a person together with their company"""
    person: PersonInput
    company: CompanyInput

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "person": {
                    "functions": ["CEO"],
                    "relationship_strength": "We know each other",
                    "activities_90d": 12,
                },
                "company": {
                    "revenue": 150000000,
                    "cagr_3y": 0.12,
                    "industry": "IT Services",
                    "distance_km": 45,
                    "score": 75,
                },
            }
        }
    )


class BulkScoreRequest(BaseModel):
    """Request to score many person/company pairs"""
    items: List[BulkScoreItem]


class CrmScoreRequest(BaseModel):
    """
    Raw CRM records to score.

    `person` is keyed by field display name, `organization` by CRM field
    key; `organization_fields` are the CRM's organization field definitions
    ({"key", "name"}) used to resolve those keys. Coordinates are used only
    when the organization has no stored distance.
    """
    model_config = ConfigDict(allow_inf_nan=False)

    person: Dict[str, Any] = Field(default_factory=dict)
    organization: Optional[Dict[str, Any]] = None
    organization_fields: List[Dict[str, Any]] = Field(default_factory=list)
    activities_90d: Optional[int] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class BulkScoreResponse(BaseModel):
    """Bulk scoring response"""
    count: int
    results: List[BulkScoringResult]


class LeaderboardRequest(BaseModel):
    """Request to rank precomputed sales rep performances"""
    performances: List[SalesRepPerformance]
    sort_by: LeaderboardSort = LeaderboardSort.TOTAL_WON_VALUE
    limit: int = Field(10, ge=1)


class ConfigResponse(BaseModel):
    """Current ICP configuration and where it came from"""
    config: ScoringConfig
    source: str
    last_modified: Optional[str] = None


class ConfigSavedResponse(BaseModel):
    """Acknowledgement of a configuration write"""
    success: bool = True
    message: str
    last_modified: Optional[str] = None


class ScoreConfigSummary(BaseModel):
    """Read-only view of the active scoring model"""
    name: str
    weights: Dict[str, float]
    tiers: Dict[str, int]
    person_factors: Dict[str, float]
    company_factors: Dict[str, float]
    role_scores: Dict[str, int]
    relationship_scores: Dict[str, int]
    target_industries: List[str]
    tier_table: List[Dict[str, Any]]
