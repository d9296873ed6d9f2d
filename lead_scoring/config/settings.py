"""
Configuration settings for the Lead Scoring Engine
"""

from typing import Dict, List, Any
import logging
import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

API_CONFIG = {
    "host": os.getenv("LEAD_SCORING_HOST", "0.0.0.0"),
    "port": int(os.getenv("LEAD_SCORING_PORT", "8000")),
    # When set, scoring endpoints require x-api-key or a Bearer token
    "api_key": os.getenv("SCORING_API_KEY", ""),
    # JSON file for the ICP editor; empty keeps the config in memory
    "icp_config_path": os.getenv("ICP_CONFIG_PATH", ""),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
}

BULK_LIMIT = 1000

LEADERBOARD_DEFAULTS = {
    "limit": 10,
    "min_sample_size": 5,
}

# =============================================================================
# DEFAULT WEIGHTS & TIERS
# =============================================================================

DEFAULT_WEIGHTS = {
    "person": 0.6,
    "company": 0.4,
}

DEFAULT_TIERS = {
    "gold": 70,
    "silver": 40,
}

DEFAULT_PERSON_FACTORS = {
    "role": 0.55,
    "engagement": 0.45,
    "relationship": 0.0,
}

DEFAULT_COMPANY_FACTORS = {
    "revenue": 0.25,
    "growth": 0.20,
    "industry_fit": 0.20,
    "distance": 0.20,
    "existing_score": 0.15,
}

# Profile with relationship strength inside person scoring
RELATIONSHIP_PERSON_FACTORS = {
    "role": 0.40,
    "relationship": 0.35,
    "engagement": 0.25,
}

RELATIONSHIP_COMPANY_FACTORS = {
    "revenue": 0.30,
    "growth": 0.20,
    "industry_fit": 0.25,
    "distance": 0.10,
    "existing_score": 0.15,
}

WEIGHT_TOLERANCE = 0.01

# =============================================================================
# CATEGORICAL MAPS
# =============================================================================

DEFAULT_ROLE_SCORES: Dict[str, int] = {
    "CEO": 100,
    "CFO": 95,
    "COO": 95,
    "CTO": 95,
    "CMO": 90,
    "Board": 95,
    "Entrepreneur": 90,
    "Finance": 85,
    "HR": 85,
    "Sales": 80,
    "Marketing": 80,
    "Operations": 75,
    "Technology": 75,
    "IT": 75,
    "Development": 70,
    "Projects": 70,
    "Production": 65,
    "Procurement": 65,
    "Legal": 60,
    "Communications": 60,
    "Logistics": 55,
    "Health": 50,
    "None": 30,
}

NO_ROLE_KEY = "None"
UNKNOWN_ROLE_SCORE = 40

DEFAULT_RELATIONSHIP_SCORES: Dict[str, int] = {
    "We know each other": 100,
    "We've heard of each other": 60,
    "Weak": 30,
    "None": 10,
}

UNKNOWN_RELATIONSHIP_SCORE = 20

DEFAULT_TARGET_INDUSTRIES: List[str] = [
    "Tech",
    "IT",
    "Consulting",
    "Professional Services",
    "Software",
    "SaaS",
]

INDUSTRY_SCORES = {
    "target": 90,
    "non_target": 50,
}

# =============================================================================
# THRESHOLD LADDERS
# =============================================================================

# Revenue in SEK, descending minimum
DEFAULT_REVENUE_TIERS: List[Dict[str, Any]] = [
    {"min": 500_000_000, "score": 100},
    {"min": 200_000_000, "score": 85},
    {"min": 100_000_000, "score": 70},
    {"min": 50_000_000, "score": 55},
    {"min": 20_000_000, "score": 40},
    {"min": 10_000_000, "score": 25},
    {"min": 0, "score": 10},
]

# 3-year CAGR as a fraction; the last step has no lower bound
DEFAULT_GROWTH_TIERS: List[Dict[str, Any]] = [
    {"min": 0.20, "score": 100},
    {"min": 0.15, "score": 85},
    {"min": 0.10, "score": 70},
    {"min": 0.05, "score": 55},
    {"min": 0.00, "score": 40},
    {"min": -0.10, "score": 25},
    {"min": None, "score": 10},
]

# Activities in the trailing 90 days
DEFAULT_ENGAGEMENT_TIERS: List[Dict[str, Any]] = [
    {"min": 20, "score": 100},
    {"min": 10, "score": 80},
    {"min": 5, "score": 60},
    {"min": 2, "score": 40},
    {"min": 1, "score": 25},
    {"min": 0, "score": 10},
]

# Distance to Gothenburg in km, ascending maximum
DEFAULT_DISTANCE_TIERS: List[Dict[str, Any]] = [
    {"max": 50, "score": 100},
    {"max": 100, "score": 85},
    {"max": 200, "score": 70},
    {"max": 400, "score": 55},
    {"max": 600, "score": 40},
    {"max": 1000, "score": 25},
    {"max": None, "score": 15},
]

# Scores substituted when an input is absent altogether
DEFAULT_MISSING_SCORES = {
    "relationship": 10,
    "engagement": 5,
    "revenue": 30,
    "growth": 40,
    "industry": 50,
    "distance": 50,
    "existing": 50,
}

# =============================================================================
# WARNINGS
# =============================================================================

WARNING_NO_ROLE = "No role/function provided - using default score"
WARNING_NO_REVENUE = "No revenue data - using default score"

# =============================================================================
# CRM FIELD NAMES
# =============================================================================

DEFAULT_PERSON_FIELD_NAMES = {
    "functions": "Functions",
    "relationship_strength": "Relationship Strength",
}

DEFAULT_ORGANIZATION_FIELD_NAMES = {
    "org_number": "Organisationsnummer",
    "city": "Ort",
    "revenue": "Omsättning",
    "employees": "Antal anställda",
    "industry": "Industry (Official)",
    "cagr_3y": "CAGR 3Y",
    "distance_km": "Avstånd GBG",
    "score": "Score",
    "company_score": "Company Score",
    "company_score_reason": "Company Score Reason",
}

# Mapping is only cached once these organization fields resolve
CRITICAL_ORGANIZATION_FIELDS = ("org_number", "company_score")

GOTHENBURG_COORDS = {
    "latitude": 57.7089,
    "longitude": 11.9746,
}

EARTH_RADIUS_KM = 6371


def configure_logging(level: str = API_CONFIG["log_level"]) -> None:
    """Configure root logging once for the service"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
