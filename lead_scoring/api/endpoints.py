"""
FastAPI Endpoints for the Lead Scoring Engine
=============================================
RESTful API around the pure scoring functions.

Base URL: http://localhost:8000

Endpoints:
- GET    /                           - API info
- GET    /api/health                 - Health check
- POST   /api/score/person           - Score a person with their company
- POST   /api/score/company          - Score a company on its own
- POST   /api/score/bulk             - Score up to 1000 person/company pairs
- POST   /api/score/crm              - Score raw CRM person/organization records
- DELETE /api/score/crm/field-mapping - Drop the cached CRM field mapping
- GET    /api/score/config           - Active scoring model
- GET    /api/icp                    - Current ICP configuration
- POST   /api/icp                    - Save an ICP configuration
- DELETE /api/icp                    - Reset ICP configuration to defaults
- POST   /api/analytics/leaderboard  - Rank sales reps
"""

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config.settings import API_CONFIG, BULK_LIMIT, LEADERBOARD_DEFAULTS
from ..config_store import ConfigStore
from ..crm_fields import FieldMappingCache, build_company_input, build_person_input
from ..engine import LeadScoringEngine
from ..models.schemas import (
    BulkScoreRequest,
    BulkScoreResponse,
    CompanyInput,
    CompanyScoreResult,
    ConfigResponse,
    ConfigSavedResponse,
    CrmScoreRequest,
    LeaderboardRequest,
    ScoreConfigSummary,
    ScorePersonRequest,
    ScoringResult,
    Tier,
)
from ..models.scoring_config import ScoringConfig, ScoringConfigError
from ..ranking import get_leaderboard
from .. import __version__

logger = logging.getLogger(__name__)


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="Lead Scoring Engine API",
    description="""
## Lead Scoring & CRM Enrichment

Scores CRM persons and organizations against a configurable Ideal Customer
Profile and explains every score in Swedish.

### Quick Start:
1. Use `/api/score/person` for a person together with their company
2. Use `/api/score/company` for company-only scoring
3. Use `/api/icp` to read or edit the scoring weights
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    start = time.time()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
    finally:
        logger.info(json.dumps({
            "request_id": request_id,
            "endpoint": request.url.path,
            "method": request.method,
            "status": status,
            "latency_ms": int((time.time() - start) * 1000),
        }))
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# Storage & Engine Initialization
# =============================================================================

config_store = ConfigStore(API_CONFIG["icp_config_path"])
engine = LeadScoringEngine(config_store.load()[0])
field_mapping = FieldMappingCache()


def get_engine() -> LeadScoringEngine:
    """Engine bound to the currently stored ICP configuration"""
    config, _, _ = config_store.load()
    if config != engine.config:
        engine.update_config(config)
    return engine


def verify_api_key(
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
):
    expected = API_CONFIG["api_key"]
    if not expected:
        return
    provided = x_api_key
    if not provided and authorization:
        provided = authorization.replace("Bearer ", "", 1)
    if provided != expected:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "Lead Scoring Engine",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "Person Score": "POST /api/score/person",
            "Company Score": "POST /api/score/company",
            "Bulk Score": "POST /api/score/bulk",
            "CRM Score": "POST /api/score/crm",
            "Scoring Config": "GET /api/score/config",
            "ICP Config": "GET|POST|DELETE /api/icp",
            "Leaderboard": "POST /api/analytics/leaderboard",
            "Health": "GET /api/health",
        },
    }


@app.get("/api/health", tags=["Info"])
def health_check():
    """Health check endpoint for monitoring"""
    _, source, _ = config_store.load()
    return {
        "status": "healthy",
        "service": "Lead Scoring Engine",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "config_source": source,
    }


# =============================================================================
# Scoring Endpoints
# =============================================================================

@app.post(
    "/api/score/person",
    response_model=ScoringResult,
    tags=["Scoring"],
    dependencies=[Depends(verify_api_key)],
)
def score_person(request: ScorePersonRequest):
    """
    Score a person together with their company

    Returns person, company and combined scores, the tier, the per-factor
    breakdown, warnings for missing key data and a Swedish explanation.
    """
    return get_engine().score_lead(request.person, request.company)


@app.post(
    "/api/score/company",
    response_model=CompanyScoreResult,
    tags=["Scoring"],
    dependencies=[Depends(verify_api_key)],
)
def score_company(company: CompanyInput):
    """Score a company on its own (same formula as the company half of a lead score)"""
    return get_engine().score_company(company)


@app.post(
    "/api/score/bulk",
    response_model=BulkScoreResponse,
    tags=["Scoring"],
    dependencies=[Depends(verify_api_key)],
)
def score_bulk(request: BulkScoreRequest):
    """
    Score many person/company pairs

    - Results keep the input order and echo each item's id
    - At most 1000 items per request
    """
    if len(request.items) > BULK_LIMIT:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {BULK_LIMIT} items per request",
        )
    results = get_engine().score_bulk(request.items)
    return BulkScoreResponse(count=len(results), results=results)


@app.post(
    "/api/score/crm",
    response_model=ScoringResult,
    tags=["Scoring"],
    dependencies=[Depends(verify_api_key)],
)
def score_crm(request: CrmScoreRequest):
    """
    Score raw CRM records

    - Organization field keys are resolved from `organization_fields` once
      and cached until the mapping is dropped
    - Without an organization number field the company scores on defaults
    - A missing distance is computed from latitude/longitude when given
    """
    mapping = field_mapping.resolve(lambda: request.organization_fields)
    coordinates = None
    if request.latitude is not None and request.longitude is not None:
        coordinates = (request.latitude, request.longitude)

    person = build_person_input(request.person, activity_count=request.activities_90d)
    company = build_company_input(request.organization, mapping, coordinates)
    return get_engine().score_lead(person, company)


@app.delete(
    "/api/score/crm/field-mapping",
    response_model=ConfigSavedResponse,
    tags=["Scoring"],
    dependencies=[Depends(verify_api_key)],
)
def reset_field_mapping():
    """Drop the cached field mapping after the CRM's field setup changed"""
    field_mapping.invalidate()
    return ConfigSavedResponse(message="CRM field mapping cleared")


@app.get("/api/score/config", response_model=ScoreConfigSummary, tags=["Scoring"])
def scoring_config():
    """Active weights, thresholds and lookup tables"""
    config = get_engine().config
    return ScoreConfigSummary(
        name=config.name,
        weights=config.weights.model_dump(),
        tiers=config.tiers.model_dump(),
        person_factors=config.person_factors.model_dump(),
        company_factors=config.company_factors.model_dump(),
        role_scores=config.role_scores,
        relationship_scores=config.relationship_scores,
        target_industries=config.industry.targets,
        tier_table=[
            {"tier": Tier.GOLD.value, "min_score": config.tiers.gold},
            {"tier": Tier.SILVER.value, "min_score": config.tiers.silver},
            {"tier": Tier.BRONZE.value, "min_score": 0},
        ],
    )


# =============================================================================
# ICP Configuration Endpoints
# =============================================================================

@app.get("/api/icp", response_model=ConfigResponse, tags=["Configuration"])
def get_icp_config():
    """Saved ICP configuration, or the default profile"""
    config, source, last_modified = config_store.load()
    return ConfigResponse(config=config, source=source, last_modified=last_modified)


@app.post(
    "/api/icp",
    response_model=ConfigSavedResponse,
    tags=["Configuration"],
    dependencies=[Depends(verify_api_key)],
)
def save_icp_config(config: ScoringConfig):
    """Validate and save an ICP configuration; it applies to the next request"""
    last_modified = config_store.save(config)
    engine.update_config(config)
    return ConfigSavedResponse(message="ICP configuration saved", last_modified=last_modified)


@app.delete(
    "/api/icp",
    response_model=ConfigSavedResponse,
    tags=["Configuration"],
    dependencies=[Depends(verify_api_key)],
)
def reset_icp_config():
    """Reset to the default configuration"""
    config_store.reset()
    get_engine()
    return ConfigSavedResponse(message="ICP configuration reset to defaults")


# =============================================================================
# Analytics
# =============================================================================

@app.post("/api/analytics/leaderboard", tags=["Analytics"])
async def leaderboard(request: LeaderboardRequest):
    """
    Rank sales reps by total won value, won deals or win rate

    For win rate, reps with fewer than 5 closed deals rank below everyone
    with enough deals.
    """
    ranked = get_leaderboard(
        request.performances,
        sort_by=request.sort_by,
        limit=request.limit,
        min_sample_size=LEADERBOARD_DEFAULTS["min_sample_size"],
    )
    return {
        "count": len(ranked),
        "sort_by": request.sort_by.value,
        "leaderboard": ranked,
    }


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(ScoringConfigError)
async def config_error_handler(request, exc):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        }
    )
