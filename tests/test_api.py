import inspect

import pytest
from fastapi.testclient import TestClient

from lead_scoring.api import endpoints
from lead_scoring.api.endpoints import app
from lead_scoring.config.settings import API_CONFIG
from lead_scoring.models.scoring_config import create_relationship_scoring_config


client = TestClient(app)

GOLD_LEAD = {
    "person": {"functions": ["CEO"], "activities_90d": 25},
    "company": {
        "revenue": 150000000,
        "cagr_3y": 0.25,
        "industry": "Tech",
        "distance_km": 30,
        "score": 85,
    },
}


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.setitem(API_CONFIG, "api_key", "")
    endpoints.config_store.reset()
    endpoints.field_mapping.invalidate()
    yield
    endpoints.config_store.reset()
    endpoints.field_mapping.invalidate()


def test_root():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["service"] == "Lead Scoring Engine"


def test_health_echoes_request_id():
    resp = client.get("/api/health", headers={"X-Request-ID": "req-42"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.json()["config_source"] == "default"
    assert resp.headers["X-Request-ID"] == "req-42"


def test_score_person():
    resp = client.post("/api/score/person", json=GOLD_LEAD)
    assert resp.status_code == 200
    data = resp.json()
    assert data["combined_score"] == 95
    assert data["tier"] == "GOLD"
    assert data["breakdown"]["role_score"] == 100
    assert data["reason"].startswith("GOLD: CEO (beslutsfattare)")


def test_score_person_rejects_negative_activity_count():
    payload = {"person": {"activities_90d": -1}, "company": {}}
    assert client.post("/api/score/person", json=payload).status_code == 422


def test_score_company_defaults():
    resp = client.post("/api/score/company", json={})
    assert resp.status_code == 200
    data = resp.json()
    assert data["company_score"] == 43
    assert data["warnings"] == ["No revenue data - using default score"]
    assert data["reason"] == "Medelstarkt företag:"


def test_score_bulk():
    items = [
        {"id": "abc-123", **GOLD_LEAD},
        {"id": 456, "person": {}, "company": {}},
    ]
    resp = client.post("/api/score/bulk", json={"items": items})
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    assert [r["id"] for r in data["results"]] == ["abc-123", 456]
    assert data["results"][0]["tier"] == "GOLD"
    assert data["results"][1]["combined_score"] == 29


def test_score_bulk_empty():
    resp = client.post("/api/score/bulk", json={"items": []})
    assert resp.status_code == 200
    assert resp.json() == {"count": 0, "results": []}


def test_score_bulk_limit():
    items = [{"id": i} for i in range(1001)]
    resp = client.post("/api/score/bulk", json={"items": items})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Maximum 1000 items per request"


def test_scoring_config_summary():
    data = client.get("/api/score/config").json()
    assert data["weights"] == {"person": 0.6, "company": 0.4}
    assert data["tiers"] == {"gold": 70, "silver": 40}
    assert data["tier_table"][0] == {"tier": "GOLD", "min_score": 70}


def test_icp_defaults():
    data = client.get("/api/icp").json()
    assert data["source"] == "default"
    assert data["last_modified"] is None
    assert data["config"]["revenue_tiers"][0] == {"min": 500000000.0, "score": 100}


def test_icp_rejects_invalid_weights():
    payload = create_relationship_scoring_config().model_dump(mode="json", by_alias=True)
    payload["weights"] = {"person": 0.8, "company": 0.4}
    resp = client.post("/api/icp", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Weights must sum to 1.0"}
    assert client.get("/api/icp").json()["source"] == "default"


def test_icp_save_applies_to_next_request():
    payload = create_relationship_scoring_config().model_dump(mode="json", by_alias=True)
    resp = client.post("/api/icp", json=payload)
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["last_modified"]

    assert client.get("/api/icp").json()["source"] == "saved"
    assert client.get("/api/score/config").json()["name"] == "Relationship ICP"

    scored = client.post(
        "/api/score/person",
        json={
            "person": {
                "functions": ["CEO"],
                "relationship_strength": "We know each other",
                "activities_90d": 12,
            },
            "company": {},
        },
    ).json()
    assert scored["combined_score"] == 74
    assert "stark relation (We know each other)" in scored["reason"]


def test_icp_reset():
    payload = create_relationship_scoring_config().model_dump(mode="json", by_alias=True)
    client.post("/api/icp", json=payload)
    resp = client.delete("/api/icp")
    assert resp.status_code == 200
    assert client.get("/api/icp").json()["source"] == "default"
    assert client.get("/api/score/config").json()["name"] == "Default ICP"


def test_leaderboard():
    performances = [
        {"user_id": 1, "user_name": "Lucky", "won_deals": 3, "lost_deals": 0, "win_rate": 100},
        {"user_id": 2, "user_name": "Steady", "won_deals": 6, "lost_deals": 4, "win_rate": 60},
    ]
    resp = client.post(
        "/api/analytics/leaderboard",
        json={"performances": performances, "sort_by": "win_rate"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["sort_by"] == "win_rate"
    assert [r["user_name"] for r in data["leaderboard"]] == ["Steady", "Lucky"]


def test_api_key_required_when_configured(monkeypatch):
    monkeypatch.setitem(API_CONFIG, "api_key", "secret")
    assert client.post("/api/score/company", json={}).status_code == 401
    ok = client.post("/api/score/company", json={}, headers={"x-api-key": "secret"})
    assert ok.status_code == 200
    bearer = client.post(
        "/api/score/company", json={}, headers={"Authorization": "Bearer secret"}
    )
    assert bearer.status_code == 200


@pytest.mark.parametrize(
    "body",
    ['{"distance_km": Infinity}', '{"revenue": NaN}', '{"cagr_3y": -Infinity}'],
)
def test_score_company_rejects_non_finite_numbers(body):
    resp = client.post(
        "/api/score/company", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 422


def test_score_person_rejects_non_finite_company_numbers():
    body = '{"person": {}, "company": {"distance_km": Infinity}}'
    resp = client.post(
        "/api/score/person", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 422


ORGANIZATION_FIELDS = [
    {"key": "a1", "name": "Organisationsnummer"},
    {"key": "b2", "name": "Omsättning"},
    {"key": "c3", "name": "CAGR 3Y"},
    {"key": "d4", "name": "Industry (Official)"},
    {"key": "e5", "name": "Avstånd GBG"},
    {"key": "f6", "name": "Score"},
    {"key": "g7", "name": "Company Score"},
]

CRM_LEAD = {
    "person": {"Functions": "CEO, Sales", "Relationship Strength": "Weak"},
    "organization": {
        "a1": "556000-0000",
        "b2": "150 000 000 kr",
        "c3": 0.25,
        "d4": "Tech",
        "e5": "30",
        "f6": 85,
    },
    "organization_fields": ORGANIZATION_FIELDS,
    "activities_90d": 25,
}


def test_score_crm_records():
    resp = client.post("/api/score/crm", json=CRM_LEAD)
    assert resp.status_code == 200
    data = resp.json()
    direct = client.post("/api/score/person", json=GOLD_LEAD).json()
    assert data["combined_score"] == direct["combined_score"] == 95
    assert data["reason"] == direct["reason"]
    assert data["factors_used"] == [
        "functions", "activities_90d", "revenue", "cagr_3y", "industry", "distance_km", "company_score",
    ]


def test_score_crm_reuses_cached_field_mapping():
    client.post("/api/score/crm", json=CRM_LEAD)
    without_fields = {**CRM_LEAD, "organization_fields": []}

    cached = client.post("/api/score/crm", json=without_fields).json()
    assert cached["company_score"] == 88

    assert client.delete("/api/score/crm/field-mapping").status_code == 200
    cleared = client.post("/api/score/crm", json=without_fields).json()
    assert cleared["company_score"] == 43


def test_score_crm_geocodes_missing_distance():
    organization = {k: v for k, v in CRM_LEAD["organization"].items() if k != "e5"}
    payload = {
        **CRM_LEAD,
        "organization": organization,
        "latitude": 59.3293,
        "longitude": 18.0686,
    }
    data = client.post("/api/score/crm", json=payload).json()
    assert data["breakdown"]["distance_score"] == 55


def test_score_crm_without_organization():
    data = client.post("/api/score/crm", json={"person": {"Functions": "CEO"}}).json()
    assert data["company_score"] == 43
    assert data["breakdown"]["role_score"] == 100


def test_score_crm_rejects_bad_coordinates():
    payload = {**CRM_LEAD, "latitude": 123.0, "longitude": 18.0}
    assert client.post("/api/score/crm", json=payload).status_code == 422


@pytest.mark.parametrize(
    "handler",
    [
        endpoints.health_check,
        endpoints.score_person,
        endpoints.score_company,
        endpoints.score_bulk,
        endpoints.score_crm,
        endpoints.scoring_config,
        endpoints.get_icp_config,
        endpoints.save_icp_config,
        endpoints.reset_icp_config,
    ],
)
def test_config_store_handlers_run_in_threadpool(handler):
    # Sync handlers keep the config file reads off the event loop
    assert not inspect.iscoroutinefunction(handler)
