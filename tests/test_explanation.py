import pytest

from lead_scoring.stages.explanation import (
    COMPANY_LABEL_RULES,
    ENGAGEMENT_RULES,
    GROWTH_RULES,
    RELATIONSHIP_RULES,
    apply_rules,
    format_percent,
    format_revenue,
)


@pytest.mark.parametrize(
    "revenue,expected",
    [
        (600_000_000, "600 MSEK"),
        (1_000_000, "1 MSEK"),
        (2_500_000, "3 MSEK"),
        (999_999, "1000 TSEK"),
        (500_000, "500 TSEK"),
    ],
)
def test_format_revenue(revenue, expected):
    assert format_revenue(revenue) == expected


def test_format_percent():
    assert format_percent(0.25) == 25
    assert format_percent(-0.15) == -15
    assert format_percent(0.125) == 13


@pytest.mark.parametrize(
    "score,label",
    [(70, "Starkt företag:"), (69, "Medelstarkt företag:"), (40, "Medelstarkt företag:"), (39, "Svagare företag:")],
)
def test_company_label_boundaries(score, label):
    assert apply_rules(COMPANY_LABEL_RULES, score) == label


def test_growth_clause_omitted_for_middle_scores():
    assert apply_rules(GROWTH_RULES, 55, 7) is None
    assert apply_rules(GROWTH_RULES, 30, -5) == "negativ tillväxt (-5%)"


def test_relationship_rules():
    assert apply_rules(RELATIONSHIP_RULES, 60, "We've heard of each other") == (
        "relation: We've heard of each other"
    )


def test_engagement_rules():
    assert apply_rules(ENGAGEMENT_RULES, 80, 10) == "hög aktivitet (10 aktiviteter)"
    assert apply_rules(ENGAGEMENT_RULES, 40, 2) == "viss aktivitet (2)"
    assert apply_rules(ENGAGEMENT_RULES, 25, 1) == "låg aktivitet"
