"""
Opportunity scoring, ROI estimation and recommendation tables.

Everything here is a pure function of the opportunity's attributes so it
can be used for both stored opportunities and unsaved drafts.
"""

import math
from typing import Any, Protocol, Sequence

from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class Scorable(Protocol):
    opportunity_type: str
    impact: str
    effort: str
    timing: str
    confidence: float
    evidence: Sequence[dict]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# Simple priority score
SIMPLE_IMPACT = {"low": 1, "medium": 2, "high": 3, "critical": 4}
SIMPLE_EFFORT = {"low": 3, "medium": 2, "high": 1}
SIMPLE_TIMING = {"immediate": 4, "short-term": 3, "medium-term": 2, "long-term": 1}

# Detailed scoring, each component on a 0-10 scale
IMPACT_SCORES = {"low": 2, "medium": 5, "high": 8, "critical": 10}
EFFORT_SCORES = {"low": 10, "medium": 6, "high": 3}
TIMING_SCORES = {"immediate": 10, "short-term": 8, "medium-term": 5, "long-term": 3}
MARKET_TIMING_SCORES = {"immediate": 10, "short-term": 8, "medium-term": 6, "long-term": 4}

SCORE_WEIGHTS = {
    "impact_score": 0.25,
    "effort_score": 0.15,
    "timing_score": 0.15,
    "confidence_score": 0.10,
    "risk_score": 0.10,
    "resource_score": 0.10,
    "strategic_alignment_score": 0.10,
    "competitive_advantage_score": 0.03,
    "market_timing_score": 0.02,
}

ROI_IMPACT_MULTIPLIER = {"low": 50, "medium": 100, "high": 200, "critical": 400}
ROI_EFFORT_DIVISOR = {"low": 1, "medium": 2, "high": 4}

PRIORITY_RANK = {"low": 1, "medium": 2, "high": 3, "critical": 4}


def simple_priority_score(
    impact: str, effort: str, timing: str, confidence: float
) -> float:
    """Quick ranking score stored on the opportunity row."""
    score = (
        SIMPLE_IMPACT.get(impact, 2) * 0.4
        + SIMPLE_EFFORT.get(effort, 2) * 0.3
        + SIMPLE_TIMING.get(timing, 2) * 0.2
        + confidence * 0.1
    )
    return round(score, 2)


def _risk_score(opportunity: Scorable) -> float:
    risk = 7
    if len(opportunity.evidence) < 3:
        risk -= 2
    if opportunity.confidence < 0.5:
        risk -= 2
    if opportunity.opportunity_type == "partnership_opportunity":
        risk -= 1
    return max(1, min(10, risk))


def detailed_scores(opportunity: Scorable) -> dict[str, float]:
    """
    Component scores and the weighted overall score.

    Falls back to a neutral 5 for every component if the opportunity
    cannot be scored.
    """
    try:
        scores = {
            "impact_score": IMPACT_SCORES.get(opportunity.impact, 5),
            "effort_score": EFFORT_SCORES.get(opportunity.effort, 6),
            "timing_score": TIMING_SCORES.get(opportunity.timing, 5),
            "confidence_score": opportunity.confidence * 10,
            "risk_score": _risk_score(opportunity),
            "resource_score": 6,
            "strategic_alignment_score": 7,
            "competitive_advantage_score": min(
                10, opportunity.confidence * 5 + len(opportunity.evidence) * 0.5
            ),
            "market_timing_score": MARKET_TIMING_SCORES.get(opportunity.timing, 6),
        }
    except (AttributeError, TypeError) as e:
        logger.warning("Falling back to neutral opportunity scores", error=str(e))
        scores = {name: 5 for name in SCORE_WEIGHTS}

    overall = sum(scores[name] * weight for name, weight in SCORE_WEIGHTS.items())
    return {**{k: float(v) for k, v in scores.items()}, "overall_score": round(overall, 2)}


def estimate_roi(impact: str, effort: str, confidence: float) -> int:
    base = ROI_IMPACT_MULTIPLIER.get(impact, 100)
    divisor = ROI_EFFORT_DIVISOR.get(effort, 2)
    return round_half_up(base / divisor * confidence)


def generate_tags(opportunity_type: str, impact: str, timing: str, evidence: Sequence[dict]) -> list[str]:
    tags = [opportunity_type, impact, timing]
    evidence_types = {item.get("type") for item in evidence}
    if "social_media" in evidence_types:
        tags.append("social_media_driven")
    if "pricing_data" in evidence_types:
        tags.append("pricing_related")
    return tags


def generate_success_metrics(opportunity_type: str) -> dict[str, dict[str, Any]]:
    metrics: dict[str, dict[str, Any]] = {
        "revenue_impact": {"target": 10000, "unit": "USD"},
        "market_share": {"target": 5, "unit": "percentage"},
        "customer_acquisition": {"target": 100, "unit": "customers"},
    }
    if opportunity_type == "pricing_opportunity":
        metrics["pricing_optimization"] = {"target": 15, "unit": "percentage"}
    elif opportunity_type == "talent_acquisition":
        metrics["key_hires"] = {"target": 3, "unit": "employees"}
    return metrics


def initial_metrics(impact: str, effort: str, confidence: float) -> list[dict[str, Any]]:
    """Metrics seeded on every new opportunity."""
    return [
        {
            "metric_name": "Revenue Impact",
            "metric_type": "revenue",
            "baseline_value": 0.0,
            "current_value": 0.0,
            "target_value": float(estimate_roi(impact, effort, confidence) * 100),
            "unit": "USD",
        },
        {
            "metric_name": "Implementation Progress",
            "metric_type": "efficiency",
            "baseline_value": 0.0,
            "current_value": 0.0,
            "target_value": 100.0,
            "unit": "percentage",
        },
    ]


# (title, description, category, priority, hours, cost, roi, timeline,
#  confidence multiplier, prerequisites, risks, success metrics, resources)
_RECOMMENDATIONS: dict[str, list[tuple]] = {
    "competitor_weakness": [
        (
            "Develop Superior Solution",
            "Create a product/service that directly addresses the competitor weakness",
            "product", "high", 40, 5000, 150, "medium-term", 1.0,
            ["Market research", "Technical feasibility study"],
            ["Development delays", "Market timing"],
            ["Customer acquisition", "Market share gain"],
            ["Development team", "Marketing budget"],
        ),
        (
            "Targeted Marketing Campaign",
            "Launch marketing campaign highlighting your advantages over competitor weakness",
            "marketing", "medium", 20, 2000, 80, "short-term", 0.8,
            ["Marketing materials", "Target audience analysis"],
            ["Competitor response", "Brand perception"],
            ["Lead generation", "Brand awareness"],
            ["Marketing team", "Creative assets"],
        ),
    ],
    "market_gap": [
        (
            "Market Entry Strategy",
            "Develop strategy to enter the identified market gap",
            "strategic", "high", 60, 10000, 200, "long-term", 1.0,
            ["Market analysis", "Business plan", "Funding"],
            ["Market validation", "Competition entry"],
            ["Market penetration", "Revenue growth"],
            ["Strategy team", "Investment capital"],
        ),
    ],
    "pricing_opportunity": [
        (
            "Pricing Strategy Optimization",
            "Adjust pricing to capitalize on competitor pricing gaps",
            "pricing", "high", 10, 500, 120, "immediate", 1.0,
            ["Pricing analysis", "Customer research"],
            ["Customer reaction", "Margin impact"],
            ["Revenue increase", "Market share"],
            ["Pricing team", "Analytics tools"],
        ),
    ],
    "talent_acquisition": [
        (
            "Strategic Talent Acquisition",
            "Recruit key talent from competitor during their hiring challenges",
            "talent", "medium", 30, 15000, 100, "short-term", 0.7,
            ["Talent pipeline", "Competitive packages"],
            ["Legal issues", "Cultural fit"],
            ["Key hires", "Team capability"],
            ["HR team", "Recruitment budget"],
        ),
    ],
    "partnership_opportunity": [
        (
            "Strategic Partnership Development",
            "Develop partnerships to fill gaps left by competitor relationship changes",
            "partnership", "medium", 50, 8000, 90, "medium-term", 0.6,
            ["Partner identification", "Value proposition"],
            ["Partnership failure", "Integration challenges"],
            ["Partnership deals", "Revenue impact"],
            ["Business development", "Legal support"],
        ),
    ],
}

_GENERIC_RECOMMENDATION = (
    "Opportunity Research",
    "Conduct detailed research to understand the opportunity better",
    "research", "medium", 15, 1000, 50, "short-term", 0.5,
    ["Research plan"],
    ["Time investment"],
    ["Research insights", "Action plan"],
    ["Research team"],
)


def generate_recommendations(opportunity_type: str, confidence: float) -> list[dict[str, Any]]:
    """Recommendations for an opportunity type, highest priority then highest ROI first."""
    rows = _RECOMMENDATIONS.get(opportunity_type, [_GENERIC_RECOMMENDATION])

    recommendations = [
        {
            "title": title,
            "description": description,
            "category": category,
            "priority": priority,
            "estimated_effort_hours": float(hours),
            "estimated_cost": float(cost),
            "expected_roi": float(roi),
            "timeline": timeline,
            "confidence": round(confidence * multiplier, 4),
            "prerequisites": prerequisites,
            "risks": risks,
            "success_metrics": success_metrics,
            "resources": resources,
        }
        for (
            title, description, category, priority, hours, cost, roi, timeline,
            multiplier, prerequisites, risks, success_metrics, resources,
        ) in rows
    ]

    recommendations.sort(
        key=lambda r: (PRIORITY_RANK.get(r["priority"], 2), r["expected_roi"]),
        reverse=True,
    )
    return recommendations
