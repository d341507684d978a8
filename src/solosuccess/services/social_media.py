"""
Social-media monitoring for competitors.

Observed posts are ingested per competitor and analysed per platform over
a rolling window. Three analyses are produced (engagement, frequency and
audience), insights are derived from them and the noteworthy insights are
raised as competitor alerts.

The analysis and insight functions are pure; `SocialMediaService` wires
them to the database.
"""

import statistics
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.competitors import SocialPostIn
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.competitor import (
    Competitor,
    CompetitorAlert,
    SocialMediaAnalysis,
    SocialMediaPost,
)
from solosuccess.infrastructure.database.repositories import (
    CompetitorRepository,
    SocialMediaAnalysisRepository,
    SocialMediaPostRepository,
)
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.services.competitors import AlertService

logger = get_logger(__name__)

FREQUENCY_TREND_BAND = 0.10
AUDIENCE_TREND_BAND = 5.0
CONSISTENCY_RISK_THRESHOLD = 70

VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com", "tiktok.com")

ADVANTAGE_ACTIONS = [
    "Analyze their content strategy",
    "Consider counter-positioning",
    "Monitor for campaign launches",
]
WEAKNESS_ACTIONS = [
    "Capitalize on their weakness",
    "Increase activity on this platform",
    "Target their audience with better content",
]
CONTENT_ACTIONS = [
    "Analyze their content approach",
    "Adapt successful elements",
    "Create differentiated content",
]


def empty_insights() -> dict[str, list]:
    return {
        "engagement_trends": [],
        "content_opportunities": [],
        "timing_insights": [],
        "audience_changes": [],
        "competitive_advantages": [],
        "risk_factors": [],
    }


def content_type(post: SocialMediaPost) -> str:
    """Rough content classification from the post URL and text."""
    url = (post.url or "").lower()
    text = post.content or ""
    if post.platform == "youtube" or any(host in url for host in VIDEO_HOSTS):
        return "video"
    if "http://" in text or "https://" in text:
        return "link"
    if "?" in text:
        return "question"
    return "text"


def _post_summary(post: SocialMediaPost) -> dict[str, Any]:
    return {
        "external_id": post.external_id,
        "content": (post.content or "")[:200],
        "url": post.url,
        "posted_at": post.posted_at.isoformat(),
        "engagement": post.engagement,
        "content_type": content_type(post),
    }


def _ranked_groups(groups: dict[Any, list[int]], key_name: str) -> list[dict[str, Any]]:
    ranked = [
        {key_name: key, "average_engagement": round(statistics.fmean(values), 2), "posts": len(values)}
        for key, values in groups.items()
    ]
    ranked.sort(key=lambda g: (g["average_engagement"], g["posts"]), reverse=True)
    return ranked


def analyze_engagement(posts: Sequence[SocialMediaPost]) -> dict[str, Any]:
    """
    Engagement per post, engagement rate against follower count, the best
    posting hours and the best performing content.
    """
    if not posts:
        return {
            "total_posts": 0,
            "average_engagement": 0.0,
            "engagement_rate": 0.0,
            "best_posting_hours": [],
            "content_types": [],
            "top_content": [],
        }

    average_engagement = statistics.fmean(p.engagement for p in posts)
    followers = [p.followers for p in posts if p.followers]
    engagement_rate = (
        average_engagement / statistics.fmean(followers) * 100 if followers else 0.0
    )

    by_hour: dict[int, list[int]] = defaultdict(list)
    by_type: dict[str, list[int]] = defaultdict(list)
    for post in posts:
        by_hour[post.posted_at.hour].append(post.engagement)
        by_type[content_type(post)].append(post.engagement)

    top_posts = sorted(posts, key=lambda p: p.engagement, reverse=True)[:3]

    return {
        "total_posts": len(posts),
        "average_engagement": round(average_engagement, 2),
        "engagement_rate": round(engagement_rate, 4),
        "best_posting_hours": _ranked_groups(by_hour, "hour")[:3],
        "content_types": _ranked_groups(by_type, "type"),
        "top_content": [_post_summary(p) for p in top_posts],
    }


def _trend(first: float, second: float, band: float) -> str:
    if first == 0:
        return "increasing" if second > 0 else "stable"
    ratio = second / first
    if ratio > 1 + band:
        return "increasing"
    if ratio < 1 - band:
        return "decreasing"
    return "stable"


def analyze_frequency(
    posts: Sequence[SocialMediaPost], window_days: int, now: datetime
) -> dict[str, Any]:
    """
    Posting cadence over the window.

    The consistency score is 100 * (1 - coefficient of variation) of the
    gaps between consecutive posts, clamped to 0-100. The daily trend
    compares post counts in the second half of the window against the
    first half.
    """
    ordered = sorted(posts, key=lambda p: p.posted_at)
    gaps = [
        (later.posted_at - earlier.posted_at).total_seconds() / 3600
        for earlier, later in zip(ordered, ordered[1:])
    ]

    if gaps:
        mean_gap = statistics.fmean(gaps)
        cv = statistics.pstdev(gaps) / mean_gap if mean_gap > 0 else 0.0
        score = max(0, min(100, round(100 * (1 - cv))))
    else:
        mean_gap, cv, score = 0.0, 0.0, 0

    midpoint = now - timedelta(days=window_days / 2)
    first_half = sum(1 for p in ordered if p.posted_at < midpoint)
    second_half = len(ordered) - first_half

    return {
        "total_posts": len(ordered),
        "posts_per_week": round(len(ordered) / (window_days / 7), 2),
        "consistency": {
            "score": score,
            "average_gap_hours": round(mean_gap, 2),
            "coefficient_of_variation": round(cv, 4),
        },
        "frequency": {
            "daily": {
                "average": round(len(ordered) / window_days, 3),
                "trend": _trend(first_half, second_half, FREQUENCY_TREND_BAND),
                "first_half": first_half,
                "second_half": second_half,
            }
        },
    }


def analyze_audience(posts: Sequence[SocialMediaPost]) -> dict[str, Any]:
    """Follower growth from the earliest to the latest observed follower count."""
    observed = sorted((p for p in posts if p.followers is not None), key=lambda p: p.posted_at)
    if not observed:
        return {
            "followers_start": None,
            "followers_end": None,
            "follower_growth": 0,
            "growth_rate": 0.0,
            "trend": "stable",
        }

    start, end = observed[0].followers, observed[-1].followers
    growth = end - start
    growth_rate = growth / start * 100 if start else 0.0

    if growth_rate > AUDIENCE_TREND_BAND:
        trend = "growing"
    elif growth_rate < -AUDIENCE_TREND_BAND:
        trend = "declining"
    else:
        trend = "stable"

    return {
        "followers_start": start,
        "followers_end": end,
        "follower_growth": growth,
        "growth_rate": round(growth_rate, 2),
        "trend": trend,
    }


def generate_insights(platform: str, analyses: dict[str, dict[str, Any]]) -> dict[str, list]:
    """Turn one platform's engagement/frequency/audience analyses into insights."""
    insights = empty_insights()

    engagement = analyses.get("engagement") or {}
    if engagement.get("content_types"):
        top = engagement["content_types"][0]
        insights["content_opportunities"].append({
            "platform": platform,
            "type": "content_type",
            "recommendation": f"{top['type']} content shows highest engagement",
            "impact": "medium",
            "data": top,
        })
    if engagement.get("best_posting_hours"):
        best = engagement["best_posting_hours"][0]
        insights["timing_insights"].append({
            "platform": platform,
            "type": "optimal_timing",
            "recommendation": f"Peak engagement at {best['hour']}:00",
            "impact": "high",
            "data": best,
        })

    frequency = analyses.get("frequency") or {}
    if frequency.get("total_posts"):
        consistency = frequency["consistency"]
        if consistency["score"] < CONSISTENCY_RISK_THRESHOLD:
            insights["risk_factors"].append({
                "platform": platform,
                "type": "inconsistent_posting",
                "description": f"Low posting consistency ({consistency['score']}%)",
                "severity": "medium",
                "data": consistency,
            })
        daily = frequency["frequency"]["daily"]
        if daily["trend"] == "increasing":
            insights["engagement_trends"].append({
                "platform": platform,
                "type": "increasing_activity",
                "description": "Posting frequency is increasing",
                "impact": "positive",
                "data": daily,
            })

    audience = analyses.get("audience") or {}
    if audience.get("trend") == "growing":
        insights["competitive_advantages"].append({
            "platform": platform,
            "type": "growing_engagement",
            "description": "Audience engagement is growing",
            "impact": "high",
            "data": audience,
        })
    elif audience.get("trend") == "declining":
        insights["risk_factors"].append({
            "platform": platform,
            "type": "declining_engagement",
            "description": "Audience engagement is declining",
            "severity": "high",
            "data": audience,
        })
    if audience.get("followers_end") is not None:
        insights["audience_changes"].append({
            "platform": platform,
            "type": "follower_change",
            "description": f"Followers changed by {audience['follower_growth']} ({audience['growth_rate']}%)",
            "data": audience,
        })

    return insights


def merge_insights(parts: Iterable[dict[str, list]]) -> dict[str, list]:
    merged = empty_insights()
    for part in parts:
        for key, items in part.items():
            merged[key].extend(items)
    return merged


def build_alerts(competitor_name: str, insights: dict[str, list]) -> list[dict[str, Any]]:
    """Alert payloads for the insights worth a user's attention."""
    alerts = []

    for advantage in insights["competitive_advantages"]:
        if advantage.get("impact") == "high":
            alerts.append({
                "alert_type": "competitive_advantage",
                "severity": "info",
                "title": f"{competitor_name} gaining competitive advantage",
                "description": f"{advantage['description']} on {advantage['platform']}",
                "source_data": advantage,
                "action_items": list(ADVANTAGE_ACTIONS),
            })

    for risk in insights["risk_factors"]:
        if risk.get("severity") == "high":
            alerts.append({
                "alert_type": "competitive_opportunity",
                "severity": "warning",
                "title": f"Opportunity detected: {competitor_name} showing weakness",
                "description": f"{risk['description']} on {risk['platform']}",
                "source_data": risk,
                "action_items": list(WEAKNESS_ACTIONS),
            })

    for opportunity in insights["content_opportunities"]:
        if opportunity.get("impact") in ("high", "medium"):
            alerts.append({
                "alert_type": "content_insight",
                "severity": "info",
                "title": f"Content strategy insight for {competitor_name}",
                "description": opportunity["recommendation"],
                "source_data": opportunity,
                "action_items": list(CONTENT_ACTIONS),
            })

    for alert in alerts:
        alert["recommended_actions"] = [
            {"action": item, "priority": "medium", "estimated_effort": "1-2 hours"}
            for item in alert["action_items"]
        ]
    return alerts


class SocialMediaService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.competitors = CompetitorRepository(session)
        self.posts = SocialMediaPostRepository(session)
        self.analyses = SocialMediaAnalysisRepository(session)
        self.alerts = AlertService(session)

    async def ingest_posts(self, competitor: Competitor, posts: Sequence[SocialPostIn]) -> dict[str, int]:
        """Insert new posts and refresh metrics of posts already seen."""
        created = updated = 0

        for post in posts:
            existing = await self.posts.get_by_external_id(competitor.id, post.platform, post.external_id)
            values = post.model_dump(exclude={"platform", "external_id"})
            if existing is None:
                self.session.add(
                    SocialMediaPost(
                        competitor_id=competitor.id,
                        platform=post.platform,
                        external_id=post.external_id,
                        **values,
                    )
                )
                # Flush per post so duplicates inside one batch update instead of colliding
                await self.session.flush()
                created += 1
            else:
                for key, value in values.items():
                    setattr(existing, key, value)
                updated += 1

        await self.session.flush()
        logger.info(
            "Social media posts ingested",
            competitor_id=str(competitor.id),
            created=created,
            updated=updated,
        )
        return {"created": created, "updated": updated}

    async def analyze_competitor(
        self, competitor: Competitor, now: Optional[datetime] = None
    ) -> dict[str, Any]:
        """
        Analyse every platform the competitor posted on within the window,
        store the analyses, raise alerts and stamp last_analyzed.
        """
        now = now or utcnow()
        window_days = get_settings().social_analysis_window_days
        posts = await self.posts.recent_for_competitor(competitor.id, now - timedelta(days=window_days))

        by_platform: dict[str, list[SocialMediaPost]] = defaultdict(list)
        for post in posts:
            by_platform[post.platform].append(post)

        platform_insights = []
        for platform, platform_posts in sorted(by_platform.items()):
            results = {
                "engagement": analyze_engagement(platform_posts),
                "frequency": analyze_frequency(platform_posts, window_days, now),
                "audience": analyze_audience(platform_posts),
            }
            insights = generate_insights(platform, results)
            platform_insights.append(insights)

            for analysis_type, result in results.items():
                self.session.add(
                    SocialMediaAnalysis(
                        competitor_id=competitor.id,
                        platform=platform,
                        analysis_type=analysis_type,
                        results=result,
                        insights=insights,
                        analyzed_at=now,
                    )
                )

        insights = merge_insights(platform_insights)
        created: list[CompetitorAlert] = []
        for payload in build_alerts(competitor.name, insights):
            created.append(await self.alerts.raise_alert(competitor, source="social_media", **payload))

        await self.competitors.apply_update(competitor, last_analyzed=now)

        logger.info(
            "Competitor social media analysed",
            competitor_id=str(competitor.id),
            platforms=len(by_platform),
            posts=len(posts),
            alerts=len(created),
        )
        return {
            "competitor_id": str(competitor.id),
            "platforms": sorted(by_platform),
            "posts_analyzed": len(posts),
            "alerts_created": len(created),
        }

    async def latest_analysis(
        self, competitor_id: UUID, platform: Optional[str] = None
    ) -> Sequence[SocialMediaAnalysis]:
        return await self.analyses.latest_for_competitor(competitor_id, platform)

    async def cleanup(self, retention_days: int, now: Optional[datetime] = None) -> int:
        cutoff = (now or utcnow()) - timedelta(days=retention_days)
        deleted = await self.analyses.delete_older_than(cutoff)
        if deleted:
            logger.info("Old social media analyses deleted", deleted=deleted, cutoff=cutoff.isoformat())
        return deleted

    async def monitoring_stats(self, now: Optional[datetime] = None) -> dict[str, int]:
        """System-wide monitoring activity over the last 24 hours."""
        since = (now or utcnow()) - timedelta(hours=24)
        return {
            "active_competitors": await self.competitors.count_active(),
            "analyses_last_24h": await self.analyses.count_since(since),
            "alerts_last_24h": await self.alerts.alerts.count_since(since),
        }
