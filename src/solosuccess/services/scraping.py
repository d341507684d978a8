"""
Scheduled scraping of competitor pages with change detection.

A job fetches one URL, reduces the page to text, hashes it and compares
it with the last successful result. Significant changes are stored in the
job history and can raise a `website_change` alert.
"""

import difflib
import hashlib
import re
import time
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Sequence
from uuid import UUID

import httpx
from bs4 import BeautifulSoup
from croniter import croniter
from soupsieve import SelectorSyntaxError
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.competitors import (
    ScrapingFrequency,
    ScrapingJobCreate,
    ScrapingJobUpdate,
)
from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import (
    Conflict,
    InvalidParameter,
    NotFound,
    ResourceAccessDenied,
)
from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.competitor import Competitor
from solosuccess.infrastructure.database.models.scraping import (
    JobStatus,
    ScrapingJob,
    ScrapingResult,
    default_scraping_config,
)
from solosuccess.infrastructure.database.repositories import (
    CompetitorRepository,
    ScrapingJobRepository,
    ScrapingResultRepository,
)
from solosuccess.infrastructure.database.repositories.scraping import SCHEDULABLE_STATUSES
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.infrastructure.observability.metrics import SCRAPING_DURATION_SECONDS, SCRAPING_RUNS
from solosuccess.services.competitors import AlertService

logger = get_logger(__name__)

JOB_TYPE_PRIORITY = {
    "pricing": "high",
    "website": "medium",
    "products": "medium",
    "jobs": "low",
}

THREAT_LEVEL_INTERVAL_MINUTES = {
    "critical": 60,
    "high": 240,
    "medium": 720,
    "low": 1440,
}

MANUAL_RUN_DELAY = timedelta(days=365)

_WHITESPACE_RE = re.compile(r"\s+")


def priority_for_job_type(job_type: str) -> str:
    return JOB_TYPE_PRIORITY.get(job_type, "medium")


def frequency_for_threat_level(threat_level: str) -> dict[str, Any]:
    return {"type": "interval", "value": THREAT_LEVEL_INTERVAL_MINUTES.get(threat_level, 720)}


def calculate_next_run(frequency: dict[str, Any], now: Optional[datetime] = None) -> datetime:
    """
    Next execution time for a frequency.

    interval: now + value minutes; cron: next fire time of the expression;
    manual: a year out, so the job only runs when executed explicitly.
    """
    now = now or utcnow()
    kind = frequency.get("type")

    if kind == "interval":
        return now + timedelta(minutes=int(frequency["value"]))
    if kind == "cron":
        return croniter(str(frequency["value"]), now).get_next(datetime)
    return now + MANUAL_RUN_DELAY


def validate_frequency(frequency: ScrapingFrequency) -> dict[str, Any]:
    if frequency.type == "cron" and not croniter.is_valid(str(frequency.value)):
        raise InvalidParameter(
            "Invalid cron expression",
            details={"field": "frequency.value", "value": frequency.value},
        )
    return frequency.model_dump()


def extract_text(
    markup: str,
    exclude_patterns: Sequence[str] = (),
    selectors: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Visible text of an HTML page with excluded patterns removed.

    With `selectors` ({name: css selector}) only the matched elements are
    kept, in name order; invalid selectors are skipped.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()

    if selectors:
        parts = []
        for name in sorted(selectors):
            try:
                matches = soup.select(selectors[name])
            except SelectorSyntaxError:
                logger.warning("Ignoring invalid selector", name=name, selector=selectors[name])
                continue
            parts.extend(match.get_text(separator=" ") for match in matches)
        text = " ".join(parts)
    else:
        text = soup.get_text(separator=" ")

    for pattern in exclude_patterns:
        try:
            text = re.sub(pattern, " ", text)
        except re.error:
            logger.warning("Ignoring invalid exclude pattern", pattern=pattern)

    return _WHITESPACE_RE.sub(" ", text).strip()


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def change_score(previous: str, current: str) -> float:
    """1 - similarity ratio; 0 means identical, 1 means nothing in common."""
    return round(1 - difflib.SequenceMatcher(None, previous, current, autojunk=False).ratio(), 4)


def retry_backoff(retry_count: int) -> timedelta:
    return timedelta(minutes=2 ** retry_count)


async def fetch_page(url: str, timeout: float, user_agent: str) -> tuple[int, str]:
    """
    GET a page.

    Raises:
        httpx.HTTPError: On network errors and non-2xx responses
    """
    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": user_agent},
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.status_code, response.text


class ScrapingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.jobs = ScrapingJobRepository(session)
        self.results = ScrapingResultRepository(session)
        self.competitors = CompetitorRepository(session)

    async def get_job(self, user_id: UUID, job_id: UUID) -> ScrapingJob:
        """
        Raises:
            NotFound: If the job does not exist
            ResourceAccessDenied: If the job belongs to another user
        """
        job = await self.jobs.get(job_id)
        if job is None:
            raise NotFound("Scraping job not found", details={"job_id": str(job_id)})
        if job.user_id != user_id:
            raise ResourceAccessDenied(details={"job_id": str(job_id)})
        return job

    async def create_job(self, user_id: UUID, competitor_id: UUID, data: ScrapingJobCreate) -> ScrapingJob:
        competitor = await self.competitors.get_owned(competitor_id, user_id)
        if competitor is None:
            raise NotFound("Competitor not found", details={"competitor_id": str(competitor_id)})

        url = data.url or self._default_url(competitor)
        frequency = (
            validate_frequency(data.frequency)
            if data.frequency
            else frequency_for_threat_level(competitor.threat_level)
        )
        config = {**default_scraping_config(), **(data.config.model_dump() if data.config else {})}

        job = await self.jobs.create(
            ScrapingJob(
                user_id=user_id,
                competitor_id=competitor.id,
                job_type=data.job_type,
                url=url,
                priority=priority_for_job_type(data.job_type),
                frequency=frequency,
                config=config,
                next_run_at=utcnow(),
            )
        )
        logger.info(
            "Scraping job created",
            job_id=str(job.id),
            competitor_id=str(competitor.id),
            job_type=job.job_type,
            priority=job.priority,
        )
        return job

    @staticmethod
    def _default_url(competitor: Competitor) -> str:
        if not competitor.domain:
            raise InvalidParameter(
                "A url is required when the competitor has no domain",
                details={"field": "url"},
            )
        domain = competitor.domain
        return domain if domain.startswith(("http://", "https://")) else f"https://{domain}"

    async def history(self, job: ScrapingJob) -> Sequence[ScrapingResult]:
        return await self.results.history(job.id, get_settings().scraping_history_limit)

    async def update_job(self, user_id: UUID, job_id: UUID, data: ScrapingJobUpdate) -> ScrapingJob:
        """
        Change frequency/config and apply an action.

        Raises:
            Conflict: resume of a job that is not paused, or any change to a
                cancelled job
        """
        job = await self.get_job(user_id, job_id)
        changes: dict[str, Any] = {}

        if job.status == JobStatus.CANCELLED and (data.frequency or data.config or data.action):
            raise Conflict("Scraping job is cancelled", details={"job_id": str(job.id)})

        if data.frequency is not None:
            changes["frequency"] = validate_frequency(data.frequency)
            changes["next_run_at"] = calculate_next_run(changes["frequency"])
        if data.config is not None:
            changes["config"] = {**job.config, **data.config.model_dump()}

        if data.action == "pause":
            changes["status"] = JobStatus.PAUSED.value
        elif data.action == "resume":
            if job.status != JobStatus.PAUSED:
                raise Conflict(
                    "Only paused jobs can be resumed",
                    details={"job_id": str(job.id), "status": job.status},
                )
            changes["status"] = JobStatus.PENDING.value
            changes["next_run_at"] = calculate_next_run(changes.get("frequency", job.frequency))
        elif data.action == "cancel":
            changes["status"] = JobStatus.CANCELLED.value

        if changes:
            job = await self.jobs.apply_update(job, **changes)
            logger.info("Scraping job updated", job_id=str(job.id), action=data.action, status=job.status)

        if data.action == "execute":
            await self.execute_job(job)

        return job

    async def cancel_job(self, user_id: UUID, job_id: UUID) -> ScrapingJob:
        job = await self.get_job(user_id, job_id)
        return await self.jobs.apply_update(job, status=JobStatus.CANCELLED.value)

    async def execute_job(self, job: ScrapingJob, now: Optional[datetime] = None) -> ScrapingResult:
        """
        Fetch the page, record the result and schedule the next run.

        Fetch failures never raise: they are recorded as a failed result and
        the job is retried with exponential backoff until max_retries.
        """
        settings = get_settings()
        config = {**default_scraping_config(), **(job.config or {})}
        now = now or utcnow()

        await self.jobs.apply_update(job, status=JobStatus.RUNNING.value, last_run_at=now)

        started = time.perf_counter()
        try:
            status_code, body = await fetch_page(job.url, settings.scraping_timeout, settings.scraping_user_agent)
        except httpx.HTTPError as e:
            duration = time.perf_counter() - started
            return await self._record_failure(job, e, duration, now)

        duration = time.perf_counter() - started
        SCRAPING_DURATION_SECONDS.labels(job_type=job.job_type).observe(duration)

        text = extract_text(
            body,
            config.get("exclude_patterns") or [],
            config.get("custom_selectors") or None,
        )
        digest = content_hash(text)
        has_changes, score = False, 0.0

        previous = await self.results.last_successful(job.id)
        if config.get("enable_change_detection") and previous is not None and previous.content_hash != digest:
            score = change_score(previous.content_text or "", text)
            has_changes = score >= float(config.get("change_threshold", 0.1))

        result = await self.results.create(
            ScrapingResult(
                job_id=job.id,
                success=True,
                status_code=status_code,
                content_hash=digest,
                content_text=text,
                has_changes=has_changes,
                change_score=score,
                duration_ms=round(duration * 1000, 2),
                executed_at=now,
            )
        )

        await self.jobs.apply_update(
            job,
            status=JobStatus.COMPLETED.value,
            retry_count=0,
            last_error=None,
            next_run_at=calculate_next_run(job.frequency, now),
        )
        SCRAPING_RUNS.labels(job_type=job.job_type, outcome="changed" if has_changes else "success").inc()

        if has_changes and config.get("notify_on_change"):
            await self._raise_change_alert(job, score)

        logger.info(
            "Scraping job executed",
            job_id=str(job.id),
            has_changes=has_changes,
            change_score=score,
            duration_ms=result.duration_ms,
        )
        return result

    async def _record_failure(
        self, job: ScrapingJob, error: Exception, duration: float, now: datetime
    ) -> ScrapingResult:
        status_code = None
        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code

        result = await self.results.create(
            ScrapingResult(
                job_id=job.id,
                success=False,
                status_code=status_code,
                error=str(error)[:1000],
                duration_ms=round(duration * 1000, 2),
                executed_at=now,
            )
        )

        retry_count = job.retry_count + 1
        if retry_count <= job.max_retries:
            status = JobStatus.PENDING.value
            next_run_at = now + retry_backoff(retry_count)
        else:
            status = JobStatus.FAILED.value
            next_run_at = calculate_next_run(job.frequency, now)

        await self.jobs.apply_update(
            job,
            status=status,
            retry_count=retry_count,
            last_error=str(error)[:1000],
            next_run_at=next_run_at,
        )
        SCRAPING_RUNS.labels(job_type=job.job_type, outcome="failed").inc()
        logger.warning(
            "Scraping job failed",
            job_id=str(job.id),
            retry_count=retry_count,
            status=status,
            error=str(error),
        )
        return result

    async def _raise_change_alert(self, job: ScrapingJob, score: float) -> None:
        competitor = await self.competitors.get(job.competitor_id)
        if competitor is None:
            return

        severity = "urgent" if score >= 0.5 else "warning"
        await AlertService(self.session).raise_alert(
            competitor,
            alert_type="website_change",
            severity=severity,
            title=f"{competitor.name} updated their {job.job_type} page",
            description=f"Detected a {round(score * 100)}% change on {job.url}",
            source_data={"job_id": str(job.id), "url": job.url, "change_score": score},
            action_items=[
                "Review the changes on their page",
                "Compare with your own offering",
                "Update your positioning if needed",
            ],
            recommended_actions=[
                {"action": "Review the changes on their page", "priority": "medium", "estimated_effort": "1-2 hours"},
            ],
            source="scraping",
        )


async def execute_due_jobs(session_factory, limit: int = 50) -> dict[str, int]:
    """
    Execute every schedulable job whose next run has passed.

    Each job runs in its own session so one failure cannot roll back the
    others.
    """
    async with session_factory() as session:
        due_ids = [job.id for job in await ScrapingJobRepository(session).due_jobs(utcnow(), limit)]

    summary = {"due": len(due_ids), "executed": 0, "failed": 0}
    for job_id in due_ids:
        async with session_factory() as session:
            service = ScrapingService(session)
            job = await service.jobs.get(job_id)
            if job is None or job.status not in SCHEDULABLE_STATUSES:
                continue
            result = await service.execute_job(job)
            summary["executed" if result.success else "failed"] += 1

    logger.info("Due scraping jobs processed", **summary)
    return summary
