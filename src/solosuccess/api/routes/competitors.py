"""
Competitor profiles, social-media monitoring and scraping jobs.

Static paths (`/social-media/processor`, `/scraping/{job_id}`) are declared
before `/{competitor_id}` so they are not captured by it.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.schemas.competitors import (
    CompetitorCreate,
    CompetitorRead,
    CompetitorUpdate,
    MonitoringStatusLiteral,
    PlatformLiteral,
    ProcessorAction,
    ProcessorActionResponse,
    ProcessorStatusResponse,
    ScrapingJobCreate,
    ScrapingJobDetail,
    ScrapingJobRead,
    ScrapingJobUpdate,
    SocialAnalysisResponse,
    SocialIngestResult,
    SocialPostsIngest,
    ThreatLevelLiteral,
)
from solosuccess.api.schemas.pagination import PaginatedResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.domain.exceptions import InvalidParameter
from solosuccess.infrastructure.database import db
from solosuccess.infrastructure.database.models.scraping import ScrapingJob
from solosuccess.services.competitors import CompetitorService
from solosuccess.services.processor import social_media_processor
from solosuccess.services.scraping import ScrapingService
from solosuccess.services.social_media import SocialMediaService

router = APIRouter()


async def _job_detail(service: ScrapingService, job: ScrapingJob) -> ScrapingJobDetail:
    return ScrapingJobDetail(
        job=ScrapingJobRead.model_validate(job),
        results=await service.history(job),
    )


# ============================================================================
# Social-media processor
# ============================================================================


@router.get("/social-media/processor", response_model=ProcessorStatusResponse)
async def processor_status(user: CurrentUser, session: DbSession):
    return {
        "status": social_media_processor.get_status(),
        "stats": await SocialMediaService(session).monitoring_stats(),
    }


@router.post(
    "/social-media/processor",
    response_model=ProcessorActionResponse,
    responses={400: {"description": "analyze_competitor without competitor_id"}},
)
async def processor_action(data: ProcessorAction, user: CurrentUser):
    """Control the in-process analysis loop or run a cycle now."""
    result = None

    if data.action == "start":
        started = social_media_processor.start(data.interval_minutes)
        message = "Processor started" if started else "Processor already running"
    elif data.action == "stop":
        stopped = social_media_processor.stop()
        message = "Processor stopped" if stopped else "Processor was not running"
    elif data.action == "process_now":
        result = await social_media_processor.process_jobs_manually()
        message = "Processing cycle skipped" if result.get("skipped") else "Processing cycle completed"
    else:
        if data.competitor_id is None:
            raise InvalidParameter(
                "competitor_id is required for analyze_competitor",
                details={"field": "competitor_id"},
            )
        async with db.session() as session:
            await CompetitorService(session).get(user.id, data.competitor_id)
        result = await social_media_processor.analyze_competitor_manually(data.competitor_id)
        message = "Competitor analysed"

    return ProcessorActionResponse(
        success=True,
        message=message,
        status=social_media_processor.get_status(),
        result=result,
    )


# ============================================================================
# Scraping jobs
# ============================================================================


@router.get("/scraping/{job_id}", response_model=ScrapingJobDetail)
async def get_scraping_job(job_id: UUID, user: CurrentUser, session: DbSession):
    service = ScrapingService(session)
    return await _job_detail(service, await service.get_job(user.id, job_id))


@router.put(
    "/scraping/{job_id}",
    response_model=ScrapingJobDetail,
    responses={409: {"description": "Action not valid for the job's status"}},
)
async def update_scraping_job(
    job_id: UUID, data: ScrapingJobUpdate, user: CurrentUser, session: DbSession
):
    service = ScrapingService(session)
    job = await service.update_job(user.id, job_id, data)
    return await _job_detail(service, job)


@router.delete("/scraping/{job_id}", response_model=ScrapingJobRead)
async def cancel_scraping_job(job_id: UUID, user: CurrentUser, session: DbSession):
    return await ScrapingService(session).cancel_job(user.id, job_id)


# ============================================================================
# Competitors
# ============================================================================


@router.get("", response_model=PaginatedResponse[CompetitorRead])
async def list_competitors(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    threat_level: Optional[ThreatLevelLiteral] = None,
    monitoring_status: Optional[MonitoringStatusLiteral] = None,
):
    result = await CompetitorService(session).search(
        user.id,
        threat_level=threat_level,
        monitoring_status=monitoring_status,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedResponse.build(result, CompetitorRead)


@router.post("", response_model=CompetitorRead, status_code=status.HTTP_201_CREATED)
async def create_competitor(data: CompetitorCreate, user: CurrentUser, session: DbSession):
    return await CompetitorService(session).create(user.id, data)


@router.get("/{competitor_id}", response_model=CompetitorRead)
async def get_competitor(competitor_id: UUID, user: CurrentUser, session: DbSession):
    return await CompetitorService(session).get(user.id, competitor_id)


@router.patch("/{competitor_id}", response_model=CompetitorRead)
async def update_competitor(
    competitor_id: UUID, data: CompetitorUpdate, user: CurrentUser, session: DbSession
):
    return await CompetitorService(session).update(user.id, competitor_id, data)


@router.delete("/{competitor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_competitor(competitor_id: UUID, user: CurrentUser, session: DbSession):
    await CompetitorService(session).delete(user.id, competitor_id)


@router.post("/{competitor_id}/social-media/posts", response_model=SocialIngestResult)
async def ingest_social_posts(
    competitor_id: UUID, data: SocialPostsIngest, user: CurrentUser, session: DbSession
):
    """Store observed posts. Re-sending a post refreshes its metrics."""
    competitor = await CompetitorService(session).get(user.id, competitor_id)
    return await SocialMediaService(session).ingest_posts(competitor, data.posts)


@router.get("/{competitor_id}/social-media/analysis", response_model=SocialAnalysisResponse)
async def get_social_analysis(
    competitor_id: UUID,
    user: CurrentUser,
    session: DbSession,
    platform: Optional[PlatformLiteral] = None,
):
    competitor = await CompetitorService(session).get(user.id, competitor_id)
    analyses = await SocialMediaService(session).latest_analysis(competitor.id, platform)
    return {
        "competitor_id": competitor.id,
        "last_analyzed": competitor.last_analyzed,
        "analyses": analyses,
    }


@router.post(
    "/{competitor_id}/scraping",
    response_model=ScrapingJobRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "No url given and the competitor has no domain"}},
)
async def create_scraping_job(
    competitor_id: UUID, data: ScrapingJobCreate, user: CurrentUser, session: DbSession
):
    return await ScrapingService(session).create_job(user.id, competitor_id, data)
