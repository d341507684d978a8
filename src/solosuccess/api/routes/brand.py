"""Brand guideline generation."""
from fastapi import APIRouter, Request, Response

from solosuccess.api.middleware.rate_limit import limiter
from solosuccess.api.schemas.brand import BrandGuidelines, BrandGuidelinesRequest
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.config.settings import get_settings
from solosuccess.services.brand import generate_guidelines

router = APIRouter()


@router.post(
    "/guidelines",
    response_model=BrandGuidelines,
    responses={429: {"description": "Too many requests"}},
)
@limiter.limit(lambda: get_settings().rate_limit_brand_guidelines)
async def brand_guidelines(
    request: Request, response: Response, data: BrandGuidelinesRequest, user: CurrentUser
):
    """Usage rules for logo, colors, typography and spacing."""
    return generate_guidelines(data)
