"""
API v1 router aggregator.

Mounted at /api/v1 by the application factory. Health and metrics
endpoints are not versioned and live at the root.
"""

from fastapi import APIRouter

from solosuccess.api.routes import (
    alerts,
    auth,
    brand,
    briefcase,
    chat,
    competitors,
    dashboard,
    goals,
    onboarding,
    opportunities,
    tasks,
    users,
)


router = APIRouter()

# ============================================================================
# Include v1 routes
# ============================================================================

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])

# Goals and tasks: /api/v1/goals/*, /api/v1/tasks/*
router.include_router(goals.router, prefix="/goals", tags=["Goals"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])

router.include_router(briefcase.router, prefix="/briefcase", tags=["Briefcase"])
router.include_router(chat.router, prefix="/chat", tags=["Chat"])
router.include_router(brand.router, prefix="/brand", tags=["Brand"])

# Competitive intelligence
router.include_router(competitors.router, prefix="/competitors", tags=["Competitors"])
router.include_router(alerts.router, prefix="/alerts", tags=["Alerts"])
router.include_router(opportunities.router, prefix="/opportunities", tags=["Opportunities"])


__all__ = ["router"]
