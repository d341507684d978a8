"""Repositories for data access."""
from .base import BaseRepository, OwnedRepository, PaginatedResult
from .user import UserRepository
from .goal import GoalRepository, TaskRepository
from .briefcase import FolderRepository, DocumentRepository
from .conversation import ConversationRepository
from .competitor import (
    AlertRepository,
    CompetitorRepository,
    SocialMediaAnalysisRepository,
    SocialMediaPostRepository,
)
from .opportunity import (
    OpportunityActionRepository,
    OpportunityMetricRepository,
    OpportunityRepository,
)
from .scraping import ScrapingJobRepository, ScrapingResultRepository

__all__ = [
    "BaseRepository",
    "OwnedRepository",
    "PaginatedResult",
    "UserRepository",
    "GoalRepository",
    "TaskRepository",
    "FolderRepository",
    "DocumentRepository",
    "ConversationRepository",
    "AlertRepository",
    "CompetitorRepository",
    "SocialMediaAnalysisRepository",
    "SocialMediaPostRepository",
    "OpportunityActionRepository",
    "OpportunityMetricRepository",
    "OpportunityRepository",
    "ScrapingJobRepository",
    "ScrapingResultRepository",
]
