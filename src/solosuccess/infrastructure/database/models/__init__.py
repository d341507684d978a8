"""Database models. Importing this package registers every table on the metadata."""

from .user import User
from .goal import Goal, Task
from .briefcase import BriefcaseFolder, Document, DocumentContent
from .conversation import Conversation
from .competitor import Competitor, CompetitorAlert, SocialMediaPost, SocialMediaAnalysis
from .opportunity import Opportunity, OpportunityAction, OpportunityMetric
from .scraping import ScrapingJob, ScrapingResult

__all__ = [
    "User",
    "Goal",
    "Task",
    "BriefcaseFolder",
    "Document",
    "DocumentContent",
    "Conversation",
    "Competitor",
    "CompetitorAlert",
    "SocialMediaPost",
    "SocialMediaAnalysis",
    "Opportunity",
    "OpportunityAction",
    "OpportunityMetric",
    "ScrapingJob",
    "ScrapingResult",
]
