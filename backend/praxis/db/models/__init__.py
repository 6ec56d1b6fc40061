"""ORM models exposed for metadata discovery."""
from praxis.db.models.chat import ChatMessage, ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.deleted_task import DeletedTask
from praxis.db.models.draft_entry import DraftEntry
from praxis.db.models.system_prompt import SystemPrompt
from praxis.db.models.task import DailyTask
from praxis.db.models.user_activity import UserActivity
from praxis.db.models.user_profile import UserProfile

__all__ = [
    "ChatMessage",
    "ChatSession",
    "DailyPlan",
    "DailyTask",
    "DeletedTask",
    "DraftEntry",
    "SystemPrompt",
    "UserActivity",
    "UserProfile",
]
