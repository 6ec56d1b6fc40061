"""Helpers for working with user profiles."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from praxis.db.models.user_profile import UserProfile
from praxis.services.display import format_display_name

DEFAULT_TIMEZONE = "UTC"
DEFAULT_TASK_COUNT = 6


def get_or_create_profile(db: Session, user_id: UUID) -> UserProfile:
    """Fetch the profile row for an authenticated user, creating a blank one if needed."""
    profile = db.get(UserProfile, user_id)
    if profile:
        return profile

    profile = UserProfile(user_id=user_id)
    db.add(profile)
    try:
        db.flush()
        return profile
    except IntegrityError:
        db.rollback()
        existing = db.get(UserProfile, user_id)
        if existing:
            return existing
        raise


def display_name_for(profile: UserProfile | None) -> str:
    if profile is None:
        return "User"
    return format_display_name(profile.first_name, profile.last_name, profile.email)


def timezone_for(profile: UserProfile | None) -> str:
    if profile is None or not profile.timezone:
        return DEFAULT_TIMEZONE
    return profile.timezone


def preferred_task_count(profile: UserProfile | None) -> int:
    """Composer slot count: the user's preference, clamped to three through six."""
    preferred = profile.daily_task_count if profile and profile.daily_task_count else DEFAULT_TASK_COUNT
    return min(DEFAULT_TASK_COUNT, max(3, preferred))
