"""Draft payload shape, stored as JSON in both draft backends."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class DraftItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    text: str = ""
    rollover: bool = False
    original_plan_date: Optional[date] = Field(default=None, alias="originalPlanDate")


class Draft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_items: List[DraftItem] = Field(default_factory=list, alias="taskItems")
    is_composer_open: bool = Field(default=False, alias="isComposerOpen")
    is_for_today: bool = Field(default=True, alias="isForToday")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def has_content(self) -> bool:
        return any(item.text.strip() for item in self.task_items)
