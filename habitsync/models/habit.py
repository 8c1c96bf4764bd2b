"""
Pydantic models for habits
"""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from habitsync.models.badge import Badge
from habitsync.utils.timezone import parse_timestamp

# Known categories and their display labels; first entry is the fallback
CATEGORY_LABELS = {
    "health": "Health & Fitness",
    "learning": "Learning",
    "productivity": "Productivity",
    "social": "Social",
}
DEFAULT_CATEGORY = "health"


class Habit(BaseModel):
    """A habit as returned by the remote service"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    category: str = DEFAULT_CATEGORY
    streak: int = 0
    total_completions: int = Field(0, validation_alias=AliasChoices("totalCompletions", "total_completions"))
    # Raw wire values; compared only after calendar-date normalization
    completed_dates: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("completedDates", "completed_dates")
    )
    created_at: Optional[datetime] = Field(None, validation_alias=AliasChoices("createdAt", "created_at"))

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return None if v is None else str(v)

    @field_validator("streak", "total_completions", mode="before")
    @classmethod
    def default_counter(cls, v):
        """Server counters are non-negative; missing means zero"""
        if v is None:
            return 0
        return max(0, int(v))

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or DEFAULT_CATEGORY

    @field_validator("completed_dates", mode="before")
    @classmethod
    def default_dates(cls, v):
        if v is None:
            return []
        return list(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def lenient_created_at(cls, v):
        """Unparseable creation timestamps are treated as missing"""
        return parse_timestamp(v)

    @property
    def category_key(self) -> str:
        """Category used for presentation; unknown values fall back to the default"""
        return self.category if self.category in CATEGORY_LABELS else DEFAULT_CATEGORY

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS[self.category_key]


class CreateHabitRequest(BaseModel):
    """Request model for creating a new habit"""
    name: str = Field(..., min_length=1, max_length=200, description="Habit name")
    category: str = Field(DEFAULT_CATEGORY, description="One of health, learning, productivity, social")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ToggleResult(BaseModel):
    """Toggle response: the authoritative habit plus badges earned by this toggle"""
    habit: Habit
    new_badges: List[Badge] = Field(default_factory=list)
