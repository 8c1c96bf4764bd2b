"""
Pydantic models for badges
"""
from datetime import datetime
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Badge(BaseModel):
    """A badge instance; the wire form is either a bare id or an object with badgeId"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    badge_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("badgeId", "badge_id", "id"),
        description="Catalog id, e.g. week_warrior"
    )
    earned_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("earnedAt", "earned_at")
    )

    @model_validator(mode="before")
    @classmethod
    def accept_bare_id(cls, data: Any) -> Any:
        """Wrap a bare badge id string into the object form"""
        if isinstance(data, str):
            return {"badgeId": data}
        return data
