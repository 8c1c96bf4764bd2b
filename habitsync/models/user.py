"""
Pydantic models for users and authentication
"""
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from habitsync.models.badge import Badge


class User(BaseModel):
    """Profile as returned by the remote service"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"))
    username: Optional[str] = None
    email: Optional[str] = None
    total_points: int = Field(0, validation_alias=AliasChoices("totalPoints", "total_points"))
    badges: List[Badge] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Ids are opaque; keep them as strings"""
        return None if v is None else str(v)

    @field_validator("total_points", mode="before")
    @classmethod
    def default_points(cls, v):
        """Missing or negative points read as zero"""
        if v is None:
            return 0
        return max(0, int(v))

    @field_validator("badges", mode="before")
    @classmethod
    def default_badges(cls, v):
        return v or []


class AuthResult(BaseModel):
    """Successful login/register payload: a token plus the user summary"""
    token: str = Field(..., min_length=1)
    user: User

    @classmethod
    def from_payload(cls, data: dict) -> "AuthResult":
        """Build from the flat {token, id, username, ...} auth payload"""
        return cls(token=data.get("token"), user=User.model_validate(data))


class Credentials(BaseModel):
    """Request model for login and registration"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    username: Optional[str] = None

    def login_body(self) -> dict:
        return {"email": self.email, "password": self.password}

    def register_body(self) -> dict:
        return {"username": self.username, "email": self.email, "password": self.password}
