# sleep_tracker/core/models/data_models.py

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Dict, Optional, Any
from datetime import date, datetime, timezone
from enum import Enum

from sleep_tracker.utils.time_format import seconds_to_hours


class MetricKind(str, Enum):
    DURATION = "duration"
    SCORE = "score"


# Sleep Data Models
class SleepRecord(BaseModel):
    """A single recorded sleep session. Stored as {date, sleepTime, memo, timestamp}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sleep_date: date = Field(..., alias="date")
    duration_seconds: int = Field(..., ge=0, alias="sleepTime")
    memo: str = ""
    recorded_at: datetime = Field(..., alias="timestamp")
    sleep_score: Optional[int] = Field(None, ge=0, le=100, alias="sleepScore")

    @field_validator('memo', mode='before')
    @classmethod
    def validate_memo(cls, v):
        return "" if v is None else v

    @field_validator('recorded_at')
    @classmethod
    def validate_recorded_at(cls, v):
        # Naive timestamps are taken as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def duration_hours(self) -> float:
        return seconds_to_hours(self.duration_seconds)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# User Models
class UserProfile(BaseModel):
    """
    User profile shared by the current-user slot and the all-users collection.

    Fields written by other flows (birthDate, gender, createdAt, ...) are kept as extras.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    avatar_token: Optional[str] = Field(None, alias="avatarToken")
    average_score: Optional[float] = Field(None, ge=0, le=100, alias="averageScore")
    average_sleep_hours: Optional[float] = Field(None, ge=0, le=24, alias="averageSleepHours")
    total_days: Optional[int] = Field(None, ge=0, alias="totalDays")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        # Numeric ids from older sign-up data are normalized to strings
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @model_validator(mode='after')
    def validate_identity(self):
        if not self.id and not self.email:
            raise ValueError('A user profile needs an id or an email')
        return self

    @property
    def identity_key(self) -> str:
        return self.id if self.id else self.email

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProfilePatch(BaseModel):
    """Partial profile update. Unknown keys pass through unchanged."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    avatar_token: Optional[str] = Field(None, alias="avatarToken")
    average_score: Optional[float] = Field(None, ge=0, le=100, alias="averageScore")
    average_sleep_hours: Optional[float] = Field(None, ge=0, le=24, alias="averageSleepHours")
    total_days: Optional[int] = Field(None, ge=0, alias="totalDays")

    def changes(self) -> Dict[str, Any]:
        """Fields to overwrite, keyed by their stored names. None never erases a value."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)


# Chart Models
class ChartPoint(BaseModel):
    day: str
    raw_value: float
    scaled_height_ratio: float = Field(..., ge=0.0, le=1.0)
    display_value: str


class ChartSeries(BaseModel):
    kind: MetricKind
    max_value: float
    points: List[ChartPoint]

    @property
    def days(self) -> List[str]:
        return [point.day for point in self.points]

    @property
    def ratios(self) -> List[float]:
        return [point.scaled_height_ratio for point in self.points]
