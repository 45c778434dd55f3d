from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, model_validator

from core.utils import as_utc, parse_media_urls
from .enums import ProjectStatus, ProjectType, ScheduleVisibility


def _normalize_timestamp(v):
    # Accept "2025-01-01T00:00:00Z" as well as "+00:00"
    if isinstance(v, str) and v.endswith("Z"):
        return v[:-1] + "+00:00"
    if isinstance(v, str) and not v.strip():
        return None
    return v


# -------------------------------------------------
# Projects
# -------------------------------------------------
class ProjectBase(BaseModel):
    title: str
    description: Optional[str] = None
    media_urls: List[str] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.draft
    type: Optional[ProjectType] = None

    pre_selling_price: Optional[float] = Field(None, ge=0)
    pre_selling_currency: Optional[str] = None
    main_price: Optional[float] = Field(None, ge=0)
    main_currency: Optional[str] = None

    @field_validator("media_urls", mode="before")
    def normalize_media_urls(cls, v):
        return parse_media_urls(v)


class ProjectCreate(ProjectBase):
    """Backend sets created_by."""

    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    def parse_created_at(cls, v):
        return _normalize_timestamp(v)


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the payload are written."""

    title: Optional[str] = None
    description: Optional[str] = None
    media_urls: Optional[List[str]] = None
    status: Optional[ProjectStatus] = None
    type: Optional[ProjectType] = None
    pre_selling_price: Optional[float] = Field(None, ge=0)
    pre_selling_currency: Optional[str] = None
    main_price: Optional[float] = Field(None, ge=0)
    main_currency: Optional[str] = None

    @field_validator("media_urls", mode="before")
    def normalize_media_urls(cls, v):
        if v is None:
            return None
        return parse_media_urls(v)


class ProjectRead(ProjectBase):
    id: str
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# -------------------------------------------------
# Scheduled content (updates / offers / events)
# -------------------------------------------------
class ScheduleFields(BaseModel):
    """
    Written as a pair. `scheduled` needs a timestamp; for `immediate`
    and `hidden` any timestamp is dropped.
    """

    schedule_visibility: ScheduleVisibility = ScheduleVisibility.immediate
    scheduled_at: Optional[datetime] = None

    @field_validator("scheduled_at", mode="before")
    def parse_scheduled_at(cls, v):
        return _normalize_timestamp(v)

    @model_validator(mode="after")
    def check_schedule(self):
        if self.schedule_visibility == ScheduleVisibility.scheduled:
            if self.scheduled_at is None:
                raise ValueError("scheduled_at is required when schedule_visibility is 'scheduled'")
        else:
            self.scheduled_at = None
        return self


class VisibilityReplace(ScheduleFields):
    """Full replacement of an item's visibility fields."""

    schedule_visibility: ScheduleVisibility


class WindowFields(BaseModel):
    start_datetime: datetime
    end_datetime: datetime

    @field_validator("start_datetime", "end_datetime", mode="before")
    def parse_window(cls, v):
        return _normalize_timestamp(v)

    @model_validator(mode="after")
    def check_window(self):
        if as_utc(self.end_datetime) <= as_utc(self.start_datetime):
            raise ValueError("end_datetime must be after start_datetime")
        return self


class ProjectUpdateCreate(ScheduleFields):
    description: str
    media_urls: List[str] = Field(default_factory=list)

    @field_validator("media_urls", mode="before")
    def normalize_media_urls(cls, v):
        return parse_media_urls(v)


class ProjectOfferCreate(ScheduleFields, WindowFields):
    title: str
    description: str
    media_urls: List[str] = Field(default_factory=list)

    @field_validator("media_urls", mode="before")
    def normalize_media_urls(cls, v):
        return parse_media_urls(v)


class ProjectEventCreate(ProjectOfferCreate):
    pass


# -------------------------------------------------
# Read models: no write-time invariants, so malformed
# rows still load (and then fail closed on visibility)
# -------------------------------------------------
class ScheduledItemRead(BaseModel):
    id: str
    project_id: str
    created_by: str
    schedule_visibility: Optional[ScheduleVisibility] = None
    scheduled_at: Optional[datetime] = None
    description: Optional[str] = None
    media_urls: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("media_urls", mode="before")
    def normalize_media_urls(cls, v):
        return parse_media_urls(v)


class ProjectUpdateRead(ScheduledItemRead):
    pass


class WindowedItemRead(ScheduledItemRead):
    title: Optional[str] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None


class ProjectOfferRead(WindowedItemRead):
    pass


class ProjectEventRead(WindowedItemRead):
    pass


class ProjectDetail(BaseModel):
    project: ProjectRead
    updates: List[ProjectUpdateRead] = Field(default_factory=list)
    offers: List[ProjectOfferRead] = Field(default_factory=list)
    events: List[ProjectEventRead] = Field(default_factory=list)
    can_manage: bool = False
