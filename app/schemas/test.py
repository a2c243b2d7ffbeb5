from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Any
from app.schemas.types import UTCDateTime

from app.core.config import settings
from app.core.constants import TestStatusEnum, TEST_TITLE_MIN_LENGTH, TEST_TITLE_MAX_LENGTH
from app.schemas.domain import DomainRef


class TestCreate(BaseModel):
    __test__ = False

    title: str = Field(..., min_length=TEST_TITLE_MIN_LENGTH, max_length=TEST_TITLE_MAX_LENGTH)
    domains: List[int] = Field(..., min_length=1)
    start_date: UTCDateTime
    end_date: UTCDateTime
    duration_minutes: int = Field(default=settings.DEFAULT_TEST_DURATION_MINUTES, gt=0)
    sections: List[str] = Field(default_factory=lambda: list(settings.DEFAULT_SECTIONS))
    eligible_students: List[int] = Field(default_factory=list)

    @field_validator("title")
    def strip_title(cls, v):
        v = v.strip()
        if len(v) < TEST_TITLE_MIN_LENGTH:
            raise ValueError(f"Title must be at least {TEST_TITLE_MIN_LENGTH} characters long.")
        return v

    @field_validator("sections")
    def sections_not_empty(cls, v):
        if not v or any(not s or not s.strip() for s in v):
            raise ValueError("Sections must be a non-empty list of labels.")
        return [s.strip() for s in v]


class TestUpdate(BaseModel):
    __test__ = False

    title: Optional[str] = Field(None, min_length=TEST_TITLE_MIN_LENGTH, max_length=TEST_TITLE_MAX_LENGTH)
    domains: Optional[List[int]] = Field(None, min_length=1)
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    sections: Optional[List[str]] = None
    eligible_students: Optional[List[int]] = None

    @field_validator("title")
    def strip_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) < TEST_TITLE_MIN_LENGTH:
            raise ValueError(f"Title must be at least {TEST_TITLE_MIN_LENGTH} characters long.")
        return v

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data


class Test(BaseModel):
    __test__ = False

    id: int
    title: str
    domains: List[DomainRef] = []
    start_date: UTCDateTime
    end_date: UTCDateTime
    duration_minutes: int
    sections: List[str]
    eligible_student_ids: List[int] = []
    status: TestStatusEnum
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None

    model_config = ConfigDict(from_attributes=True)


class TestSummary(BaseModel):
    id: int
    title: str
    start_date: UTCDateTime
    end_date: UTCDateTime
    duration_minutes: int
    status: TestStatusEnum

    model_config = ConfigDict(from_attributes=True)


class TitleAvailability(BaseModel):
    exists: bool
