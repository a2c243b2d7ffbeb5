from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from app.schemas.types import UTCDateTime

from app.core.constants import AttemptStatusEnum
from app.schemas.question import Question


class AttemptStart(BaseModel):
    domain_id: int
    section: str = Field(..., min_length=1)


class Attempt(BaseModel):
    id: int
    student_id: int
    test_id: int
    start_time: Optional[UTCDateTime] = None
    due_time: Optional[UTCDateTime] = None
    end_time: Optional[UTCDateTime] = None
    selected_domain_id: Optional[int] = None
    selected_section: Optional[str] = None
    score: Optional[float] = None
    status: AttemptStatusEnum

    model_config = ConfigDict(from_attributes=True)


class AttemptWindow(BaseModel):
    attempt: Attempt
    start_time: UTCDateTime
    due_time: UTCDateTime
    time_remaining_ms: int
    questions: List[Question] = []


class AttemptFinish(BaseModel):
    ok: bool = True
    status: AttemptStatusEnum
    end_time: UTCDateTime
