from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from app.schemas.types import UTCDateTime

from app.core.constants import ANSWER_TEXT_MAX_LENGTH
from app.schemas.question import QuestionRef
from app.schemas.user import UserSummary


class AnswerSubmit(BaseModel):
    question_id: int
    domain_id: int
    section: str = Field(..., min_length=1)
    exam_start_time: Optional[UTCDateTime] = None
    answer_text: Optional[str] = Field(None, max_length=ANSWER_TEXT_MAX_LENGTH)
    test_id: Optional[int] = None
    image_url: Optional[str] = None
    image_public_id: Optional[str] = None


class StudentAnswer(BaseModel):
    """An answer as its author sees it; marks stay with staff."""
    id: int
    student_id: int
    question_id: int
    domain_id: int
    test_id: Optional[int] = None
    section: str
    answer_text: Optional[str] = None
    image_url: Optional[str] = None
    submitted_at: UTCDateTime
    exam_start_time: UTCDateTime
    exam_end_time: UTCDateTime
    is_submitted: bool

    model_config = ConfigDict(from_attributes=True)


class Answer(StudentAnswer):
    mark: Optional[float] = None


class MarkAdd(BaseModel):
    answer_id: int
    mark: float = Field(..., ge=0)


class MarkEdit(BaseModel):
    mark: float = Field(..., ge=0)


class TotalRequest(BaseModel):
    student_id: int
    domain_id: int
    test_id: Optional[int] = None


class TotalResult(BaseModel):
    student_id: int
    domain_id: int
    test_id: Optional[int] = None
    total: float


class ExamStatus(BaseModel):
    has_started: bool
    exam_start_time: Optional[UTCDateTime] = None
    exam_end_time: Optional[UTCDateTime] = None
    time_remaining_ms: int = 0
    has_expired: bool = False


class GradedAnswer(BaseModel):
    id: int
    question: Optional[QuestionRef] = None
    section: str
    answer_text: Optional[str] = None
    mark: Optional[float] = None
    submitted_at: UTCDateTime
    test_id: Optional[int] = None
    exam_start_time: UTCDateTime
    exam_end_time: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class StudentAnswerGroup(BaseModel):
    student: UserSummary
    total_mark: float
    sections: Dict[str, List[GradedAnswer]]


class ExamSessionStart(BaseModel):
    domain_id: int
    section: str = Field(..., min_length=1)


class ExamSessionWindow(BaseModel):
    domain_id: int
    section: str
    exam_start_time: UTCDateTime
    exam_end_time: UTCDateTime
    time_remaining_ms: int
    resumed: bool = False

    model_config = ConfigDict(from_attributes=True)
