from pydantic import BaseModel, ConfigDict
from typing import Optional, Any, List

from app.core.constants import QuestionTypeEnum


class Question(BaseModel):
    """Question as shown to a student during an attempt."""
    id: int
    domain_id: int
    title: str
    description: str
    section: str
    question_type: QuestionTypeEnum
    options: Optional[List[Any]] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionRef(BaseModel):
    id: int
    title: str
    section: str

    model_config = ConfigDict(from_attributes=True)
