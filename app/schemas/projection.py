from pydantic import BaseModel
from typing import List, Optional

from app.core.constants import AttemptStatusEnum
from app.schemas.attempt import Attempt
from app.schemas.domain import DomainRef
from app.schemas.test import Test, TestSummary
from app.schemas.user import UserSummary


class ProjectedAttempt(Attempt):
    """Attempt with the state it has once lazy expiry is taken into account."""
    effective_status: AttemptStatusEnum
    test: Test
    selected_domain: Optional[DomainRef] = None


class AttemptBuckets(BaseModel):
    upcoming: List[ProjectedAttempt] = []
    active: List[ProjectedAttempt] = []
    completed: List[ProjectedAttempt] = []


class TestBuckets(BaseModel):
    upcoming: List[Test] = []
    active: List[Test] = []
    completed: List[Test] = []


class CompletedUser(BaseModel):
    student: UserSummary
    test: TestSummary
