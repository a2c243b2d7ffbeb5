"""
Status projection.

Combines the clock authority with attempt ledger rows to build the
upcoming/active/completed views. Nothing here writes; lazily expired
attempts are reported as expired and left for the next write to persist.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.constants import (
    AttemptStatusEnum,
    BucketEnum,
    TestStatusEnum,
    TERMINAL_ATTEMPT_STATUSES,
)
from app.core.exceptions import NotFound
from app.crud.attempt import attempt as crud_attempt
from app.crud.domain import domain as crud_domain
from app.crud.test import test as crud_test
from app.models.attempt import Attempt as AttemptModel
from app.models.test import Test as TestModel
from app.schemas.domain import DomainRef
from app.schemas.projection import AttemptBuckets, CompletedUser, ProjectedAttempt, TestBuckets
from app.schemas.test import Test, TestSummary
from app.schemas.user import Principal, UserSummary
from app.services.clock import derive_status
from app.utils.timeutils import ensure_aware

logger = logging.getLogger(__name__)


def project_test(test: TestModel, now: datetime) -> Test:
    """Serialise a test with its derived status in place of the stored one."""
    return Test.model_validate(test).model_copy(update={"status": project_status(test, now)})


def project_status(test: TestModel, now: datetime) -> TestStatusEnum:
    return derive_status(test, now)


def classify_attempt(attempt: AttemptModel, test_status: TestStatusEnum,
                     now: datetime) -> Tuple[BucketEnum, AttemptStatusEnum]:
    """
    Returns (bucket, effective_status) for every status/test-status pair.

    pending + active is bucketed as active: the student can still be admitted
    while the window is open. Open attempts of a finished test, and
    in-progress attempts past their due time, are effectively expired.
    """
    status = AttemptStatusEnum(attempt.status)

    if status in TERMINAL_ATTEMPT_STATUSES:
        return BucketEnum.COMPLETED, status

    if test_status == TestStatusEnum.FINISHED:
        return BucketEnum.COMPLETED, AttemptStatusEnum.EXPIRED

    if status == AttemptStatusEnum.IN_PROGRESS and attempt.due_time is not None \
            and ensure_aware(now) > ensure_aware(attempt.due_time):
        return BucketEnum.COMPLETED, AttemptStatusEnum.EXPIRED

    if test_status == TestStatusEnum.ACTIVE:
        return BucketEnum.ACTIVE, status

    return BucketEnum.UPCOMING, status


def project_attempts(attempts: Iterable[AttemptModel], now: datetime) -> AttemptBuckets:
    buckets = AttemptBuckets()
    for attempt in attempts:
        test_status = derive_status(attempt.test, now)
        bucket, effective_status = classify_attempt(attempt, test_status, now)
        projected = ProjectedAttempt(
            id=attempt.id,
            student_id=attempt.student_id,
            test_id=attempt.test_id,
            start_time=attempt.start_time,
            due_time=attempt.due_time,
            end_time=attempt.end_time,
            selected_domain_id=attempt.selected_domain_id,
            selected_section=attempt.selected_section,
            score=attempt.score,
            status=attempt.status,
            effective_status=effective_status,
            test=project_test(attempt.test, now),
            selected_domain=DomainRef.model_validate(attempt.selected_domain) if attempt.selected_domain else None,
        )
        getattr(buckets, bucket.value).append(projected)
    return buckets


class ProjectionService:

    def get_my_tests(self, db: Session, principal: Principal, now: datetime) -> AttemptBuckets:
        attempts = crud_attempt.get_all_by_student(db, student_id=principal.id)
        buckets = project_attempts(attempts, now)
        logger.info(f"Student {principal.id} fetched my-tests ({len(attempts)} attempts)")
        return buckets

    def project_tests_for_student(self, db: Session, principal: Principal, now: datetime) -> TestBuckets:
        tests = crud_test.get_visible_to_student(db, student_id=principal.id)
        done_test_ids = {
            a.test_id for a in crud_attempt.get_all_by_student(db, student_id=principal.id)
            if a.status in TERMINAL_ATTEMPT_STATUSES
        }

        buckets = TestBuckets()
        for test in tests:
            presented = project_test(test, now)
            if test.id in done_test_ids or presented.status == TestStatusEnum.FINISHED:
                buckets.completed.append(presented)
            elif presented.status == TestStatusEnum.ACTIVE:
                buckets.active.append(presented)
            else:
                buckets.upcoming.append(presented)

        logger.info(f"Student {principal.id} fetched available tests ({len(tests)} visible)")
        return buckets

    def get_completed_users(self, db: Session, domain_id: int, now: datetime,
                            test_id: Optional[int] = None) -> List[CompletedUser]:
        if not crud_domain.get(db, id=domain_id):
            raise NotFound("Domain not found")

        seen = set()
        users = []
        for attempt in crud_attempt.get_completed_for_domain(db, domain_id=domain_id, test_id=test_id):
            key = (attempt.student_id, attempt.test_id)
            if key in seen:
                continue
            seen.add(key)
            users.append(CompletedUser(
                student=UserSummary.model_validate(attempt.student),
                test=TestSummary.model_validate(project_test(attempt.test, now)),
            ))
        return users


projection_service = ProjectionService()
