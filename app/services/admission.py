import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.core.constants import AttemptStatusEnum, TestStatusEnum, TERMINAL_ATTEMPT_STATUSES
from app.core.exceptions import (
    AlreadyCompleted,
    DomainNotInTest,
    ExamExpired,
    InvalidSection,
    NotActive,
    NotEligible,
    NotFound,
)
from app.crud.attempt import attempt as crud_attempt
from app.crud.question import question as crud_question
from app.crud.test import test as crud_test
from app.models.attempt import Attempt as AttemptModel
from app.models.test import Test as TestModel
from app.schemas.attempt import Attempt, AttemptStart, AttemptWindow
from app.schemas.question import Question
from app.schemas.user import Principal
from app.services.clock import derive_status, remaining_ms
from app.services.validation import validate_attempt_times
from app.utils.timeutils import ensure_aware

logger = logging.getLogger(__name__)


class AdmissionService:

    def _require_admissible(self, test: TestModel, attempt_in: AttemptStart, principal: Principal, now: datetime):
        if derive_status(test, now) != TestStatusEnum.ACTIVE:
            raise NotActive("Test is not active")

        if attempt_in.domain_id not in test.domain_ids:
            logger.warning(
                f"Student {principal.id} requested domain {attempt_in.domain_id} not in test {test.id}"
            )
            raise DomainNotInTest("Domain not in this test")

        if attempt_in.section not in (test.sections or []):
            raise InvalidSection("Invalid section")

        eligible = test.eligible_student_ids
        if eligible and principal.id not in eligible:
            raise NotEligible("You are not eligible for this test")

    def _open_window(self, test: TestModel, attempt_in: AttemptStart, now: datetime) -> dict:
        start_time = ensure_aware(now)
        due_time = start_time + timedelta(minutes=test.duration_minutes)
        validate_attempt_times(start_time, due_time)
        return {
            "start_time": start_time,
            "due_time": due_time,
            "status": AttemptStatusEnum.IN_PROGRESS,
            "selected_domain_id": attempt_in.domain_id,
            "selected_section": attempt_in.section,
        }

    def _expire(self, db: Session, attempt: AttemptModel, now: datetime):
        crud_attempt.update_if(
            db,
            id=attempt.id,
            predicate=(AttemptModel.status == AttemptStatusEnum.IN_PROGRESS,),
            values={"status": AttemptStatusEnum.EXPIRED, "end_time": ensure_aware(now)},
        )
        logger.warning(f"Attempt {attempt.id} expired before re-entry (due {attempt.due_time})")
        raise ExamExpired("Exam time has expired")

    def _resolve_existing(self, db: Session, test: TestModel, attempt_in: AttemptStart,
                          principal: Principal, now: datetime) -> AttemptModel:
        attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test.id)
        if attempt is None:
            # The row vanished between the conflict and the read (test deleted).
            raise NotFound("Test not found")

        if attempt.status in TERMINAL_ATTEMPT_STATUSES:
            logger.warning(f"Student {principal.id} attempted to start already completed test {test.id}")
            raise AlreadyCompleted("You have already completed this test")

        if attempt.status == AttemptStatusEnum.PENDING:
            promoted = crud_attempt.update_if(
                db,
                id=attempt.id,
                predicate=(AttemptModel.status == AttemptStatusEnum.PENDING,),
                values=self._open_window(test, attempt_in, now),
            )
            if promoted is not None:
                logger.info(f"Student {principal.id} opened pending attempt {attempt.id} for test {test.id}")
                return promoted
            # Another request promoted it first; fall through with its window.
            attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test.id)
            if attempt.status in TERMINAL_ATTEMPT_STATUSES:
                raise AlreadyCompleted("You have already completed this test")

        if ensure_aware(now) > ensure_aware(attempt.due_time):
            self._expire(db, attempt, now)

        return attempt

    def start_attempt(self, db: Session, test_id: int, attempt_in: AttemptStart,
                      principal: Principal, now: datetime) -> AttemptWindow:
        test = crud_test.get(db, id=test_id)
        if not test:
            raise NotFound("Test not found")

        self._require_admissible(test, attempt_in, principal, now)

        created = crud_attempt.admit(
            db,
            values={"student_id": principal.id, "test_id": test.id, **self._open_window(test, attempt_in, now)},
        )

        if created:
            attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test.id)
            logger.info(f"Student {principal.id} started test {test.id} (due {attempt.due_time})")
        else:
            attempt = self._resolve_existing(db, test, attempt_in, principal, now)

        questions = crud_question.get_for_domain_section(
            db, domain_id=attempt.selected_domain_id, section=attempt.selected_section
        )

        return AttemptWindow(
            attempt=Attempt.model_validate(attempt),
            start_time=ensure_aware(attempt.start_time),
            due_time=ensure_aware(attempt.due_time),
            time_remaining_ms=remaining_ms(attempt.due_time, now),
            questions=[Question.model_validate(q) for q in questions],
        )


admission_service = AdmissionService()
