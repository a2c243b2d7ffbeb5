import logging
from datetime import datetime, timedelta
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import AttemptStatusEnum, TERMINAL_ATTEMPT_STATUSES
from app.core.exceptions import AlreadyCompleted, ExamExpired, NotFound, NotStarted
from app.crud.answer import answer as crud_answer
from app.crud.attempt import attempt as crud_attempt
from app.crud.domain import domain as crud_domain
from app.crud.exam_session import exam_session as crud_exam_session
from app.crud.question import question as crud_question
from app.crud.test import test as crud_test
from app.models.attempt import Attempt as AttemptModel
from app.models.exam_session import ExamSession as ExamSessionModel
from app.schemas.answer import AnswerSubmit, ExamSessionWindow, ExamStatus, StudentAnswer
from app.schemas.attempt import AttemptFinish
from app.schemas.user import Principal
from app.services.clock import remaining_ms
from app.services.validation import normalize_answer_text, validate_answer_window, validate_attempt_times
from app.utils.timeutils import ensure_aware

logger = logging.getLogger(__name__)


class SubmissionService:
    """
    Submission gate.

    Inside a test the deadline is the attempt's recorded ``due_time``. Outside
    one it is the end of the student's domain+section exam session, opened by
    ``start_exam`` or by the first submission. Client-sent start times never
    move a recorded deadline.
    """

    def _open_session(self, db: Session, principal: Principal, domain_id: int, section: str,
                      start_time: datetime) -> Tuple[ExamSessionModel, bool]:
        end_time = start_time + timedelta(minutes=settings.EXAM_DURATION_MINUTES)
        validate_answer_window(start_time, end_time)
        return crud_exam_session.open(db, values={
            "student_id": principal.id,
            "domain_id": domain_id,
            "section": section,
            "exam_start_time": start_time,
            "exam_end_time": end_time,
        })

    def _test_window(self, db: Session, test_id: int, principal: Principal,
                     now: datetime) -> Tuple[datetime, datetime]:
        test = crud_test.get(db, id=test_id)
        if not test:
            raise NotFound("Test not found")

        attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test.id)
        if attempt is None or attempt.status == AttemptStatusEnum.PENDING:
            logger.warning(f"Student {principal.id} submitted an answer without starting test {test.id}")
            raise NotStarted("Not started")

        due_time = ensure_aware(attempt.due_time)
        if now > due_time:
            crud_attempt.update_if(
                db,
                id=attempt.id,
                predicate=(AttemptModel.status == AttemptStatusEnum.IN_PROGRESS,),
                values={"status": AttemptStatusEnum.EXPIRED, "end_time": now},
            )
            logger.warning(f"Student {principal.id} submitted after attempt {attempt.id} was due ({due_time})")
            raise ExamExpired("Exam time has expired")

        if attempt.status in TERMINAL_ATTEMPT_STATUSES:
            raise AlreadyCompleted("You have already completed this test")

        return ensure_aware(attempt.start_time), due_time

    def _session_window(self, db: Session, answer_in: AnswerSubmit, principal: Principal,
                        now: datetime) -> Tuple[datetime, datetime]:
        requested = ensure_aware(answer_in.exam_start_time) if answer_in.exam_start_time else now
        session, _ = self._open_session(db, principal, answer_in.domain_id, answer_in.section, min(requested, now))
        exam_end_time = ensure_aware(session.exam_end_time)
        if now > exam_end_time:
            logger.warning(f"Student {principal.id} submitted after exam end ({exam_end_time})")
            raise ExamExpired("Exam time has expired")
        return ensure_aware(session.exam_start_time), exam_end_time

    def start_exam(self, db: Session, principal: Principal, domain_id: int, section: str,
                   now: datetime) -> ExamSessionWindow:
        now = ensure_aware(now)
        if not crud_domain.get(db, id=domain_id):
            raise NotFound("Domain not found")

        session, created = self._open_session(db, principal, domain_id, section, now)
        exam_end_time = ensure_aware(session.exam_end_time)
        if now > exam_end_time:
            logger.warning(f"Student {principal.id} re-entered expired exam for domain {domain_id} section {section}")
            raise ExamExpired("Exam time has expired")

        if created:
            logger.info(f"Student {principal.id} started exam for domain {domain_id} section {section}")
        return ExamSessionWindow(
            domain_id=domain_id,
            section=section,
            exam_start_time=session.exam_start_time,
            exam_end_time=exam_end_time,
            time_remaining_ms=remaining_ms(exam_end_time, now),
            resumed=not created,
        )

    def submit_answer(self, db: Session, answer_in: AnswerSubmit, principal: Principal, now: datetime) -> StudentAnswer:
        now = ensure_aware(now)

        if not crud_question.get(db, id=answer_in.question_id):
            raise NotFound("Question not found")
        if not crud_domain.get(db, id=answer_in.domain_id):
            raise NotFound("Domain not found")

        if answer_in.test_id is not None:
            exam_start_time, exam_end_time = self._test_window(db, answer_in.test_id, principal, now)
        else:
            exam_start_time, exam_end_time = self._session_window(db, answer_in, principal, now)

        answer_text = normalize_answer_text(answer_in.answer_text)

        saved = crud_answer.save_submission(
            db,
            values={
                "student_id": principal.id,
                "question_id": answer_in.question_id,
                "domain_id": answer_in.domain_id,
                "section": answer_in.section,
                "test_id": answer_in.test_id,
                "answer_text": answer_text,
                "image_url": answer_in.image_url,
                "image_public_id": answer_in.image_public_id,
                "submitted_at": now,
                "exam_start_time": exam_start_time,
                "exam_end_time": exam_end_time,
                "is_submitted": True,
            },
        )
        logger.info(f"Answer {saved.id} saved for student {principal.id} (question {answer_in.question_id})")
        return StudentAnswer.model_validate(saved)

    def finish_attempt(self, db: Session, test_id: int, principal: Principal, now: datetime) -> AttemptFinish:
        now = ensure_aware(now)
        attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test_id)
        if not attempt or attempt.status == AttemptStatusEnum.PENDING:
            logger.warning(f"Student {principal.id} attempted to submit test {test_id} without starting it")
            raise NotStarted("Not started")

        expired = attempt.due_time is not None and now > ensure_aware(attempt.due_time)
        final_status = AttemptStatusEnum.EXPIRED if expired else AttemptStatusEnum.COMPLETED
        validate_attempt_times(attempt.start_time, attempt.due_time, now)

        finished = crud_attempt.update_if(
            db,
            id=attempt.id,
            predicate=(AttemptModel.status == AttemptStatusEnum.IN_PROGRESS,),
            values={"status": final_status, "end_time": now},
        )
        if finished is None:
            attempt = crud_attempt.get_by_student_and_test(db, student_id=principal.id, test_id=test_id)
            if attempt.status != AttemptStatusEnum.EXPIRED:
                raise AlreadyCompleted("You have already completed this test")
            # Closed by its deadline already; report that outcome again.
            return AttemptFinish(status=attempt.status, end_time=attempt.end_time)

        logger.info(f"Student {principal.id} submitted test {test_id} with status {final_status.value}")
        return AttemptFinish(status=finished.status, end_time=finished.end_time)

    def get_my_answers(self, db: Session, principal: Principal, domain_id: int, section: str) -> List[StudentAnswer]:
        answers = crud_answer.get_for_student_domain_section(
            db, student_id=principal.id, domain_id=domain_id, section=section
        )
        return [StudentAnswer.model_validate(a) for a in answers]

    def get_exam_status(self, db: Session, principal: Principal, domain_id: int, section: str,
                        now: datetime) -> ExamStatus:
        session = crud_exam_session.get_for(
            db, student_id=principal.id, domain_id=domain_id, section=section
        )
        if session is None:
            # Answers written inside a test carry the attempt's window instead.
            session = crud_answer.get_latest_session(
                db, student_id=principal.id, domain_id=domain_id, section=section
            )
        if not session:
            return ExamStatus(has_started=False)

        return ExamStatus(
            has_started=True,
            exam_start_time=session.exam_start_time,
            exam_end_time=session.exam_end_time,
            time_remaining_ms=remaining_ms(session.exam_end_time, now),
            has_expired=ensure_aware(now) > ensure_aware(session.exam_end_time),
        )


submission_service = SubmissionService()
