import logging
from collections import OrderedDict
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import MarkAlreadyExists, NoExistingMark, NotFound
from app.crud.answer import answer as crud_answer
from app.crud.attempt import attempt as crud_attempt
from app.crud.domain import domain as crud_domain
from app.crud.test import test as crud_test
from app.crud.user import user as crud_user
from app.models.answer import Answer as AnswerModel
from app.schemas.answer import Answer, GradedAnswer, StudentAnswerGroup, TotalResult
from app.schemas.user import UserSummary
from app.services.validation import validate_mark

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Staff-only marking.

    Adding and editing a mark are separate conditional updates so that a
    first score can never silently overwrite, and a correction can never
    create, a mark.
    """

    def _require_answer(self, db: Session, answer_id: int):
        if not crud_answer.get(db, id=answer_id):
            raise NotFound("Answer not found")

    def add_mark(self, db: Session, answer_id: int, mark: float) -> Answer:
        mark = validate_mark(mark)
        updated = crud_answer.update_if(
            db,
            id=answer_id,
            predicate=(AnswerModel.mark.is_(None),),
            values={"mark": mark},
        )
        if updated is None:
            self._require_answer(db, answer_id)
            raise MarkAlreadyExists()

        logger.info(f"Mark {mark} saved for answer {answer_id}")
        return Answer.model_validate(updated)

    def edit_mark(self, db: Session, answer_id: int, mark: float) -> Answer:
        mark = validate_mark(mark)
        updated = crud_answer.update_if(
            db,
            id=answer_id,
            predicate=(AnswerModel.mark.is_not(None),),
            values={"mark": mark},
        )
        if updated is None:
            self._require_answer(db, answer_id)
            raise NoExistingMark()

        logger.info(f"Mark updated to {mark} for answer {answer_id}")
        return Answer.model_validate(updated)

    def delete_answer(self, db: Session, answer_id: int) -> None:
        if not crud_answer.delete(db, id=answer_id):
            raise NotFound("Answer not found")
        logger.info(f"Deleted answer {answer_id}")

    def compute_total(self, db: Session, student_id: int, domain_id: int, test_id: Optional[int] = None) -> TotalResult:
        if not crud_user.get(db, id=student_id):
            raise NotFound("Student not found")
        if not crud_domain.get(db, id=domain_id):
            raise NotFound("Domain not found")
        if test_id is not None and not crud_test.get(db, id=test_id):
            raise NotFound("Test not found")

        total = crud_answer.sum_marks(db, student_id=student_id, domain_id=domain_id, test_id=test_id)

        if test_id is not None:
            crud_attempt.set_score(db, student_id=student_id, test_id=test_id, score=total)

        logger.info(f"Total {total} calculated for student {student_id} in domain {domain_id}")
        return TotalResult(student_id=student_id, domain_id=domain_id, test_id=test_id, total=total)

    def get_domain_answers(self, db: Session, domain_id: int, test_id: Optional[int] = None) -> List[StudentAnswerGroup]:
        domain = crud_domain.get(db, id=domain_id)
        if not domain:
            raise NotFound("Domain not found")

        groups = OrderedDict()
        for answer in crud_answer.get_for_domain(db, domain_id=domain_id, test_id=test_id):
            group = groups.setdefault(answer.student_id, {
                "student": UserSummary.model_validate(answer.student),
                "total_mark": 0.0,
                "sections": {},
            })
            group["total_mark"] += answer.mark or 0
            group["sections"].setdefault(answer.section, []).append(GradedAnswer.model_validate(answer))

        result = [StudentAnswerGroup(**group) for group in groups.values()]
        return sorted(result, key=lambda g: g.student.name)


scoring_service = ScoringService()
