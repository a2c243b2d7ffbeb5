from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional

from app.crud.base import CRUDBase
from app.models.answer import Answer

ANSWER_KEY = ("student_id", "question_id", "domain_id", "section")
REPLACED_ON_RESUBMIT = (
    "test_id",
    "answer_text",
    "image_url",
    "image_public_id",
    "submitted_at",
    "exam_start_time",
    "exam_end_time",
    "is_submitted",
)


class CRUDAnswer(CRUDBase[Answer, dict, dict]):

    def _query_with_relationships(self, db: Session):
        return db.query(Answer).options(
            selectinload(Answer.student),
            selectinload(Answer.question)
        )

    def save_submission(self, db: Session, *, values: Dict[str, Any]) -> Answer:
        return self.upsert(db, values=values, index_elements=ANSWER_KEY, update_fields=REPLACED_ON_RESUBMIT)

    def get_for_student_domain_section(self, db: Session, student_id: int, domain_id: int, section: str) -> List[Answer]:
        return (
            self._query_with_relationships(db)
            .filter(Answer.student_id == student_id)
            .filter(Answer.domain_id == domain_id)
            .filter(Answer.section == section)
            .order_by(Answer.submitted_at.desc(), Answer.id.desc())
            .all()
        )

    def get_latest_session(self, db: Session, student_id: int, domain_id: int, section: str) -> Optional[Answer]:
        return (
            db.query(Answer)
            .filter(Answer.student_id == student_id)
            .filter(Answer.domain_id == domain_id)
            .filter(Answer.section == section)
            .order_by(Answer.submitted_at.desc(), Answer.id.desc())
            .first()
        )

    def get_for_domain(self, db: Session, domain_id: int, test_id: Optional[int] = None) -> List[Answer]:
        query = self._query_with_relationships(db).filter(Answer.domain_id == domain_id)
        if test_id is not None:
            query = query.filter(Answer.test_id == test_id)
        return query.order_by(Answer.student_id, Answer.submitted_at).all()

    def sum_marks(self, db: Session, student_id: int, domain_id: int, test_id: Optional[int] = None) -> float:
        query = (
            db.query(func.coalesce(func.sum(func.coalesce(Answer.mark, 0)), 0))
            .filter(Answer.student_id == student_id)
            .filter(Answer.domain_id == domain_id)
        )
        if test_id is not None:
            query = query.filter(Answer.test_id == test_id)
        return float(query.scalar() or 0)


answer = CRUDAnswer(Answer)
