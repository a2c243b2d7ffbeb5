from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional

from app.core.constants import AttemptStatusEnum
from app.crud.base import CRUDBase
from app.models.attempt import Attempt
from app.models.test import Test

STUDENT_TEST_KEY = ("student_id", "test_id")


class CRUDAttempt(CRUDBase[Attempt, dict, dict]):

    def _query_with_relationships(self, db: Session):
        return db.query(Attempt).options(
            selectinload(Attempt.test).selectinload(Test.domains),
            selectinload(Attempt.selected_domain),
            selectinload(Attempt.student)
        )

    def get_by_student_and_test(self, db: Session, student_id: int, test_id: int) -> Optional[Attempt]:
        attempt = (
            db.query(Attempt)
            .filter(Attempt.student_id == student_id)
            .filter(Attempt.test_id == test_id)
            .first()
        )
        if attempt is not None:
            db.refresh(attempt)
        return attempt

    def get_all_by_student(self, db: Session, student_id: int) -> List[Attempt]:
        return (
            self._query_with_relationships(db)
            .filter(Attempt.student_id == student_id)
            .order_by(Attempt.id)
            .all()
        )

    def get_completed_for_domain(self, db: Session, domain_id: int, test_id: Optional[int] = None) -> List[Attempt]:
        query = (
            self._query_with_relationships(db)
            .filter(Attempt.selected_domain_id == domain_id)
            .filter(Attempt.status == AttemptStatusEnum.COMPLETED)
        )
        if test_id is not None:
            query = query.filter(Attempt.test_id == test_id)
        return query.order_by(Attempt.id).all()

    def admit(self, db: Session, *, values: Dict[str, Any]) -> bool:
        """Create the (student, test) row unless one already exists."""
        return self.insert_if_absent(db, values=values, index_elements=STUDENT_TEST_KEY)

    def set_score(self, db: Session, *, student_id: int, test_id: int, score: float) -> Attempt:
        return self.upsert(
            db,
            values={
                "student_id": student_id,
                "test_id": test_id,
                "score": score,
                "status": AttemptStatusEnum.PENDING,
            },
            index_elements=STUDENT_TEST_KEY,
            update_fields=("score",),
        )


attempt = CRUDAttempt(Attempt)
