from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.test import Test, test_eligible_students
from app.models.domain import Domain
from app.models.user import User
from app.schemas.test import TestCreate, TestUpdate


class CRUDTest(CRUDBase[Test, TestCreate, TestUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Test).options(
            selectinload(Test.domains),
            selectinload(Test.eligible_students)
        )

    def get(self, db: Session, id: int) -> Optional[Test]:
        return self._query_with_relationships(db).filter(Test.id == id).first()

    def get_multi(self, db: Session, skip: int = 0, limit: int = 100) -> List[Test]:
        return (
            self._query_with_relationships(db)
            .order_by(Test.start_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_all(self, db: Session) -> List[Test]:
        return self._query_with_relationships(db).order_by(Test.start_date.desc()).all()

    def get_by_domain(self, db: Session, domain_id: int) -> List[Test]:
        return (
            db.query(Test)
            .filter(Test.domains.any(Domain.id == domain_id))
            .order_by(Test.start_date.desc())
            .all()
        )

    def get_by_title(self, db: Session, title: str) -> Optional[Test]:
        return db.query(Test).filter(Test.title == title.strip()).first()

    def get_visible_to_student(self, db: Session, student_id: int) -> List[Test]:
        open_to_all = ~Test.eligible_students.any()
        includes_student = Test.id.in_(
            db.query(test_eligible_students.c.test_id)
            .filter(test_eligible_students.c.student_id == student_id)
        )
        return (
            self._query_with_relationships(db)
            .filter(or_(open_to_all, includes_student))
            .order_by(Test.start_date)
            .all()
        )

    def create_with_relations(
        self, db: Session, *, obj_in: TestCreate, domains: List[Domain], eligible_students: List[User], status
    ) -> Test:
        db_obj = Test(
            title=obj_in.title,
            start_date=obj_in.start_date,
            end_date=obj_in.end_date,
            duration_minutes=obj_in.duration_minutes,
            sections=obj_in.sections,
            status=status,
            domains=domains,
            eligible_students=eligible_students,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


test = CRUDTest(Test)
