import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import InputValidationError, NotFound
from app.crud.domain import domain as crud_domain
from app.crud.test import test as crud_test
from app.crud.user import user as crud_user
from app.models.test import Test as TestModel
from app.schemas.response import Page
from app.schemas.test import Test, TestCreate, TestSummary, TestUpdate
from app.services.clock import derive_status, window_status
from app.services.projection import project_test
from app.services.validation import validate_test_window

logger = logging.getLogger(__name__)


class TestService:
    __test__ = False

    def _get_test_or_404(self, db: Session, test_id: int) -> TestModel:
        test = crud_test.get(db, id=test_id)
        if not test:
            raise NotFound("Test not found")
        return test

    def _resolve_domains(self, db: Session, domain_ids: List[int]):
        unique_ids = list(dict.fromkeys(domain_ids))
        if not unique_ids:
            raise InputValidationError("At least one domain is required")
        domains = crud_domain.get_many(db, unique_ids)
        if len(domains) != len(unique_ids):
            raise InputValidationError("One or more invalid domain IDs")
        return domains

    def _resolve_students(self, db: Session, student_ids: List[int]):
        unique_ids = list(dict.fromkeys(student_ids))
        students = crud_user.get_many(db, unique_ids)
        if len(students) != len(unique_ids):
            raise InputValidationError("One or more invalid student IDs")
        return students

    def title_exists(self, db: Session, title: str) -> bool:
        return crud_test.get_by_title(db, title) is not None

    def create_test(self, db: Session, test_in: TestCreate, now: datetime) -> Test:
        if self.title_exists(db, test_in.title):
            raise InputValidationError("This test name is already used. Please choose another name.")

        domains = self._resolve_domains(db, test_in.domains)
        students = self._resolve_students(db, test_in.eligible_students)
        validate_test_window(test_in.start_date, test_in.end_date, now)

        try:
            test = crud_test.create_with_relations(
                db,
                obj_in=test_in,
                domains=domains,
                eligible_students=students,
                status=derive_status(test_in, now),
            )
        except IntegrityError:
            db.rollback()
            raise InputValidationError("This test name is already used. Please choose another name.")

        logger.info(f"Created test {test.id} ({test.title})")
        return project_test(test, now)

    def list_tests(self, db: Session, now: datetime, page: Optional[int] = None, limit: Optional[int] = None):
        if page and limit:
            page = max(1, page)
            limit = min(100, max(1, limit))
            total = crud_test.count(db)
            tests = crud_test.get_multi(db, skip=(page - 1) * limit, limit=limit)
            return Page[TestSummary](
                items=[TestSummary.model_validate(project_test(t, now)) for t in tests],
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit) if total else 0,
            )
        return [TestSummary.model_validate(project_test(t, now)) for t in crud_test.get_all(db)]

    def list_tests_for_domain(self, db: Session, domain_id: int, now: datetime) -> List[TestSummary]:
        if not crud_domain.get(db, id=domain_id):
            raise NotFound("Domain not found")
        return [TestSummary.model_validate(project_test(t, now)) for t in crud_test.get_by_domain(db, domain_id)]

    def get_test(self, db: Session, test_id: int, now: datetime) -> Test:
        return project_test(self._get_test_or_404(db, test_id), now)

    def update_test(self, db: Session, test_id: int, test_in: TestUpdate, now: datetime) -> Test:
        test = self._get_test_or_404(db, test_id)
        update_data = test_in.model_dump(exclude_unset=True, exclude_none=True)

        if "title" in update_data and update_data["title"] != test.title and self.title_exists(db, update_data["title"]):
            raise InputValidationError("This test name is already used. Please choose another name.")

        start_date = update_data.get("start_date", test.start_date)
        end_date = update_data.get("end_date", test.end_date)
        # Past starts are only rejected when both dates are being rescheduled.
        validate_test_window(
            start_date,
            end_date,
            now,
            allow_past_start=not ("start_date" in update_data and "end_date" in update_data),
        )

        if "domains" in update_data:
            update_data["domains"] = self._resolve_domains(db, update_data["domains"])
        if "eligible_students" in update_data:
            update_data["eligible_students"] = self._resolve_students(db, update_data["eligible_students"])

        update_data["status"] = window_status(start_date, end_date, now)

        try:
            test = crud_test.update(db, db_obj=test, obj_in=update_data)
        except IntegrityError:
            db.rollback()
            raise InputValidationError("This test name is already used. Please choose another name.")

        logger.info(f"Updated test {test.id}")
        return project_test(test, now)

    def delete_test(self, db: Session, test_id: int) -> None:
        self._get_test_or_404(db, test_id)
        crud_test.delete(db, id=test_id)
        logger.info(f"Deleted test {test_id} and its attempts")


test_service = TestService()
