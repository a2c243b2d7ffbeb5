from sqlalchemy.orm import Session
from typing import Any, Dict, Optional, Tuple

from app.crud.base import CRUDBase
from app.models.exam_session import ExamSession

SESSION_KEY = ("student_id", "domain_id", "section")


class CRUDExamSession(CRUDBase[ExamSession, dict, dict]):

    def get_for(self, db: Session, student_id: int, domain_id: int, section: str) -> Optional[ExamSession]:
        session = (
            db.query(ExamSession)
            .filter(ExamSession.student_id == student_id)
            .filter(ExamSession.domain_id == domain_id)
            .filter(ExamSession.section == section)
            .first()
        )
        if session is not None:
            db.refresh(session)
        return session

    def open(self, db: Session, *, values: Dict[str, Any]) -> Tuple[ExamSession, bool]:
        """Record the window unless one exists; returns the stored row and whether this call created it."""
        created = self.insert_if_absent(db, values=values, index_elements=SESSION_KEY)
        session = self.get_for(
            db, student_id=values["student_id"], domain_id=values["domain_id"], section=values["section"]
        )
        return session, created


exam_session = CRUDExamSession(ExamSession)
