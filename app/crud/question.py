from sqlalchemy.orm import Session
from typing import List

from app.crud.base import CRUDBase
from app.models.question import Question


class CRUDQuestion(CRUDBase[Question, dict, dict]):

    def get_for_domain_section(self, db: Session, domain_id: int, section: str) -> List[Question]:
        return (
            db.query(Question)
            .filter(Question.domain_id == domain_id)
            .filter(Question.section == section)
            .filter(Question.is_active.is_(True))
            .order_by(Question.id)
            .all()
        )


question = CRUDQuestion(Question)
