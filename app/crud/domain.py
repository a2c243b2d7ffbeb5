from sqlalchemy.orm import Session
from typing import List

from app.crud.base import CRUDBase
from app.models.domain import Domain


class CRUDDomain(CRUDBase[Domain, dict, dict]):

    def get_many(self, db: Session, ids: List[int]) -> List[Domain]:
        if not ids:
            return []
        return db.query(Domain).filter(Domain.id.in_(ids)).all()


domain = CRUDDomain(Domain)
