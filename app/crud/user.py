from sqlalchemy.orm import Session
from typing import List

from app.crud.base import CRUDBase
from app.models.user import User


class CRUDUser(CRUDBase[User, dict, dict]):

    def get_many(self, db: Session, ids: List[int]) -> List[User]:
        if not ids:
            return []
        return db.query(User).filter(User.id.in_(ids)).all()


user = CRUDUser(User)
