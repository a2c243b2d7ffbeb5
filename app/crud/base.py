from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy import func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from app.core.database import Base
import app.models.registry  # noqa: F401

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        return db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def count(self, db: Session) -> int:
        return db.query(func.count(self.model.id)).scalar() or 0

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        if commit:
            db.commit()
        return db_obj

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: int) -> Optional[ModelType]:
        obj = db.get(self.model, id)
        if not obj:
            return None
        db.delete(obj)
        db.commit()
        return obj

    # Atomic primitives. None of these read before writing; the database
    # decides the outcome through unique constraints or the WHERE clause.

    def _insert(self, db: Session):
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(self.model)
        if dialect == "sqlite":
            return sqlite.insert(self.model)
        raise NotImplementedError(f"Conditional insert is not supported for dialect '{dialect}'")

    def insert_if_absent(self, db: Session, *, values: Dict[str, Any], index_elements: Sequence[str]) -> bool:
        """INSERT ... ON CONFLICT DO NOTHING. Returns True if this call created the row."""
        stmt = self._insert(db).values(**values).on_conflict_do_nothing(index_elements=list(index_elements))
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def upsert(
        self,
        db: Session,
        *,
        values: Dict[str, Any],
        index_elements: Sequence[str],
        update_fields: Sequence[str],
    ) -> ModelType:
        """INSERT ... ON CONFLICT DO UPDATE, replacing ``update_fields`` on conflict."""
        stmt = self._insert(db).values(**values)
        set_ = {field: stmt.excluded[field] for field in update_fields}
        if hasattr(self.model, "updated_at"):
            set_["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=list(index_elements), set_=set_)
        db.execute(stmt)
        db.commit()

        query = db.query(self.model)
        for field in index_elements:
            query = query.filter(getattr(self.model, field) == values[field])
        obj = query.one()
        db.refresh(obj)
        return obj

    def update_if(
        self,
        db: Session,
        *,
        id: Any,
        predicate: Sequence[Any],
        values: Dict[str, Any],
    ) -> Optional[ModelType]:
        """
        Compare-and-swap: apply ``values`` to row ``id`` only while every
        expression in ``predicate`` holds. Returns the updated row, or None
        when the row is missing or the predicate did not match.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id, *predicate)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        if result.rowcount == 0:
            return None
        obj = db.get(self.model, id)
        db.refresh(obj)
        return obj
