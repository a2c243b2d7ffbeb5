from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, JSON, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import TestStatusEnum

test_domains = Table(
    "test_domains",
    Base.metadata,
    Column("test_id", Integer, ForeignKey("tests.id", ondelete="CASCADE"), primary_key=True),
    Column("domain_id", Integer, ForeignKey("domains.id", ondelete="CASCADE"), primary_key=True),
)

test_eligible_students = Table(
    "test_eligible_students",
    Base.metadata,
    Column("test_id", Integer, ForeignKey("tests.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

class Test(Base):
    __tablename__ = "tests"
    __test__ = False

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), unique=True, index=True, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    sections = Column(JSON, nullable=False, default=lambda: ["A", "B"])
    # Advisory only; read paths always recompute from the dates.
    status = Column(Enum(TestStatusEnum, values_callable=lambda e: [m.value for m in e]), nullable=False, default=TestStatusEnum.UPCOMING)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    domains = relationship("Domain", secondary=test_domains, lazy="selectin")
    eligible_students = relationship("User", secondary=test_eligible_students, lazy="selectin")
    attempts = relationship("Attempt", back_populates="test", cascade="all, delete-orphan", passive_deletes=True)
    answers = relationship("Answer", back_populates="test", passive_deletes=True)

    @property
    def domain_ids(self):
        return [d.id for d in self.domains]

    @property
    def eligible_student_ids(self):
        return [s.id for s in self.eligible_students]
