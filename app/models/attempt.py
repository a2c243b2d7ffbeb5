from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import AttemptStatusEnum

class Attempt(Base):
    __tablename__ = "attempts"
    __table_args__ = (
        UniqueConstraint("student_id", "test_id", name="uq_attempts_student_test"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    test_id = Column(Integer, ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    due_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    selected_domain_id = Column(Integer, ForeignKey("domains.id", ondelete="SET NULL"), nullable=True)
    selected_section = Column(String, nullable=True)
    score = Column(Float, nullable=True)
    status = Column(
        Enum(AttemptStatusEnum, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AttemptStatusEnum.PENDING,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("User", back_populates="attempts")
    test = relationship("Test", back_populates="attempts")
    selected_domain = relationship("Domain")
