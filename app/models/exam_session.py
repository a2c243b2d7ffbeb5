from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class ExamSession(Base):
    """Fixed-duration window for a student's domain+section exam taken outside a test."""
    __tablename__ = "exam_sessions"
    __table_args__ = (
        UniqueConstraint("student_id", "domain_id", "section", name="uq_exam_sessions_student_domain_section"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    domain_id = Column(Integer, ForeignKey("domains.id", ondelete="CASCADE"), nullable=False)
    section = Column(String, nullable=False)
    exam_start_time = Column(DateTime(timezone=True), nullable=False)
    exam_end_time = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("User")
    domain = relationship("Domain")
