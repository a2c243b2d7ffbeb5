from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Text, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("student_id", "question_id", "domain_id", "section", name="uq_answers_student_question_domain_section"),
        Index("ix_answers_student_domain_section", "student_id", "domain_id", "section"),
        Index("ix_answers_student_test", "student_id", "test_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    domain_id = Column(Integer, ForeignKey("domains.id", ondelete="CASCADE"), nullable=False)
    test_id = Column(Integer, ForeignKey("tests.id", ondelete="SET NULL"), nullable=True)
    section = Column(String, nullable=False)
    answer_text = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    image_public_id = Column(String, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    exam_start_time = Column(DateTime(timezone=True), nullable=False)
    exam_end_time = Column(DateTime(timezone=True), nullable=False)
    is_submitted = Column(Boolean, default=True, nullable=False)
    mark = Column(Float, nullable=True)  # staff-only
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("User", back_populates="answers")
    question = relationship("Question", back_populates="answers")
    domain = relationship("Domain")
    test = relationship("Test", back_populates="answers")
