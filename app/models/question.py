from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import QuestionTypeEnum

class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_domain_section_active", "domain_id", "section", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    domain_id = Column(Integer, ForeignKey("domains.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    description = Column(String(2000), nullable=False)
    section = Column(String, nullable=False, default="A")
    question_type = Column(Enum(QuestionTypeEnum, values_callable=lambda e: [m.value for m in e]), nullable=False, default=QuestionTypeEnum.MCQ)
    options = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    domain = relationship("Domain", back_populates="questions")
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan")
