from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from core.database import Base


class CompletedQuiz(Base):
    __tablename__ = "completed_quizzes"
    __table_args__ = (
        UniqueConstraint("user_id", "quiz_question_id", name="uq_completed_quizzes_user_question"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_question_id = Column(
        Integer, ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    was_correct = Column(Boolean, nullable=False, default=False)
