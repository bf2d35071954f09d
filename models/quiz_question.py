from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from core.database import Base


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True)
    word = Column(String(100), nullable=False, index=True)
    correct_answer = Column(String(255), nullable=False)
    wrong_answer_1 = Column(String(255), nullable=False)
    wrong_answer_2 = Column(String(255), nullable=False)
    wrong_answer_3 = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def choices(self) -> list[str]:
        return [self.correct_answer, self.wrong_answer_1, self.wrong_answer_2, self.wrong_answer_3]
