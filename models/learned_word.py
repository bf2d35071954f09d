from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, func
from core.database import Base


class LearnedWord(Base):
    __tablename__ = "learned_words"

    id = Column(Integer, primary_key=True)
    word = Column(String(100), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    learned_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# words keep the casing they were given, uniqueness ignores it
Index(
    "uq_learned_words_user_word",
    LearnedWord.user_id,
    func.lower(LearnedWord.word),
    unique=True,
)
