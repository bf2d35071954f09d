from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from core.database import Base


class Vocabulary(Base):
    __tablename__ = "vocabularies"

    id = Column(Integer, primary_key=True)
    word = Column(String(100), unique=True, nullable=False, index=True)
    vietnamese = Column(String(200), nullable=True)
    phonetics_json = Column(Text, nullable=False, default="[]")
    meanings_json = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    @property
    def has_definition(self) -> bool:
        return bool(self.meanings_json) and self.meanings_json != "[]"
