from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.learned_word import LearnedWord


class LearnedWordRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: int) -> list[LearnedWord]:
        stmt = (
            select(LearnedWord)
            .where(LearnedWord.user_id == user_id)
            .order_by(LearnedWord.learned_at.desc(), LearnedWord.id.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def get_learned_word_set(self, user_id: int) -> set[str]:
        stmt = select(LearnedWord.word).where(LearnedWord.user_id == user_id)
        return {word.lower() for word in self.db.execute(stmt).scalars()}

    def get_by_user_and_word(self, user_id: int, word: str) -> LearnedWord | None:
        stmt = select(LearnedWord).where(
            LearnedWord.user_id == user_id,
            func.lower(LearnedWord.word) == word.lower(),
        )
        return self.db.execute(stmt).scalars().first()

    def get_by_id(self, word_id: int) -> LearnedWord | None:
        return self.db.get(LearnedWord, word_id)

    def add(self, *, user_id: int, word: str) -> LearnedWord:
        """Insert a learned word; a duplicate pair raises ``IntegrityError`` to the caller."""
        entity = LearnedWord(user_id=user_id, word=word)
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, word_id: int) -> bool:
        entity = self.get_by_id(word_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True

    def get_paginated_by_user_id(self, user_id: int, page: int, page_size: int) -> tuple[list[LearnedWord], int]:
        total = self.db.execute(
            select(func.count(LearnedWord.id)).where(LearnedWord.user_id == user_id)
        ).scalar_one()
        stmt = (
            select(LearnedWord)
            .where(LearnedWord.user_id == user_id)
            .order_by(LearnedWord.learned_at.desc(), LearnedWord.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.db.execute(stmt).scalars()), total
