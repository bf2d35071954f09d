import logging
import math
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.learned_word import LearnedWord
from repositories.learned_word_repo import LearnedWordRepository
from services.word_status_service import WordStatusCache, WordStatusService

logger = logging.getLogger(__name__)

EMPTY_WORD = "empty_word"
DATABASE_ERROR = "database_error"


@dataclass
class MarkWordResult:
    success: bool
    already_learned: bool = False
    data: LearnedWord | None = None
    error: str | None = None
    error_message: str | None = None


class LearnedWordService:
    def __init__(self, db: Session, cache: WordStatusCache):
        self.db = db
        self.repo = LearnedWordRepository(db)
        self.status = WordStatusService(self.repo, cache)

    def mark_word_as_learned(self, *, user_id: int, word: str | None) -> MarkWordResult:
        word = (word or "").strip()
        if not word:
            return MarkWordResult(success=False, error=EMPTY_WORD, error_message="Word cannot be empty")

        try:
            existing = self.repo.get_by_user_and_word(user_id, word)
            if existing:
                logger.warning("User %s tried to mark already learned word: %s", user_id, word)
                return MarkWordResult(success=True, already_learned=True, data=existing)

            try:
                entity = self.repo.add(user_id=user_id, word=word)
            except IntegrityError:
                # another request inserted the same pair first
                self.db.rollback()
                existing = self.repo.get_by_user_and_word(user_id, word)
                if existing is None:
                    raise
                logger.info("Concurrent insert of '%s' for user %s resolved as already learned", word, user_id)
                return MarkWordResult(success=True, already_learned=True, data=existing)

            logger.info("Marked word '%s' as learned for user %s", word, user_id)
            return MarkWordResult(success=True, data=entity)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error marking word as learned for user %s: %s", user_id, word)
            return MarkWordResult(success=False, error=DATABASE_ERROR, error_message="Database error")
        finally:
            self.status.invalidate_user_cache(user_id)

    def is_word_learned(self, *, user_id: int, word: str) -> bool:
        return self.status.is_word_learned(user_id, word)

    def get_learned_words(self, user_id: int) -> list[LearnedWord]:
        logger.info("Getting learned words for user %s", user_id)
        return self.repo.get_by_user_id(user_id)

    def get_learned_word(self, *, user_id: int, word_id: int) -> LearnedWord | None:
        entity = self.repo.get_by_id(word_id)
        if entity is None or entity.user_id != user_id:
            logger.warning("Learned word %s not found or doesn't belong to user %s", word_id, user_id)
            return None
        return entity

    def get_paginated_learned_words(
        self, *, user_id: int, page: int, page_size: int
    ) -> tuple[list[LearnedWord], int, int]:
        items, total = self.repo.get_paginated_by_user_id(user_id, page, page_size)
        total_pages = math.ceil(total / page_size) if page_size else 0
        logger.info(
            "Retrieved %s learned words for user %s (page %s, %s total, %s pages)",
            len(items), user_id, page, total, total_pages,
        )
        return items, total, total_pages

    def remove_learned_word(self, *, user_id: int, word_id: int) -> bool:
        entity = self.get_learned_word(user_id=user_id, word_id=word_id)
        if entity is None:
            return False
        try:
            deleted = self.repo.delete(word_id)
        finally:
            self.status.invalidate_user_cache(user_id)
        logger.info("Removed learned word %s for user %s", word_id, user_id)
        return deleted
