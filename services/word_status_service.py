import logging
import threading
import time
from typing import Callable

from repositories.learned_word_repo import LearnedWordRepository

logger = logging.getLogger(__name__)


class WordStatusCache:
    """Per-user sets of learned words, kept in process memory for ``ttl_minutes``.

    Entries expire a fixed time after they were filled. Mutating code paths call
    :meth:`invalidate` so a user never reads a set older than their last write.
    """

    def __init__(self, ttl_minutes: int = 15, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_minutes * 60
        self._clock = clock
        self._entries: dict[int, tuple[frozenset[str], float]] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> frozenset[str] | None:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            words, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[user_id]
                return None
            return words

    def set(self, user_id: int, words) -> frozenset[str]:
        normalized = frozenset(w.lower() for w in words)
        with self._lock:
            self._entries[user_id] = (normalized, self._clock() + self.ttl_seconds)
        return normalized

    def invalidate(self, user_id: int) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, user_id: int) -> bool:
        return self.get(user_id) is not None


class WordStatusService:
    def __init__(self, learned_repo: LearnedWordRepository, cache: WordStatusCache):
        self.learned_repo = learned_repo
        self.cache = cache

    def get_learned_words(self, user_id: int) -> frozenset[str]:
        words = self.cache.get(user_id)
        if words is None:
            words = self.cache.set(user_id, self.learned_repo.get_learned_word_set(user_id))
        return words

    def is_word_learned(self, user_id: int, word: str) -> bool:
        try:
            return word.strip().lower() in self.get_learned_words(user_id)
        except Exception:
            logger.exception("Error checking if word '%s' is learned for user %s", word, user_id)
            return False

    def invalidate_user_cache(self, user_id: int) -> None:
        self.cache.invalidate(user_id)
        logger.debug("Invalidated learned-word cache for user %s", user_id)
