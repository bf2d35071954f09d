import logging
import random
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.orm import Session

from models.vocabulary import Vocabulary
from repositories.learned_word_repo import LearnedWordRepository
from repositories.vocabulary_repo import VocabularyRepository
from schemas.dictionary import DictionaryEntry
from services.dictionary_service import DictionaryService
from services.word_status_service import WordStatusCache, WordStatusService

logger = logging.getLogger(__name__)

PickReason = Literal["ok", "all_learned", "empty_vocabulary"]


@dataclass
class RandomWordPick:
    vocabulary: Vocabulary | None
    reason: PickReason

    @property
    def found(self) -> bool:
        return self.vocabulary is not None


class RandomWordService:
    def __init__(
        self,
        db: Session,
        cache: WordStatusCache,
        dictionary: DictionaryService | None = None,
        rng: random.Random | None = None,
    ):
        self.vocab_repo = VocabularyRepository(db)
        self.status = WordStatusService(LearnedWordRepository(db), cache)
        self.dictionary = dictionary or DictionaryService(db)
        self.rng = rng or random.Random()

    def pick_unlearned(self, *, user_id: int) -> RandomWordPick:
        learned = self.status.get_learned_words(user_id)
        vocab = self.vocab_repo.get_random_exclude(learned, rng=self.rng)
        if vocab is not None:
            return RandomWordPick(vocabulary=vocab, reason="ok")

        if self.vocab_repo.count() == 0:
            logger.warning("No vocabulary available for user %s", user_id)
            return RandomWordPick(vocabulary=None, reason="empty_vocabulary")

        logger.info("User %s has learned every vocabulary word (%s)", user_id, len(learned))
        return RandomWordPick(vocabulary=None, reason="all_learned")

    async def get_random_word_details(self, *, user_id: int) -> tuple[RandomWordPick, DictionaryEntry | None]:
        pick = self.pick_unlearned(user_id=user_id)
        if not pick.found:
            return pick, None

        vocab = pick.vocabulary
        entry = await self.dictionary.lookup(vocab.word)
        if entry is None:
            logger.warning("No definition available for word %s, returning the bare word", vocab.word)
            entry = DictionaryEntry(word=vocab.word, vietnamese=vocab.vietnamese)
        return pick, entry
