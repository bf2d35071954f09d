import asyncio
import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from core.config import settings
from models.vocabulary import Vocabulary
from repositories.vocabulary_repo import VocabularyRepository
from schemas.dictionary import DictionaryEntry, Meaning, Phonetic

logger = logging.getLogger(__name__)

_phonetics_adapter = TypeAdapter(list[Phonetic])
_meanings_adapter = TypeAdapter(list[Meaning])


class DictionaryApiClient:
    """Single-attempt client for the public dictionary API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.DICTIONARY_API_URL
        self.timeout = timeout if timeout is not None else settings.DICTIONARY_API_TIMEOUT
        self.transport = transport

    async def fetch(self, word: str) -> DictionaryEntry | None:
        url = f"{self.base_url}{quote(word)}"
        logger.info("Calling dictionary API for word: %s", word)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.get(url)
            except httpx.HTTPError as exc:
                logger.warning("Dictionary API request failed for word %s: %s", word, exc)
                return None

        if not r.is_success:
            logger.warning("Dictionary API returned status %s for word %s", r.status_code, word)
            return None

        try:
            data = r.json()
        except ValueError:
            logger.warning("Dictionary API returned a non-JSON body for word %s", word)
            return None

        if not isinstance(data, list) or not data:
            logger.warning("No definition found from API for word: %s", word)
            return None

        try:
            entry = DictionaryEntry.model_validate(data[0])
        except ValidationError as exc:
            logger.warning("Unexpected dictionary payload for word %s: %s", word, exc)
            return None

        if not entry.phonetic:
            entry.phonetic = next((p.text for p in entry.phonetics if p.text), None)
        return entry


def entry_from_vocabulary(vocab: Vocabulary) -> DictionaryEntry:
    phonetics = _phonetics_adapter.validate_json(vocab.phonetics_json or "[]")
    meanings = _meanings_adapter.validate_json(vocab.meanings_json or "[]")
    return DictionaryEntry(
        word=vocab.word,
        phonetic=next((p.text for p in phonetics if p.text), None),
        phonetics=phonetics,
        meanings=meanings,
        vietnamese=vocab.vietnamese,
    )


class DictionaryService:
    def __init__(self, db: Session, client: DictionaryApiClient | None = None):
        self.repo = VocabularyRepository(db)
        self.client = client or DictionaryApiClient()

    def get_from_database(self, word: str) -> DictionaryEntry | None:
        vocab = self.repo.get_by_word(word)
        if vocab is None or not vocab.has_definition:
            return None
        try:
            return entry_from_vocabulary(vocab)
        except ValidationError:
            logger.exception("Stored definition for word %s could not be parsed", word)
            return None

    async def lookup(self, word: str) -> DictionaryEntry | None:
        word = (word or "").strip()
        if not word:
            logger.warning("Word to lookup is empty")
            return None

        cached = self.get_from_database(word)
        if cached is not None:
            logger.info("Serving cached definition for word: %s", word)
            return cached

        entry = await self.client.fetch(word)
        if entry is None:
            return None

        vocab = self.save(entry, fallback_word=word)
        entry.vietnamese = vocab.vietnamese
        return entry

    def save(self, entry: DictionaryEntry, fallback_word: str | None = None) -> Vocabulary:
        phonetics_json = (
            _phonetics_adapter.dump_json(entry.phonetics, by_alias=True).decode() if entry.phonetics else "[]"
        )
        meanings_json = _meanings_adapter.dump_json(entry.meanings, by_alias=True).decode()
        vocab = self.repo.upsert_definition(
            word=entry.word or fallback_word,
            phonetics_json=phonetics_json,
            meanings_json=meanings_json,
            vietnamese=entry.vietnamese,
        )
        logger.info("Cached definition for word: %s", vocab.word)
        return vocab

    async def cache_all_definitions(self, delay: float | None = None) -> int:
        delay = settings.DICTIONARY_CACHE_DELAY if delay is None else delay
        pending = self.repo.list_missing_definitions()
        if not pending:
            logger.warning("No vocabulary needs caching")
            return 0

        logger.info("Caching definitions for %s vocabulary rows", len(pending))
        cached = 0
        failed = 0
        for index, vocab in enumerate(pending):
            if index and delay:
                await asyncio.sleep(delay)
            entry = await self.client.fetch(vocab.word)
            if entry is None:
                failed += 1
                continue
            entry.word = vocab.word
            self.save(entry)
            cached += 1

        logger.info("Finished caching vocabulary. Success: %s, Failed: %s", cached, failed)
        return cached

