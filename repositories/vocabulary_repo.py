import random
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from models.vocabulary import Vocabulary


class VocabularyRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Vocabulary]:
        stmt = select(Vocabulary).order_by(Vocabulary.id)
        return list(self.db.execute(stmt).scalars())

    def count(self) -> int:
        return self.db.execute(select(func.count(Vocabulary.id))).scalar_one()

    def get_by_word(self, word: str) -> Vocabulary | None:
        stmt = select(Vocabulary).where(func.lower(Vocabulary.word) == word.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def get_random_exclude(self, words: set[str], rng: random.Random | None = None) -> Vocabulary | None:
        excluded = {w.lower() for w in words}
        candidates = [v for v in self.get_all() if v.word.lower() not in excluded]
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    def list_missing_definitions(self) -> list[Vocabulary]:
        stmt = (
            select(Vocabulary)
            .where(or_(Vocabulary.meanings_json.is_(None), Vocabulary.meanings_json.in_(["", "[]"])))
            .order_by(Vocabulary.id)
        )
        return list(self.db.execute(stmt).scalars())

    def create(self, *, word: str, vietnamese: str | None = None) -> Vocabulary:
        entity = Vocabulary(word=word, vietnamese=vietnamese)
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def upsert_definition(
        self,
        *,
        word: str,
        phonetics_json: str,
        meanings_json: str,
        vietnamese: str | None = None,
    ) -> Vocabulary:
        entity = self.get_by_word(word)

        if entity:
            entity.phonetics_json = phonetics_json
            entity.meanings_json = meanings_json
            entity.updated_at = datetime.utcnow()
            if vietnamese:
                entity.vietnamese = vietnamese
        else:
            entity = Vocabulary(
                word=word,
                phonetics_json=phonetics_json,
                meanings_json=meanings_json,
                vietnamese=vietnamese,
            )
            self.db.add(entity)

        self.db.commit()
        self.db.refresh(entity)
        return entity
