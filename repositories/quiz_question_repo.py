import random

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.quiz_question import QuizQuestion


class QuizQuestionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, question_id: int) -> QuizQuestion | None:
        return self.db.get(QuizQuestion, question_id)

    def count(self) -> int:
        return self.db.execute(select(func.count(QuizQuestion.id))).scalar_one()

    def create(
        self,
        *,
        word: str,
        correct_answer: str,
        wrong_answers: tuple[str, str, str],
    ) -> QuizQuestion:
        entity = QuizQuestion(
            word=word,
            correct_answer=correct_answer,
            wrong_answer_1=wrong_answers[0],
            wrong_answer_2=wrong_answers[1],
            wrong_answer_3=wrong_answers[2],
        )
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def get_random(self, rng: random.Random | None = None) -> QuizQuestion | None:
        return self.get_random_unanswered(set(), rng=rng)

    def get_random_unanswered(
        self,
        exclude_ids: set[int],
        rng: random.Random | None = None,
    ) -> QuizQuestion | None:
        stmt = select(QuizQuestion.id).order_by(QuizQuestion.id)
        if exclude_ids:
            stmt = stmt.where(QuizQuestion.id.not_in(exclude_ids))
        candidate_ids = list(self.db.execute(stmt).scalars())
        if not candidate_ids:
            return None
        return self.get_by_id((rng or random).choice(candidate_ids))
