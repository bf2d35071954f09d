from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.completed_quiz import CompletedQuiz
from models.quiz_question import QuizQuestion


class CompletedQuizRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: int) -> list[CompletedQuiz]:
        stmt = (
            select(CompletedQuiz)
            .where(CompletedQuiz.user_id == user_id)
            .order_by(CompletedQuiz.completed_at.desc(), CompletedQuiz.id.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def get_completed_question_ids(self, user_id: int) -> set[int]:
        stmt = select(CompletedQuiz.quiz_question_id).where(CompletedQuiz.user_id == user_id)
        return set(self.db.execute(stmt).scalars())

    def get_by_user_and_question(self, user_id: int, question_id: int) -> CompletedQuiz | None:
        stmt = select(CompletedQuiz).where(
            CompletedQuiz.user_id == user_id,
            CompletedQuiz.quiz_question_id == question_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def count_by_user(self, user_id: int) -> tuple[int, int]:
        """Return ``(completed, correct)`` for the user."""
        stmt = select(
            func.count(CompletedQuiz.id),
            func.coalesce(func.sum(case((CompletedQuiz.was_correct.is_(True), 1), else_=0)), 0),
        ).where(CompletedQuiz.user_id == user_id)
        completed, correct = self.db.execute(stmt).one()
        return int(completed or 0), int(correct or 0)

    def mark_as_completed(self, *, user_id: int, question_id: int, was_correct: bool) -> tuple[CompletedQuiz, bool]:
        """Record the first attempt for (user, question).

        Returns the stored row and whether it was created by this call. A row
        that already exists is returned untouched, including when a concurrent
        writer wins the race and the unique constraint rejects our insert.
        """
        existing = self.get_by_user_and_question(user_id, question_id)
        if existing:
            return existing, False

        entity = CompletedQuiz(user_id=user_id, quiz_question_id=question_id, was_correct=was_correct)
        self.db.add(entity)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_by_user_and_question(user_id, question_id)
            if existing is None:
                raise
            return existing, False
        self.db.refresh(entity)
        return entity, True

    def get_paginated_correct(
        self, user_id: int, page: int, page_size: int
    ) -> tuple[list[tuple[CompletedQuiz, QuizQuestion]], int]:
        where = (CompletedQuiz.user_id == user_id, CompletedQuiz.was_correct.is_(True))
        total = self.db.execute(select(func.count(CompletedQuiz.id)).where(*where)).scalar_one()
        stmt = (
            select(CompletedQuiz, QuizQuestion)
            .join(QuizQuestion, QuizQuestion.id == CompletedQuiz.quiz_question_id)
            .where(*where)
            .order_by(CompletedQuiz.completed_at.desc(), CompletedQuiz.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()], total

    def get_with_questions(self, user_id: int, *, correct_only: bool = False) -> list[tuple[CompletedQuiz, QuizQuestion]]:
        stmt = (
            select(CompletedQuiz, QuizQuestion)
            .join(QuizQuestion, QuizQuestion.id == CompletedQuiz.quiz_question_id)
            .where(CompletedQuiz.user_id == user_id)
            .order_by(CompletedQuiz.completed_at.desc(), CompletedQuiz.id.desc())
        )
        if correct_only:
            stmt = stmt.where(CompletedQuiz.was_correct.is_(True))
        return [tuple(row) for row in self.db.execute(stmt).all()]
