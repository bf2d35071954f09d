import logging
import math
import random
from dataclasses import dataclass

from sqlalchemy.orm import Session

from models.completed_quiz import CompletedQuiz
from models.quiz_question import QuizQuestion
from repositories.completed_quiz_repo import CompletedQuizRepository
from repositories.quiz_question_repo import QuizQuestionRepository

logger = logging.getLogger(__name__)


def normalize_answer(answer: str | None) -> str:
    """Answers match ignoring surrounding whitespace and letter case."""
    return " ".join((answer or "").split()).casefold()


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


@dataclass
class QuizAnswerResult:
    is_correct: bool
    correct_answer: str
    message: str
    recorded: bool = False


@dataclass
class QuizStats:
    total_questions: int
    completed_questions: int
    correct_answers: int
    accuracy_rate: float
    completion_percentage: float


class QuizQuestionService:
    def __init__(self, db: Session, rng: random.Random | None = None):
        self.question_repo = QuizQuestionRepository(db)
        self.completed_repo = CompletedQuizRepository(db)
        self.rng = rng or random.Random()

    def get_random_question(self) -> QuizQuestion | None:
        return self.question_repo.get_random(rng=self.rng)

    def get_random_uncompleted(self, *, user_id: int) -> QuizQuestion | None:
        completed_ids = self.completed_repo.get_completed_question_ids(user_id)
        question = self.question_repo.get_random_unanswered(completed_ids, rng=self.rng)
        if question is None:
            logger.info(
                "No unanswered questions left for user %s (%s completed of %s)",
                user_id, len(completed_ids), self.question_repo.count(),
            )
        return question

    def shuffled_options(self, question: QuizQuestion) -> list[str]:
        options = list(question.choices)
        self.rng.shuffle(options)
        return options


class QuizAnswerService:
    def __init__(self, db: Session):
        self.question_repo = QuizQuestionRepository(db)
        self.completed_repo = CompletedQuizRepository(db)

    def check_answer(self, *, question_id: int, answer: str) -> QuizAnswerResult | None:
        question = self.question_repo.get_by_id(question_id)
        if question is None:
            logger.warning("Quiz question %s does not exist", question_id)
            return None
        is_correct = normalize_answer(answer) == normalize_answer(question.correct_answer)
        return QuizAnswerResult(
            is_correct=is_correct,
            correct_answer=question.correct_answer,
            message="Correct!" if is_correct else "Incorrect. The right answer is shown.",
        )

    def submit_answer(self, *, user_id: int, question_id: int, answer: str) -> QuizAnswerResult | None:
        result = self.check_answer(question_id=question_id, answer=answer)
        if result is None:
            return None

        _, created = self.completed_repo.mark_as_completed(
            user_id=user_id,
            question_id=question_id,
            was_correct=result.is_correct,
        )
        result.recorded = created
        if created:
            logger.info(
                "User %s completed question %s (correct=%s)", user_id, question_id, result.is_correct
            )
        else:
            logger.info("User %s re-answered question %s; first attempt kept", user_id, question_id)
        return result


class QuizProgressService:
    def __init__(self, db: Session):
        self.question_repo = QuizQuestionRepository(db)
        self.completed_repo = CompletedQuizRepository(db)

    def get_statistics(self, *, user_id: int) -> QuizStats:
        total = self.question_repo.count()
        completed, correct = self.completed_repo.count_by_user(user_id)
        return QuizStats(
            total_questions=total,
            completed_questions=completed,
            correct_answers=correct,
            accuracy_rate=percentage(correct, completed),
            completion_percentage=percentage(completed, total),
        )

    def get_completed(self, *, user_id: int) -> list[tuple[CompletedQuiz, QuizQuestion]]:
        return self.completed_repo.get_with_questions(user_id)

    def get_correct(self, *, user_id: int) -> list[tuple[CompletedQuiz, QuizQuestion]]:
        return self.completed_repo.get_with_questions(user_id, correct_only=True)

    def get_paginated_correct(
        self, *, user_id: int, page: int, page_size: int
    ) -> tuple[list[tuple[CompletedQuiz, QuizQuestion]], int, int]:
        items, total = self.completed_repo.get_paginated_correct(user_id, page, page_size)
        total_pages = math.ceil(total / page_size) if page_size else 0
        return items, total, total_pages
