from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db
from models.completed_quiz import CompletedQuiz
from models.quiz_question import QuizQuestion
from routers.auth import current_user_id
from schemas.quiz import (
    CompletedQuizOut,
    CompletedQuizPageOut,
    QuizQuestionOut,
    QuizResultOut,
    QuizStatsOut,
    RandomQuestionOut,
    SubmitAnswerIn,
)
from schemas.word import PageInfo
from services.quiz_services import QuizAnswerService, QuizProgressService, QuizQuestionService

router = APIRouter(prefix="/api/quizz", tags=["quiz"])
stats_router = APIRouter(prefix="/api/quiz", tags=["quiz"])


def _question_out(svc: QuizQuestionService, question: QuizQuestion) -> QuizQuestionOut:
    return QuizQuestionOut(id=question.id, word=question.word, options=svc.shuffled_options(question))


def _completed_out(completed: CompletedQuiz, question: QuizQuestion) -> CompletedQuizOut:
    return CompletedQuizOut(
        id=completed.id,
        quiz_question_id=completed.quiz_question_id,
        word=question.word,
        correct_answer=question.correct_answer,
        completed_at=completed.completed_at,
        was_correct=completed.was_correct,
    )


@router.get("/random-question", response_model=RandomQuestionOut)
async def random_uncompleted_question(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = QuizQuestionService(db)
    question = svc.get_random_uncompleted(user_id=user_id)
    if question is None:
        return RandomQuestionOut(completed_all=True, message="You have answered every quiz question")
    return RandomQuestionOut(question=_question_out(svc, question))


@router.post("/submit-answer", response_model=QuizResultOut)
async def submit_answer(
    data: SubmitAnswerIn,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = QuizAnswerService(db)
    result = svc.submit_answer(user_id=user_id, question_id=data.quiz_question_id, answer=data.selected_answer)
    if result is None:
        raise HTTPException(status_code=404, detail="Quiz question not found")
    return QuizResultOut(
        is_correct=result.is_correct,
        correct_answer=result.correct_answer,
        message=result.message,
        recorded=result.recorded,
    )


@stats_router.get("/random", response_model=QuizQuestionOut)
async def random_question(
    _: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    svc = QuizQuestionService(db)
    question = svc.get_random_question()
    if question is None:
        raise HTTPException(status_code=404, detail="No quiz questions available")
    return _question_out(svc, question)


@stats_router.get("/stats", response_model=QuizStatsOut)
async def quiz_stats(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    stats = QuizProgressService(db).get_statistics(user_id=user_id)
    return QuizStatsOut(
        total_questions=stats.total_questions,
        completed_questions=stats.completed_questions,
        correct_answers=stats.correct_answers,
        accuracy_rate=stats.accuracy_rate,
        completion_percentage=stats.completion_percentage,
    )


@stats_router.get("/completed", response_model=list[CompletedQuizOut])
async def completed_quizzes(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    rows = QuizProgressService(db).get_completed(user_id=user_id)
    return [_completed_out(completed, question) for completed, question in rows]


@stats_router.get("/correct", response_model=list[CompletedQuizOut])
async def correct_quizzes(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    rows = QuizProgressService(db).get_correct(user_id=user_id)
    return [_completed_out(completed, question) for completed, question in rows]


@stats_router.get("/correct/paginated", response_model=CompletedQuizPageOut)
async def correct_quizzes_paginated(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    items, total, total_pages = QuizProgressService(db).get_paginated_correct(
        user_id=user_id, page=page, page_size=page_size
    )
    return CompletedQuizPageOut(
        items=[_completed_out(completed, question) for completed, question in items],
        page_info=PageInfo(current_page=page, page_size=page_size, total_items=total, total_pages=total_pages),
    )
