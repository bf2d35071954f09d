from datetime import datetime

from pydantic import BaseModel, Field, constr

from schemas.word import PageInfo


class QuizQuestionOut(BaseModel):
    id: int
    word: str
    options: list[str]


class RandomQuestionOut(BaseModel):
    completed_all: bool = False
    message: str | None = None
    question: QuizQuestionOut | None = None


class SubmitAnswerIn(BaseModel):
    quiz_question_id: int = Field(gt=0)
    selected_answer: constr(max_length=255)


class QuizResultOut(BaseModel):
    is_correct: bool
    correct_answer: str
    message: str
    recorded: bool


class QuizStatsOut(BaseModel):
    total_questions: int
    completed_questions: int
    correct_answers: int
    accuracy_rate: float
    completion_percentage: float


class CompletedQuizOut(BaseModel):
    id: int
    quiz_question_id: int
    word: str
    correct_answer: str
    completed_at: datetime
    was_correct: bool


class CompletedQuizPageOut(BaseModel):
    items: list[CompletedQuizOut]
    page_info: PageInfo
