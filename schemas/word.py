from datetime import datetime

from pydantic import BaseModel, ConfigDict, constr


class LearnedWordIn(BaseModel):
    word: constr(strip_whitespace=True, max_length=100)


class LearnedWordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    word: str
    learned_at: datetime


class MarkWordOut(BaseModel):
    success: bool
    already_learned: bool = False
    message: str
    data: LearnedWordOut | None = None


class WordStatusOut(BaseModel):
    word: str
    is_learned: bool


class PageInfo(BaseModel):
    current_page: int
    page_size: int
    total_items: int
    total_pages: int


class LearnedWordPageOut(BaseModel):
    items: list[LearnedWordOut]
    page_info: PageInfo
