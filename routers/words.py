from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db
from core.dependencies import get_dictionary_client, get_word_status_cache
from routers.auth import current_user_id
from schemas.dictionary import DictionaryEntry
from schemas.word import (
    LearnedWordIn,
    LearnedWordOut,
    LearnedWordPageOut,
    MarkWordOut,
    PageInfo,
    WordStatusOut,
)
from services.dictionary_service import DictionaryApiClient, DictionaryService
from services.learned_word_service import EMPTY_WORD, LearnedWordService
from services.random_word_service import RandomWordService
from services.word_status_service import WordStatusCache

generator_router = APIRouter(prefix="/api/wordgenerator", tags=["word generator"])
learned_router = APIRouter(prefix="/api/learnedword", tags=["learned words"])

NO_WORD_MESSAGES = {
    "all_learned": "You have learned every word in the vocabulary",
    "empty_vocabulary": "No vocabulary is available yet",
}


@generator_router.get("/random-word", response_model=DictionaryEntry)
async def random_word(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
    client: DictionaryApiClient = Depends(get_dictionary_client),
):
    svc = RandomWordService(db, cache, dictionary=DictionaryService(db, client))
    pick, entry = await svc.get_random_word_details(user_id=user_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=NO_WORD_MESSAGES[pick.reason])
    return entry


@generator_router.post("/learned-word", response_model=MarkWordOut)
async def mark_learned(
    data: LearnedWordIn,
    response: Response,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    svc = LearnedWordService(db, cache)
    result = svc.mark_word_as_learned(user_id=user_id, word=data.word)
    if not result.success:
        if result.error == EMPTY_WORD:
            raise HTTPException(status_code=400, detail=result.error_message)
        raise HTTPException(status_code=500, detail=result.error_message)

    if result.already_learned:
        message = "This word is already marked as learned"
    else:
        response.status_code = status.HTTP_201_CREATED
        message = "Word saved"
    return MarkWordOut(
        success=True,
        already_learned=result.already_learned,
        message=message,
        data=LearnedWordOut.model_validate(result.data, from_attributes=True) if result.data else None,
    )


@generator_router.get("/is-learned/{word}", response_model=WordStatusOut)
async def is_learned(
    word: str,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    svc = LearnedWordService(db, cache)
    return WordStatusOut(word=word, is_learned=svc.is_word_learned(user_id=user_id, word=word))


@learned_router.get("/learned-word", response_model=list[LearnedWordOut])
async def list_learned(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    svc = LearnedWordService(db, cache)
    return [LearnedWordOut.model_validate(w, from_attributes=True) for w in svc.get_learned_words(user_id)]


@learned_router.get("/paginated", response_model=LearnedWordPageOut)
async def list_learned_paginated(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    svc = LearnedWordService(db, cache)
    items, total, total_pages = svc.get_paginated_learned_words(user_id=user_id, page=page, page_size=page_size)
    return LearnedWordPageOut(
        items=[LearnedWordOut.model_validate(w, from_attributes=True) for w in items],
        page_info=PageInfo(current_page=page, page_size=page_size, total_items=total, total_pages=total_pages),
    )


@learned_router.get("/{word_id}", response_model=LearnedWordOut)
async def get_learned(
    word_id: int,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    entity = LearnedWordService(db, cache).get_learned_word(user_id=user_id, word_id=word_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Learned word not found")
    return LearnedWordOut.model_validate(entity, from_attributes=True)


@learned_router.delete("/{word_id}", status_code=204)
async def remove_learned(
    word_id: int,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    cache: WordStatusCache = Depends(get_word_status_cache),
):
    deleted = LearnedWordService(db, cache).remove_learned_word(user_id=user_id, word_id=word_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Learned word not found")
    return Response(status_code=204)
