from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.dependencies import get_dictionary_client
from models.user import User
from routers.auth import current_user_id
from schemas.dictionary import CacheAllOut, DictionaryEntry
from services.dictionary_service import DictionaryApiClient, DictionaryService

router = APIRouter(prefix="/api/dictionary", tags=["dictionary"])


def require_admin(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)) -> int:
    user = db.get(User, user_id)
    if user is None or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return user_id


@router.post("/cache-all", response_model=CacheAllOut)
async def cache_all(
    _: int = Depends(require_admin),
    db: Session = Depends(get_db),
    client: DictionaryApiClient = Depends(get_dictionary_client),
):
    cached = await DictionaryService(db, client).cache_all_definitions()
    return CacheAllOut(cached=cached, message=f"Cached {cached} vocabulary definitions")


@router.get("/{word}", response_model=DictionaryEntry)
async def lookup(
    word: str,
    _: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    client: DictionaryApiClient = Depends(get_dictionary_client),
):
    entry = await DictionaryService(db, client).lookup(word)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No definition found for '{word}'")
    return entry
