import logging
from typing import Union

from fastapi import HTTPException, status
from pydantic import SecretStr
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.security import hash_password, verify_password
from repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository(db)

    def register(self, *, name: str, password: Union[str, SecretStr]):
        if self.repo.get_by_name(name):
            raise HTTPException(status_code=400, detail="Name already taken")
        try:
            user = self.repo.create(name=name, password_hash=hash_password(password))
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Name already taken") from exc
        logger.info("Registered user %s (id=%s)", user.name, user.id)
        return user

    def login(self, *, name: str, password: Union[str, SecretStr]):
        user = self.repo.get_by_name(name)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for name %s", name)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        return user

    def get_user(self, user_id: int):
        return self.repo.get_by_id(user_id)
