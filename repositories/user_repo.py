from sqlalchemy.orm import Session
from sqlalchemy import select
from models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_name(self, name: str) -> User | None:
        return self.db.execute(select(User).where(User.name == name)).scalar_one_or_none()

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, *, name: str, password_hash: str, role: str = "user") -> User:
        user = User(name=name, password_hash=password_hash, role=role)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
