"""
User directory: registration, lookup and credential changes.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError

from talentledger.errors import ConflictError, NotFoundError, ValidationError
from .database import Database
from .models import User
from .validation import validate_text


@dataclass
class StoredUser:
    """Data class for user data transfer."""

    id: int
    username: str
    password_hash: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: User) -> "StoredUser":
        return cls(
            id=model.id,
            username=model.username,
            password_hash=model.password_hash,
            created_at=model.created_at,
        )


class UserRepository:
    """Repository for user accounts. Users are never deleted."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, username: str, password_hash: str) -> int:
        """
        Register a user.

        Raises:
            ValidationError: blank username or empty hash
            ConflictError: username already taken
        """
        validate_text(username, "username")
        if not password_hash:
            raise ValidationError("password is required")

        with self.db.session() as session:
            user = User(username=username, password_hash=password_hash)
            session.add(user)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictError(
                    "Username already registered",
                    detail=f"'{username}' is taken",
                ) from e

            logger.info(f"Registered user {user.id}: {username}")
            return user.id

    def find_by_username(self, username: str) -> StoredUser:
        with self.db.session() as session:
            user = session.query(User).filter(User.username == username).first()

        if user is None:
            raise NotFoundError("User", username)
        return StoredUser.from_model(user)

    def find_by_id(self, user_id: int) -> StoredUser:
        with self.db.session() as session:
            user = session.query(User).filter(User.id == user_id).first()

        if user is None:
            raise NotFoundError("User", user_id)
        return StoredUser.from_model(user)

    def get_id(self, username: str) -> int:
        """Resolve a username to the owner id used by the talent catalog."""
        with self.db.session() as session:
            row = session.query(User.id).filter(User.username == username).first()

        if row is None:
            raise NotFoundError("User", username)
        return row[0]

    def update_username(self, user_id: int, new_username: str) -> None:
        validate_text(new_username, "username")

        with self.db.session() as session:
            try:
                count = session.query(User).filter(User.id == user_id).update(
                    {User.username: new_username},
                    synchronize_session=False,
                )
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictError(
                    "Username already registered",
                    detail=f"'{new_username}' is taken",
                ) from e

        if count == 0:
            raise NotFoundError("User", user_id)
        logger.info(f"User {user_id} renamed to {new_username}")

    def update_password(self, user_id: int, new_password_hash: str) -> None:
        if not new_password_hash:
            raise ValidationError("password is required")

        with self.db.session() as session:
            count = session.query(User).filter(User.id == user_id).update(
                {User.password_hash: new_password_hash},
                synchronize_session=False,
            )
            session.commit()

        if count == 0:
            raise NotFoundError("User", user_id)
