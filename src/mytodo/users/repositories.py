from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from threading import RLock
from typing import Dict, Optional

from ..errors import DuplicateEmailError, NotFoundError
from ..settings import Settings
from .models import User


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """Abstract repository contract for user storage backends."""

    @abstractmethod
    def create(self, user: User) -> None:
        """Persist a new user. Raise DuplicateEmailError if the email is taken."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Return a user by id, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email, or None if not found."""

    @abstractmethod
    def update(self, user: User) -> None:
        """Overwrite a stored user. Raise NotFoundError if no row was affected."""

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Delete a user. Raise NotFoundError if no row was affected."""


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, User] = {}

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(u.email == email and u.id != exclude_id for u in self._items.values())

    def create(self, user: User) -> None:
        with self._lock:
            if self._email_taken(user.email):
                raise DuplicateEmailError()
            # Store copies to avoid external mutation
            self._items[user.id] = replace(user)

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            item = self._items.get(user_id)
            return None if item is None else replace(item)

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for item in self._items.values():
                if item.email == email:
                    return replace(item)
            return None

    def update(self, user: User) -> None:
        with self._lock:
            existing = self._items.get(user.id)
            if existing is None:
                raise NotFoundError("user not found")
            if self._email_taken(user.email, exclude_id=user.id):
                raise DuplicateEmailError()
            # created_at is immutable once stored
            self._items[user.id] = replace(user, created_at=existing.created_at)

    def delete(self, user_id: str) -> None:
        with self._lock:
            if self._items.pop(user_id, None) is None:
                raise NotFoundError("user not found")


# PUBLIC_INTERFACE
def get_user_repository(settings: Settings) -> UserRepository:
    """
    Factory to return the configured user repository based on settings.
    - memory: InMemoryUserRepository
    - sqlite: SQLiteUserRepository at settings.user_db_path
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteUserRepository

        return SQLiteUserRepository(settings.user_db_path, timeout=settings.sqlite_timeout_seconds)
    return InMemoryUserRepository()
