from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

from ..deadline import storage_timeout
from ..errors import ConnectivityError, DuplicateEmailError, NotFoundError
from ..utils import format_ts, parse_ts
from .models import User
from .repositories import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "users"
    id: str = "id"
    email: str = "email"
    password_hash: str = "password_hash"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()

_SELECT = (
    f"SELECT {_COLS.id}, {_COLS.email}, {_COLS.password_hash}, {_COLS.created_at}, {_COLS.updated_at} "
    f"FROM {_COLS.table}"
)


class SQLiteUserRepository(UserRepository):
    """
    SQLite repository implementing the UserRepository interface.

    Each call opens its own connection; writes commit on success and roll back
    on any exception.
    """

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._timeout = timeout
        try:
            self._init_db()
        except sqlite3.Error as exc:
            raise ConnectivityError(f"cannot open user database at {db_path}: {exc}") from exc
        logger.info("User store ready at %s", db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path, timeout=storage_timeout(self._timeout))
        except sqlite3.OperationalError as exc:
            raise ConnectivityError(f"user database unavailable: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.OperationalError as exc:
            conn.rollback()
            logger.error("User store call aborted: %s", exc)
            raise ConnectivityError(f"user database unavailable: {exc}") from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.email} TEXT NOT NULL UNIQUE,
                    {_COLS.password_hash} TEXT NOT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> User:
        return User(
            id=str(row[_COLS.id]),
            email=str(row[_COLS.email]),
            password_hash=str(row[_COLS.password_hash]),
            created_at=parse_ts(row[_COLS.created_at]),  # type: ignore[arg-type]
            updated_at=parse_ts(row[_COLS.updated_at]),  # type: ignore[arg-type]
        )

    def create(self, user: User) -> None:
        try:
            with self._conn() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.email}, {_COLS.password_hash},
                        {_COLS.created_at}, {_COLS.updated_at})
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        user.id,
                        user.email,
                        user.password_hash,
                        format_ts(user.created_at),
                        format_ts(user.updated_at),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateEmailError() from exc

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._conn() as conn:
            row = conn.execute(f"{_SELECT} WHERE {_COLS.id} = ?", (user_id,)).fetchone()
            return self._row_to_entity(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._conn() as conn:
            row = conn.execute(f"{_SELECT} WHERE {_COLS.email} = ?", (email,)).fetchone()
            return self._row_to_entity(row) if row else None

    def update(self, user: User) -> None:
        try:
            with self._conn() as conn:
                cur = conn.execute(
                    f"""
                    UPDATE {_COLS.table}
                    SET {_COLS.email} = ?, {_COLS.password_hash} = ?, {_COLS.updated_at} = ?
                    WHERE {_COLS.id} = ?
                    """,
                    (user.email, user.password_hash, format_ts(user.updated_at), user.id),
                )
                affected = cur.rowcount
        except sqlite3.IntegrityError as exc:
            raise DuplicateEmailError() from exc
        if affected == 0:
            raise NotFoundError("user not found")

    def delete(self, user_id: str) -> None:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (user_id,))
            affected = cur.rowcount
        if affected == 0:
            raise NotFoundError("user not found")
