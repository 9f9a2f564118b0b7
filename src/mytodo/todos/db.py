from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional

from ..deadline import storage_timeout
from ..errors import ConnectivityError, NotFoundError
from ..utils import format_ts, parse_ts
from .models import Todo
from .repositories import TodoRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    user_id: str = "user_id"
    title: str = "title"
    description: str = "description"
    completed: str = "completed"
    created_at: str = "created_at"
    updated_at: str = "updated_at"
    completed_at: str = "completed_at"


_COLS = _Cols()

_SELECT = (
    f"SELECT {_COLS.id}, {_COLS.user_id}, {_COLS.title}, {_COLS.description}, {_COLS.completed}, "
    f"{_COLS.created_at}, {_COLS.updated_at}, {_COLS.completed_at} FROM {_COLS.table}"
)


class SQLiteTodoRepository(TodoRepository):
    """
    SQLite repository implementing the TodoRepository interface.
    """

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._timeout = timeout
        try:
            self._init_db()
        except sqlite3.Error as exc:
            raise ConnectivityError(f"cannot open todo database at {db_path}: {exc}") from exc
        logger.info("Todo store ready at %s", db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        # Lock waits are capped by the caller's deadline, if any
        try:
            conn = sqlite3.connect(self._db_path, timeout=storage_timeout(self._timeout))
        except sqlite3.OperationalError as exc:
            raise ConnectivityError(f"todo database unavailable: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.OperationalError as exc:
            conn.rollback()
            logger.error("Todo store call aborted: %s", exc)
            raise ConnectivityError(f"todo database unavailable: {exc}") from exc
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
                    {_COLS.user_id} TEXT NOT NULL,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL,
                    {_COLS.completed_at} TEXT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_user_id ON {_COLS.table}({_COLS.user_id})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_user_completed "
                f"ON {_COLS.table}({_COLS.user_id}, {_COLS.completed})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> Todo:
        return Todo(
            id=str(row[_COLS.id]),
            user_id=str(row[_COLS.user_id]),
            title=str(row[_COLS.title]),
            description=row[_COLS.description] or "",
            completed=bool(row[_COLS.completed]),
            created_at=parse_ts(row[_COLS.created_at]),  # type: ignore[arg-type]
            updated_at=parse_ts(row[_COLS.updated_at]),  # type: ignore[arg-type]
            completed_at=parse_ts(row[_COLS.completed_at]),
        )

    def create(self, todo: Todo) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.user_id}, {_COLS.title}, {_COLS.description},
                    {_COLS.completed}, {_COLS.created_at}, {_COLS.updated_at}, {_COLS.completed_at})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    todo.id,
                    todo.user_id,
                    todo.title,
                    todo.description,
                    1 if todo.completed else 0,
                    format_ts(todo.created_at),
                    format_ts(todo.updated_at),
                    format_ts(todo.completed_at),
                ),
            )

    def get_by_id(self, todo_id: str, user_id: str) -> Optional[Todo]:
        with self._conn() as conn:
            row = conn.execute(
                f"{_SELECT} WHERE {_COLS.id} = ? AND {_COLS.user_id} = ?", (todo_id, user_id)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def list_by_user_id(self, user_id: str) -> List[Todo]:
        with self._conn() as conn:
            rows = conn.execute(
                f"{_SELECT} WHERE {_COLS.user_id} = ? ORDER BY {_COLS.created_at} DESC", (user_id,)
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def list_completed_by_user_id(self, user_id: str) -> List[Todo]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                {_SELECT}
                WHERE {_COLS.user_id} = ? AND {_COLS.completed} = 1
                ORDER BY {_COLS.completed_at} DESC
                """,
                (user_id,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update(self, todo: Todo) -> None:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.completed} = ?,
                    {_COLS.updated_at} = ?, {_COLS.completed_at} = ?
                WHERE {_COLS.id} = ? AND {_COLS.user_id} = ?
                """,
                (
                    todo.title,
                    todo.description,
                    1 if todo.completed else 0,
                    format_ts(todo.updated_at),
                    format_ts(todo.completed_at),
                    todo.id,
                    todo.user_id,
                ),
            )
            affected = cur.rowcount
        if affected == 0:
            raise NotFoundError("todo not found")

    def delete(self, todo_id: str, user_id: str) -> None:
        with self._conn() as conn:
            cur = conn.execute(
                f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ? AND {_COLS.user_id} = ?",
                (todo_id, user_id),
            )
            affected = cur.rowcount
        if affected == 0:
            raise NotFoundError("todo not found")
