from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils import utcnow


# PUBLIC_INTERFACE
@dataclass
class Todo:
    """
    Domain model representing a Todo item.

    Fields:
    - id: opaque unique identifier (uuid4 string)
    - user_id: owner; every lookup filters on it
    - title / description: free text
    - completed: completion flag
    - created_at / updated_at: aware UTC timestamps
    - completed_at: set iff completed is True
    """

    id: str
    user_id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def new(cls, id: str, user_id: str, title: str, description: str) -> "Todo":
        now = utcnow()
        return cls(
            id=id,
            user_id=user_id,
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
            completed_at=None,
        )

    def update(self, title: str, description: str) -> None:
        """
        Overwrite title and/or description. Empty values keep the current text.
        Completion state is never touched.
        """
        if title:
            self.title = title
        if description:
            self.description = description
        self.updated_at = utcnow()

    def mark_complete(self, completed: bool) -> None:
        now = utcnow()
        self.completed = completed
        self.completed_at = now if completed else None
        self.updated_at = now
