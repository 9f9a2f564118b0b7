from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Union

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: Union[str, int] = "INFO") -> None:
    """
    Install a single stdout handler on the root logger.

    Safe to call more than once; later calls only change the level.
    """
    root = logging.getLogger()
    if not any(getattr(h, "_mytodo", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._mytodo = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)


# PUBLIC_INTERFACE
def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_ts(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp for storage (ISO-8601, UTC offset kept)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # fixed width keeps lexicographic order equal to chronological order
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_ts(value: Optional[str]) -> Optional[datetime]:
    """Inverse of format_ts. Naive strings are read as UTC."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
