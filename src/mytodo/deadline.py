"""
Per-call deadline carried from the gateway down to the storage call.

The RPC client sends its remaining budget in the `X-Rpc-Timeout` header
(seconds). `DeadlineMiddleware` turns it into an absolute deadline for the
request, and the SQLite engines cap their lock wait with `storage_timeout`,
so a service never keeps working on a call its caller has already given up on.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .errors import ConnectivityError

DEADLINE_HEADER = "X-Rpc-Timeout"

_deadline_var: ContextVar[Optional[float]] = ContextVar("rpc_deadline", default=None)


def parse_budget(value: Optional[str]) -> Optional[float]:
    """Parse a header budget; missing, unparsable or negative values mean no deadline."""
    if not value:
        return None
    try:
        budget = float(value)
    except ValueError:
        return None
    return budget if budget >= 0 else None


def remaining() -> Optional[float]:
    """Seconds left before the current call's deadline, or None without one."""
    deadline = _deadline_var.get()
    if deadline is None:
        return None
    return deadline - time.monotonic()


@contextmanager
def call_deadline(budget: Optional[float]) -> Iterator[None]:
    """Run the enclosed block under a deadline `budget` seconds from now."""
    token = _deadline_var.set(time.monotonic() + budget if budget is not None else None)
    try:
        yield
    finally:
        _deadline_var.reset(token)


# PUBLIC_INTERFACE
def storage_timeout(configured: float) -> float:
    """
    Return the lock wait to use for one storage call.

    Raises:
        ConnectivityError: if the caller's deadline has already passed.
    """
    left = remaining()
    if left is None:
        return configured
    if left <= 0:
        raise ConnectivityError("deadline exceeded before storage call")
    return min(configured, left)


class DeadlineMiddleware(BaseHTTPMiddleware):
    """
    Bind the caller's `X-Rpc-Timeout` budget to the request being served.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        with call_deadline(parse_budget(request.headers.get(DEADLINE_HEADER))):
            return await call_next(request)
