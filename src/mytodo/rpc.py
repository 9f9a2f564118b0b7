"""
Tagged request/response protocol between the gateway and the backend services.

Every RPC is a JSON `POST /rpc/<Service>/<Method>`. The service always answers
HTTP 200 with an envelope that is either

    {"ok": true,  "result": {...}}
    {"ok": false, "error": {"kind": "NotFound", "message": "todo not found"}}

Application errors travel inside the envelope. Anything else (connection
refused, timeout, non-200 status, unreadable body) is a transport failure and
is raised as ConnectivityError by the client.

Each request carries the client's time budget in `X-Rpc-Timeout` so the
service can abort its storage call once the caller has stopped waiting.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .deadline import DEADLINE_HEADER, remaining
from .errors import AppError, ConnectivityError, error_from_kind

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
C = TypeVar("C", bound="RpcClient")

RPC_PREFIX = "/rpc"


class RpcErrorBody(BaseModel):
    kind: str = Field(..., description="Error category, e.g. NotFound or DuplicateEmail")
    message: str = Field(..., description="Human readable error message")


# PUBLIC_INTERFACE
class RpcResponse(BaseModel, Generic[T]):
    """Tagged result envelope: exactly one of `result` / `error` is set."""

    ok: bool = Field(..., description="True when `result` is populated")
    result: Optional[T] = Field(default=None, description="Payload on success")
    error: Optional[RpcErrorBody] = Field(default=None, description="Error on failure")

    @classmethod
    def success(cls, result: T) -> "RpcResponse[T]":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, exc: AppError) -> "RpcResponse[T]":
        return cls(ok=False, error=RpcErrorBody(kind=exc.kind.value, message=exc.message))


class DeleteResult(BaseModel):
    success: bool = Field(..., description="True when the record was removed")


# PUBLIC_INTERFACE
def rpc_path(service: str, method: str) -> str:
    """Return the route for one RPC method, e.g. /rpc/TodoService/GetTodo."""
    return f"{RPC_PREFIX}/{service}/{method}"


# PUBLIC_INTERFACE
class RpcClient:
    """
    Base class for synchronous RPC clients built on httpx.

    The wrapped `httpx.Client` must have `base_url` pointing at the service;
    subclasses set `service` and call `_call` for each method.
    """

    service: str = ""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def connect(cls: Type[C], base_url: str, timeout: float) -> C:
        """Build a client with its own pooled httpx.Client."""
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self._http.close()

    def _budget(self) -> Optional[float]:
        """Seconds the service may spend on a call: the read timeout, capped by any enclosing deadline."""
        budget = self._http.timeout.read
        left = remaining()
        if left is not None:
            budget = left if budget is None else min(budget, left)
        return budget

    def _call(self, method: str, payload: Dict[str, Any], result_type: Type[T]) -> T:
        """
        Invoke `method` and return its typed result.

        Raises:
            AppError subclass: when the service answered with an error envelope.
            ConnectivityError: when the call failed at the transport level.
        """
        name = f"{self.service}.{method}"
        budget = self._budget()
        headers = {DEADLINE_HEADER: f"{max(budget, 0.0):.3f}"} if budget is not None else {}
        try:
            response = self._http.post(rpc_path(self.service, method), json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            logger.error("RPC %s timed out: %s", name, exc)
            raise ConnectivityError(f"{self.service} timed out") from exc
        except httpx.TransportError as exc:
            logger.error("RPC %s failed to connect: %s", name, exc)
            raise ConnectivityError(f"{self.service} is unreachable") from exc

        if response.status_code != 200:
            logger.error("RPC %s returned HTTP %s: %s", name, response.status_code, response.text)
            raise ConnectivityError(f"{self.service} returned HTTP {response.status_code}")

        try:
            envelope = RpcResponse[result_type].model_validate_json(response.content)  # type: ignore[valid-type]
        except PydanticValidationError as exc:
            logger.error("RPC %s returned a malformed envelope: %s", name, exc)
            raise ConnectivityError(f"{self.service} returned a malformed response") from exc

        if not envelope.ok:
            if envelope.error is None:
                raise ConnectivityError(f"{self.service} returned an empty error")
            raise error_from_kind(envelope.error.kind, envelope.error.message)
        if envelope.result is None:
            raise ConnectivityError(f"{self.service} returned an empty result")
        return envelope.result
