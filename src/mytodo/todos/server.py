from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from ..errors import AppError
from ..rpc import RPC_PREFIX, DeleteResult, RpcResponse
from .schemas import (
    CreateTodoRequest,
    DeleteTodoRequest,
    GetTodoRequest,
    ListTodosRequest,
    MarkTodoCompleteRequest,
    TodoListMessage,
    TodoMessage,
    UpdateTodoRequest,
)
from .service import TodoService

logger = logging.getLogger(__name__)

SERVICE_NAME = "TodoService"

router = APIRouter(
    prefix=f"{RPC_PREFIX}/{SERVICE_NAME}",
    tags=["todos"],
)

TodoResponse = RpcResponse[TodoMessage]
TodoListResponse = RpcResponse[TodoListMessage]
DeleteResponse = RpcResponse[DeleteResult]


def get_todo_service(request: Request) -> TodoService:
    """
    Dependency returning the TodoService built at application startup.
    """
    return request.app.state.todo_service


def _failed(method: str, exc: AppError) -> None:
    logger.info("%s.%s failed: %s (%s)", SERVICE_NAME, method, exc.kind.value, exc.message)


# PUBLIC_INTERFACE
@router.post("/CreateTodo", response_model=TodoResponse, summary="Create Todo")
def create_todo(payload: CreateTodoRequest, service: TodoService = Depends(get_todo_service)) -> TodoResponse:
    try:
        todo = service.create_todo(payload.user_id, payload.title, payload.description)
    except AppError as exc:
        _failed("CreateTodo", exc)
        return TodoResponse.failure(exc)
    return TodoResponse.success(TodoMessage.from_entity(todo))


# PUBLIC_INTERFACE
@router.post("/GetTodo", response_model=TodoResponse, summary="Get Todo")
def get_todo(payload: GetTodoRequest, service: TodoService = Depends(get_todo_service)) -> TodoResponse:
    """Owner-scoped lookup; another user's todo reports NotFound."""
    try:
        todo = service.get_todo(payload.id, payload.user_id)
    except AppError as exc:
        _failed("GetTodo", exc)
        return TodoResponse.failure(exc)
    return TodoResponse.success(TodoMessage.from_entity(todo))


# PUBLIC_INTERFACE
@router.post("/ListTodos", response_model=TodoListResponse, summary="List Todos")
def list_todos(payload: ListTodosRequest, service: TodoService = Depends(get_todo_service)) -> TodoListResponse:
    """
    List the owner's todos, or only the completed ones when `completed_only` is set.
    """
    try:
        if payload.completed_only:
            todos = service.list_completed_todos(payload.user_id)
        else:
            todos = service.list_todos(payload.user_id)
    except AppError as exc:
        _failed("ListTodos", exc)
        return TodoListResponse.failure(exc)
    return TodoListResponse.success(TodoListMessage(todos=[TodoMessage.from_entity(t) for t in todos]))


# PUBLIC_INTERFACE
@router.post("/UpdateTodo", response_model=TodoResponse, summary="Update Todo")
def update_todo(payload: UpdateTodoRequest, service: TodoService = Depends(get_todo_service)) -> TodoResponse:
    try:
        todo = service.update_todo(payload.id, payload.user_id, payload.title, payload.description)
    except AppError as exc:
        _failed("UpdateTodo", exc)
        return TodoResponse.failure(exc)
    return TodoResponse.success(TodoMessage.from_entity(todo))


# PUBLIC_INTERFACE
@router.post("/MarkTodoComplete", response_model=TodoResponse, summary="Mark Todo Complete")
def mark_todo_complete(
    payload: MarkTodoCompleteRequest, service: TodoService = Depends(get_todo_service)
) -> TodoResponse:
    try:
        todo = service.mark_todo_complete(payload.id, payload.user_id, payload.completed)
    except AppError as exc:
        _failed("MarkTodoComplete", exc)
        return TodoResponse.failure(exc)
    return TodoResponse.success(TodoMessage.from_entity(todo))


# PUBLIC_INTERFACE
@router.post("/DeleteTodo", response_model=DeleteResponse, summary="Delete Todo")
def delete_todo(payload: DeleteTodoRequest, service: TodoService = Depends(get_todo_service)) -> DeleteResponse:
    try:
        service.delete_todo(payload.id, payload.user_id)
    except AppError as exc:
        _failed("DeleteTodo", exc)
        return DeleteResponse.failure(exc)
    return DeleteResponse.success(DeleteResult(success=True))
