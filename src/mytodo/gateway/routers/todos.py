from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth import get_current_user, get_todo_client
from ..clients import TodoServiceClient
from ..schemas import ErrorResponse, MessageResponse, TodoComplete, TodoCreate, TodoOut, TodoUpdate
from ..tokens import TokenClaims

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Todo not found"}}

_TRUE_VALUES = {"1", "t", "T", "true", "TRUE", "True"}


def _is_true(value: Optional[str]) -> bool:
    # Anything other than a recognised true value lists every todo
    return value is not None and value in _TRUE_VALUES


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item owned by the caller.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
    },
)
def create_todo(
    payload: TodoCreate,
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> TodoOut:
    """
    Create a new Todo.
    """
    created = todos.create_todo(current.user_id, payload.title, payload.description)
    return TodoOut.from_message(created)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List the caller's todos, newest first.\n\n"
        "Query parameters:\n"
        "- completed: when true, only completed todos ordered by completion time (newest first)"
    ),
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(
    completed: Optional[str] = Query(None, description="Only list completed todos when true"),
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> List[TodoOut]:
    items = todos.list_todos(current.user_id, completed_only=_is_true(completed))
    return [TodoOut.from_message(it) for it in items]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={200: {"description": "Todo found"}, **_NOT_FOUND},
)
def get_todo(
    todo_id: str,
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> TodoOut:
    """
    Retrieve a single Todo item by its ID. Another user's todo is reported as not found.
    """
    return TodoOut.from_message(todos.get_todo(todo_id, current.user_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Update title and/or description. Empty fields keep their current value.",
    responses={200: {"description": "Todo updated"}, **_NOT_FOUND},
)
def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> TodoOut:
    updated = todos.update_todo(todo_id, current.user_id, payload.title, payload.description)
    return TodoOut.from_message(updated)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}/complete",
    response_model=TodoOut,
    summary="Mark Todo Complete",
    description="Set the completion flag; completing stamps completed_at, reopening clears it.",
    responses={200: {"description": "Todo updated"}, **_NOT_FOUND},
)
def mark_todo_complete(
    todo_id: str,
    payload: TodoComplete,
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> TodoOut:
    updated = todos.mark_todo_complete(todo_id, current.user_id, payload.completed)
    return TodoOut.from_message(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=MessageResponse,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={200: {"description": "Todo deleted"}, **_NOT_FOUND},
)
def delete_todo(
    todo_id: str,
    current: TokenClaims = Depends(get_current_user),
    todos: TodoServiceClient = Depends(get_todo_client),
) -> MessageResponse:
    """
    Delete a Todo. Returns 200 with a message on success, 404 if not found.
    """
    todos.delete_todo(todo_id, current.user_id)
    return MessageResponse(message="todo deleted successfully")
