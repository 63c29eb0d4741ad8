from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.errors import NotFoundOrForbidden
from todo_api.pipeline import require_user
from todo_api.repositories.todo_repo import TodoRepository
from todo_api.schemas.todo import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(prefix="/todos", tags=["todos"])

# same body whether the id is missing, deleted, or someone else's
TODO_NOT_FOUND = "Todo not found"


@router.post("", response_model=TodoOut, status_code=201)
def create_todo(todo: TodoCreate, user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    return TodoRepository(db).create(user_id, todo.item, todo.completed)


@router.get("", response_model=list[TodoOut])
def list_todos(user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    return TodoRepository(db).list(user_id)


@router.get("/{todo_id}", response_model=TodoOut)
def get_todo(todo_id: int, user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    todo = TodoRepository(db).get(todo_id, user_id)
    if todo is None:
        raise NotFoundOrForbidden(TODO_NOT_FOUND)
    return todo


@router.patch("/{todo_id}", response_model=TodoOut)
def update_todo(todo_id: int, changes: TodoUpdate, user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    todo = TodoRepository(db).update(todo_id, user_id, changes.changes())
    if todo is None:
        raise NotFoundOrForbidden(TODO_NOT_FOUND)
    return todo


@router.delete("/{todo_id}", status_code=204)
def delete_todo(todo_id: int, user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    if not TodoRepository(db).soft_delete(todo_id, user_id):
        raise NotFoundOrForbidden(TODO_NOT_FOUND)
