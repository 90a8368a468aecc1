"""Todo and production plan endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import get_planning_service
from api.middleware.auth import require_permission
from cookiecogs.services import PlanningService

router = APIRouter()


class TodoCreate(BaseModel):
    text: str = Field(..., min_length=1)
    due_date: Optional[date] = Field(None, description="Defaults to tomorrow")
    info: str = ""


class TodoUpdate(BaseModel):
    text: Optional[str] = None
    due_date: Optional[date] = None
    info: Optional[str] = None


class PlanCreate(BaseModel):
    product: str = Field(..., description="Product name")
    quantity: int = Field(..., gt=0)
    deadline: Optional[date] = Field(None, description="Defaults to tomorrow")
    note: str = ""


def _with_priority(item) -> dict:
    return {**item.model_dump(mode="json"), "priority": item.priority.value}


# =============================================================================
# Todos
# =============================================================================

@router.get("/todos")
async def list_todos(
    _user=Depends(require_permission("view_todos")),
    service: PlanningService = Depends(get_planning_service),
):
    return {
        "todos": [_with_priority(t) for t in service.list_todos()],
        "counts": service.todo_counts(),
    }


@router.post("/todos", status_code=201)
async def add_todo(
    request: TodoCreate,
    _user=Depends(require_permission("edit_todos")),
    service: PlanningService = Depends(get_planning_service),
):
    return _with_priority(service.add_todo(request.text, request.due_date, request.info))


@router.patch("/todos/{todo_id}")
async def edit_todo(
    todo_id: int,
    request: TodoUpdate,
    _user=Depends(require_permission("edit_todos")),
    service: PlanningService = Depends(get_planning_service),
):
    todo = service.edit_todo(todo_id, text=request.text, due_date=request.due_date, info=request.info)
    return _with_priority(todo)


@router.post("/todos/{todo_id}/toggle")
async def toggle_todo(
    todo_id: int,
    _user=Depends(require_permission("edit_todos")),
    service: PlanningService = Depends(get_planning_service),
):
    return _with_priority(service.toggle_todo(todo_id))


@router.delete("/todos/{todo_id}")
async def delete_todo(
    todo_id: int,
    _user=Depends(require_permission("edit_todos")),
    service: PlanningService = Depends(get_planning_service),
):
    service.delete_todo(todo_id)
    return {"deleted": todo_id}


# =============================================================================
# Production plans
# =============================================================================

@router.get("/plans")
async def list_plans(
    _user=Depends(require_permission("view_production_planning")),
    service: PlanningService = Depends(get_planning_service),
):
    return {
        "plans": [_with_priority(p) for p in service.list_plans()],
        "counts": service.plan_counts(),
    }


@router.post("/plans", status_code=201)
async def add_plan(
    request: PlanCreate,
    _user=Depends(require_permission("edit_production_planning")),
    service: PlanningService = Depends(get_planning_service),
):
    plan = service.add_plan(request.product, request.quantity, request.deadline, request.note)
    return _with_priority(plan)


@router.post("/plans/{plan_id}/toggle")
async def toggle_plan(
    plan_id: int,
    _user=Depends(require_permission("edit_production_planning")),
    service: PlanningService = Depends(get_planning_service),
):
    return _with_priority(service.toggle_plan(plan_id))


@router.delete("/plans/{plan_id}")
async def delete_plan(
    plan_id: int,
    _user=Depends(require_permission("edit_production_planning")),
    service: PlanningService = Depends(get_planning_service),
):
    service.delete_plan(plan_id)
    return {"deleted": plan_id}
