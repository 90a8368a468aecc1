"""
Planning Service - todos and production plans

Both lists sort open items first, then by due date.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from cookiecogs.models import Priority, ProductionPlan, Todo
from cookiecogs.services.errors import NotFoundError, ValidationError
from cookiecogs.services.state import PLANS, TODOS, AppState, next_id

logger = logging.getLogger(__name__)


def _counts(items, reference: Optional[date] = None) -> Dict[str, int]:
    overdue = 0
    for item in items:
        due = item.due_date if isinstance(item, Todo) else item.deadline
        if not item.done and due < (reference or date.today()):
            overdue += 1
    return {
        "total": len(items),
        "open": sum(1 for i in items if not i.done),
        "done": sum(1 for i in items if i.done),
        "overdue": overdue,
    }


class PlanningService:
    def __init__(self, state: AppState):
        self.state = state

    # =========================================================================
    # Todos
    # =========================================================================

    def list_todos(self) -> List[Todo]:
        """Open first, then by due date, newest first within a day."""
        todos = sorted(self.state.todos, key=lambda t: t.created_at, reverse=True)
        return sorted(todos, key=lambda t: (t.done, t.due_date))

    def get_todo(self, todo_id: int) -> Todo:
        for todo in self.state.todos:
            if todo.id == todo_id:
                return todo
        raise NotFoundError("Todo", todo_id)

    def add_todo(self, text: str, due_date: Optional[date] = None, info: str = "") -> Todo:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Todo text is required")

        with self.state.lock:
            todo = Todo(id=next_id(self.state.todos), text=text, info=(info or "").strip())
            if due_date is not None:
                todo.due_date = due_date
            self.state.todos.append(todo)
            logger.info(f"Added todo {todo.id}")
            self.state.commit(TODOS)
            return todo

    def edit_todo(
        self,
        todo_id: int,
        text: Optional[str] = None,
        due_date: Optional[date] = None,
        info: Optional[str] = None,
    ) -> Todo:
        if text is not None and not text.strip():
            raise ValidationError("Todo text is required")

        with self.state.lock:
            todo = self.get_todo(todo_id)
            if text is not None:
                todo.text = text.strip()
            if due_date is not None:
                todo.due_date = due_date
            if info is not None:
                todo.info = info.strip()
            self.state.commit(TODOS)
            return todo

    def toggle_todo(self, todo_id: int) -> Todo:
        with self.state.lock:
            todo = self.get_todo(todo_id)
            todo.done = not todo.done
            self.state.commit(TODOS)
            return todo

    def delete_todo(self, todo_id: int):
        with self.state.lock:
            self.get_todo(todo_id)
            self.state.todos = [t for t in self.state.todos if t.id != todo_id]
            logger.info(f"Deleted todo {todo_id}")
            self.state.commit(TODOS)

    def todo_counts(self, reference: Optional[date] = None) -> Dict[str, int]:
        return _counts(self.state.todos, reference)

    def open_count(self) -> int:
        return sum(1 for t in self.state.todos if not t.done)

    # =========================================================================
    # Production plans
    # =========================================================================

    def list_plans(self) -> List[ProductionPlan]:
        return sorted(self.state.plans, key=lambda p: (p.done, p.deadline))

    def get_plan(self, plan_id: int) -> ProductionPlan:
        for plan in self.state.plans:
            if plan.id == plan_id:
                return plan
        raise NotFoundError("ProductionPlan", plan_id)

    def add_plan(
        self,
        product: str,
        quantity: int,
        deadline: Optional[date] = None,
        note: str = "",
    ) -> ProductionPlan:
        """Plan a production run for an existing product."""
        if quantity is None or quantity <= 0:
            raise ValidationError("Plan quantity must be positive")

        with self.state.lock:
            found = self.state.find_product(product or "")
            if found is None:
                raise NotFoundError("Product", product)

            plan = ProductionPlan(
                id=next_id(self.state.plans),
                product=found.name,
                quantity=quantity,
                note=(note or "").strip(),
            )
            if deadline is not None:
                plan.deadline = deadline
            self.state.plans.append(plan)
            logger.info(f"Planned {quantity} x {found.name} by {plan.deadline}")
            self.state.commit(PLANS)
            return plan

    def toggle_plan(self, plan_id: int) -> ProductionPlan:
        with self.state.lock:
            plan = self.get_plan(plan_id)
            plan.done = not plan.done
            self.state.commit(PLANS)
            return plan

    def delete_plan(self, plan_id: int):
        with self.state.lock:
            self.get_plan(plan_id)
            self.state.plans = [p for p in self.state.plans if p.id != plan_id]
            logger.info(f"Deleted production plan {plan_id}")
            self.state.commit(PLANS)

    def plan_counts(self, reference: Optional[date] = None) -> Dict[str, int]:
        return _counts(self.state.plans, reference)

    def overdue_plans(self) -> List[ProductionPlan]:
        return [p for p in self.list_plans() if p.priority == Priority.OVERDUE]
