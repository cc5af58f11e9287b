import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from backend.app.database import run_atomic
from backend.app.exceptions import BudgetNotFoundError, UserNotFoundError
from backend.app.models.models import Budget, BudgetCategory, Expense, ExpenseCategory, User
from backend.app.periods import Period
from backend.app.schemas.budgets import BudgetReplace, BudgetSave
from backend.app.services.ledger_service import sum_spending_by_category
from backend.app.services.reconciliation_service import (
    Allocations, merge_addition, merge_removal, merge_replacement, merge_upsert, reconcile
)

logger = logging.getLogger(__name__)

def _require_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError(f"User with id {user_id} not found")
    return user

def _find_budget(db: Session, period: Period) -> Optional[Budget]:
    return db.query(Budget).filter(
        Budget.user_id == period.user_id,
        Budget.year == period.year,
        Budget.month == period.month
    ).first()

def _get_budget(db: Session, budget_id: str) -> Budget:
    budget = db.query(Budget).filter(Budget.id == budget_id).first()
    if not budget:
        raise BudgetNotFoundError(f"Budget not found: {budget_id}")
    return budget

def _find_or_create_budget(db: Session, period: Period) -> Budget:
    budget = _find_budget(db, period)
    if budget is None:
        budget = Budget(
            user_id=period.user_id,
            month=period.month,
            year=period.year,
            total_budget=Decimal("0"),
            total_spent=Decimal("0"),
            total_remaining=Decimal("0"),
            categories=[]
        )
        db.add(budget)
        logger.info("Created empty budget %s for user %s", period.label(), period.user_id)
    return budget

def _allocations_of(budget: Budget) -> Allocations:
    return {row.category: row.allocated for row in budget.categories}

def _period_of(budget: Budget) -> Period:
    return Period(budget.user_id, budget.month, budget.year)

def _apply(db: Session, budget: Budget, allocations: Allocations) -> Budget:
    """Reconcile a budget against the ledger and write the result onto it.

    Rows are matched by category so a kept category is updated in place, a
    dropped one is deleted and a new one inserted.
    """
    period = _period_of(budget)
    result = reconcile(allocations, sum_spending_by_category(db, period))

    rows = {row.category: row for row in budget.categories}
    new_rows = []
    for position, line in enumerate(result.lines):
        row = rows.pop(line.category, None) or BudgetCategory(category=line.category)
        row.position = position
        row.allocated = line.allocated
        row.spent_amount = line.spent
        row.remaining = line.remaining
        new_rows.append(row)

    budget.categories = new_rows
    budget.total_budget = result.total_budget
    budget.total_spent = result.total_spent
    budget.total_remaining = result.total_remaining
    # Always issue an UPDATE so the version column is checked and bumped
    budget.updated_at = datetime.utcnow()
    db.flush()

    logger.debug(
        "Reconciled budget %s (%s): total=%s spent=%s remaining=%s",
        budget.id, period.label(), result.total_budget, result.total_spent, result.total_remaining
    )
    return budget

# --- Budget mutations ---

def save_budget(db: Session, budget_data: BudgetSave) -> Budget:
    """Create the budget for a period, or replace its categories if it exists"""
    allocations = merge_replacement((item.category, item.allocated) for item in budget_data.categories)
    period = Period(budget_data.user_id, budget_data.month, budget_data.year)

    def work():
        _require_user(db, period.user_id)
        return _apply(db, _find_or_create_budget(db, period), allocations)

    budget = run_atomic(db, work, action=f"Saving budget {period.label()}")
    logger.info("Saved budget %s for user %s with %d categories", period.label(), period.user_id, len(allocations))
    return budget

def update_budget(db: Session, budget_id: str, budget_data: BudgetReplace) -> Budget:
    """Replace the categories of an existing budget; its period never changes"""
    allocations = merge_replacement((item.category, item.allocated) for item in budget_data.categories)

    def work():
        budget = _get_budget(db, budget_id)
        _require_user(db, budget.user_id)
        return _apply(db, budget, allocations)

    return run_atomic(db, work, action=f"Updating budget {budget_id}")

def upsert_category(db: Session, user_id: str, month: int, year: int,
                    category: ExpenseCategory, allocated: Decimal) -> Budget:
    """Set one category's allocation, creating the budget for the period if needed"""
    period = Period(user_id, month, year)

    def work():
        _require_user(db, user_id)
        budget = _find_or_create_budget(db, period)
        return _apply(db, budget, merge_upsert(_allocations_of(budget), category, allocated))

    return run_atomic(db, work, action=f"Upserting {category.value} in budget {period.label()}")

def add_category(db: Session, user_id: str, month: int, year: int,
                 category: ExpenseCategory, allocated: Decimal) -> Budget:
    """Like upsert_category, but refuses to overwrite an existing category"""
    period = Period(user_id, month, year)

    def work():
        _require_user(db, user_id)
        budget = _find_or_create_budget(db, period)
        return _apply(db, budget, merge_addition(_allocations_of(budget), category, allocated))

    return run_atomic(db, work, action=f"Adding {category.value} to budget {period.label()}")

def remove_category(db: Session, user_id: str, month: int, year: int, category: ExpenseCategory) -> Budget:
    period = Period(user_id, month, year)

    def work():
        _require_user(db, user_id)
        budget = _find_budget(db, period)
        if budget is None:
            raise BudgetNotFoundError(f"Budget not found for user {user_id} ({period.label()})")
        return _apply(db, budget, merge_removal(_allocations_of(budget), category))

    return run_atomic(db, work, action=f"Removing {category.value} from budget {period.label()}")

def delete_budget(db: Session, budget_id: str) -> None:
    """Delete a budget and its categories. The ledger is left alone."""
    def work():
        db.delete(_get_budget(db, budget_id))
        db.flush()

    run_atomic(db, work, action=f"Deleting budget {budget_id}")
    logger.info("Deleted budget %s", budget_id)

def sync_budget(db: Session, budget_id: str) -> Budget:
    """Recompute a budget from its current allocations and the ledger"""
    def work():
        budget = _get_budget(db, budget_id)
        _require_user(db, budget.user_id)
        return _apply(db, budget, _allocations_of(budget))

    return run_atomic(db, work, action=f"Syncing budget {budget_id}")

# --- Ledger hooks ---

def reconcile_period(db: Session, period: Period) -> Optional[Budget]:
    """Reconcile the budget of a period if there is one. Does not commit."""
    budget = _find_budget(db, period)
    if budget is None:
        logger.debug("No budget for user %s in %s, nothing to reconcile", period.user_id, period.label())
        return None
    return _apply(db, budget, _allocations_of(budget))

def on_expense_changed(db: Session, expense: Expense, previous: Optional[Period] = None) -> None:
    """Bring budgets in line after an expense was created, updated or deleted.

    Runs inside the caller's transaction. ``previous`` is the period the
    posting belonged to before an update; when it differs from the current
    one both budgets are reconciled.
    """
    periods = [Period.of(expense.user_id, expense.expense_date)]
    if previous is not None and previous not in periods:
        periods.append(previous)
    for period in periods:
        reconcile_period(db, period)
