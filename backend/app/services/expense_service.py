from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.database import run_atomic
from backend.app.exceptions import ExpenseNotFoundError, UserNotFoundError
from backend.app.models.models import Expense, ExpenseCategory, User
from backend.app.periods import Period
from backend.app.schemas.expenses import ExpenseCreate, ExpenseUpdate
from backend.app.services.budget_service import on_expense_changed

def _get_expense(db: Session, expense_id: str) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise ExpenseNotFoundError(f"Expense with id {expense_id} not found")
    return expense

def create_expense(db: Session, expense_data: ExpenseCreate) -> Expense:
    """
    Record a new expense and reconcile the budget of its month, if any
    """
    def work():
        if not db.query(User).filter(User.id == expense_data.user_id).first():
            raise UserNotFoundError(f"User with id {expense_data.user_id} not found")

        expense = Expense(
            user_id=expense_data.user_id,
            category=expense_data.category,
            amount=expense_data.amount,
            expense_date=expense_data.expense_date,
            description=expense_data.description
        )
        db.add(expense)
        db.flush()
        on_expense_changed(db, expense)
        return expense

    return run_atomic(db, work, action="Creating expense")

def get_expense(db: Session, expense_id: str) -> Expense:
    return _get_expense(db, expense_id)

def get_user_expenses(db: Session, user_id: str,
                      start_date: Optional[date] = None,
                      end_date: Optional[date] = None,
                      category: Optional[ExpenseCategory] = None,
                      limit: int = 100,
                      offset: int = 0) -> List[Expense]:
    """Get expenses of a user with optional date and category filtering"""
    query = db.query(Expense).filter(Expense.user_id == user_id)

    if start_date:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date:
        query = query.filter(Expense.expense_date <= end_date)
    if category:
        query = query.filter(Expense.category == category)

    # Newest first, paginated
    return query.order_by(Expense.expense_date.desc()).offset(offset).limit(limit).all()

def update_expense(db: Session, expense_id: str, expense_update: ExpenseUpdate) -> Expense:
    """
    Update an expense. When it moves to another month both budgets are reconciled.
    """
    update_data = expense_update.model_dump(exclude_unset=True)

    def work():
        expense = _get_expense(db, expense_id)
        previous = Period.of(expense.user_id, expense.expense_date)
        for key, value in update_data.items():
            if value is not None:
                setattr(expense, key, value)
        db.flush()
        on_expense_changed(db, expense, previous=previous)
        return expense

    return run_atomic(db, work, action=f"Updating expense {expense_id}")

def delete_expense(db: Session, expense_id: str) -> None:
    def work():
        expense = _get_expense(db, expense_id)
        db.delete(expense)
        db.flush()
        on_expense_changed(db, expense)

    run_atomic(db, work, action=f"Deleting expense {expense_id}")
