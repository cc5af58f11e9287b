"""Read-only views over budgets. Nothing here recomputes balances."""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from backend.app.exceptions import BudgetNotFoundError
from backend.app.models.models import Budget
from backend.app.periods import Period

def get_budget_by_id(db: Session, budget_id: str) -> Budget:
    budget = db.query(Budget).filter(Budget.id == budget_id).first()
    if not budget:
        raise BudgetNotFoundError(f"Budget not found for id: {budget_id}")
    return budget

def get_budget_for_period(db: Session, user_id: str, month: int, year: int) -> Budget:
    budget = db.query(Budget).filter(
        Budget.user_id == user_id,
        Budget.year == year,
        Budget.month == month
    ).first()
    if not budget:
        raise BudgetNotFoundError(f"No budget found for user {user_id} ({year}-{month:02d})")
    return budget

def list_budgets_for_user(db: Session, user_id: str, limit: int = 100, offset: int = 0) -> List[Budget]:
    """Most recent period first, paginated"""
    return db.query(Budget).filter(Budget.user_id == user_id).order_by(
        Budget.year.desc(), Budget.month.desc()
    ).offset(offset).limit(limit).all()

def list_budget_periods(db: Session, user_id: str) -> List[Dict[str, int]]:
    rows = db.query(Budget.month, Budget.year).filter(Budget.user_id == user_id).all()
    return [{"month": row.month, "year": row.year} for row in rows]

def annual_total(db: Session, user_id: str, year: int) -> Decimal:
    """Sum of total_budget over a user's budgets in one year, 0 when there are none"""
    rows = db.query(Budget.total_budget).filter(Budget.user_id == user_id, Budget.year == year).all()
    return sum((row.total_budget for row in rows), Decimal("0"))

def monthly_aggregate(db: Session, user_id: str, year: int) -> Dict[int, Decimal]:
    """total_budget per month of one year. Months without a budget are left out."""
    rows = db.query(Budget.month, Budget.total_budget).filter(
        Budget.user_id == user_id,
        Budget.year == year
    ).order_by(Budget.month.asc()).all()

    aggregate: Dict[int, Decimal] = {}
    for row in rows:
        aggregate[row.month] = aggregate.get(row.month, Decimal("0")) + row.total_budget
    return aggregate

def get_budget_summary(db: Session, user_id: str, month: int, year: int) -> Budget:
    """Budget of one month with its reconciled balances, as last written"""
    period = Period(user_id, month, year)
    return get_budget_for_period(db, period.user_id, period.month, period.year)

def current_month_summary(db: Session, user_id: str, today: Optional[date] = None) -> Budget:
    period = Period.current(user_id, today)
    return get_budget_summary(db, user_id, period.month, period.year)

def previous_month_summary(db: Session, user_id: str, today: Optional[date] = None) -> Budget:
    period = Period.current(user_id, today).previous()
    return get_budget_summary(db, user_id, period.month, period.year)
