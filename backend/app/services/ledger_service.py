"""Read side of the expense ledger, as seen by budget reconciliation."""
from decimal import Decimal
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from backend.app.models.models import Expense, ExpenseCategory
from backend.app.periods import Period
from backend.app.services.reconciliation_service import aggregate_spending

def fetch_postings(db: Session, period: Period) -> List[Tuple[ExpenseCategory, Decimal]]:
    """All (category, amount) postings of a user within one calendar month"""
    start, end = period.bounds()
    rows = db.query(Expense.category, Expense.amount).filter(
        Expense.user_id == period.user_id,
        Expense.expense_date >= start,
        Expense.expense_date < end
    ).all()
    return [(row.category, row.amount) for row in rows]

def sum_spending_by_category(db: Session, period: Period) -> Dict[ExpenseCategory, Decimal]:
    return aggregate_spending(fetch_postings(db, period))
