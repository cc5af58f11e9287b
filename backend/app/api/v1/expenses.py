from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
from datetime import date

from backend.app.database import get_db_session
from backend.app.models.models import ExpenseCategory
from backend.app.schemas.expenses import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from backend.app.services.expense_service import (
    create_expense, get_expense, get_user_expenses, update_expense, delete_expense
)

router = APIRouter()

@router.post("/", response_model=ExpenseResponse)
def create_expense_endpoint(expense_data: ExpenseCreate, db: Session = Depends(get_db_session)):
    """
    Record an expense.

    - Reconciles the budget of the expense's month when one exists
    """
    return create_expense(db, expense_data)

@router.get("/", response_model=List[ExpenseResponse])
def get_expenses_endpoint(
    user_id: str = Query(..., description="ID of the user"),
    start_date: Optional[date] = Query(None, description="Filter expenses on or after this date"),
    end_date: Optional[date] = Query(None, description="Filter expenses on or before this date"),
    category: Optional[ExpenseCategory] = Query(None, description="Filter by category"),
    limit: int = Query(100, le=500, description="Maximum number of expenses to return"),
    offset: int = Query(0, ge=0, description="Number of expenses to skip"),
    db: Session = Depends(get_db_session)
):
    """
    Get a user's expenses, newest first
    """
    return get_user_expenses(db, user_id, start_date, end_date, category, limit, offset)

@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense_endpoint(expense_id: str, db: Session = Depends(get_db_session)):
    return get_expense(db, expense_id)

@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense_endpoint(
    expense_id: str,
    expense_update: ExpenseUpdate,
    db: Session = Depends(get_db_session)
):
    """
    Update an expense and reconcile the affected budgets
    """
    return update_expense(db, expense_id, expense_update)

@router.delete("/{expense_id}", response_model=Dict[str, bool])
def delete_expense_endpoint(expense_id: str, db: Session = Depends(get_db_session)):
    delete_expense(db, expense_id)
    return {"success": True}
