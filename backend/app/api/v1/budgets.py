from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from typing import List, Dict
from decimal import Decimal

from backend.app.database import get_db_session
from backend.app.models.models import ExpenseCategory
from backend.app.schemas.budgets import (
    AnnualBudgetTotal, BudgetPeriod, BudgetReplace, BudgetResponse, BudgetSave, CategoryAllocationUpdate
)
from backend.app.services.budget_service import (
    save_budget, update_budget, delete_budget, sync_budget,
    upsert_category, add_category, remove_category
)
from backend.app.services.budget_summary_service import (
    get_budget_by_id, list_budgets_for_user, list_budget_periods,
    get_budget_summary, annual_total, monthly_aggregate, current_month_summary, previous_month_summary
)

router = APIRouter()

@router.post("/", response_model=BudgetResponse)
def save_budget_endpoint(
    budget_data: BudgetSave,
    db: Session = Depends(get_db_session)
):
    """
    Create the budget of a month, or replace its categories if one exists.

    - Rejects a category listed twice
    - Remaining balances are computed from the user's expenses of that month
    """
    return save_budget(db, budget_data)

@router.get("/{budget_id}", response_model=BudgetResponse)
def get_budget_endpoint(budget_id: str, db: Session = Depends(get_db_session)):
    return get_budget_by_id(db, budget_id)

@router.put("/{budget_id}", response_model=BudgetResponse)
def update_budget_endpoint(
    budget_id: str,
    budget_data: BudgetReplace,
    db: Session = Depends(get_db_session)
):
    """
    Replace the categories of an existing budget
    """
    return update_budget(db, budget_id, budget_data)

@router.delete("/{budget_id}", response_model=Dict[str, bool])
def delete_budget_endpoint(budget_id: str, db: Session = Depends(get_db_session)):
    """
    Delete a budget. Expenses are not touched.
    """
    delete_budget(db, budget_id)
    return {"success": True}

@router.post("/{budget_id}/sync", response_model=BudgetResponse)
def sync_budget_endpoint(budget_id: str, db: Session = Depends(get_db_session)):
    """
    Recompute spent and remaining balances from the expense ledger
    """
    return sync_budget(db, budget_id)

# --- Per-user views ---

@router.get("/user/{user_id}", response_model=List[BudgetResponse])
def list_budgets_endpoint(
    user_id: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db_session)
):
    """
    List a user's budgets, most recent month first
    """
    return list_budgets_for_user(db, user_id, limit=limit, offset=offset)

@router.get("/user/{user_id}/periods", response_model=List[BudgetPeriod])
def list_periods_endpoint(user_id: str, db: Session = Depends(get_db_session)):
    return list_budget_periods(db, user_id)

@router.get("/user/{user_id}/summary/current", response_model=BudgetResponse)
def current_summary_endpoint(user_id: str, db: Session = Depends(get_db_session)):
    return current_month_summary(db, user_id)

@router.get("/user/{user_id}/summary/previous", response_model=BudgetResponse)
def previous_summary_endpoint(user_id: str, db: Session = Depends(get_db_session)):
    return previous_month_summary(db, user_id)

@router.get("/user/{user_id}/annual/{year}", response_model=AnnualBudgetTotal)
def annual_total_endpoint(
    user_id: str,
    year: int = Path(..., ge=2000),
    db: Session = Depends(get_db_session)
):
    return AnnualBudgetTotal(user_id=user_id, year=year, total=annual_total(db, user_id, year))

@router.get("/user/{user_id}/aggregate/{year}", response_model=Dict[int, Decimal])
def monthly_aggregate_endpoint(
    user_id: str,
    year: int = Path(..., ge=2000),
    db: Session = Depends(get_db_session)
):
    return monthly_aggregate(db, user_id, year)

@router.get("/user/{user_id}/{year}/{month}", response_model=BudgetResponse)
def get_budget_summary_endpoint(
    user_id: str,
    year: int = Path(..., ge=2000),
    month: int = Path(..., ge=1, le=12, description="Month (1-12)"),
    db: Session = Depends(get_db_session)
):
    return get_budget_summary(db, user_id, month, year)

# --- Categories ---

@router.post("/user/{user_id}/{year}/{month}/category", response_model=BudgetResponse)
def add_category_endpoint(
    user_id: str,
    allocation: CategoryAllocationUpdate,
    year: int = Path(..., ge=2000),
    month: int = Path(..., ge=1, le=12, description="Month (1-12)"),
    db: Session = Depends(get_db_session)
):
    """
    Add a category to the month's budget, creating the budget if needed.

    - Fails if the category is already allocated
    """
    return add_category(db, user_id, month, year, allocation.category, allocation.allocated)

@router.put("/user/{user_id}/{year}/{month}/category", response_model=BudgetResponse)
def upsert_category_endpoint(
    user_id: str,
    allocation: CategoryAllocationUpdate,
    year: int = Path(..., ge=2000),
    month: int = Path(..., ge=1, le=12, description="Month (1-12)"),
    db: Session = Depends(get_db_session)
):
    """
    Set a category's allocation, adding it (and the budget) if missing
    """
    return upsert_category(db, user_id, month, year, allocation.category, allocation.allocated)

@router.delete("/user/{user_id}/{year}/{month}/category", response_model=BudgetResponse)
def remove_category_endpoint(
    user_id: str,
    year: int = Path(..., ge=2000),
    month: int = Path(..., ge=1, le=12, description="Month (1-12)"),
    category: ExpenseCategory = Query(..., description="Category to remove"),
    db: Session = Depends(get_db_session)
):
    return remove_category(db, user_id, month, year, category)
