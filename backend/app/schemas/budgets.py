from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.models import ExpenseCategory

class BudgetCategoryItem(BaseModel):
    category: ExpenseCategory
    allocated: Decimal = Field(..., gt=0, max_digits=19, decimal_places=4)

class BudgetReplace(BaseModel):
    categories: List[BudgetCategoryItem] = Field(default_factory=list)

class BudgetSave(BudgetReplace):
    user_id: str
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)

class CategoryAllocationUpdate(BaseModel):
    category: ExpenseCategory
    allocated: Decimal = Field(..., gt=0, max_digits=19, decimal_places=4)

class BudgetCategoryResponse(BaseModel):
    id: str
    category: ExpenseCategory
    allocated: Decimal
    spent_amount: Decimal
    remaining: Decimal

    model_config = ConfigDict(from_attributes=True)

class BudgetResponse(BaseModel):
    id: str
    user_id: str
    month: int
    year: int
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    categories: List[BudgetCategoryResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class BudgetPeriod(BaseModel):
    month: int
    year: int

class AnnualBudgetTotal(BaseModel):
    user_id: str
    year: int
    total: Decimal
