from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, date
from decimal import Decimal

from backend.app.models.models import ExpenseCategory

class ExpenseCreate(BaseModel):
    user_id: str
    category: ExpenseCategory
    amount: Decimal = Field(..., gt=0, max_digits=19, decimal_places=4)
    expense_date: date
    description: Optional[str] = Field(None, max_length=500)

class ExpenseUpdate(BaseModel):
    category: Optional[ExpenseCategory] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=19, decimal_places=4)
    expense_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=500)

class ExpenseResponse(BaseModel):
    id: str
    user_id: str
    category: ExpenseCategory
    amount: Decimal
    expense_date: date
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
