from fastapi import APIRouter
from backend.app.api.v1 import users, budgets, expenses

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
