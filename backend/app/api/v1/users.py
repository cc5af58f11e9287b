from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.schemas.users import UserCreate, UserResponse
from backend.app.services.user_service import create_user, get_user_by_id
from backend.app.database import get_db_session

router = APIRouter()

@router.post("/", response_model=UserResponse)
async def create_user_route(user_data: UserCreate, db: Session = Depends(get_db_session)):
    """
    Create a new user account.

    - Checks if user with this email already exists
    - Returns user object with user_id
    """
    return create_user(db, user_data)

@router.get("/{user_id}", response_model=UserResponse)
async def get_user_route(user_id: str, db: Session = Depends(get_db_session)):
    """
    Get a specific user by ID.

    - Returns 404 if user not found
    """
    return get_user_by_id(db, user_id)
