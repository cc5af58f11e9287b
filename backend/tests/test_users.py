import pytest
from fastapi import status, HTTPException
from uuid import uuid4

from backend.app.exceptions import UserNotFoundError
from backend.app.schemas.users import UserCreate
from backend.app.services.user_service import create_user, get_user_by_id

# Service layer tests
def test_create_user_service(db_session):
    """Test user creation at the service layer"""
    user = create_user(db_session, UserCreate(email="newuser@example.com", display_name="New User"))

    assert user.id is not None
    assert user.email == "newuser@example.com"
    assert user.display_name == "New User"

def test_create_duplicate_user_service(db_session, test_user):
    """Test that creating a user with an existing email raises an error"""
    with pytest.raises(HTTPException) as excinfo:
        create_user(db_session, UserCreate(email=test_user.email, display_name="Duplicate User"))
    assert "Email already registered" in str(excinfo.value.detail)

def test_get_nonexistent_user_by_id_service(db_session):
    random_id = str(uuid4())

    with pytest.raises(UserNotFoundError) as excinfo:
        get_user_by_id(db_session, random_id)

    assert excinfo.value.status_code == 404
    assert f"User with id {random_id} not found" in excinfo.value.detail

# API layer tests
def test_create_and_get_user_api(client):
    response = client.post(
        "/api/v1/users/",
        json={"email": "apiuser@example.com", "display_name": "API User"}
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["email"] == "apiuser@example.com"

    response = client.get(f"/api/v1/users/{data['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["display_name"] == "API User"

def test_get_unknown_user_api(client):
    response = client.get(f"/api/v1/users/{uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
