"""User endpoints."""

from fastapi import APIRouter, Depends

from fundledger.api.deps import get_user_service
from fundledger.api.schemas import CashUpdateRequest, UserCreateRequest, UserResponse
from fundledger.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    data: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a new user."""
    user = service.create_user(
        username=data.username,
        available_cash=data.available_cash,
        is_ai_agent=data.is_ai_agent,
    )
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Get user by ID."""
    return UserResponse.model_validate(service.get_user(user_id))


@router.put("/{user_id}/cash", response_model=UserResponse)
def set_available_cash(
    user_id: str,
    data: CashUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Set the cash ceiling for automated buy orders."""
    return UserResponse.model_validate(service.set_available_cash(user_id, data.available_cash))
