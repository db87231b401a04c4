"""
User endpoints
==============

GET    /api/v1/users           -- list users
GET    /api/v1/users/{user_id} -- get one user
POST   /api/v1/users/{user_id} -- register a user (202 Accepted)
PUT    /api/v1/users/{user_id} -- replace a user's profile
DELETE /api/v1/users/{user_id} -- delete an account at least one year old
"""

from fastapi import APIRouter, Depends, Request

from carpool.api.dependencies import get_account_service
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    ErrorResponse,
    MessageResponse,
    UserRequest,
    UserResponse,
)
from carpool.config import settings
from carpool.domain.accounts import AccountService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[UserResponse], summary="List all users")
@limiter.limit(settings.rate_limit)
def list_users(
    request: Request,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.list_users()


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
@limiter.limit(settings.rate_limit)
def get_user(
    request: Request,
    user_id: str,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get_user(user_id)


@router.post(
    "/{user_id}",
    status_code=202,
    response_model=UserResponse,
    summary="Register a user",
)
@limiter.limit(settings.rate_limit)
def create_user(
    request: Request,
    user_id: str,
    body: UserRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.create_or_update_user(True, user_id, body.to_profile())


@router.put(
    "/{user_id}",
    status_code=202,
    response_model=UserResponse,
    summary="Update a user",
)
@limiter.limit(settings.rate_limit)
def update_user(
    request: Request,
    user_id: str,
    body: UserRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.create_or_update_user(False, user_id, body.to_profile())


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user")
@limiter.limit(settings.rate_limit)
def delete_user(
    request: Request,
    user_id: str,
    accounts: AccountService = Depends(get_account_service),
):
    accounts.delete_user(user_id)
    return MessageResponse(detail=f"User {user_id} deleted")
