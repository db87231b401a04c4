"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- simple health check with record counts
"""

from fastapi import APIRouter, Depends

from carpool.api.dependencies import get_account_service, get_booking_engine
from carpool.api.schemas import HealthResponse
from carpool.domain.accounts import AccountService
from carpool.domain.booking import BookingEngine

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health(
    engine: BookingEngine = Depends(get_booking_engine),
    accounts: AccountService = Depends(get_account_service),
):
    return HealthResponse(
        users=len(accounts.list_users()),
        trips=len(engine.list_trips()),
    )
