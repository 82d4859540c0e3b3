# app/auth/routes/login_routes.py
"""
POST /login - verify email + password against the stored hash.

Success is a bare 200 with a message; no session or token is created.
"""

from fastapi import APIRouter, Depends, status

from app.auth.schemas.common_schemas import ErrorOut, MessageOut
from app.auth.schemas.login_schemas import LoginRequest
from app.auth.services.auth_service import AuthService
from app.dependencies.services import get_auth_service

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=MessageOut,
    status_code=status.HTTP_200_OK,
    summary="Check user credentials",
    responses={
        401: {"model": ErrorOut},
        404: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
def login_endpoint(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    service.login(payload.email, payload.password)
    return MessageOut(message="Login successful")
