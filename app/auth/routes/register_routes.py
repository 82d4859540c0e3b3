# app/auth/routes/register_routes.py
from fastapi import APIRouter, Depends, status

from app.auth.schemas.common_schemas import ErrorOut, MessageOut
from app.auth.schemas.register_schemas import RegisterRequest
from app.auth.services.auth_service import AuthService
from app.dependencies.services import get_auth_service

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
    responses={400: {"model": ErrorOut}},
)
def register_endpoint(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    service.register(payload.email, payload.password)
    return MessageOut(message="User registered successfully")
