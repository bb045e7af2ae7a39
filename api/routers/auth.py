# api/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.deps.auth import User, get_current_user
from app.models.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    MessageResponse,
    PublicUser,
    SignupRequest,
)
from services.account_service import AccountService, get_account_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    request: SignupRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Create an account and return a bearer token for it."""
    user, token = await accounts.signup(request.name, request.email, request.password)
    return AuthResponse(message="User created successfully", user=user, token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    user, token = await accounts.login(request.email, request.password)
    return AuthResponse(message="Login successful", user=user, token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """
    Tokens are stateless; the client drops its copy.
    """
    return MessageResponse(message="Logout successful.")


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    account = await accounts.get_account(user.user_id)
    return MeResponse(user=PublicUser.from_account(account))
