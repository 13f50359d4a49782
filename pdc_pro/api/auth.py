"""
Auth API Routes

Endpoints for account operations:
- POST /register - Create an account and return a token
- POST /login - Exchange credentials for a token
- GET /me - Current user profile
"""
from fastapi import APIRouter, Depends, HTTPException, status

from pdc_pro.core.dependencies import get_current_user
from pdc_pro.core.security import create_access_token
from pdc_pro.models.user import User
from pdc_pro.repositories.user_repository import UserRepository
from pdc_pro.schemas.auth import (
    AuthResponseSchema,
    LoginSchema,
    RegisterSchema,
    UserSchema
)

router = APIRouter()


def _user_to_response(user: User) -> UserSchema:
    return UserSchema(
        id=str(user.id),
        name=user.name,
        email=user.email,
        createdAt=user.created_at
    )


def _auth_response(user: User) -> AuthResponseSchema:
    token = create_access_token({"sub": str(user.id)})
    return AuthResponseSchema(token=token, user=_user_to_response(user))


@router.post(
    "/register",
    response_model=AuthResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an inspector account. Emails are unique, case-insensitively."
)
async def register(data: RegisterSchema):
    user = await UserRepository().register(data.name, data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )
    return _auth_response(user)


@router.post(
    "/login",
    response_model=AuthResponseSchema,
    summary="Login",
    description="Verify email and password and issue a bearer token."
)
async def login(data: LoginSchema):
    user = await UserRepository().verify(data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )
    return _auth_response(user)


@router.get(
    "/me",
    response_model=UserSchema,
    summary="Current user"
)
async def me(current_user: User = Depends(get_current_user)):
    return _user_to_response(current_user)
