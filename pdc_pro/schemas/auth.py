from pydantic import BaseModel, Field, EmailStr
from datetime import datetime


class RegisterSchema(BaseModel):
    """Sign-up form"""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Plaintext, hashed before storage")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Inspector",
                "email": "jane@example.com",
                "password": "secret123"
            }
        }


class LoginSchema(BaseModel):
    email: str
    password: str


class UserSchema(BaseModel):
    """Public user profile (never includes the password hash)"""
    id: str
    name: str
    email: str
    createdAt: datetime


class AuthResponseSchema(BaseModel):
    token: str
    user: UserSchema
