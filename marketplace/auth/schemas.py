from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class RegisterRequest(BaseModel):
    """POST /auth/register — customer self-registration."""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class VendorRegisterRequest(RegisterRequest):
    """POST /auth/register-vendor"""
    business_name: str = Field(..., min_length=2, max_length=150)
    phone_number: str = Field(..., min_length=7, max_length=20)
    address: Optional[str] = Field(None, max_length=250)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)


class LoginRequest(BaseModel):
    """POST /auth/login"""
    email: EmailStr
    password: str


class TokenRequest(BaseModel):
    """Body for /auth/logout and /auth/refresh; the cookie is used when absent."""
    refresh_token: Optional[str] = None
