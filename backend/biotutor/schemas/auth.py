"""
Authentication schemas: registration, login and session payloads.
"""

from typing import Optional
from pydantic import BaseModel


class UserRegister(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public account fields. Never carries the password hash."""
    id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[str] = None


class RegisterResponse(BaseModel):
    user: UserResponse
    message: str = "User created successfully"


class LoginResponse(BaseModel):
    ok: bool
    error: Optional[str] = None


class SessionUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
