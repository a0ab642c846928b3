"""
Pydantic models for admin authentication.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginRequest(BaseModel):
    """Body of POST /api/admin/login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=1, description="Admin username")
    password: str = Field(..., min_length=1, description="Admin password")


class AdminUser(BaseModel):
    """Admin identity carried by the token."""

    username: str
    role: str = "admin"


class AdminTokenResponse(BaseModel):
    """Response of the login and refresh endpoints."""

    success: bool = True
    message: str
    token: str
    user: Optional[AdminUser] = None
