from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class StaffBrief(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    organization_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: StaffBrief


class SetupStatus(BaseModel):
    has_super_admin: bool
    needs_setup: bool


# plain str so a bad address comes back as 400, not 422
class SetupRequest(BaseModel):
    email: str
    password: str
    full_name: str = Field(..., min_length=1, max_length=255)
