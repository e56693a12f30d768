from typing import List, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, validator


Role = Literal["super_admin", "org_admin", "manager", "server", "kitchen", "cashier"]


class StaffCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: Role = "server"
    organization_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    phone: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    permissions: Optional[List[str]] = None


class StaffUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[Role] = None
    restaurant_id: Optional[int] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    permissions: Optional[List[str]] = None

    @validator('full_name', 'password', 'role', 'is_active')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class StaffProfileUpdate(BaseModel):
    """what any staff member may change on their own account"""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=32)

    @validator('full_name', 'email')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class StaffOut(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    organization_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    phone: Optional[str] = None
    is_active: bool
    hire_date: datetime
    hourly_rate: Optional[float] = None
    permissions: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
