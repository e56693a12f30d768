from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, validator


class RestaurantCreate(BaseModel):
    organization_id: Optional[int] = None  # defaults to the caller's organization
    name: str = Field(..., min_length=1, max_length=255)
    address: str = ""
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    logo_url: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = Field(None, max_length=8)
    tax_rate: Optional[float] = Field(None, ge=0, le=1)


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    logo_url: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = Field(None, max_length=8)
    tax_rate: Optional[float] = Field(None, ge=0, le=1)
    is_active: Optional[bool] = None

    @validator('name', 'address', 'is_active')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class RestaurantOut(BaseModel):
    id: int
    organization_id: int
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = None
    tax_rate: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
