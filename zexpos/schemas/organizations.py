from typing import Any, Dict, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, validator


Plan = Literal["basic", "premium", "enterprise"]


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    billing_address: Optional[str] = None
    subscription_plan: Plan = "basic"


class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    billing_address: Optional[str] = None
    subscription_plan: Optional[Plan] = None
    is_active: Optional[bool] = None

    @validator('name', 'subscription_plan', 'is_active')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class OrganizationOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    billing_address: Optional[str] = None
    subscription_plan: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SettingUpsert(BaseModel):
    """either a single key/value or a batch under `settings`"""
    setting_key: Optional[str] = Field(None, min_length=1, max_length=128)
    setting_value: Any = None
    settings: Optional[Dict[str, Any]] = None
