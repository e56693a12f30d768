from typing import Any, Dict, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field, validator


class ReceiptCreate(BaseModel):
    order_id: int
    payment_method: Literal["cash", "card", "digital_wallet"]
    amount_tendered: Optional[float] = Field(None, ge=0)
    payment_reference: Optional[str] = Field(None, max_length=255)


class ReceiptOut(BaseModel):
    id: int
    order_id: int
    restaurant_id: int
    receipt_number: str
    generated_at: datetime
    generated_by: Optional[int] = None
    receipt_type: str
    receipt_data: Dict[str, Any]

    class Config:
        from_attributes = True


TemplateType = Literal["thermal", "a4", "custom"]


class ReceiptTemplateCreate(BaseModel):
    restaurant_id: int
    name: str = Field(..., min_length=1, max_length=255)
    template_type: TemplateType = "thermal"
    width: int = Field(default=80, ge=20, le=300)
    font_size: int = Field(default=10, ge=6, le=32)
    header_config: Optional[Dict[str, Any]] = None
    footer_config: Optional[Dict[str, Any]] = None
    is_default: bool = False


class ReceiptTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    template_type: Optional[TemplateType] = None
    width: Optional[int] = Field(None, ge=20, le=300)
    font_size: Optional[int] = Field(None, ge=6, le=32)
    header_config: Optional[Dict[str, Any]] = None
    footer_config: Optional[Dict[str, Any]] = None
    is_default: Optional[bool] = None

    @validator('name', 'template_type', 'width', 'font_size', 'is_default')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class ReceiptTemplateOut(BaseModel):
    id: int
    restaurant_id: int
    name: str
    template_type: str
    width: int
    font_size: int
    header_config: Optional[Dict[str, Any]] = None
    footer_config: Optional[Dict[str, Any]] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
