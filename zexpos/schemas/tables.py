from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field, validator


TableStatus = Literal["available", "occupied", "reserved", "cleaning"]


class TableCreate(BaseModel):
    restaurant_id: int
    table_number: int = Field(..., ge=1)
    table_name: Optional[str] = Field(None, max_length=64)
    seats: int = Field(default=4, ge=1)
    status: TableStatus = "available"
    qr_code_url: Optional[str] = None


class TableUpdate(BaseModel):
    table_number: Optional[int] = Field(None, ge=1)
    table_name: Optional[str] = Field(None, max_length=64)
    seats: Optional[int] = Field(None, ge=1)
    status: Optional[TableStatus] = None
    qr_code_url: Optional[str] = None

    @validator('table_number', 'seats', 'status')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class TableStatusUpdate(BaseModel):
    status: TableStatus


class TableOut(BaseModel):
    id: int
    restaurant_id: int
    table_number: int
    table_name: Optional[str] = None
    seats: int
    status: str
    current_order_id: Optional[int] = None
    qr_code_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
