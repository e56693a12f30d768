from typing import Any, Dict, List, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field, validator

from zexpos.services.orders.lifecycle import ORDER_STATUSES


OrderType = Literal["dine_in", "takeaway", "delivery"]
ItemStatus = Literal["pending", "preparing", "ready", "served"]


class OrderItemIn(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    special_instructions: Optional[str] = None


class OrderCreate(BaseModel):
    restaurant_id: int
    table_id: Optional[int] = None
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=32)
    order_type: OrderType = "dine_in"
    kitchen_notes: Optional[str] = None
    discount_amount: float = Field(default=0, ge=0)
    items: List[OrderItemIn] = Field(..., min_length=1)


class OrderUpdate(BaseModel):
    """edit an open order; `items` replaces every line when given"""
    table_id: Optional[int] = None
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=32)
    order_type: Optional[OrderType] = None
    kitchen_notes: Optional[str] = None
    discount_amount: Optional[float] = Field(None, ge=0)
    items: Optional[List[OrderItemIn]] = None

    @validator('order_type')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class OrderStatusUpdate(BaseModel):
    status: str

    @validator('status')
    def validate_status(cls, v):
        if v not in ORDER_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(ORDER_STATUSES)}")
        return v


class OrderAction(BaseModel):
    action: Literal["print_kitchen_ticket", "print_additional_items", "complete"]
    # only used by print_additional_items
    items: Optional[List[OrderItemIn]] = None


class QuoteRequest(BaseModel):
    restaurant_id: int
    items: List[OrderItemIn] = []
    discount_amount: float = Field(default=0, ge=0)


class QuoteLine(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    unit_price: float
    total_price: float
    special_instructions: Optional[str] = None


class QuoteOut(BaseModel):
    tax_rate: float
    lines: List[QuoteLine]
    subtotal: float
    tax_amount: float
    discount_amount: float
    total_amount: float


class OrderItemCreate(BaseModel):
    order_id: int
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    special_instructions: Optional[str] = None


class OrderItemUpdate(BaseModel):
    """quantity 0 drops the line"""
    quantity: Optional[int] = Field(None, ge=0)
    special_instructions: Optional[str] = None
    status: Optional[ItemStatus] = None


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    menu_item_id: Optional[int] = None
    name_snapshot: str
    quantity: int
    unit_price: float
    total_price: float
    special_instructions: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    restaurant_id: int
    table_id: Optional[int] = None
    order_number: int
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    status: str
    order_type: str
    subtotal: float
    tax_amount: float
    discount_amount: float
    total_amount: float
    payment_status: str
    payment_method: Optional[str] = None
    server_id: Optional[int] = None
    kitchen_notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]

    class Config:
        from_attributes = True


class OrderWithTicket(BaseModel):
    order: OrderOut
    ticket: Optional[Dict[str, Any]] = None
