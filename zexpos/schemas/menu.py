from typing import List, Optional
from pydantic import BaseModel, Field, validator
from datetime import datetime


class CategoryCreate(BaseModel):
    restaurant_id: int
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    sort_order: int = Field(default=0, ge=0)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @validator('name', 'sort_order', 'is_active')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class CategoryOut(BaseModel):
    id: int
    restaurant_id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    restaurant_id: int
    category_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=1024)
    prep_time: int = Field(default=15, ge=0)
    calories: Optional[int] = Field(None, ge=0)
    allergens: Optional[List[str]] = None
    dietary_info: Optional[List[str]] = None
    is_available: bool = True
    is_featured: bool = False
    sort_order: int = Field(default=0, ge=0)


class MenuItemUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=1024)
    prep_time: Optional[int] = Field(None, ge=0)
    calories: Optional[int] = Field(None, ge=0)
    allergens: Optional[List[str]] = None
    dietary_info: Optional[List[str]] = None
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @validator('name', 'price', 'prep_time', 'is_available', 'is_featured', 'sort_order')
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class MenuItemOut(BaseModel):
    id: int
    restaurant_id: int
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price: float
    cost_price: Optional[float] = None
    image_url: Optional[str] = None
    prep_time: int
    calories: Optional[int] = None
    allergens: Optional[List[str]] = None
    dietary_info: Optional[List[str]] = None
    is_available: bool
    is_featured: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
