from datetime import datetime
from typing import Any
from sqlalchemy import Integer, String, DateTime, Boolean, ForeignKey, Numeric, Text, UniqueConstraint, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

from zexpos.db.base import Base


# helpers
now = datetime.utcnow


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    billing_address: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    subscription_plan: Mapped[str] = mapped_column(String(16), default="basic")  # basic|premium|enterprise
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurants: Mapped[list["Restaurant"]] = relationship("Restaurant", back_populates="organization", cascade="all, delete-orphan")
    settings: Mapped[list["OrganizationSetting"]] = relationship("OrganizationSetting", back_populates="organization", cascade="all, delete-orphan")
    staff: Mapped[list["Staff"]] = relationship("Staff", back_populates="organization")


class OrganizationSetting(Base):
    __tablename__ = "organization_settings"
    __table_args__ = (
        UniqueConstraint("organization_id", "setting_key", name="uq_organization_settings_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organizations.id", ondelete="CASCADE"))
    setting_key: Mapped[str] = mapped_column(String(128))
    setting_value: Mapped[Any] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    organization: Mapped[Organization] = relationship("Organization", back_populates="settings")


class Restaurant(Base):
    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organizations.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(255))
    address: Mapped[str] = mapped_column(String(1024), default="")
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    tax_rate: Mapped[float | None] = mapped_column(Numeric(5, 4), nullable=True)  # fraction, 0.10 == 10%
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    organization: Mapped[Organization] = relationship("Organization", back_populates="restaurants")
    staff: Mapped[list["Staff"]] = relationship("Staff", back_populates="restaurant")
    categories: Mapped[list["MenuCategory"]] = relationship("MenuCategory", back_populates="restaurant", cascade="all, delete-orphan")
    menu_items: Mapped[list["MenuItem"]] = relationship("MenuItem", back_populates="restaurant", cascade="all, delete-orphan")
    tables: Mapped[list["RestaurantTable"]] = relationship("RestaurantTable", back_populates="restaurant", cascade="all, delete-orphan")
    orders: Mapped[list["Order"]] = relationship("Order", back_populates="restaurant", cascade="all, delete-orphan")
    receipt_templates: Mapped[list["ReceiptTemplate"]] = relationship("ReceiptTemplate", back_populates="restaurant", cascade="all, delete-orphan")


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    organization_id: Mapped[int | None] = mapped_column(ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True)
    restaurant_id: Mapped[int | None] = mapped_column(ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(16), default="server")  # super_admin|org_admin|manager|server|kitchen|cashier
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    hire_date: Mapped[datetime] = mapped_column(DateTime, default=now)
    hourly_rate: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    permissions: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    organization: Mapped[Organization | None] = relationship("Organization", back_populates="staff")
    restaurant: Mapped[Restaurant | None] = relationship("Restaurant", back_populates="staff")


class MenuCategory(Base):
    __tablename__ = "menu_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurant: Mapped[Restaurant] = relationship("Restaurant", back_populates="categories")
    items: Mapped[list["MenuItem"]] = relationship("MenuItem", back_populates="category")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    category_id: Mapped[int | None] = mapped_column(ForeignKey("menu_categories.id", ondelete="SET NULL"), nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2))
    cost_price: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    prep_time: Mapped[int] = mapped_column(Integer, default=15)  # minutes
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allergens: Mapped[list | None] = mapped_column(JSON, nullable=True)
    dietary_info: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurant: Mapped[Restaurant] = relationship("Restaurant", back_populates="menu_items")
    category: Mapped[MenuCategory | None] = relationship("MenuCategory", back_populates="items")
    order_items: Mapped[list["OrderItem"]] = relationship("OrderItem", back_populates="menu_item")


class RestaurantTable(Base):
    __tablename__ = "restaurant_tables"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="uq_restaurant_tables_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    table_number: Mapped[int] = mapped_column(Integer)
    table_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    seats: Mapped[int] = mapped_column(Integer, default=4)
    status: Mapped[str] = mapped_column(String(16), default="available")  # available|occupied|reserved|cleaning
    current_order_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # plain column, orders already point here
    qr_code_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurant: Mapped[Restaurant] = relationship("Restaurant", back_populates="tables")
    orders: Mapped[list["Order"]] = relationship("Order", back_populates="table")


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "order_number", name="uq_orders_restaurant_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    table_id: Mapped[int | None] = mapped_column(ForeignKey("restaurant_tables.id", ondelete="SET NULL"), nullable=True)
    order_number: Mapped[int] = mapped_column(Integer)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending")  # pending|confirmed|completed|cancelled
    order_type: Mapped[str] = mapped_column(String(16), default="dine_in")  # dine_in|takeaway|delivery
    subtotal: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    tax_amount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    discount_amount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    total_amount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    payment_status: Mapped[str] = mapped_column(String(16), default="pending")  # pending|paid|refunded
    payment_method: Mapped[str | None] = mapped_column(String(16), nullable=True)  # cash|card|digital_wallet
    server_id: Mapped[int | None] = mapped_column(ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    kitchen_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_prep_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurant: Mapped[Restaurant] = relationship("Restaurant", back_populates="orders")
    table: Mapped[RestaurantTable | None] = relationship("RestaurantTable", back_populates="orders")
    server: Mapped[Staff | None] = relationship("Staff")
    items: Mapped[list["OrderItem"]] = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")
    receipts: Mapped[list["Receipt"]] = relationship("Receipt", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"))
    menu_item_id: Mapped[int | None] = mapped_column(ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    name_snapshot: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[float] = mapped_column(Numeric(10, 2))
    total_price: Mapped[float] = mapped_column(Numeric(10, 2))
    special_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending")  # pending|preparing|ready|served
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    order: Mapped[Order] = relationship("Order", back_populates="items")
    menu_item: Mapped[MenuItem | None] = relationship("MenuItem", back_populates="order_items")


class Receipt(Base):
    __tablename__ = "receipts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"))
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    receipt_number: Mapped[str] = mapped_column(String(32), unique=True)
    generated_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    generated_by: Mapped[int | None] = mapped_column(ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    receipt_type: Mapped[str] = mapped_column(String(16), default="payment")  # payment|refund|void
    receipt_data: Mapped[dict] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    order: Mapped[Order] = relationship("Order", back_populates="receipts")


class ReceiptTemplate(Base):
    __tablename__ = "receipt_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(255))
    template_type: Mapped[str] = mapped_column(String(16), default="thermal")  # thermal|a4|custom
    width: Mapped[int] = mapped_column(Integer, default=80)  # mm
    font_size: Mapped[int] = mapped_column(Integer, default=10)
    header_config: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    footer_config: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    restaurant: Mapped[Restaurant] = relationship("Restaurant", back_populates="receipt_templates")
