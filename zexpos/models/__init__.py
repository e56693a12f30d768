from .models import (
    Organization,
    OrganizationSetting,
    Restaurant,
    Staff,
    MenuCategory,
    MenuItem,
    RestaurantTable,
    Order,
    OrderItem,
    Receipt,
    ReceiptTemplate,
)

__all__ = [
    "Organization",
    "OrganizationSetting",
    "Restaurant",
    "Staff",
    "MenuCategory",
    "MenuItem",
    "RestaurantTable",
    "Order",
    "OrderItem",
    "Receipt",
    "ReceiptTemplate",
]
