from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import get_current_user, require_manager, ensure_restaurant_access, is_manager
from zexpos.schemas.menu import CategoryOut, CategoryCreate, CategoryUpdate, MenuItemOut, MenuItemCreate, MenuItemUpdate

router = APIRouter(prefix="/menu", tags=["menu"])


def _check_category(db: Session, category_id: Optional[int], restaurant_id: int) -> None:
    if category_id is None:
        return
    category = db.get(models.MenuCategory, category_id)
    if not category or category.restaurant_id != restaurant_id:
        raise HTTPException(status_code=400, detail="Category does not belong to this restaurant")


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(
    restaurant_id: int,
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    q = db.query(models.MenuCategory).filter(models.MenuCategory.restaurant_id == restaurant_id)
    if active is not None:
        q = q.filter(models.MenuCategory.is_active.is_(active))
    return q.order_by(models.MenuCategory.sort_order.asc(), models.MenuCategory.name.asc()).all()


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    """create a new category"""
    ensure_restaurant_access(db, user, payload.restaurant_id)
    existing = db.query(models.MenuCategory).filter(
        models.MenuCategory.restaurant_id == payload.restaurant_id,
        models.MenuCategory.name == payload.name,
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Category with this name already exists")

    category = models.MenuCategory(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.put("/categories/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    """update a category"""
    category = db.get(models.MenuCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    ensure_restaurant_access(db, user, category.restaurant_id)

    # check for duplicate name if name is being changed
    if payload.name and payload.name != category.name:
        existing = db.query(models.MenuCategory).filter(
            models.MenuCategory.restaurant_id == category.restaurant_id,
            models.MenuCategory.name == payload.name,
            models.MenuCategory.id != category_id,
        ).first()
        if existing:
            raise HTTPException(status_code=409, detail="Category with this name already exists")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(category, field, value)

    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    """delete a category; its items become uncategorized"""
    category = db.get(models.MenuCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    ensure_restaurant_access(db, user, category.restaurant_id)

    db.delete(category)
    db.commit()
    return {"message": "Category deleted successfully"}


@router.get("/items", response_model=List[MenuItemOut])
def list_items(
    restaurant_id: int,
    category_id: Optional[int] = None,
    available: Optional[bool] = None,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    q = db.query(models.MenuItem).filter(models.MenuItem.restaurant_id == restaurant_id)
    if category_id is not None:
        q = q.filter(models.MenuItem.category_id == category_id)
    if available is not None:
        q = q.filter(models.MenuItem.is_available.is_(available))
    return q.order_by(models.MenuItem.sort_order.asc(), models.MenuItem.name.asc()).all()


@router.get("/items/{item_id}", response_model=MenuItemOut)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    item = db.get(models.MenuItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    ensure_restaurant_access(db, user, item.restaurant_id)
    return item


@router.post("/items", response_model=MenuItemOut, status_code=201)
def create_menu_item(
    payload: MenuItemCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    """create a new menu item"""
    ensure_restaurant_access(db, user, payload.restaurant_id)
    _check_category(db, payload.category_id, payload.restaurant_id)

    data = payload.model_dump()
    data["price"] = Decimal(str(payload.price))
    if payload.cost_price is not None:
        data["cost_price"] = Decimal(str(payload.cost_price))
    menu_item = models.MenuItem(**data)
    db.add(menu_item)
    db.commit()
    db.refresh(menu_item)
    return menu_item


@router.put("/items/{item_id}", response_model=MenuItemOut)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """update a menu item; floor staff may only flip availability"""
    menu_item = db.get(models.MenuItem, item_id)
    if not menu_item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    ensure_restaurant_access(db, user, menu_item.restaurant_id)

    data = payload.model_dump(exclude_unset=True)
    if not is_manager(user) and set(data) - {"is_available"}:
        raise HTTPException(status_code=403, detail="Only managers can edit menu items")

    if "category_id" in data:
        _check_category(db, data["category_id"], menu_item.restaurant_id)
    for money_field in ("price", "cost_price"):
        if data.get(money_field) is not None:
            data[money_field] = Decimal(str(data[money_field]))
    for field, value in data.items():
        setattr(menu_item, field, value)

    db.add(menu_item)
    db.commit()
    db.refresh(menu_item)
    return menu_item


@router.delete("/items/{item_id}")
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    """delete a menu item"""
    menu_item = db.get(models.MenuItem, item_id)
    if not menu_item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    ensure_restaurant_access(db, user, menu_item.restaurant_id)

    # past order lines keep their name snapshot
    db.delete(menu_item)
    db.commit()
    return {"message": "Menu item deleted successfully"}
