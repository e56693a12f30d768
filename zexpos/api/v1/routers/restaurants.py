import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.core.security import (
    get_current_user,
    require_admin,
    accessible_restaurants_query,
    ensure_restaurant_access,
    ensure_organization_access,
)
from zexpos.db.session import get_db
from zexpos import models
from zexpos.schemas.restaurants import RestaurantCreate, RestaurantUpdate, RestaurantOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=List[RestaurantOut])
def list_restaurants(
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    return accessible_restaurants_query(db, user).order_by(models.Restaurant.name.asc()).all()


@router.post("", response_model=RestaurantOut, status_code=201)
def create_restaurant(
    payload: RestaurantCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    organization_id = payload.organization_id or user.organization_id
    if organization_id is None:
        raise HTTPException(status_code=400, detail="organization_id is required")
    ensure_organization_access(user, organization_id)
    if not db.get(models.Organization, organization_id):
        raise HTTPException(status_code=404, detail="Organization not found")

    data = payload.model_dump()
    data["organization_id"] = organization_id
    if data.get("tax_rate") is not None:
        data["tax_rate"] = Decimal(str(data["tax_rate"]))
    restaurant = models.Restaurant(**data)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info("created restaurant %s in organization %s", restaurant.id, organization_id)
    return restaurant


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    return ensure_restaurant_access(db, user, restaurant_id)


@router.put("/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    restaurant_id: int,
    payload: RestaurantUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    restaurant = ensure_restaurant_access(db, user, restaurant_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("tax_rate") is not None:
        data["tax_rate"] = Decimal(str(data["tax_rate"]))
    for field, value in data.items():
        setattr(restaurant, field, value)

    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


@router.delete("/{restaurant_id}")
def delete_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    restaurant = ensure_restaurant_access(db, user, restaurant_id)
    db.delete(restaurant)
    db.commit()
    logger.info("deleted restaurant %s", restaurant_id)
    return {"message": "Restaurant deleted successfully"}
