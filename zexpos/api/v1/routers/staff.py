import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.core.security import (
    FLOOR_ROLES,
    require_manager,
    get_password_hash,
    ensure_restaurant_access,
    ensure_organization_access,
)
from zexpos.db.session import get_db
from zexpos import models
from zexpos.schemas.staff import StaffCreate, StaffUpdate, StaffOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff", tags=["staff"])


def _check_role_grant(user: models.Staff, role: str) -> None:
    """who may hand out which role"""
    if user.role == "super_admin":
        return
    if user.role == "org_admin" and role != "super_admin":
        return
    if user.role == "manager" and role in FLOOR_ROLES:
        return
    raise HTTPException(status_code=403, detail=f"Not allowed to manage {role} accounts")


def _ensure_staff_access(user: models.Staff, member: models.Staff) -> None:
    if user.role == "super_admin":
        return
    if user.role == "org_admin" and member.organization_id == user.organization_id:
        return
    if user.role == "manager" and member.restaurant_id == user.restaurant_id and member.role in FLOOR_ROLES:
        return
    raise HTTPException(status_code=403, detail="No access to this staff member")


def _get_member(db: Session, staff_id: int) -> models.Staff:
    member = db.get(models.Staff, staff_id)
    if not member:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return member


@router.get("", response_model=List[StaffOut])
def list_staff(
    restaurant_id: Optional[int] = None,
    organization_id: Optional[int] = None,
    role: Optional[str] = None,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    q = db.query(models.Staff)
    if restaurant_id is not None:
        ensure_restaurant_access(db, user, restaurant_id)
        q = q.filter(models.Staff.restaurant_id == restaurant_id)
    elif organization_id is not None:
        ensure_organization_access(user, organization_id)
        q = q.filter(models.Staff.organization_id == organization_id)
    elif user.role == "org_admin":
        q = q.filter(models.Staff.organization_id == user.organization_id)
    elif user.role == "manager":
        q = q.filter(models.Staff.restaurant_id == user.restaurant_id)
    if role:
        q = q.filter(models.Staff.role == role)
    return q.order_by(models.Staff.full_name.asc()).all()


@router.post("", response_model=StaffOut, status_code=201)
def create_staff(
    payload: StaffCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    _check_role_grant(user, payload.role)

    email = payload.email.strip().lower()
    if db.query(models.Staff).filter(models.Staff.email == email).first():
        raise HTTPException(status_code=409, detail="Staff member with this email already exists")

    restaurant_id = payload.restaurant_id
    if user.role == "manager":
        restaurant_id = user.restaurant_id

    organization_id = payload.organization_id
    if restaurant_id is not None:
        restaurant = ensure_restaurant_access(db, user, restaurant_id)
        organization_id = restaurant.organization_id
    elif user.role != "super_admin":
        organization_id = user.organization_id
    if organization_id is not None and not db.get(models.Organization, organization_id):
        raise HTTPException(status_code=404, detail="Organization not found")

    member = models.Staff(
        email=email,
        password_hash=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=payload.role,
        organization_id=organization_id,
        restaurant_id=restaurant_id,
        phone=payload.phone,
        hourly_rate=Decimal(str(payload.hourly_rate)) if payload.hourly_rate is not None else None,
        permissions=payload.permissions,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("staff %s created %s account %s", user.id, member.role, member.email)
    return member


@router.get("/{staff_id}", response_model=StaffOut)
def get_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    member = _get_member(db, staff_id)
    _ensure_staff_access(user, member)
    return member


@router.put("/{staff_id}", response_model=StaffOut)
def update_staff(
    staff_id: int,
    payload: StaffUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    member = _get_member(db, staff_id)
    _ensure_staff_access(user, member)

    data = payload.model_dump(exclude_unset=True)
    if "role" in data and data["role"] is not None:
        _check_role_grant(user, data["role"])
    if "restaurant_id" in data and data["restaurant_id"] is not None:
        if user.role == "manager" and data["restaurant_id"] != user.restaurant_id:
            raise HTTPException(status_code=403, detail="No access to this restaurant")
        restaurant = ensure_restaurant_access(db, user, data["restaurant_id"])
        member.organization_id = restaurant.organization_id

    password = data.pop("password", None)
    if password:
        member.password_hash = get_password_hash(password)
    if data.get("hourly_rate") is not None:
        data["hourly_rate"] = Decimal(str(data["hourly_rate"]))
    for field, value in data.items():
        setattr(member, field, value)

    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@router.delete("/{staff_id}")
def delete_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    member = _get_member(db, staff_id)
    _ensure_staff_access(user, member)
    if member.id == user.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    db.delete(member)
    db.commit()
    logger.info("staff %s deleted account %s", user.id, member.email)
    return {"message": f"Staff member {member.full_name} deleted successfully"}
