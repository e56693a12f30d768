from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from zexpos.core.config import settings
from zexpos.db.session import get_db
from zexpos import models


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# role groups
ADMIN_ROLES = ("super_admin", "org_admin")
MANAGEMENT_ROLES = ("super_admin", "org_admin", "manager")
# everyone but the kitchen may take payment
PAYMENT_ROLES = ("super_admin", "org_admin", "manager", "server", "cashier")
# roles a manager may hand out
FLOOR_ROLES = ("server", "kitchen", "cashier")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(subject: str, role: str = "server", expires_delta: Optional[timedelta] = None) -> str:
    to_encode = {
        "sub": subject,
        "role": role,
        "iat": int(datetime.now(tz=timezone.utc).timestamp()),
    }
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRES_MIN))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm="HS256")


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from e


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> models.Staff:
    payload = decode_token(token)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    user = db.get(models.Staff, int(sub))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    return user


def require_roles(*roles: str):
    """build a dependency that lets through only the given roles"""
    def dependency(user: models.Staff = Depends(get_current_user)) -> models.Staff:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user
    return dependency


def require_super_admin(user: models.Staff = Depends(get_current_user)) -> models.Staff:
    if user.role != "super_admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Super admin only")
    return user


def require_admin(user: models.Staff = Depends(get_current_user)) -> models.Staff:
    """super admin or organization admin"""
    if user.role not in ADMIN_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def require_manager(user: models.Staff = Depends(get_current_user)) -> models.Staff:
    """manager or above - menu, tables, staff, templates"""
    if user.role not in MANAGEMENT_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Manager access required")
    return user


def is_manager(user: models.Staff) -> bool:
    return user.role in MANAGEMENT_ROLES


def accessible_restaurants_query(db: Session, user: models.Staff):
    """restaurants the caller can see"""
    q = db.query(models.Restaurant)
    if user.role == "super_admin":
        return q.filter(models.Restaurant.is_active.is_(True))
    if user.role == "org_admin":
        return q.filter(models.Restaurant.organization_id == user.organization_id)
    return q.filter(models.Restaurant.id == user.restaurant_id)


def can_access_restaurant(user: models.Staff, restaurant: models.Restaurant) -> bool:
    if user.role == "super_admin":
        return True
    if user.role == "org_admin":
        return user.organization_id is not None and restaurant.organization_id == user.organization_id
    return user.restaurant_id is not None and restaurant.id == user.restaurant_id


def ensure_restaurant_access(db: Session, user: models.Staff, restaurant_id: int) -> models.Restaurant:
    restaurant = db.get(models.Restaurant, restaurant_id)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    if not can_access_restaurant(user, restaurant):
        raise HTTPException(status_code=403, detail="No access to this restaurant")
    return restaurant


def ensure_organization_access(user: models.Staff, organization_id: int) -> None:
    if user.role == "super_admin":
        return
    if user.role == "org_admin" and user.organization_id == organization_id:
        return
    raise HTTPException(status_code=403, detail="No access to this organization")
