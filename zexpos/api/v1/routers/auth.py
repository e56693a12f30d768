import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from zexpos.core.security import verify_password, create_access_token, get_current_user
from zexpos.db.session import get_db
from zexpos import models
from zexpos.schemas.auth import LoginRequest, TokenResponse, StaffBrief
from zexpos.schemas.staff import StaffOut, StaffProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.query(models.Staff).filter(models.Staff.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    token = create_access_token(subject=str(user.id), role=user.role)
    return TokenResponse(access_token=token, user=user)


@router.get("/me", response_model=StaffBrief)
def me(user: models.Staff = Depends(get_current_user)):
    return user


@router.get("/profile", response_model=StaffOut)
def get_profile(user: models.Staff = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=StaffOut)
def update_profile(
    payload: StaffProfileUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """self-service edit of name, email and phone; role and scope stay with the admins"""
    data = payload.model_dump(exclude_unset=True)

    if "email" in data:
        email = data["email"].strip().lower()
        if email != user.email:
            existing = db.query(models.Staff).filter(models.Staff.email == email).first()
            if existing:
                raise HTTPException(status_code=409, detail="Email already in use")
            logger.info("staff %s changed email to %s", user.id, email)
        data["email"] = email

    for field, value in data.items():
        setattr(user, field, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user
