import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.core.security import get_password_hash
from zexpos.db.session import get_db
from zexpos import models
from zexpos.schemas.auth import SetupRequest, SetupStatus, StaffBrief

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/setup", tags=["setup"])

MIN_PASSWORD_LENGTH = 8


def super_admin_exists(db: Session) -> bool:
    return db.query(models.Staff).filter(models.Staff.role == "super_admin").first() is not None


def create_super_admin(db: Session, email: str, password: str, full_name: str) -> models.Staff:
    """first-run bootstrap; validation errors come back as ValueError"""
    try:
        email = validate_email(email.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email: {e}") from e
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if db.query(models.Staff).filter(models.Staff.email == email).first():
        raise ValueError("Email already registered")

    admin = models.Staff(
        email=email,
        password_hash=get_password_hash(password),
        full_name=full_name,
        role="super_admin",
        is_active=True,
        permissions=["all"],
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("created super admin %s", email)
    return admin


@router.get("/check", response_model=SetupStatus)
def check_setup(db: Session = Depends(get_db)):
    exists = super_admin_exists(db)
    return SetupStatus(has_super_admin=exists, needs_setup=not exists)


@router.post("/create", response_model=StaffBrief, status_code=201)
def create_setup(payload: SetupRequest, db: Session = Depends(get_db)):
    if super_admin_exists(db):
        raise HTTPException(status_code=409, detail="Super admin already exists")
    try:
        return create_super_admin(db, payload.email, payload.password, payload.full_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
