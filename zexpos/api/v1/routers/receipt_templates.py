from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import get_current_user, require_manager, ensure_restaurant_access
from zexpos.schemas.receipts import ReceiptTemplateCreate, ReceiptTemplateUpdate, ReceiptTemplateOut

router = APIRouter(prefix="/receipt-templates", tags=["receipts"])


def _clear_default(db: Session, restaurant_id: int, keep_id: int | None = None) -> None:
    """one default template per restaurant"""
    q = db.query(models.ReceiptTemplate).filter(
        models.ReceiptTemplate.restaurant_id == restaurant_id,
        models.ReceiptTemplate.is_default.is_(True),
    )
    if keep_id is not None:
        q = q.filter(models.ReceiptTemplate.id != keep_id)
    for template in q.all():
        template.is_default = False
        db.add(template)


@router.get("", response_model=List[ReceiptTemplateOut])
def list_templates(
    restaurant_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    return (
        db.query(models.ReceiptTemplate)
        .filter(models.ReceiptTemplate.restaurant_id == restaurant_id)
        .order_by(models.ReceiptTemplate.is_default.desc(), models.ReceiptTemplate.name.asc())
        .all()
    )


@router.get("/default", response_model=ReceiptTemplateOut)
def get_default_template(
    restaurant_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    template = (
        db.query(models.ReceiptTemplate)
        .filter(
            models.ReceiptTemplate.restaurant_id == restaurant_id,
            models.ReceiptTemplate.is_default.is_(True),
        )
        .first()
    )
    if not template:
        raise HTTPException(status_code=404, detail="No default receipt template")
    return template


@router.post("", response_model=ReceiptTemplateOut, status_code=201)
def create_template(
    payload: ReceiptTemplateCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    ensure_restaurant_access(db, user, payload.restaurant_id)
    if payload.is_default:
        _clear_default(db, payload.restaurant_id)

    template = models.ReceiptTemplate(**payload.model_dump())
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@router.put("/{template_id}", response_model=ReceiptTemplateOut)
def update_template(
    template_id: int,
    payload: ReceiptTemplateUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    template = db.get(models.ReceiptTemplate, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Receipt template not found")
    ensure_restaurant_access(db, user, template.restaurant_id)

    data = payload.model_dump(exclude_unset=True)
    if data.get("is_default"):
        _clear_default(db, template.restaurant_id, keep_id=template.id)
    for field, value in data.items():
        setattr(template, field, value)

    db.add(template)
    db.commit()
    db.refresh(template)
    return template
