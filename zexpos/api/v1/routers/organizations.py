import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.core.security import require_admin, require_super_admin, ensure_organization_access
from zexpos.db.session import get_db
from zexpos import models
from zexpos.schemas.organizations import OrganizationCreate, OrganizationUpdate, OrganizationOut, SettingUpsert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organizations", tags=["organizations"])


def _get_organization(db: Session, organization_id: int) -> models.Organization:
    organization = db.get(models.Organization, organization_id)
    if not organization:
        raise HTTPException(status_code=404, detail="Organization not found")
    return organization


def _settings_map(db: Session, organization_id: int) -> Dict[str, Any]:
    rows = (
        db.query(models.OrganizationSetting)
        .filter(models.OrganizationSetting.organization_id == organization_id)
        .order_by(models.OrganizationSetting.setting_key.asc())
        .all()
    )
    return {row.setting_key: row.setting_value for row in rows}


def _upsert_setting(db: Session, organization_id: int, key: str, value: Any) -> None:
    row = (
        db.query(models.OrganizationSetting)
        .filter(
            models.OrganizationSetting.organization_id == organization_id,
            models.OrganizationSetting.setting_key == key,
        )
        .first()
    )
    if row:
        row.setting_value = value
    else:
        row = models.OrganizationSetting(organization_id=organization_id, setting_key=key, setting_value=value)
    db.add(row)


@router.get("", response_model=List[OrganizationOut])
def list_organizations(
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    q = db.query(models.Organization)
    if user.role != "super_admin":
        q = q.filter(models.Organization.id == user.organization_id)
    return q.order_by(models.Organization.name.asc()).all()


@router.post("", response_model=OrganizationOut, status_code=201)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    _: models.Staff = Depends(require_super_admin),
):
    organization = models.Organization(**payload.model_dump())
    db.add(organization)
    db.commit()
    db.refresh(organization)
    logger.info("created organization %s (%s)", organization.id, organization.name)
    return organization


@router.get("/{organization_id}", response_model=OrganizationOut)
def get_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    ensure_organization_access(user, organization_id)
    return _get_organization(db, organization_id)


@router.put("/{organization_id}", response_model=OrganizationOut)
def update_organization(
    organization_id: int,
    payload: OrganizationUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    ensure_organization_access(user, organization_id)
    organization = _get_organization(db, organization_id)

    data = payload.model_dump(exclude_unset=True)
    # org admins can't change their own plan or switch themselves off
    if user.role != "super_admin":
        data.pop("subscription_plan", None)
        data.pop("is_active", None)
    for field, value in data.items():
        setattr(organization, field, value)

    db.add(organization)
    db.commit()
    db.refresh(organization)
    return organization


@router.delete("/{organization_id}")
def delete_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    _: models.Staff = Depends(require_super_admin),
):
    organization = _get_organization(db, organization_id)
    db.delete(organization)
    db.commit()
    logger.info("deleted organization %s", organization_id)
    return {"message": "Organization deleted successfully"}


# settings

@router.get("/{organization_id}/settings")
def get_settings(
    organization_id: int,
    key: str | None = None,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    """all settings as a key -> value map, or a single key"""
    ensure_organization_access(user, organization_id)
    _get_organization(db, organization_id)
    values = _settings_map(db, organization_id)
    if key is None:
        return values
    if key not in values:
        raise HTTPException(status_code=404, detail="Setting not found")
    return {key: values[key]}


@router.put("/{organization_id}/settings")
def update_settings(
    organization_id: int,
    payload: SettingUpsert,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    ensure_organization_access(user, organization_id)
    _get_organization(db, organization_id)

    updates: Dict[str, Any] = {}
    if payload.settings:
        updates.update(payload.settings)
    if payload.setting_key:
        updates[payload.setting_key] = payload.setting_value
    if not updates:
        raise HTTPException(status_code=400, detail="Nothing to update")

    for key, value in updates.items():
        _upsert_setting(db, organization_id, key, value)
    db.commit()
    return _settings_map(db, organization_id)


@router.delete("/{organization_id}/settings/{key}")
def delete_setting(
    organization_id: int,
    key: str,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_admin),
):
    ensure_organization_access(user, organization_id)
    row = (
        db.query(models.OrganizationSetting)
        .filter(
            models.OrganizationSetting.organization_id == organization_id,
            models.OrganizationSetting.setting_key == key,
        )
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Setting not found")
    db.delete(row)
    db.commit()
    return {"message": "Setting deleted successfully"}
