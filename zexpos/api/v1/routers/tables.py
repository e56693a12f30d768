from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import get_current_user, require_manager, ensure_restaurant_access
from zexpos.schemas.tables import TableCreate, TableUpdate, TableStatusUpdate, TableOut

router = APIRouter(prefix="/tables", tags=["tables"])


def _get_table(db: Session, user: models.Staff, table_id: int) -> models.RestaurantTable:
    table = db.get(models.RestaurantTable, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    ensure_restaurant_access(db, user, table.restaurant_id)
    return table


def _number_taken(db: Session, restaurant_id: int, table_number: int, exclude_id: int | None = None) -> bool:
    q = db.query(models.RestaurantTable).filter(
        models.RestaurantTable.restaurant_id == restaurant_id,
        models.RestaurantTable.table_number == table_number,
    )
    if exclude_id is not None:
        q = q.filter(models.RestaurantTable.id != exclude_id)
    return q.first() is not None


@router.get("", response_model=List[TableOut])
def list_tables(
    restaurant_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    return (
        db.query(models.RestaurantTable)
        .filter(models.RestaurantTable.restaurant_id == restaurant_id)
        .order_by(models.RestaurantTable.table_number.asc())
        .all()
    )


@router.post("", response_model=TableOut, status_code=201)
def create_table(
    payload: TableCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    ensure_restaurant_access(db, user, payload.restaurant_id)
    if _number_taken(db, payload.restaurant_id, payload.table_number):
        raise HTTPException(status_code=409, detail="Table number already exists")

    table = models.RestaurantTable(**payload.model_dump())
    db.add(table)
    db.commit()
    db.refresh(table)
    return table


@router.put("/{table_id}", response_model=TableOut)
def update_table(
    table_id: int,
    payload: TableUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    table = _get_table(db, user, table_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("table_number") is not None and _number_taken(db, table.restaurant_id, data["table_number"], table.id):
        raise HTTPException(status_code=409, detail="Table number already exists")

    for field, value in data.items():
        setattr(table, field, value)
    if table.status == "available":
        table.current_order_id = None

    db.add(table)
    db.commit()
    db.refresh(table)
    return table


@router.put("/{table_id}/status", response_model=TableOut)
def update_table_status(
    table_id: int,
    payload: TableStatusUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """floor staff flip tables between available/occupied/reserved/cleaning"""
    table = _get_table(db, user, table_id)
    table.status = payload.status
    if payload.status == "available":
        table.current_order_id = None

    db.add(table)
    db.commit()
    db.refresh(table)
    return table


@router.delete("/{table_id}")
def delete_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    table = _get_table(db, user, table_id)
    db.delete(table)
    db.commit()
    return {"message": "Table deleted successfully"}
