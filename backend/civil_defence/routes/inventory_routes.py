"""
Inventory Routes Module
=======================

District equipment and supplies. Admin only, district scoped.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.rbac import require_admin
from civil_defence.core.enums import EquipmentCategory, EquipmentCondition
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    ErrorResponse,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    MessageResponse,
)
from civil_defence.services.inventory_service import InventoryService


router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.post(
    "",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Inventory Item",
)
def create_item(
    data: InventoryItemCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).create_item(current_user, data)


@router.get(
    "",
    response_model=List[InventoryItemResponse],
    summary="List Inventory",
    description="List items in scope. `low_stock=true` keeps items below the stock threshold.",
)
def list_items(
    district: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=100),
    category: Optional[EquipmentCategory] = Query(default=None),
    condition: Optional[EquipmentCondition] = Query(default=None),
    low_stock: bool = Query(default=False),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).list_items(
        current_user,
        district=district,
        search=search,
        category=category,
        condition=condition,
        low_stock=low_stock,
    )


@router.get(
    "/{item_id}",
    response_model=InventoryItemResponse,
    summary="Get Inventory Item",
    responses={404: {"model": ErrorResponse, "description": "Item not found"}},
)
def get_item(
    item_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).get_item(current_user, item_id)


@router.patch(
    "/{item_id}",
    response_model=InventoryItemResponse,
    summary="Update Inventory Item",
    responses={404: {"model": ErrorResponse, "description": "Item not found"}},
)
def update_item(
    item_id: UUID,
    data: InventoryItemUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).update_item(current_user, item_id, data)


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    summary="Delete Inventory Item",
    responses={404: {"model": ErrorResponse, "description": "Item not found"}},
)
def delete_item(
    item_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    InventoryService(db).delete_item(current_user, item_id)
    return MessageResponse(message="Inventory item deleted")
