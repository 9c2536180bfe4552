"""
Inventory Service Module
========================

District equipment and supplies.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import EquipmentCategory, EquipmentCondition
from civil_defence.core.exceptions import InventoryItemNotFoundError, ValidationError
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.models.inventory import InventoryItem
from civil_defence.models.user import User
from civil_defence.schemas.inventory import InventoryItemCreate, InventoryItemUpdate
from civil_defence.services.filters import apply_equals, apply_search

logger = get_logger(__name__)


class InventoryService:
    def __init__(self, db: Session):
        self.db = db

    def _scope(self, current_user: User) -> DistrictScope:
        return DistrictScope(self.db, InventoryItem, current_user)

    def _get_in_scope(self, current_user: User, item_id: UUID) -> InventoryItem:
        item = self._scope(current_user).get_by_id(item_id)
        if item is None:
            raise InventoryItemNotFoundError(identifier=str(item_id))
        return item

    def create_item(self, current_user: User, data: InventoryItemCreate) -> InventoryItem:
        self._scope(current_user).ensure_district_access(data.district)

        item = InventoryItem(
            name=data.name,
            category=data.category.value,
            description=data.description,
            quantity=data.quantity,
            condition=data.condition.value,
            location=data.location,
            district=data.district,
            last_inspection=data.last_inspection,
            next_inspection=data.next_inspection,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource="inventory",
            resource_id=str(item.id),
        )
        return item

    def list_items(
        self,
        current_user: User,
        district: Optional[str] = None,
        search: Optional[str] = None,
        category: Optional[EquipmentCategory] = None,
        condition: Optional[EquipmentCondition] = None,
        low_stock: bool = False,
    ) -> List[InventoryItem]:
        """
        List items in scope.

        ``low_stock`` keeps items whose quantity is below
        LOW_STOCK_THRESHOLD.
        """
        query = self._scope(current_user).filter_by_district_name(district)
        query = apply_equals(query, InventoryItem.category, category)
        query = apply_equals(query, InventoryItem.condition, condition)
        query = apply_search(
            query,
            search,
            InventoryItem.name,
            InventoryItem.description,
            InventoryItem.location,
            InventoryItem.district,
        )
        if low_stock:
            query = query.filter(InventoryItem.quantity < settings.LOW_STOCK_THRESHOLD)

        return query.order_by(InventoryItem.created_at.desc()).all()

    def get_item(self, current_user: User, item_id: UUID) -> InventoryItem:
        return self._get_in_scope(current_user, item_id)

    def update_item(
        self,
        current_user: User,
        item_id: UUID,
        data: InventoryItemUpdate,
    ) -> InventoryItem:
        item = self._get_in_scope(current_user, item_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("district") and changes["district"] != item.district:
            self._scope(current_user).ensure_district_access(changes["district"])

        # Partial updates are checked against the stored dates too
        last = changes.get("last_inspection", item.last_inspection)
        nxt = changes.get("next_inspection", item.next_inspection)
        if last and nxt and nxt < last:
            raise ValidationError(
                "next_inspection cannot be before last_inspection",
                details={"field": "next_inspection"},
            )

        for field, value in changes.items():
            if value is None and field not in {"description", "last_inspection", "next_inspection"}:
                continue
            setattr(item, field, getattr(value, "value", value))

        self.db.commit()
        self.db.refresh(item)

        if item.quantity < settings.LOW_STOCK_THRESHOLD:
            logger.info(
                "Inventory item below stock threshold",
                extra={"item_id": str(item.id), "quantity": item.quantity, "district": item.district}
            )
        return item

    def delete_item(self, current_user: User, item_id: UUID) -> None:
        item = self._get_in_scope(current_user, item_id)
        self.db.delete(item)
        self.db.commit()

        audit_logger.log_record_deleted(
            actor_id=str(current_user.id),
            resource="inventory",
            resource_id=str(item_id),
        )
