"""
Inventory Schemas Module
========================
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from civil_defence.core.enums import EquipmentCategory, EquipmentCondition


def _check_inspection_order(last: Optional[date], nxt: Optional[date]) -> None:
    if last and nxt and nxt < last:
        raise ValueError("next_inspection cannot be before last_inspection")


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: EquipmentCategory
    description: Optional[str] = None
    quantity: int = Field(default=0, ge=0)
    condition: EquipmentCondition = EquipmentCondition.GOOD
    location: str = Field(..., min_length=1, max_length=500)
    district: str = Field(..., min_length=2, max_length=100)
    last_inspection: Optional[date] = None
    next_inspection: Optional[date] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Inflatable rescue boat",
                "category": "rescue_equipment",
                "quantity": 4,
                "condition": "good",
                "location": "District HQ store room",
                "district": "Puri",
            }
        }
    )

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def inspection_dates_ordered(self) -> "InventoryItemCreate":
        _check_inspection_order(self.last_inspection, self.next_inspection)
        return self


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[EquipmentCategory] = None
    description: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    condition: Optional[EquipmentCondition] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    district: Optional[str] = Field(default=None, min_length=2, max_length=100)
    last_inspection: Optional[date] = None
    next_inspection: Optional[date] = None

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def inspection_dates_ordered(self) -> "InventoryItemUpdate":
        _check_inspection_order(self.last_inspection, self.next_inspection)
        return self


class InventoryItemResponse(BaseModel):
    id: UUID
    name: str
    category: str
    description: Optional[str] = None
    quantity: int
    condition: str
    location: str
    district: str
    last_inspection: Optional[date] = None
    next_inspection: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
