"""Request and response payloads for the inventory CRUD endpoints."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .rows import CategoryRef


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: str
    updated_at: str


class ItemBase(BaseModel):
    category_id: Optional[int] = None
    unit: str = "un"
    current_quantity: float = Field(default=0, ge=0)
    min_quantity: float = Field(default=0, ge=0)
    cost_per_unit: Optional[float] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    supplier: Optional[str] = None
    is_perishable: bool = False


class ItemCreate(ItemBase):
    name: str = Field(min_length=1)


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None
    unit: Optional[str] = None
    current_quantity: Optional[float] = Field(default=None, ge=0)
    min_quantity: Optional[float] = Field(default=None, ge=0)
    cost_per_unit: Optional[float] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    supplier: Optional[str] = None
    is_perishable: Optional[bool] = None


class ItemOut(ItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: Optional[CategoryRef] = None
    created_at: str
    updated_at: str


class ConsumptionCreate(BaseModel):
    item_id: int
    quantity_consumed: float = Field(gt=0)
    consumption_date: Optional[date] = None


class ConsumptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    consumption_date: date
    quantity_consumed: float
    created_at: str
