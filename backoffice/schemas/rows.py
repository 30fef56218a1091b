"""Row shapes handed from the data fetcher to the aggregation core.

Joined relations are optional fields: a row fetched without its join, or
whose parent was deleted, carries ``None`` and the ``*_name`` helpers fall
back to a fixed placeholder label.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

UNKNOWN_ITEM = "Unknown"
UNCATEGORIZED = "Uncategorized"
UNKNOWN_SUPPLIER = "N/A"


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CategoryRef(_Row):
    name: Optional[str] = None


class InventoryItemRow(_Row):
    id: int
    name: str
    category_id: Optional[int] = None
    category: Optional[CategoryRef] = None
    unit: str = ""
    current_quantity: float = 0
    min_quantity: float = 0
    cost_per_unit: Optional[float] = None
    expiry_date: Optional[date] = None
    supplier: Optional[str] = None
    is_perishable: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def category_name(self) -> str:
        if self.category and self.category.name:
            return self.category.name
        return UNCATEGORIZED


class ConsumptionItemRef(_Row):
    name: Optional[str] = None
    unit: Optional[str] = None
    cost_per_unit: Optional[float] = None


class ConsumptionRow(_Row):
    id: Optional[int] = None
    item_id: int
    consumption_date: date
    quantity_consumed: float
    item: Optional[ConsumptionItemRef] = None

    @property
    def item_name(self) -> str:
        if self.item and self.item.name:
            return self.item.name
        return UNKNOWN_ITEM

    @property
    def item_unit(self) -> str:
        return (self.item.unit if self.item else None) or ""

    @property
    def item_cost(self) -> Optional[float]:
        return self.item.cost_per_unit if self.item else None


class AlertRow(_Row):
    id: Optional[int] = None
    item_id: Optional[int] = None
    alert_type: str
    message: str = ""
    is_read: bool = False
    created_at: Optional[str] = None


class RestockItemRef(_Row):
    name: Optional[str] = None
    current_quantity: Optional[float] = None
    unit: Optional[str] = None


class RestockSuggestionRow(_Row):
    id: Optional[int] = None
    item_id: int
    suggested_quantity: float
    days_until_stockout: Optional[float] = None
    avg_daily_consumption: float = 0
    item: Optional[RestockItemRef] = None

    @property
    def item_name(self) -> str:
        if self.item and self.item.name:
            return self.item.name
        return UNKNOWN_ITEM
