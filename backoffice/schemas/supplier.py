from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .common import Money, Quantity


class Purchase(BaseModel):
    item_id: int
    supplier_name: str
    item_name: str
    quantity: Quantity
    unit_cost: Money
    total_cost: Money
    purchase_date: Optional[str] = None


class SupplierSummary(BaseModel):
    name: str
    products: list[str] = Field(default_factory=list)
    purchase_count: int = 0
    total_spent: Money


class SupplierPurchases(BaseModel):
    supplier: Optional[str] = None
    purchases: list[Purchase] = Field(default_factory=list)
    total_spent: Money
