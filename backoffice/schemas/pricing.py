from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .common import Money


class PriceTerms(BaseModel):
    suggested_price: Money
    profit_margin: Money
    markup_percentage: Money


class ItemPricing(BaseModel):
    id: int
    item_name: str
    current_cost: Money
    suggested_price: Money
    current_price: Optional[Money] = None
    profit_margin: Money
    markup_percentage: Money
    category: str
    supplier: str
    last_updated: Optional[str] = None


class PricingSummary(BaseModel):
    total_items: int
    items_needing_update: int
    average_margin: Money
    total_potential_revenue: Money


class MarkupPreset(BaseModel):
    label: str
    value: Money
    description: str


class MarkupRequest(BaseModel):
    markup: Optional[Decimal] = Field(default=None, gt=0)


class CategoryMarkupRequest(BaseModel):
    markup: Decimal = Field(gt=0)


class PriceOverride(BaseModel):
    price: Decimal = Field(gt=0)


class MarkupQuote(BaseModel):
    profit_target: Money
    markup: Money
    markup_percentage: Money
