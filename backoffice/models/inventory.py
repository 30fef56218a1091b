"""Inventory items and the append-only consumption log."""

from __future__ import annotations

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class InventoryItem(Base):
    """A stocked ingredient or supply.

    ``min_quantity`` is the reorder threshold: an item whose
    ``current_quantity`` is at or below it counts as low stock.
    """

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    unit = Column(Text, nullable=False, default="un")
    current_quantity = Column(Float, nullable=False, default=0)
    min_quantity = Column(Float, nullable=False, default=0)
    cost_per_unit = Column(Float, nullable=True)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(Text, nullable=True)
    is_perishable = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    category = relationship("Category", lazy="joined")


class ConsumptionRecord(Base):
    __tablename__ = "consumption_history"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    consumption_date = Column(Date, nullable=False, index=True)
    quantity_consumed = Column(Float, nullable=False)
    created_at = Column(Text, nullable=False)

    item = relationship("InventoryItem", lazy="joined")


__all__ = ["ConsumptionRecord", "InventoryItem"]
