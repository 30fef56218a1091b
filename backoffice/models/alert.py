"""Alerts and restock suggestions, both produced by jobs outside this service."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    alert_type = Column(Text, nullable=False)
    message = Column(Text, nullable=False, default="")
    is_read = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)


class RestockSuggestion(Base):
    __tablename__ = "restock_suggestions"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    suggested_quantity = Column(Float, nullable=False)
    days_until_stockout = Column(Float, nullable=True)
    avg_daily_consumption = Column(Float, nullable=False, default=0)
    created_at = Column(Text, nullable=False)

    item = relationship("InventoryItem", lazy="joined")


__all__ = ["Alert", "RestockSuggestion"]
