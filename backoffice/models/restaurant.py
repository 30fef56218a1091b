"""Tenant tables: restaurants and the users who belong to them."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base

ROLES = ("admin", "manager", "chef", "staff", "inventory")
DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#1E40AF"
DEFAULT_FONT_FAMILY = "Inter"


class Restaurant(Base):
    """A restaurant account. Every other row is scoped to one of these."""

    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    primary_color = Column(Text, nullable=False, default=DEFAULT_PRIMARY_COLOR)
    secondary_color = Column(Text, nullable=False, default=DEFAULT_SECONDARY_COLOR)
    font_family = Column(Text, nullable=False, default=DEFAULT_FONT_FAMILY)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    members = relationship("RestaurantMember", back_populates="restaurant", cascade="all, delete-orphan")


class RestaurantMember(Base):
    __tablename__ = "restaurant_members"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    role = Column(Text, nullable=False, default="staff")
    is_active = Column(Integer, nullable=False, default=1)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    restaurant = relationship("Restaurant", back_populates="members")


__all__ = ["Restaurant", "RestaurantMember", "ROLES"]
