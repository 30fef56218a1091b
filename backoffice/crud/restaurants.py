"""Restaurant accounts and their memberships."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.restaurant import ROLES, Restaurant, RestaurantMember

MANAGER_ROLES = ("admin", "manager")

RESTAURANT_FIELDS = (
    "name",
    "email",
    "phone",
    "address",
    "description",
    "logo_url",
    "primary_color",
    "secondary_color",
    "font_family",
)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def get_restaurant(db: Session, restaurant_id: int) -> Restaurant | None:
    return db.get(Restaurant, restaurant_id)


def create_restaurant(db: Session, payload: dict[str, Any], *, owner_user_id: str) -> Restaurant:
    """Create a restaurant and make ``owner_user_id`` its admin."""

    name = (payload.get("name") or "").strip()
    if not name:
        raise ValueError("name is required")
    now = _utcnow()
    restaurant = Restaurant(
        name=name,
        email=(payload.get("email") or None),
        phone=(payload.get("phone") or None),
        address=(payload.get("address") or None),
        description=(payload.get("description") or None),
        created_at=now,
        updated_at=now,
    )
    restaurant.members.append(
        RestaurantMember(user_id=owner_user_id, role="admin", is_active=1, created_at=now, updated_at=now)
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def update_restaurant(db: Session, restaurant: Restaurant, values: dict[str, Any]) -> Restaurant:
    for field in RESTAURANT_FIELDS:
        if field in values:
            setattr(restaurant, field, values[field])
    restaurant.updated_at = _utcnow()
    db.commit()
    db.refresh(restaurant)
    return restaurant


def list_memberships(db: Session, user_id: str) -> list[RestaurantMember]:
    stmt = (
        select(RestaurantMember)
        .where(RestaurantMember.user_id == user_id, RestaurantMember.is_active == 1)
        .order_by(RestaurantMember.created_at, RestaurantMember.id)
    )
    return db.execute(stmt).scalars().all()


def get_membership(db: Session, restaurant_id: int, user_id: str) -> RestaurantMember | None:
    stmt = select(RestaurantMember).where(
        RestaurantMember.restaurant_id == restaurant_id,
        RestaurantMember.user_id == user_id,
        RestaurantMember.is_active == 1,
    )
    return db.execute(stmt).scalars().first()


def list_members(db: Session, restaurant_id: int) -> list[RestaurantMember]:
    stmt = (
        select(RestaurantMember)
        .where(RestaurantMember.restaurant_id == restaurant_id)
        .order_by(RestaurantMember.id)
    )
    return db.execute(stmt).scalars().all()


def get_member(db: Session, restaurant_id: int, member_id: int) -> RestaurantMember | None:
    stmt = select(RestaurantMember).where(
        RestaurantMember.restaurant_id == restaurant_id,
        RestaurantMember.id == member_id,
    )
    return db.execute(stmt).scalars().first()


def _remaining_admins(db: Session, restaurant_id: int, excluding: int) -> int:
    return sum(
        1
        for member in list_members(db, restaurant_id)
        if member.id != excluding and member.role == "admin" and member.is_active
    )


def update_member_role(db: Session, member: RestaurantMember, role: str) -> RestaurantMember:
    if role not in ROLES:
        raise ValueError(f"unknown role: {role}")
    if member.role == "admin" and role != "admin" and not _remaining_admins(db, member.restaurant_id, member.id):
        raise ValueError("a restaurant must keep at least one admin")
    member.role = role
    member.updated_at = _utcnow()
    db.commit()
    db.refresh(member)
    return member


def remove_member(db: Session, member: RestaurantMember) -> None:
    if member.role == "admin" and not _remaining_admins(db, member.restaurant_id, member.id):
        raise ValueError("a restaurant must keep at least one admin")
    db.delete(member)
    db.commit()


__all__ = [
    "MANAGER_ROLES",
    "create_restaurant",
    "get_member",
    "get_membership",
    "get_restaurant",
    "list_members",
    "list_memberships",
    "remove_member",
    "update_member_role",
    "update_restaurant",
]
