"""Tenant-scoped reads and writes for inventory data.

Every function takes the ``restaurant_id`` explicitly and filters on it;
rows that belong to another restaurant behave as if they did not exist.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete, desc, select
from sqlalchemy.orm import Session

from ..models.alert import Alert, RestockSuggestion
from ..models.category import Category
from ..models.inventory import ConsumptionRecord, InventoryItem
from ..schemas.rows import AlertRow, ConsumptionRow, InventoryItemRow, RestockSuggestionRow

CONSUMPTION_WINDOW_DAYS = 30

ITEM_FIELDS = (
    "name",
    "category_id",
    "unit",
    "current_quantity",
    "min_quantity",
    "cost_per_unit",
    "expiry_date",
    "supplier",
    "is_perishable",
)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


# ---------- Fetcher ----------


def fetch_items(db: Session, restaurant_id: int) -> list[InventoryItemRow]:
    """Inventory items with their category name joined in."""

    stmt = (
        select(InventoryItem)
        .where(InventoryItem.restaurant_id == restaurant_id)
        .order_by(InventoryItem.name, InventoryItem.id)
    )
    items = db.execute(stmt).unique().scalars().all()
    return [InventoryItemRow.model_validate(item) for item in items]


def fetch_consumption(
    db: Session,
    restaurant_id: int,
    *,
    since: date | None = None,
    today: date | None = None,
) -> list[ConsumptionRow]:
    """Consumption of the last 30 days (or since ``since``), most recent first."""

    if since is None:
        since = (today or date.today()) - timedelta(days=CONSUMPTION_WINDOW_DAYS)
    stmt = (
        select(ConsumptionRecord)
        .where(
            ConsumptionRecord.restaurant_id == restaurant_id,
            ConsumptionRecord.consumption_date >= since,
        )
        .order_by(desc(ConsumptionRecord.consumption_date), desc(ConsumptionRecord.id))
    )
    records = db.execute(stmt).unique().scalars().all()
    return [ConsumptionRow.model_validate(record) for record in records]


def fetch_alerts(db: Session, restaurant_id: int) -> list[AlertRow]:
    stmt = (
        select(Alert)
        .where(Alert.restaurant_id == restaurant_id)
        .order_by(desc(Alert.created_at), desc(Alert.id))
    )
    return [AlertRow.model_validate(alert) for alert in db.execute(stmt).scalars().all()]


def fetch_restock_suggestions(db: Session, restaurant_id: int) -> list[RestockSuggestionRow]:
    stmt = (
        select(RestockSuggestion)
        .where(RestockSuggestion.restaurant_id == restaurant_id)
        .order_by(RestockSuggestion.id)
    )
    records = db.execute(stmt).unique().scalars().all()
    return [RestockSuggestionRow.model_validate(record) for record in records]


# ---------- Categories ----------


def list_categories(db: Session, restaurant_id: int) -> list[Category]:
    stmt = select(Category).where(Category.restaurant_id == restaurant_id).order_by(Category.name)
    return db.execute(stmt).scalars().all()


def get_category(db: Session, restaurant_id: int, category_id: int) -> Category | None:
    stmt = select(Category).where(Category.restaurant_id == restaurant_id, Category.id == category_id)
    return db.execute(stmt).scalars().first()


def create_category(db: Session, restaurant_id: int, name: str) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValueError("name is required")
    now = _utcnow()
    category = Category(restaurant_id=restaurant_id, name=name, created_at=now, updated_at=now)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


# ---------- Items ----------


def get_item(db: Session, restaurant_id: int, item_id: int) -> InventoryItem | None:
    stmt = select(InventoryItem).where(InventoryItem.restaurant_id == restaurant_id, InventoryItem.id == item_id)
    return db.execute(stmt).unique().scalars().first()


def _check_category(db: Session, restaurant_id: int, category_id: Any) -> None:
    if category_id is None:
        return
    if not get_category(db, restaurant_id, int(category_id)):
        raise ValueError("category_id does not belong to this restaurant")


def _check_quantities(values: dict[str, Any]) -> None:
    for field in ("current_quantity", "min_quantity", "cost_per_unit"):
        value = values.get(field)
        if value is not None and float(value) < 0:
            raise ValueError(f"{field} must be zero or greater")


def create_item(db: Session, restaurant_id: int, payload: dict[str, Any]) -> InventoryItem:
    name = (payload.get("name") or "").strip()
    if not name:
        raise ValueError("name is required")
    values = {field: payload.get(field) for field in ITEM_FIELDS if field in payload}
    values["name"] = name
    if "supplier" in values:
        values["supplier"] = (values["supplier"] or "").strip() or None
    _check_quantities(values)
    _check_category(db, restaurant_id, values.get("category_id"))
    now = _utcnow()
    item = InventoryItem(restaurant_id=restaurant_id, created_at=now, updated_at=now, **values)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item: InventoryItem, payload: dict[str, Any]) -> InventoryItem:
    if "name" in payload:
        name = (payload.get("name") or "").strip()
        if not name:
            raise ValueError("name is required")
        payload = {**payload, "name": name}
    if "supplier" in payload:
        payload = {**payload, "supplier": (payload.get("supplier") or "").strip() or None}
    for field in ("unit", "current_quantity", "min_quantity", "is_perishable"):
        if field in payload and payload[field] is None:
            raise ValueError(f"{field} cannot be empty")
    _check_quantities(payload)
    if "category_id" in payload:
        _check_category(db, item.restaurant_id, payload.get("category_id"))
    for field in ITEM_FIELDS:
        if field in payload:
            setattr(item, field, payload[field])
    item.updated_at = _utcnow()
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item: InventoryItem) -> None:
    """Remove an item together with the rows that reference it."""

    for model in (ConsumptionRecord, Alert, RestockSuggestion):
        db.execute(delete(model).where(model.item_id == item.id))
    db.delete(item)
    db.commit()


# ---------- Consumption ----------


def list_consumption(db: Session, restaurant_id: int, limit: int = 100, offset: int = 0) -> list[ConsumptionRecord]:
    stmt = (
        select(ConsumptionRecord)
        .where(ConsumptionRecord.restaurant_id == restaurant_id)
        .order_by(desc(ConsumptionRecord.consumption_date), desc(ConsumptionRecord.id))
        .limit(limit)
        .offset(offset)
    )
    return db.execute(stmt).unique().scalars().all()


def record_consumption(
    db: Session,
    restaurant_id: int,
    *,
    item_id: int,
    quantity: float,
    consumption_date: date | None = None,
) -> ConsumptionRecord:
    if quantity is None or float(quantity) <= 0:
        raise ValueError("quantity must be greater than zero")
    if not get_item(db, restaurant_id, item_id):
        raise LookupError("Inventory item not found")
    record = ConsumptionRecord(
        restaurant_id=restaurant_id,
        item_id=item_id,
        consumption_date=consumption_date or date.today(),
        quantity_consumed=float(quantity),
        created_at=_utcnow(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


# ---------- Alerts ----------


def get_alert(db: Session, restaurant_id: int, alert_id: int) -> Alert | None:
    stmt = select(Alert).where(Alert.restaurant_id == restaurant_id, Alert.id == alert_id)
    return db.execute(stmt).scalars().first()


def mark_alert_read(db: Session, alert: Alert) -> Alert:
    alert.is_read = 1
    db.commit()
    db.refresh(alert)
    return alert


__all__ = [
    "create_category",
    "create_item",
    "delete_item",
    "fetch_alerts",
    "fetch_consumption",
    "fetch_items",
    "fetch_restock_suggestions",
    "get_alert",
    "get_category",
    "get_item",
    "list_categories",
    "list_consumption",
    "mark_alert_read",
    "record_consumption",
    "update_item",
]
