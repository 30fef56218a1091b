"""Dashboard statistics derived from fetched inventory rows.

``compute_stats`` is a pure function: it never touches the database and it
never raises on empty or partially populated input. Missing costs count as 0,
missing names fall back to placeholder labels, and any ratio with a zero
denominator is 0.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Iterable, Sequence

from ..core.money import HUNDRED, ZERO, round_percent, safe_ratio, to_decimal
from ..schemas.dashboard import (
    AlertsSummary,
    CategoryShare,
    ConsumerEntry,
    DailyConsumption,
    DashboardStats,
)
from ..schemas.rows import AlertRow, ConsumptionRow, InventoryItemRow

TOP_CONSUMING_LIMIT = 5
TOP_CONSUMING_WINDOW = timedelta(days=7)
TREND_POINTS = 30


def start_of_day(day: date, now: datetime) -> datetime:
    """Midnight of ``day`` in the same timezone as ``now``."""

    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def is_expired(item: InventoryItemRow, now: datetime) -> bool:
    return item.expiry_date is not None and start_of_day(item.expiry_date, now) < now


def is_low_stock(item: InventoryItemRow) -> bool:
    return to_decimal(item.current_quantity) <= to_decimal(item.min_quantity)


def stock_value(item: InventoryItemRow) -> Decimal:
    return to_decimal(item.current_quantity) * to_decimal(item.cost_per_unit)


def inventory_value(items: Iterable[InventoryItemRow]) -> Decimal:
    return sum((stock_value(item) for item in items), ZERO)


def top_consuming_items(
    consumption: Iterable[ConsumptionRow],
    now: datetime,
    limit: int = TOP_CONSUMING_LIMIT,
) -> list[ConsumerEntry]:
    cutoff = now - TOP_CONSUMING_WINDOW
    totals: Dict[str, Dict[str, object]] = {}
    for row in consumption:
        if start_of_day(row.consumption_date, now) < cutoff:
            continue
        name = row.item_name
        entry = totals.setdefault(name, {"name": name, "quantity": ZERO, "unit": row.item_unit})
        entry["quantity"] += to_decimal(row.quantity_consumed)
    # sorted() is stable, so ties keep first-seen order.
    ranked = sorted(totals.values(), key=lambda entry: entry["quantity"], reverse=True)
    return [ConsumerEntry(**entry) for entry in ranked[:limit]]


def consumption_trend(consumption: Iterable[ConsumptionRow], points: int = TREND_POINTS) -> list[DailyConsumption]:
    """Cost of consumption per day, oldest first, keeping only the last ``points`` days.

    The caller is expected to have fetched a bounded window already; this only
    takes the tail of whatever dates are present.
    """

    by_day: Dict[date, Decimal] = {}
    for row in consumption:
        value = to_decimal(row.quantity_consumed) * to_decimal(row.item_cost)
        by_day[row.consumption_date] = by_day.get(row.consumption_date, ZERO) + value
    series = [DailyConsumption(date=day, value=value) for day, value in sorted(by_day.items())]
    return series[-points:] if points else []


def category_distribution(items: Sequence[InventoryItemRow], total_value: Decimal | None = None) -> list[CategoryShare]:
    total = inventory_value(items) if total_value is None else total_value
    by_category: Dict[str, Decimal] = {}
    for item in items:
        name = item.category_name
        by_category[name] = by_category.get(name, ZERO) + stock_value(item)
    return [
        CategoryShare(name=name, value=value, percentage=round_percent(safe_ratio(value, total) * HUNDRED))
        for name, value in by_category.items()
    ]


def summarize_alerts(alerts: Sequence[AlertRow]) -> AlertsSummary:
    return AlertsSummary(
        total=len(alerts),
        unread=sum(1 for alert in alerts if not alert.is_read),
        by_type=dict(Counter(alert.alert_type for alert in alerts)),
    )


def compute_stats(
    items: Sequence[InventoryItemRow],
    consumption: Sequence[ConsumptionRow],
    alerts: Sequence[AlertRow],
    now: datetime,
) -> DashboardStats:
    """Reduce one tenant's fetched rows into the dashboard summary."""

    total_value = inventory_value(items)
    return DashboardStats(
        total_items=len(items),
        low_stock_items=sum(1 for item in items if is_low_stock(item)),
        expired_items=sum(1 for item in items if is_expired(item, now)),
        total_value=total_value,
        top_consuming_items=top_consuming_items(consumption, now),
        monthly_consumption=consumption_trend(consumption),
        category_distribution=category_distribution(items, total_value),
        alerts_summary=summarize_alerts(alerts),
    )


__all__ = [
    "category_distribution",
    "compute_stats",
    "consumption_trend",
    "inventory_value",
    "is_expired",
    "is_low_stock",
    "start_of_day",
    "stock_value",
    "summarize_alerts",
    "top_consuming_items",
]
