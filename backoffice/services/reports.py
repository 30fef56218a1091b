"""Tabular reports built from the same rows as the dashboard stats."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Sequence

from ..core.money import HUNDRED, ZERO, round_percent, safe_ratio, to_decimal
from ..schemas.dashboard import (
    ConsumptionHistoryRow,
    PerformanceRow,
    Priority,
    ReportData,
    RestockRecommendation,
    WasteRow,
)
from ..schemas.rows import ConsumptionRow, InventoryItemRow, RestockSuggestionRow
from .stats import inventory_value, is_expired, stock_value

PERFORMANCE_ITEM_LIMIT = 10
HISTORY_LIMIT = 50
HIGH_PRIORITY_DAYS = Decimal("3")
MEDIUM_PRIORITY_DAYS = Decimal("7")


def restock_priority(days_until_stockout: float | None) -> Priority:
    """Bucket a suggestion by urgency.

    An unknown stockout horizon counts as 0 days, i.e. ``high``.
    """

    days = to_decimal(days_until_stockout)
    if days <= HIGH_PRIORITY_DAYS:
        return "high"
    if days <= MEDIUM_PRIORITY_DAYS:
        return "medium"
    return "low"


def performance_report(
    items: Sequence[InventoryItemRow],
    consumption: Sequence[ConsumptionRow],
    limit: int = PERFORMANCE_ITEM_LIMIT,
) -> list[PerformanceRow]:
    rows = []
    for item in items[:limit]:
        consumed = sum(
            (to_decimal(row.quantity_consumed) for row in consumption if row.item_id == item.id),
            ZERO,
        )
        current = to_decimal(item.current_quantity)
        efficiency = min(100, round_percent(consumed / current * HUNDRED)) if current > 0 else 0
        # No restock history is recorded anywhere, so ``restocked`` stays 0.
        rows.append(PerformanceRow(item=item.name, consumed=consumed, restocked=ZERO, efficiency=efficiency))
    return rows


def consumption_history(consumption: Sequence[ConsumptionRow], limit: int = HISTORY_LIMIT) -> list[ConsumptionHistoryRow]:
    """First ``limit`` rows in the order they were fetched, each with its cost."""

    return [
        ConsumptionHistoryRow(
            date=row.consumption_date,
            item=row.item_name,
            quantity=to_decimal(row.quantity_consumed),
            cost=to_decimal(row.quantity_consumed) * to_decimal(row.item_cost),
        )
        for row in consumption[:limit]
    ]


def waste_analysis(items: Sequence[InventoryItemRow], now: datetime) -> list[WasteRow]:
    """Expired stock, with each item's share of the value of the whole inventory."""

    total_value = inventory_value(items)
    rows = []
    for item in items:
        if not is_expired(item, now):
            continue
        cost = stock_value(item)
        rows.append(
            WasteRow(
                item=item.name,
                expired=to_decimal(item.current_quantity),
                cost=cost,
                percentage=round_percent(safe_ratio(cost, total_value) * HUNDRED),
            )
        )
    return rows


def restock_recommendations(suggestions: Sequence[RestockSuggestionRow]) -> list[RestockRecommendation]:
    return [
        RestockRecommendation(
            item=suggestion.item_name,
            current=to_decimal(suggestion.item.current_quantity if suggestion.item else None),
            suggested=to_decimal(suggestion.suggested_quantity),
            priority=restock_priority(suggestion.days_until_stockout),
        )
        for suggestion in suggestions
    ]


def build_reports(
    items: Sequence[InventoryItemRow],
    consumption: Sequence[ConsumptionRow],
    suggestions: Sequence[RestockSuggestionRow],
    now: datetime,
) -> ReportData:
    return ReportData(
        performance_report=performance_report(items, consumption),
        consumption_history=consumption_history(consumption),
        waste_analysis=waste_analysis(items, now),
        restock_recommendations=restock_recommendations(suggestions),
    )


__all__ = [
    "build_reports",
    "consumption_history",
    "performance_report",
    "restock_priority",
    "restock_recommendations",
    "waste_analysis",
]
