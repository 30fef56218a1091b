import os
import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.schemas.rows import ConsumptionRow, InventoryItemRow, RestockSuggestionRow
from backoffice.services.reports import (
    build_reports,
    consumption_history,
    performance_report,
    restock_priority,
    restock_recommendations,
    waste_analysis,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _item(item_id, name, qty, cost=None, expiry=None):
    return InventoryItemRow(id=item_id, name=name, current_quantity=qty, cost_per_unit=cost, expiry_date=expiry)


def test_restock_priority_thresholds():
    assert restock_priority(3) == "high"
    assert restock_priority(4) == "medium"
    assert restock_priority(7) == "medium"
    assert restock_priority(8) == "low"


def test_missing_stockout_days_is_high_priority():
    assert restock_priority(None) == "high"

    recs = restock_recommendations(
        [RestockSuggestionRow(item_id=1, suggested_quantity=12, days_until_stockout=None)]
    )

    assert recs[0].priority == "high"
    assert recs[0].item == "Unknown"
    assert recs[0].current == 0


def test_waste_percentage_is_share_of_total_value():
    items = [
        _item(1, "Milk", 5, cost=10, expiry=date(2024, 3, 1)),
        _item(2, "Flour", 15, cost=10, expiry=date(2024, 5, 1)),
    ]

    waste = waste_analysis(items, NOW)

    assert len(waste) == 1
    assert waste[0].item == "Milk"
    assert waste[0].cost == Decimal("50")
    assert waste[0].percentage == 25


def test_waste_percentage_zero_without_inventory_value():
    waste = waste_analysis([_item(1, "Milk", 5, expiry=date(2024, 3, 1))], NOW)

    assert waste[0].percentage == 0


def test_performance_report_caps_efficiency_and_keeps_restocked_zero():
    items = [_item(i, f"Item {i}", 10) for i in range(1, 13)]
    items.append(_item(99, "Empty", 0))
    consumption = [
        ConsumptionRow(item_id=1, consumption_date=NOW.date(), quantity_consumed=25),
        ConsumptionRow(item_id=2, consumption_date=NOW.date(), quantity_consumed=4),
    ]

    report = performance_report(items, consumption)

    assert len(report) == 10
    assert report[0].efficiency == 100
    assert report[1].efficiency == 40
    assert report[2].efficiency == 0
    assert all(row.restocked == 0 for row in report)

    empty = performance_report([_item(99, "Empty", 0)], consumption)
    assert empty[0].efficiency == 0


def test_consumption_history_keeps_first_fifty_in_order():
    start = date(2024, 3, 14)
    consumption = [
        ConsumptionRow(
            item_id=1,
            consumption_date=start - timedelta(days=i),
            quantity_consumed=2,
            item={"name": "Flour", "unit": "kg", "cost_per_unit": 1.25},
        )
        for i in range(60)
    ]

    history = consumption_history(consumption)

    assert len(history) == 50
    assert history[0].date == start
    assert history[-1].date == start - timedelta(days=49)
    assert history[0].cost == Decimal("2.50")


def test_build_reports_handles_empty_inputs():
    reports = build_reports([], [], [], NOW)

    assert reports.performance_report == []
    assert reports.consumption_history == []
    assert reports.waste_analysis == []
    assert reports.restock_recommendations == []
