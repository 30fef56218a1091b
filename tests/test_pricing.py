import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.core.money import round_cents, round_percent
from backoffice.schemas.rows import InventoryItemRow
from backoffice.services.pricing import (
    MARKUP_PRESETS,
    PricingBook,
    apply_price_override,
    item_pricing,
    markup_percentage,
    price_item,
    profit_margin,
    profit_target_to_markup,
    summarize_pricing,
)


def _item(item_id, name, cost, category=None, supplier=None):
    return InventoryItemRow(
        id=item_id,
        name=name,
        cost_per_unit=cost,
        category={"name": category} if category else None,
        supplier=supplier,
    )


def test_price_item_standard_markup():
    terms = price_item(Decimal("10"), Decimal("2.5"))

    assert terms.suggested_price == Decimal("25.00")
    assert terms.profit_margin == Decimal("60.00")
    assert terms.markup_percentage == Decimal("150.00")


def test_price_item_markup_percentage_ignores_cent_rounding():
    terms = price_item(Decimal("0.33"), Decimal("2.5"))

    assert terms.suggested_price == Decimal("0.83")
    assert terms.markup_percentage == Decimal("150.00")
    assert terms.profit_margin == Decimal("60.24")

    for cost in ("0.07", "1.01", "3.33", "12.99"):
        assert price_item(Decimal(cost), Decimal("2.5")).markup_percentage == Decimal("150.00")


def test_profit_target_round_trip():
    markup = profit_target_to_markup(Decimal("25"))
    assert markup == pytest.approx(Decimal("1.3333"), abs=Decimal("0.0001"))

    terms = price_item(Decimal("20"), Decimal("1.3333"))
    assert terms.suggested_price == pytest.approx(Decimal("26.67"), abs=Decimal("0.01"))
    assert terms.profit_margin == pytest.approx(Decimal("25.00"), abs=Decimal("0.05"))


def test_profit_target_fifty_is_double():
    assert profit_target_to_markup(Decimal("50")) == Decimal("2")


def test_profit_target_of_hundred_is_rejected():
    with pytest.raises(ValueError):
        profit_target_to_markup(Decimal("100"))


def test_zero_cost_and_zero_price_are_safe():
    terms = price_item(Decimal("0"), Decimal("2.5"))

    assert terms.suggested_price == 0
    assert terms.profit_margin == 0
    assert terms.markup_percentage == 0
    assert profit_margin(Decimal("0"), Decimal("5")) == 0


def test_rounding_is_half_up():
    assert round_cents(Decimal("2.675")) == Decimal("2.68")
    assert round_cents(Decimal("0.125")) == Decimal("0.13")
    assert round_percent(Decimal("12.5")) == 13
    assert round_percent(Decimal("13.5")) == 14


def test_item_pricing_fallback_labels():
    row = item_pricing(_item(1, "Salt", None), Decimal("2.5"))

    assert row.current_cost == 0
    assert row.category == "Uncategorized"
    assert row.supplier == "N/A"


def test_override_keeps_suggested_price():
    row = item_pricing(_item(1, "Flour", 10), Decimal("2.5"))

    updated = apply_price_override(row, Decimal("20"))

    assert updated.current_price == Decimal("20.00")
    assert updated.suggested_price == Decimal("25.00")
    assert updated.profit_margin == Decimal("50.00")
    assert row.current_price is None


def test_recalculate_all_is_idempotent():
    book = PricingBook(restaurant_id=1)
    book.load([_item(1, "Flour", 3.33, "Dry"), _item(2, "Milk", 1.1, "Dairy")])

    first = book.recalculate_all(Decimal("3"))
    second = book.recalculate_all(Decimal("3"))

    assert first == second
    assert first[0].suggested_price == Decimal("9.99")
    assert first[0].markup_percentage == Decimal("200.00")


def test_apply_by_category_is_exact_match():
    book = PricingBook(restaurant_id=1)
    book.load([_item(1, "Flour", 10, "Dry"), _item(2, "Rice", 10, "dry"), _item(3, "Milk", 10, "Dairy")])

    rows = book.apply_by_category("Dry", Decimal("2"))

    by_id = {row.id: row for row in rows}
    assert by_id[1].suggested_price == Decimal("20.00")
    assert by_id[2].suggested_price == Decimal("25.00")
    assert by_id[3].suggested_price == Decimal("25.00")
    assert book.categories() == ["Dairy", "Dry", "dry"]


def test_price_overrides_are_lost_on_load():
    items = [_item(1, "Flour", 10)]
    book = PricingBook(restaurant_id=1)
    book.load(items)

    book.update_price(1, Decimal("30"))
    assert book.rows()[0].current_price == Decimal("30.00")

    book.load(items)
    assert book.rows()[0].current_price is None


def test_update_price_unknown_item():
    book = PricingBook(restaurant_id=1)
    book.load([_item(1, "Flour", 10)])

    with pytest.raises(KeyError):
        book.update_price(42, Decimal("5"))


def test_summary_flags_low_margin_items():
    book = PricingBook(restaurant_id=1)
    book.load([_item(1, "Flour", 10), _item(2, "Milk", 4)], markup=Decimal("2.5"))
    book.apply_by_category("Uncategorized", Decimal("2.5"))
    book.update_price(2, Decimal("4.50"))

    summary = book.summary()

    assert summary.total_items == 2
    assert summary.items_needing_update == 1
    assert summary.total_potential_revenue == Decimal("35.00")
    assert summary.average_margin == round_cents((Decimal("60.00") + Decimal("11.11")) / 2)


def test_summary_of_empty_book():
    summary = summarize_pricing([])

    assert summary.total_items == 0
    assert summary.average_margin == 0
    assert summary.total_potential_revenue == 0


def test_markup_presets_and_percentage():
    assert [preset.value for preset in MARKUP_PRESETS] == [
        Decimal("2.0"),
        Decimal("2.5"),
        Decimal("3.0"),
        Decimal("4.0"),
    ]
    assert markup_percentage(Decimal("2.5")) == Decimal("150.00")
