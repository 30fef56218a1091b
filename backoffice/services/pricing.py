"""Markup and margin arithmetic plus the per-restaurant pricing workspace.

Two numbers are easy to confuse here:

* **markup** is the multiplier applied to cost (2.5 means price = cost x 2.5),
  reported as ``markup_percentage`` = (markup - 1) x 100;
* **profit margin** is profit as a share of the *sale price*,
  (price - cost) / price x 100.

A 2.5 markup is therefore a 150% markup but a 60% margin.

Price overrides made through ``PricingBook.update_price`` only live in memory.
They are not written to the database and the next ``load`` discards them.
Any inventory write drops the book through ``PricingStore.invalidate``, so the
following read reloads it.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, Iterable, Sequence

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.money import HUNDRED, ZERO, round_cents, to_decimal
from ..crud.inventory import fetch_items
from ..schemas.pricing import ItemPricing, MarkupPreset, PriceTerms, PricingSummary
from ..schemas.rows import UNKNOWN_SUPPLIER, InventoryItemRow

logger = logging.getLogger(__name__)

ONE = Decimal("1")

MARKUP_PRESETS: tuple[MarkupPreset, ...] = (
    MarkupPreset(label="100% (2x)", value=Decimal("2.0"), description="Conservative"),
    MarkupPreset(label="150% (2.5x)", value=Decimal("2.5"), description="Standard"),
    MarkupPreset(label="200% (3x)", value=Decimal("3.0"), description="Premium"),
    MarkupPreset(label="300% (4x)", value=Decimal("4.0"), description="High value"),
)


def profit_margin(price: Decimal, cost: Decimal) -> Decimal:
    price = to_decimal(price)
    if price <= 0:
        return ZERO
    return round_cents((price - to_decimal(cost)) / price * HUNDRED)


def markup_percentage(markup: Decimal) -> Decimal:
    """Markup multiplier expressed as a percentage over cost."""

    return round_cents((to_decimal(markup) - ONE) * HUNDRED)


def price_item(cost: Decimal, markup: Decimal) -> PriceTerms:
    """Initial pricing of an item from its cost.

    ``markup_percentage`` comes from the unrounded price, so it stays at the
    applied multiplier whatever cent rounding does to ``suggested_price``.
    A zero cost reports 0.
    """

    cost = to_decimal(cost)
    raw_price = cost * to_decimal(markup)
    suggested = round_cents(raw_price)
    ratio = round_cents((raw_price / cost - ONE) * HUNDRED) if cost > 0 else ZERO
    return PriceTerms(
        suggested_price=suggested,
        profit_margin=profit_margin(suggested, cost),
        markup_percentage=ratio,
    )


def reprice_item(pricing: ItemPricing, markup: Decimal) -> ItemPricing:
    suggested = round_cents(pricing.current_cost * to_decimal(markup))
    return pricing.model_copy(
        update={
            "suggested_price": suggested,
            "profit_margin": profit_margin(suggested, pricing.current_cost),
            "markup_percentage": markup_percentage(markup),
        }
    )


def apply_price_override(pricing: ItemPricing, price: Decimal) -> ItemPricing:
    """Record a manual sale price; ``suggested_price`` is left untouched."""

    price = round_cents(price)
    return pricing.model_copy(
        update={
            "current_price": price,
            "profit_margin": profit_margin(price, pricing.current_cost),
        }
    )


def profit_target_to_markup(profit_target: Decimal) -> Decimal:
    """Markup multiplier that yields ``profit_target`` percent margin on the sale price.

    25 gives 1.333..., 50 gives 2. Targets of 100% or more have no finite
    markup and are rejected.
    """

    target = to_decimal(profit_target)
    if target >= HUNDRED:
        raise ValueError("profit target must be below 100%")
    return ONE / (ONE - target / HUNDRED)


def item_pricing(item: InventoryItemRow, markup: Decimal) -> ItemPricing:
    cost = to_decimal(item.cost_per_unit)
    terms = price_item(cost, markup)
    return ItemPricing(
        id=item.id,
        item_name=item.name,
        current_cost=cost,
        suggested_price=terms.suggested_price,
        profit_margin=terms.profit_margin,
        markup_percentage=terms.markup_percentage,
        category=item.category_name,
        supplier=item.supplier or UNKNOWN_SUPPLIER,
        last_updated=item.updated_at,
    )


def summarize_pricing(
    rows: Sequence[ItemPricing],
    min_margin: Decimal | None = None,
    min_markup_percentage: Decimal | None = None,
) -> PricingSummary:
    min_margin = settings.MIN_PROFIT_MARGIN if min_margin is None else min_margin
    min_markup = settings.MIN_MARKUP_PERCENTAGE if min_markup_percentage is None else min_markup_percentage
    needing_update = sum(
        1 for row in rows if row.profit_margin < min_margin or row.markup_percentage < min_markup
    )
    total_margin = sum((row.profit_margin for row in rows), ZERO)
    return PricingSummary(
        total_items=len(rows),
        items_needing_update=needing_update,
        average_margin=round_cents(total_margin / len(rows)) if rows else round_cents(ZERO),
        total_potential_revenue=round_cents(sum((row.suggested_price for row in rows), ZERO)),
    )


class PricingBook:
    """One restaurant's editable pricing list.

    Every mutation builds a new list and swaps it in under the lock, so two
    edits can never interleave half-way.
    """

    def __init__(self, restaurant_id: int) -> None:
        self.restaurant_id = restaurant_id
        self.loaded_at: datetime | None = None
        self._rows: list[ItemPricing] = []
        self._lock = threading.Lock()

    def load(self, items: Iterable[InventoryItemRow], markup: Decimal | None = None) -> list[ItemPricing]:
        markup = settings.DEFAULT_MARKUP if markup is None else markup
        rows = [item_pricing(item, markup) for item in items]
        with self._lock:
            self._rows = rows
            self.loaded_at = datetime.now(timezone.utc)
        return list(rows)

    def rows(self) -> list[ItemPricing]:
        with self._lock:
            return list(self._rows)

    def categories(self) -> list[str]:
        return sorted({row.category for row in self.rows()})

    def _replace(self, transform: Callable[[ItemPricing], ItemPricing]) -> list[ItemPricing]:
        with self._lock:
            self._rows = [transform(row) for row in self._rows]
            return list(self._rows)

    def recalculate_all(self, markup: Decimal | None = None) -> list[ItemPricing]:
        markup = settings.DEFAULT_MARKUP if markup is None else markup
        logger.info(
            "pricing.recalculate_all",
            extra={"extra_data": {"restaurant_id": self.restaurant_id, "markup": str(markup)}},
        )
        return self._replace(lambda row: reprice_item(row, markup))

    def apply_by_category(self, category: str, markup: Decimal) -> list[ItemPricing]:
        logger.info(
            "pricing.apply_by_category",
            extra={"extra_data": {"restaurant_id": self.restaurant_id, "category": category, "markup": str(markup)}},
        )
        return self._replace(lambda row: reprice_item(row, markup) if row.category == category else row)

    def update_price(self, item_id: int, price: Decimal) -> ItemPricing:
        with self._lock:
            for index, row in enumerate(self._rows):
                if row.id == item_id:
                    updated = apply_price_override(row, price)
                    rows = list(self._rows)
                    rows[index] = updated
                    self._rows = rows
                    return updated
        raise KeyError(item_id)

    def summary(self) -> PricingSummary:
        return summarize_pricing(self.rows())


class PricingStore:
    """Holds a ``PricingBook`` per restaurant for the lifetime of the app."""

    def __init__(self) -> None:
        self._books: Dict[int, PricingBook] = {}
        self._lock = threading.Lock()

    def get(self, restaurant_id: int) -> PricingBook | None:
        with self._lock:
            return self._books.get(restaurant_id)

    def reload(self, db: Session, restaurant_id: int, markup: Decimal | None = None) -> PricingBook:
        items = fetch_items(db, restaurant_id)
        with self._lock:
            book = self._books.setdefault(restaurant_id, PricingBook(restaurant_id))
        book.load(items, markup)
        logger.info(
            "pricing.loaded",
            extra={"extra_data": {"restaurant_id": restaurant_id, "items": len(items)}},
        )
        return book

    def invalidate(self, restaurant_id: int) -> None:
        """Forget the restaurant's book, overrides included; the next read refetches."""

        with self._lock:
            self._books.pop(restaurant_id, None)

    def book(self, db: Session, restaurant_id: int) -> PricingBook:
        existing = self.get(restaurant_id)
        if existing is not None and existing.loaded_at is not None:
            return existing
        return self.reload(db, restaurant_id)


__all__ = [
    "MARKUP_PRESETS",
    "PricingBook",
    "PricingStore",
    "apply_price_override",
    "item_pricing",
    "markup_percentage",
    "price_item",
    "profit_margin",
    "profit_target_to_markup",
    "reprice_item",
    "summarize_pricing",
]
