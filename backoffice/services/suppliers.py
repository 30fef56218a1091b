"""Supplier directory and purchase history derived from inventory items.

There is no supplier table: a supplier is any non-empty ``supplier`` value on
an inventory item, and each item with both a supplier and a unit cost counts
as one purchase of its current quantity.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Sequence

from ..core.money import ZERO, round_cents, to_decimal
from ..schemas.rows import InventoryItemRow
from ..schemas.supplier import Purchase, SupplierSummary


def purchase_history(items: Iterable[InventoryItemRow]) -> list[Purchase]:
    purchases = []
    for item in items:
        supplier = (item.supplier or "").strip()
        if not supplier or item.cost_per_unit is None:
            continue
        quantity = to_decimal(item.current_quantity)
        unit_cost = to_decimal(item.cost_per_unit)
        purchases.append(
            Purchase(
                item_id=item.id,
                supplier_name=supplier,
                item_name=item.name,
                quantity=quantity,
                unit_cost=unit_cost,
                total_cost=round_cents(unit_cost * quantity),
                purchase_date=item.created_at,
            )
        )
    return purchases


def purchases_by_supplier(purchases: Iterable[Purchase], supplier_name: str) -> list[Purchase]:
    wanted = supplier_name.strip().lower()
    return [purchase for purchase in purchases if purchase.supplier_name.lower() == wanted]


def total_spent(purchases: Iterable[Purchase]) -> Decimal:
    return round_cents(sum((p.total_cost for p in purchases), ZERO))


def total_spent_by_supplier(purchases: Iterable[Purchase], supplier_name: str) -> Decimal:
    return total_spent(purchases_by_supplier(purchases, supplier_name))


def list_suppliers(items: Sequence[InventoryItemRow]) -> list[SupplierSummary]:
    """Unique supplier names in first-seen order with their products and spend."""

    purchases = purchase_history(items)
    products: Dict[str, list[str]] = {}
    for item in items:
        supplier = (item.supplier or "").strip()
        if supplier:
            products.setdefault(supplier, []).append(item.name)
    summaries = []
    for name, product_names in products.items():
        matched = [p for p in purchases if p.supplier_name == name]
        summaries.append(
            SupplierSummary(
                name=name,
                products=product_names,
                purchase_count=len(matched),
                total_spent=total_spent(matched),
            )
        )
    return summaries


__all__ = [
    "list_suppliers",
    "purchase_history",
    "purchases_by_supplier",
    "total_spent",
    "total_spent_by_supplier",
]
