from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..crud.inventory import fetch_items
from ..db.session import get_db
from ..deps.auth import AuthContext, require_tenant
from ..schemas.supplier import SupplierPurchases, SupplierSummary
from ..services.suppliers import (
    list_suppliers,
    purchase_history,
    purchases_by_supplier,
    total_spent,
    total_spent_by_supplier,
)

router = APIRouter(prefix="/api/v1/suppliers", tags=["suppliers"])


@router.get("", response_model=list[SupplierSummary])
def api_list_suppliers(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return list_suppliers(fetch_items(db, auth.restaurant_id))


@router.get("/purchases", response_model=SupplierPurchases)
def api_purchase_history(
    supplier: str | None = Query(default=None),
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    purchases = purchase_history(fetch_items(db, auth.restaurant_id))
    if not supplier:
        return SupplierPurchases(purchases=purchases, total_spent=total_spent(purchases))
    return SupplierPurchases(
        supplier=supplier,
        purchases=purchases_by_supplier(purchases, supplier),
        total_spent=total_spent_by_supplier(purchases, supplier),
    )
