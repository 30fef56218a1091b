from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..deps.auth import AuthContext, get_pricing_store, require_tenant
from ..schemas.pricing import (
    CategoryMarkupRequest,
    ItemPricing,
    MarkupPreset,
    MarkupQuote,
    MarkupRequest,
    PriceOverride,
    PricingSummary,
)
from ..services.pricing import MARKUP_PRESETS, PricingStore, markup_percentage, profit_target_to_markup

router = APIRouter(prefix="/api/v1/pricing", tags=["pricing"])


@router.get("", response_model=list[ItemPricing])
def api_list_pricing(
    category: str | None = Query(default=None),
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    rows = store.book(db, auth.restaurant_id).rows()
    if category:
        rows = [row for row in rows if row.category == category]
    return rows


@router.get("/summary", response_model=PricingSummary)
def api_pricing_summary(
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    return store.book(db, auth.restaurant_id).summary()


@router.get("/categories", response_model=list[str])
def api_pricing_categories(
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    return store.book(db, auth.restaurant_id).categories()


@router.post("/reload", response_model=list[ItemPricing])
def api_reload_pricing(
    payload: MarkupRequest | None = None,
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    return store.reload(db, auth.restaurant_id, payload.markup if payload else None).rows()


@router.post("/recalculate", response_model=list[ItemPricing])
def api_recalculate_all(
    payload: MarkupRequest | None = None,
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    return store.book(db, auth.restaurant_id).recalculate_all(payload.markup if payload else None)


@router.post("/categories/{name}", response_model=list[ItemPricing])
def api_apply_category_markup(
    name: str,
    payload: CategoryMarkupRequest,
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    book = store.book(db, auth.restaurant_id)
    if name not in book.categories():
        raise HTTPException(404, "Not found")
    return book.apply_by_category(name, payload.markup)


@router.patch("/items/{item_id}", response_model=ItemPricing)
def api_override_price(
    item_id: int,
    payload: PriceOverride,
    auth: AuthContext = Depends(require_tenant),
    store: PricingStore = Depends(get_pricing_store),
    db: Session = Depends(get_db),
):
    try:
        return store.book(db, auth.restaurant_id).update_price(item_id, payload.price)
    except KeyError as exc:
        raise HTTPException(404, "Not found") from exc


@router.get("/markup", response_model=MarkupQuote)
def api_markup_for_target(
    profit_target: Decimal = Query(gt=0, lt=100),
    auth: AuthContext = Depends(require_tenant),
):
    try:
        markup = profit_target_to_markup(profit_target)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return MarkupQuote(
        profit_target=profit_target,
        markup=markup,
        markup_percentage=markup_percentage(markup),
    )


@router.get("/presets", response_model=list[MarkupPreset])
def api_markup_presets(auth: AuthContext = Depends(require_tenant)):
    return list(MARKUP_PRESETS)
