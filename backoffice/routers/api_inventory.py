from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..crud.inventory import (
    create_category,
    create_item,
    delete_item,
    fetch_alerts,
    fetch_items,
    fetch_restock_suggestions,
    get_alert,
    get_item,
    list_categories,
    list_consumption,
    mark_alert_read,
    record_consumption,
    update_item,
)
from ..db.session import get_db
from ..deps.auth import AuthContext, require_tenant
from ..schemas.inventory import (
    CategoryCreate,
    CategoryOut,
    ConsumptionCreate,
    ConsumptionOut,
    ItemCreate,
    ItemOut,
    ItemUpdate,
)
from ..schemas.rows import AlertRow, RestockSuggestionRow

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


def _drop_cached_views(request: Request, restaurant_id: int) -> None:
    # Dashboard and pricing are derived from these rows; the next read recomputes them.
    request.app.state.dashboard_store.invalidate(restaurant_id)
    request.app.state.pricing_store.invalidate(restaurant_id)


# ---------- Items ----------


@router.get("/items", response_model=list[ItemOut])
def api_list_items(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return fetch_items(db, auth.restaurant_id)


@router.post("/items", response_model=ItemOut, status_code=201)
def api_create_item(
    payload: ItemCreate,
    request: Request,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    try:
        item = create_item(db, auth.restaurant_id, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _drop_cached_views(request, auth.restaurant_id)
    return item


@router.get("/items/{item_id}", response_model=ItemOut)
def api_get_item(item_id: int, auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    item = get_item(db, auth.restaurant_id, item_id)
    if not item:
        raise HTTPException(404, "Not found")
    return item


@router.patch("/items/{item_id}", response_model=ItemOut)
def api_update_item(
    item_id: int,
    payload: ItemUpdate,
    request: Request,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    item = get_item(db, auth.restaurant_id, item_id)
    if not item:
        raise HTTPException(404, "Not found")
    try:
        item = update_item(db, item, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _drop_cached_views(request, auth.restaurant_id)
    return item


@router.delete("/items/{item_id}")
def api_delete_item(
    item_id: int,
    request: Request,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    item = get_item(db, auth.restaurant_id, item_id)
    if not item:
        raise HTTPException(404, "Not found")
    delete_item(db, item)
    _drop_cached_views(request, auth.restaurant_id)
    return {"ok": True}


# ---------- Consumption ----------


@router.get("/consumption", response_model=list[ConsumptionOut])
def api_list_consumption(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    return list_consumption(db, auth.restaurant_id, limit=limit, offset=offset)


@router.post("/consumption", response_model=ConsumptionOut, status_code=201)
def api_record_consumption(
    payload: ConsumptionCreate,
    request: Request,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    try:
        record = record_consumption(
            db,
            auth.restaurant_id,
            item_id=payload.item_id,
            quantity=payload.quantity_consumed,
            consumption_date=payload.consumption_date,
        )
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _drop_cached_views(request, auth.restaurant_id)
    return record


# ---------- Alerts & suggestions ----------


@router.get("/alerts", response_model=list[AlertRow])
def api_list_alerts(
    unread: bool = Query(default=False),
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    alerts = fetch_alerts(db, auth.restaurant_id)
    if unread:
        alerts = [alert for alert in alerts if not alert.is_read]
    return alerts


@router.post("/alerts/{alert_id}/read", response_model=AlertRow)
def api_mark_alert_read(
    alert_id: int,
    request: Request,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    alert = get_alert(db, auth.restaurant_id, alert_id)
    if not alert:
        raise HTTPException(404, "Not found")
    alert = mark_alert_read(db, alert)
    request.app.state.dashboard_store.invalidate(auth.restaurant_id)
    return AlertRow.model_validate(alert)


@router.get("/restock-suggestions", response_model=list[RestockSuggestionRow])
def api_restock_suggestions(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return fetch_restock_suggestions(db, auth.restaurant_id)


# ---------- Categories ----------


@router.get("/categories", response_model=list[CategoryOut])
def api_list_categories(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return list_categories(db, auth.restaurant_id)


@router.post("/categories", response_model=CategoryOut, status_code=201)
def api_create_category(
    payload: CategoryCreate,
    auth: AuthContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    try:
        return create_category(db, auth.restaurant_id, payload.name)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
