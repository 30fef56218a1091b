from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..deps.auth import AuthContext, get_dashboard_store, require_tenant
from ..schemas.dashboard import DashboardSnapshot
from ..services.dashboard import DashboardStore, DashboardUnavailable

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSnapshot)
def api_dashboard(
    auth: AuthContext = Depends(require_tenant),
    store: DashboardStore = Depends(get_dashboard_store),
    db: Session = Depends(get_db),
):
    try:
        return store.current(db, auth.restaurant_id)
    except DashboardUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.post("/refresh", response_model=DashboardSnapshot)
def api_refresh_dashboard(
    auth: AuthContext = Depends(require_tenant),
    store: DashboardStore = Depends(get_dashboard_store),
    db: Session = Depends(get_db),
):
    try:
        return store.refresh(db, auth.restaurant_id)
    except DashboardUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
