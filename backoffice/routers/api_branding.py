from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ..crud.restaurants import get_restaurant
from ..db.session import get_db
from ..deps.auth import AuthContext, require_roles, require_tenant
from ..models.restaurant import Restaurant
from ..schemas.branding import BrandingUpdate, BrandingView
from ..services.branding import (
    LogoTooLarge,
    UnsupportedLogoType,
    branding_view,
    delete_logo,
    reset_to_defaults,
    store_logo,
    update_branding,
)

router = APIRouter(prefix="/api/v1/branding", tags=["branding"])


def _restaurant(db: Session, auth: AuthContext) -> Restaurant:
    restaurant = get_restaurant(db, auth.restaurant_id)
    if not restaurant:
        raise HTTPException(404, "Not found")
    return restaurant


@router.get("", response_model=BrandingView)
def api_get_branding(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return branding_view(_restaurant(db, auth))


@router.patch("", response_model=BrandingView)
def api_update_branding(
    payload: BrandingUpdate,
    auth: AuthContext = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    restaurant = _restaurant(db, auth)
    try:
        restaurant = update_branding(db, restaurant, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return branding_view(restaurant)


@router.post("/reset", response_model=BrandingView)
def api_reset_branding(auth: AuthContext = Depends(require_roles("admin")), db: Session = Depends(get_db)):
    return branding_view(reset_to_defaults(db, _restaurant(db, auth)))


@router.post("/logo", response_model=BrandingView, status_code=201)
async def api_upload_logo(
    file: UploadFile = File(...),
    auth: AuthContext = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    restaurant = _restaurant(db, auth)
    try:
        restaurant = store_logo(db, restaurant, file.filename, file.content_type, file.file)
    except UnsupportedLogoType as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc
    except LogoTooLarge as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    finally:
        await file.close()
    return branding_view(restaurant)


@router.delete("/logo", response_model=BrandingView)
def api_delete_logo(auth: AuthContext = Depends(require_roles("admin")), db: Session = Depends(get_db)):
    return branding_view(delete_logo(db, _restaurant(db, auth)))
