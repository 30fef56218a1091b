from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..crud.restaurants import (
    MANAGER_ROLES,
    create_restaurant,
    get_member,
    get_restaurant,
    list_members,
    list_memberships,
    remove_member,
    update_member_role,
)
from ..db.session import get_db
from ..deps.auth import AuthContext, require_roles, require_tenant, require_user
from ..schemas.restaurant import MemberOut, MemberRoleUpdate, MembershipOut, RestaurantCreate, RestaurantOut

router = APIRouter(prefix="/api/v1/restaurants", tags=["restaurants"])


@router.post("", response_model=RestaurantOut, status_code=status.HTTP_201_CREATED)
def api_create(payload: RestaurantCreate, auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    try:
        return create_restaurant(db, payload.model_dump(), owner_user_id=auth.subject)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("", response_model=list[MembershipOut])
def api_list_mine(auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    memberships = []
    for member in list_memberships(db, auth.subject):
        restaurant = get_restaurant(db, member.restaurant_id)
        if restaurant is not None:
            memberships.append(
                MembershipOut(restaurant=RestaurantOut.model_validate(restaurant), role=member.role)
            )
    return memberships


@router.get("/members", response_model=list[MemberOut])
def api_list_members(auth: AuthContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return list_members(db, auth.restaurant_id)


@router.patch("/members/{member_id}", response_model=MemberOut)
def api_update_member(
    member_id: int,
    payload: MemberRoleUpdate,
    auth: AuthContext = Depends(require_roles(*MANAGER_ROLES)),
    db: Session = Depends(get_db),
):
    member = get_member(db, auth.restaurant_id, member_id)
    if not member:
        raise HTTPException(404, "Not found")
    if "admin" in (payload.role, member.role) and auth.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change admin roles")
    try:
        return update_member_role(db, member, payload.role)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/members/{member_id}")
def api_remove_member(
    member_id: int,
    auth: AuthContext = Depends(require_roles(*MANAGER_ROLES)),
    db: Session = Depends(get_db),
):
    member = get_member(db, auth.restaurant_id, member_id)
    if not member:
        raise HTTPException(404, "Not found")
    if member.role == "admin" and auth.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can remove admins")
    try:
        remove_member(db, member)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"ok": True}
