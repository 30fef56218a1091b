from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..crud.restaurants import get_membership
from ..db.session import get_db
from ..core.security import decode_token
from ..middlewares import principal_ctx_var, tenant_ctx_var
from ..services.dashboard import DashboardStore
from ..services.pricing import PricingStore


class AuthContext:
    def __init__(self, *, subject: str, restaurant_id: int | None = None, role: str | None = None) -> None:
        self.subject = subject
        self.restaurant_id = restaurant_id
        self.role = role


def _unauthorized(detail: str = "Unauthorized") -> None:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def _set_tenant(request: Request, restaurant_id: int) -> None:
    tenant_ctx_var.set(restaurant_id)
    request.state.restaurant_id = restaurant_id


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> AuthContext:
    """Authenticate the bearer access token; the restaurant claim is optional here."""

    if not authorization:
        _unauthorized("Authorization required")
    scheme, credentials = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not credentials:
        _unauthorized("Bearer token required")
    try:
        payload = decode_token(credentials, verify_type="access")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    _set_principal(request, f"jwt:{payload.sub}")
    request.state.token_payload = payload
    return AuthContext(subject=payload.sub, restaurant_id=payload.rid, role=payload.role)


def require_tenant(
    request: Request,
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Resolve the caller's restaurant and current role from an active membership."""

    if auth.restaurant_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token is not bound to a restaurant")
    membership = get_membership(db, auth.restaurant_id, auth.subject)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this restaurant")
    _set_tenant(request, auth.restaurant_id)
    return AuthContext(subject=auth.subject, restaurant_id=auth.restaurant_id, role=membership.role)


def require_roles(*roles: str):
    allowed = set(roles)

    def dependency(auth: AuthContext = Depends(require_tenant)) -> AuthContext:
        if auth.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return auth

    return dependency


def get_dashboard_store(request: Request) -> DashboardStore:
    return request.app.state.dashboard_store


def get_pricing_store(request: Request) -> PricingStore:
    return request.app.state.pricing_store
