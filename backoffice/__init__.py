"""Application factory and top-level wiring for the restaurant back office.

Importing this package builds the FastAPI app: middleware, error handlers,
database tables, the ``/assets`` static mount, the per-tenant in-memory
stores and every API router.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.errors import register_exception_handlers
from .db.migrate import run_migrations
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Importing the models registers them with the metadata before create_all.
from .models import alert as _alert  # noqa: F401
from .models import category as _category  # noqa: F401
from .models import inventory as _inventory  # noqa: F401
from .models import restaurant as _restaurant  # noqa: F401
from .services.dashboard import DashboardStore
from .services.pricing import PricingStore

# ---------- App init ----------
app = FastAPI(title=settings.APP_NAME)

app.add_middleware(SecurityHeadersMiddleware)
if settings.ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.add_middleware(RequestIdMiddleware)
register_exception_handlers(app)

# Uploaded logos live under <assets>/<restaurant_id>/.
app.mount("/assets", StaticFiles(directory=str(settings.assets_dir)), name="assets")

# ---------- DB init/migrations ----------
Base.metadata.create_all(bind=engine)
run_migrations(engine)

# ---------- In-memory stores ----------
app.state.dashboard_store = DashboardStore()
app.state.pricing_store = PricingStore()

# ---------- Routers ----------
from .routers import api_auth as api_auth_router  # noqa: E402

app.include_router(api_auth_router.router)

from .routers import api_restaurants as api_restaurants_router  # noqa: E402

app.include_router(api_restaurants_router.router)

from .routers import api_inventory as api_inventory_router  # noqa: E402

app.include_router(api_inventory_router.router)

from .routers import api_dashboard as api_dashboard_router  # noqa: E402

app.include_router(api_dashboard_router.router)

from .routers import api_pricing as api_pricing_router  # noqa: E402

app.include_router(api_pricing_router.router)

from .routers import api_suppliers as api_suppliers_router  # noqa: E402

app.include_router(api_suppliers_router.router)

from .routers import api_branding as api_branding_router  # noqa: E402

app.include_router(api_branding_router.router)


__all__ = ["app"]
