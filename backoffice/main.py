from prometheus_fastapi_instrumentator import Instrumentator

from backoffice.core.config import settings
from backoffice.core.logging import setup_logging

from . import app as backoffice_app

setup_logging(settings.LOG_LEVEL)
app = backoffice_app
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}
