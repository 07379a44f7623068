from contextlib import asynccontextmanager
from fastapi import FastAPI

from socialdesk.routers.normalize import router as normalize_router
from socialdesk.routers.read import router as read_router
from socialdesk.settings import UPSTREAM_BASE_URL
from socialdesk.setup_logging import setup_logging
from socialdesk.upstream import UpstreamClient

# --------------------------------------------------------------------
# App bootstrap
# --------------------------------------------------------------------
setup_logging() # Init Logging


# --------------------------------------------------------------------
# FastAPI application with lifespan hook
# --------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context runs once at startup and once at shutdown.
    One upstream client (and its connection pool) is shared by all requests.
    """
    app.state.upstream = UpstreamClient()
    yield
    app.state.upstream.close()

# Create the FastAPI app instance
app = FastAPI(title="Socialdesk normalization gateway", lifespan=lifespan)

# --------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------
@app.get("/healthz")
def health():
    """
    Simple health check for monitoring.
    Returns:
      - ok: static True if the app is alive
      - upstream: the dashboard backend this instance reads from
    """
    return {
        "ok": True,
        "service": "socialdesk",
        "version": 1,
        "upstream": UPSTREAM_BASE_URL,
    }

# Register API routers (normalize first: read has a catch-all /{resource}/{id})
app.include_router(normalize_router)
app.include_router(read_router)
