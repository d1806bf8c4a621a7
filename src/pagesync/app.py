import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import air
from air.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from pagesync.app_logging import configure_logging
from pagesync.routes.relay import router as relay_router
from pagesync.settings import settings
from pagesync.state import build_state
from pagesync.state import RelayState
from pagesync.utils import jinja

logger = logging.getLogger(__name__)


def create_app(state: RelayState | None = None) -> air.Air:
    """Create the relay application around its own registry, feed and broker."""
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: air.Air) -> AsyncIterator[None]:
        logger.info("%s server running on port %s", settings.app_title, settings.port)
        logger.info("Open http://localhost:%s in your browser", settings.port)
        yield
        await app.state.relay.close()

    app = air.Air(lifespan=lifespan)
    app.state.relay = state or build_state()
    app.include_router(relay_router)

    if settings.static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    @app.get("/")
    def index(request: air.Request):
        return jinja(request, "index.html", {"title": settings.app_title})

    @app.get("/healthz")
    def healthz(request: air.Request):
        relay: RelayState = request.app.state.relay
        return JSONResponse(
            {
                "ok": True,
                "participants": len(relay.registry),
                "photos": len(relay.feed),
            }
        )

    return app


app = create_app()
