from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from piggybank import __version__
from piggybank.core.config import Settings, get_settings
from piggybank.core.container import ApplicationContainer
from piggybank.core.logging import configure_logging
from piggybank.interfaces.http import create_api_router
from piggybank.interfaces.http.errors import register_exception_handlers
from piggybank.interfaces.http.middleware import correlation_id_middleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    await container.startup()
    yield
    await container.shutdown()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="Personal savings wallets and investment instruments",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = ApplicationContainer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(correlation_id_middleware)

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))
    return app


app = create_app()
