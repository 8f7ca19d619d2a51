# main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from config import Settings, settings as default_settings
from relay import RelayHandler, RelayResult
from reverse_proxy import router as proxy_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # httpx logs full request URLs, which carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Gemini relay starting, upstream model {settings.GEMINI_MODEL}")
        if not settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY is not set; POST requests will be answered with 500")
        yield
        logger.info("Gemini relay shutting down...")

    app = FastAPI(
        title="Gemini Relay",
        description="Forwards generateContent requests to the Gemini API with a server-held key",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.relay_handler = RelayHandler(settings)

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        # Methods outside the route list are rejected by the router itself
        if exc.status_code == 405:
            return RelayResult.method_not_allowed().to_response()
        return await http_exception_handler(request, exc)

    app.include_router(proxy_router)
    return app


app = create_app()


def run() -> None:
    configure_logging(default_settings)
    uvicorn.run(
        app,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
