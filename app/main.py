import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.novabulk.api import api_router
from app.novabulk.core.config import settings
from app.novabulk.core.errors import setup_exception_handlers
from app.novabulk.core.logging import configure_logging
from app.novabulk.middleware.account import AccountContextMiddleware
from app.novabulk.middleware.observability import ObservabilityMiddleware
from app.novabulk.middleware.trace import TRACE_HEADER, TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(AccountContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[TRACE_HEADER, "X-Idempotency-Result"],
    )
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
