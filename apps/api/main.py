from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

try:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
except Exception:  # pragma: no cover - optional dependency resolution
    FastAPIInstrumentor = None

from apps.api import state
from apps.api.observability import init_observability
from apps.api.routes.chat import router as chat_router
from apps.api.routes.notifications import router as notifications_router
from apps.api.routes.reminders import router as reminders_router
from packages.memorykeeper.logging_config import configure_logging


configure_logging()

tracing = init_observability()
app = FastAPI(title="MemoryKeeper API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
if FastAPIInstrumentor is not None and tracing:
    FastAPIInstrumentor.instrument_app(app)
elif FastAPIInstrumentor is None:
    logging.getLogger("memorykeeper.api").warning(
        "OpenTelemetry instrumentation not available. "
        "Install observability dependencies to enable tracing."
    )
app.include_router(reminders_router)
app.include_router(chat_router)
app.include_router(notifications_router)


@app.exception_handler(RequestValidationError)
async def _invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
def _start_notifications() -> None:
    state.start_notifications()


@app.on_event("shutdown")
def _stop_notifications() -> None:
    state.stop_notifications()
