import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api import state
from api.metrics import MetricsMiddleware
from api.routers import notes, ops, providers, settings, tasks
from mindstream.errors import (
    InvalidSchema,
    MalformedResponse,
    MindStreamError,
    MissingCredential,
    PersistenceError,
    RecognitionFailed,
    TaskNotFound,
    UnknownProvider,
    UnsupportedCapability,
    UpstreamError,
)
from storage import db
from storage.task_store import PostgresTaskStore

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    MissingCredential: 400,
    UnknownProvider: 400,
    UnsupportedCapability: 400,
    RecognitionFailed: 422,
    UpstreamError: 502,
    MalformedResponse: 502,
    InvalidSchema: 502,
    TaskNotFound: 404,
    PersistenceError: 500,
}

app = FastAPI(title="MindStream")
app.add_middleware(MetricsMiddleware)

app.include_router(ops.router, tags=["ops"])
app.include_router(providers.router, tags=["providers"])
app.include_router(settings.router, prefix="/settings", tags=["settings"])
app.include_router(notes.router, tags=["notes"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])


@app.exception_handler(MindStreamError)
async def mindstream_error_handler(request: Request, exc: MindStreamError) -> JSONResponse:
    status = ERROR_STATUS.get(type(exc), 500)
    logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc}")
    return JSONResponse(
        status_code=status,
        content={"error": exc.code, "message": exc.user_message},
    )


@app.on_event("startup")
async def startup() -> None:
    if state.USE_DATABASE:
        await db.init_db_pool()
        await db.init_schema()
        state.backend.task_store = PostgresTaskStore()
        logger.info("Using PostgreSQL task store")
    else:
        logger.info("USE_DATABASE is off; tasks are kept in memory")


@app.on_event("shutdown")
async def shutdown() -> None:
    await db.close_db_pool()
