import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from batches import router as batches_router
from batches.service import BatchCache
from core import db, logs
from core.errors import DatabaseError, NotFound, SourceUnavailable
from feedback import router as feedback_router
from machines import router as machines_router
from nests import router as nests_router
from programs import router as programs_router

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logs.configure_logging()
    # One pool and one batch cache per process.
    app.state.db = await db.create_database()
    app.state.batch_cache = BatchCache()
    try:
        yield
    finally:
        await app.state.db.close()


app = FastAPI(lifespan=lifespan)

# Allow the shop-floor browser client to call this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFound)
async def not_found_handler(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DatabaseError)
@app.exception_handler(SourceUnavailable)
async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request_failed path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content=None)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "sheet batch interface api"}


# `/{machine}` in the programs router matches any single segment; keep it last.
app.include_router(machines_router.router, tags=["machines"])
app.include_router(batches_router.router, tags=["batches"])
app.include_router(nests_router.router, tags=["nests"])
app.include_router(feedback_router.router, tags=["feedback"])
app.include_router(programs_router.router, tags=["programs"])
