import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db, log, settings
from status import router as status_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # The service keeps serving when MongoDB is unreachable.
    await db.init_client()
    try:
        yield
    finally:
        await db.close_client()


log.configure_logging()

app = FastAPI(lifespan=lifespan)

# Allow the browser front end (any origin by default) to call this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(status_router.router, tags=["status"])


@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "database": "connected" if db.is_connected() else "disconnected",
    }
