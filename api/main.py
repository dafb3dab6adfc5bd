import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import repository as auth_repository
from auth import router as auth_router
from catalog import repository as catalog_repository
from catalog import router as catalog_router
from core import config, db
from core.errors import ServiceError
from core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    backend = config.store_backend()
    if backend == "postgres":
        # Initialize the DB pool once per process.
        await db.init_pool()
        app.state.users = auth_repository.PostgresUserRepository()
        app.state.sessions = auth_repository.PostgresSessionRepository()
        app.state.movies = catalog_repository.PostgresMovieRepository()
    else:
        app.state.users = auth_repository.InMemoryUserRepository()
        app.state.sessions = auth_repository.InMemorySessionRepository()
        app.state.movies = catalog_repository.InMemoryMovieRepository()
    logger.info("store_ready backend=%s", backend)
    try:
        yield
    finally:
        if backend == "postgres":
            await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Session cookies must cross origins for the local frontend dev server.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.internal:
        logger.error(
            "request_failed method=%s path=%s error=%s detail=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
            getattr(exc, "log_detail", exc.detail),
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(catalog_router.router, tags=["catalog"])
app.include_router(auth_router.router, tags=["auth"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "movie-watchlist api"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=config.api_host(), port=config.api_port())
