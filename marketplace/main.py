# marketplace/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .context import AppContext
from .errors import MarketplaceError
from .routers import admin, balances, contracts, health, jobs
from .seed import seed

log = logging.getLogger("uvicorn.error")


async def marketplace_error(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    else:
        log.warning(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


async def storage_error(request: Request, exc: SQLAlchemyError):
    log.error(f"{request.method} {request.url.path} -> storage error: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Storage failure", "code": "store_failure"})


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    settings = settings or (context.settings if context else Settings.from_env())
    context = context or AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_schema:
            await context.store.create_all()
            log.info("Database schema ready")
        if settings.seed_data:
            await seed(context.store)
        yield
        await context.store.dispose()

    app = FastAPI(title="Marketplace API", version="1.0.0", lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(MarketplaceError, marketplace_error)
    app.add_exception_handler(SQLAlchemyError, storage_error)

    # routers
    app.include_router(health.router)
    app.include_router(contracts.router)
    app.include_router(jobs.router)
    app.include_router(balances.router)
    app.include_router(admin.router)
    return app


# ──────────────────────────────────────────────────────────────────────────────
# Local dev entrypoint
# ──────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "marketplace.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=Settings.from_env().port,
    )
