# marketplace/routers/health.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..context import AppContext
from ..deps import get_context

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["health"])


@router.get("/")
def root(): return {"name": "marketplace-api"}


@router.get("/health")
def health(): return {"ok": True}


@router.get("/health/db")
async def health_db(ctx: AppContext = Depends(get_context)):
    try:
        return {"db": await ctx.store.ping()}
    except Exception as e:
        log.error(f"DB check failed: {e}")
        raise HTTPException(status_code=503, detail=f"DB check failed: {e}")
