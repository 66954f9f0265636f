"""Health check endpoints.

- /health: process is up
- /healthz: database and search engine connectivity
"""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text

from backend.paper_search.db.engine import get_async_engine
from backend.paper_search.search.engine import SearchEngine, get_search_engine

router = APIRouter()


async def check_db() -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_search(engine: SearchEngine) -> tuple[bool, str]:
    """Check search engine connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        if await engine.ping():
            return (True, "ok")
        return (False, "unreachable")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
) -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if db and search are ok
        503 otherwise
    """
    db_ok, db_status = await check_db()
    search_ok, search_status = await check_search(engine)

    core_ok = db_ok and search_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "db": db_status,
            "search": search_status,
        },
    }

    if not core_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
