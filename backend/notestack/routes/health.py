"""
notestack: Health Check Route
===============================

What:  Liveness probe shared by both services.
How:   Always 200 "ok". No dependency is checked, so a database outage never
       makes the orchestrator restart a process that is otherwise running.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/healthz",
    response_class=PlainTextResponse,
    summary="Liveness check",
)
async def healthz() -> PlainTextResponse:
    return PlainTextResponse("ok")
