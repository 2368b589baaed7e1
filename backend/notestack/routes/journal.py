"""
notestack: Journal Route Handlers
===================================

What:  GET /, POST /save, GET /notes for the file-backed journal service.
How:   Plain-text in, plain-text out. The request body of POST /save is
       stored as-is, followed by a newline.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from notestack.services.journal_service import JournalService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Journal"])

INDEX_TEXT = (
    "notestack journal\n"
    "POST /save   append the request body as a line\n"
    "GET  /notes  read every saved line\n"
    "GET  /healthz\n"
)


def get_journal_service(request: Request) -> JournalService:
    """Dependency: JournalService bound to the app's JournalFile."""
    return JournalService(request.app.state.journal)


@router.get("/", response_class=PlainTextResponse, summary="Service description")
async def index() -> PlainTextResponse:
    return PlainTextResponse(INDEX_TEXT)


@router.post(
    "/save",
    status_code=201,
    response_class=PlainTextResponse,
    summary="Append the raw request body to the journal",
)
async def save(
    request: Request,
    service: JournalService = Depends(get_journal_service),
) -> PlainTextResponse:
    raw = await request.body()
    await service.save(raw)
    logger.info("Saved %d bytes to journal", len(raw))
    return PlainTextResponse("saved", status_code=201)


@router.get(
    "/notes",
    response_class=PlainTextResponse,
    summary="Read the whole journal",
)
async def read_notes(
    service: JournalService = Depends(get_journal_service),
) -> PlainTextResponse:
    return PlainTextResponse(await service.read_notes())
