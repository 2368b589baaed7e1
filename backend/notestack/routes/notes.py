"""
notestack: Notes Route Handlers
=================================

What:  POST /notes, GET /notes, DELETE /notes/{id}.
How:   Each handler gets a NoteService built around the store held on
       app.state, calls it once, and shapes the HTTP response.

Status codes:
    POST   /notes        201 created | 400 invalid input | 500 storage fault
    GET    /notes        200 array (possibly empty) | 500
    DELETE /notes/{id}   204 | 400 invalid id | 404 unknown id | 500
    other methods        405 (FastAPI routing)

Errors are raised, not returned; the handlers registered in
notestack.main turn them into JSON error envelopes.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from notestack.schemas.note import ErrorResponse, NoteCreate, NoteResponse
from notestack.services.note_service import NoteService, parse_note_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


def get_note_service(request: Request) -> NoteService:
    """Dependency: NoteService bound to the store the app was built with."""
    return NoteService(request.app.state.note_store)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed JSON or blank title/body", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Create a note",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": NoteCreate.model_json_schema()}},
        }
    },
)
async def create_note(
    request: Request,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Create a note from a JSON body.

    The body is decoded as JSON whatever its Content-Type, so
    `curl -d '{"title":"a","body":"b"}'` (form-urlencoded) works too.
    """
    raw = await request.body()
    try:
        payload = NoteCreate.model_validate_json(raw)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return await service.create_note(payload.title, payload.body)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Storage fault", "model": ErrorResponse}},
    summary="List notes, newest first",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return await service.list_notes()


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Id is not a positive integer", "model": ErrorResponse},
        404: {"description": "No note with this id", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Response:
    """
    Delete one note.

    note_id is taken as a raw string and parsed by parse_note_id so that
    "abc" and "0" both produce the same 400 "invalid id".
    """
    await service.delete_note(parse_note_id(note_id))
    return Response(status_code=204)
