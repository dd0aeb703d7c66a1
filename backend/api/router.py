"""
Relay API router. Calls the findings store only. No business logic.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.api.schemas import (
    ErrorResponse,
    FindingSchema,
    MessageResponse,
    PetsResponse,
    StatsResponse,
    StatsSchema,
    SubmitRequest,
    SubmitResponse,
)
from backend.relay.finding_store import FindingStore
from backend.relay.validation import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

INTERNAL_ERROR = "Internal server error"


def get_store(request: Request) -> FindingStore:
    return request.app.state.findings


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post("/submit", response_model=SubmitResponse)
def post_submit(
    request: SubmitRequest | None = None,
    store: FindingStore = Depends(get_store),
):
    """
    POST /api/submit

    Body:
        - jobId (str): server job identifier
        - placeId (str): place identifier
        - pets (list[str]): non-empty list of pet names
        - rates (dict, optional): pet name -> rate

    Returns:
        {success, message, findingCount}; 400 on invalid input.
    """
    if request is None:
        # empty body is treated as {}
        request = SubmitRequest()
    try:
        result = store.submit(
            job_id=request.jobId,
            place_id=request.placeId,
            pets=request.pets,
            rates=request.rates,
        )
        return SubmitResponse(
            message="Finding submitted successfully",
            findingCount=result.count,
        )
    except ValidationError as e:
        return error_response(400, str(e))
    except Exception:
        logger.exception("Error in /api/submit")
        return error_response(500, INTERNAL_ERROR)


@router.get("/pets", response_model=PetsResponse)
def get_pets(store: FindingStore = Depends(get_store)):
    """
    GET /api/pets
    Live findings, most recent first.
    """
    try:
        listing = store.list()
        return PetsResponse(
            pets=[FindingSchema.from_finding(f) for f in listing.findings],
            count=listing.count,
            timestamp=listing.timestamp,
        )
    except Exception:
        logger.exception("Error in /api/pets")
        return error_response(500, INTERNAL_ERROR)


@router.get("/stats", response_model=StatsResponse)
def get_stats(store: FindingStore = Depends(get_store)):
    """
    GET /api/stats
    Totals, top 10 pets and oldest/newest finding times.
    """
    try:
        return StatsResponse(stats=StatsSchema.from_stats(store.stats()))
    except Exception:
        logger.exception("Error in /api/stats")
        return error_response(500, INTERNAL_ERROR)


@router.post("/clear", response_model=MessageResponse)
def post_clear(store: FindingStore = Depends(get_store)):
    """POST /api/clear — drops every finding."""
    count = store.clear()
    return MessageResponse(message=f"Cleared {count} findings")
