"""
Parse endpoints for free-text workouts

POST /parse/workout   full result with confidence metadata
POST /parse/validate  issues only
POST /parse/legacy    structured workout without confidence metadata
POST /parse/line      a single movement line

Parsing is CPU-bound and synchronous, so handlers run it in a worker thread.
"""

import asyncio
import logging
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from wod_parser_api.config import settings
from wod_parser_api.parsers.models import IssueSeverity, ParsingIssue
from wod_parser_api.services.workout_parsing_service import WorkoutParsingService
from wod_parser_api.vocabulary import VocabularyUnavailableError, load_vocabulary

logger = logging.getLogger(__name__)

router = APIRouter()

# Request bodies above this are rejected by validation before parsing; the
# parser itself only warns once text passes MAX_INPUT_LENGTH.
MAX_REQUEST_LENGTH = 50000


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ParseWorkoutRequest(BaseModel):
    """Request model for the workout endpoints"""
    text: str = Field(..., max_length=MAX_REQUEST_LENGTH, description="Free-text workout description")


class ParseLineRequest(BaseModel):
    """Request model for POST /parse/line"""
    line: str = Field(..., max_length=1000, description="One movement line, e.g. '21 Thrusters (95/65 lb)'")


class ValidateResponse(BaseModel):
    """Response model for POST /parse/validate"""
    is_valid: bool
    issues: list[ParsingIssue]
    error_count: int = 0
    warning_count: int = 0


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_parsing_service() -> WorkoutParsingService:
    """Build a parsing service over the configured vocabulary source."""
    try:
        vocabulary = load_vocabulary()
    except VocabularyUnavailableError as e:
        logger.error(f"Movement vocabulary unavailable: {e}")
        raise HTTPException(status_code=503, detail="Movement vocabulary is unavailable")
    return WorkoutParsingService(vocabulary, max_input_length=settings.MAX_INPUT_LENGTH)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/parse/workout")
async def parse_workout(
    request: ParseWorkoutRequest,
    service: WorkoutParsingService = Depends(get_parsing_service),
) -> JSONResponse:
    """
    Parse a workout into type, time domain, movements and a confidence score.

    ## Request Body
    - **text**: e.g. "AMRAP 20 min\\n5 Pull-ups\\n10 Push-ups\\n15 Air Squats"

    ## Response
    - workout_type, time_cap_seconds, round_count, interval_seconds
    - movements: one entry per parsed movement, in order
    - errors / warnings: issues ordered errors first
    - confidence_score (0-100) and confidence_level
    """
    result = await asyncio.to_thread(service.parse, request.text)
    return JSONResponse(result.model_dump(mode="json"))


@router.post("/parse/validate")
async def validate_workout(
    request: ParseWorkoutRequest,
    service: WorkoutParsingService = Depends(get_parsing_service),
) -> JSONResponse:
    """Return the errors and warnings a parse of the text would produce."""
    issues = await asyncio.to_thread(service.validate, request.text)
    errors = [i for i in issues if i.severity == IssueSeverity.ERROR.value]
    warnings = [i for i in issues if i.severity == IssueSeverity.WARNING.value]
    response = ValidateResponse(
        is_valid=not errors,
        issues=issues,
        error_count=len(errors),
        warning_count=len(warnings),
    )
    return JSONResponse(response.model_dump(mode="json"))


@router.post("/parse/legacy")
async def parse_legacy(
    request: ParseWorkoutRequest,
    service: WorkoutParsingService = Depends(get_parsing_service),
) -> JSONResponse:
    """Structured workout in the shape stored by existing clients."""
    workout = await asyncio.to_thread(service.parse_to_legacy_shape, request.text)
    return JSONResponse(workout.model_dump(mode="json"))


@router.post("/parse/line")
async def parse_line(
    request: ParseLineRequest,
    service: WorkoutParsingService = Depends(get_parsing_service),
) -> JSONResponse:
    """Parse one movement line and resolve it against the vocabulary."""
    if not request.line.strip():
        raise HTTPException(status_code=400, detail="Line is required")

    result = await asyncio.to_thread(service.parse_line, request.line)
    return JSONResponse(result.model_dump(mode="json"))
