"""
Preconditions Router
Sanity checks on a (source, destination) artifact pair before correlation.

Runs the vt_preconditions validators over two artifact directories and
returns the aggregated report.
"""
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.config import settings
from vt_preconditions.io.loader import load_artifact  # type: ignore
from vt_preconditions.io.schema import PreconditionReport  # type: ignore
from vt_preconditions.policy.profile import PreconditionProfile  # type: ignore
from vt_preconditions.runner import run_preconditions  # type: ignore
from vt_preconditions.validators.registry import DEFAULT_VALIDATORS  # type: ignore

logger = logging.getLogger(__name__)


# =============================================================================
# Request / Response Models
# =============================================================================

class PreconditionRunRequest(BaseModel):
    """Request to run the precondition checks on one artifact pair."""

    source_dir: str = Field(
        ...,
        description="Source artifact directory (absolute, or relative to ARTIFACTS_PATH)",
    )
    destination_dir: str = Field(
        ...,
        description="Destination artifact directory (absolute, or relative to ARTIFACTS_PATH)",
    )
    threshold: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description=(
            "Maximum tolerated no-return count difference as a fraction "
            "(default: NORETURN_DIFFERENCE_THRESHOLD setting)"
        ),
    )
    write_outputs: bool = Field(
        False,
        description="Write precondition_report.json next to the source artifact",
    )


class ValidatorInfo(BaseModel):
    name: str
    description: str


# =============================================================================
# Helpers
# =============================================================================

def _resolve(path_str: str) -> Path:
    path = Path(path_str)
    if not path.is_absolute():
        path = Path(settings.ARTIFACTS_PATH) / path
    return path


# =============================================================================
# Router
# =============================================================================

router = APIRouter()


@router.get(
    "/validators",
    response_model=List[ValidatorInfo],
    summary="List the registered precondition validators",
)
async def list_validators():
    return [
        ValidatorInfo(name=cls.NAME, description=cls.DESCRIPTION)
        for cls in DEFAULT_VALIDATORS
    ]


@router.post(
    "/run",
    response_model=PreconditionReport,
    status_code=status.HTTP_200_OK,
    summary="Run all precondition validators on a source/destination pair",
)
async def run_preconditions_endpoint(request: PreconditionRunRequest):
    """
    Load both artifacts (``artifact.json`` + ``functions.jsonl`` each),
    run every registered validator, and return the report.

    When *write_outputs* is set the report is written to::

        <source_dir>/preconditions/precondition_report.json
    """
    source_dir = _resolve(request.source_dir)
    destination_dir = _resolve(request.destination_dir)

    for label, path in (("Source", source_dir), ("Destination", destination_dir)):
        if not path.is_dir():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label} artifact directory not found: {path}",
            )

    threshold = (
        request.threshold
        if request.threshold is not None
        else settings.NORETURN_DIFFERENCE_THRESHOLD
    )
    try:
        profile = PreconditionProfile(noreturn_difference_threshold=threshold)
        source = load_artifact(source_dir)
        destination = load_artifact(destination_dir)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    output_dir = source_dir / "preconditions" if request.write_outputs else None
    report = run_preconditions(source, destination, profile, output_dir=output_dir)
    logger.info(
        "Preconditions %s vs %s: %s", source.name, destination.name, report.status
    )
    return report
