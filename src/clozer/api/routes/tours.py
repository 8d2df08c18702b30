"""Tour routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import (
    CompletionRequest,
    CompletionResponse,
    ReoptimizationRequest,
    ReoptimizationResponse,
    TourOptimizationRequest,
    TourOptimizationResponse,
)
from ...services.planning.service import estimate_completion_request
from ...services.routing.service import optimize_tour_request, reoptimize_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tours", tags=["tours"])


@router.post("/optimize", response_model=TourOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: TourOptimizationRequest) -> TourOptimizationResponse:
    try:
        return optimize_tour_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing tour: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize tour: {str(exc)}",
        ) from exc


@router.post("/reoptimize", response_model=ReoptimizationResponse, status_code=status.HTTP_200_OK)
def reoptimize(payload: ReoptimizationRequest) -> ReoptimizationResponse:
    """Re-plan the rest of a running tour after a client was found absent."""
    try:
        return reoptimize_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error re-optimizing tour: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to re-optimize tour: {str(exc)}",
        ) from exc


@router.post("/completion", response_model=CompletionResponse, status_code=status.HTTP_200_OK)
def completion(payload: CompletionRequest) -> CompletionResponse:
    try:
        return estimate_completion_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
