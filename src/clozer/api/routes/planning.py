"""Daily planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.planning import DailyPlanRequest, DailyPlanResponse, InsightsRequest, InsightsResponse
from ...services.planning.service import build_daily_plan, compute_insights_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/planning", tags=["planning"])


@router.post("/daily", response_model=DailyPlanResponse, status_code=status.HTTP_200_OK)
def daily_plan(payload: DailyPlanRequest) -> DailyPlanResponse:
    try:
        return build_daily_plan(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error generating daily plan: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate daily plan: {str(exc)}",
        ) from exc


@router.post("/insights", response_model=InsightsResponse, status_code=status.HTTP_200_OK)
def insights(payload: InsightsRequest) -> InsightsResponse:
    try:
        return compute_insights_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
