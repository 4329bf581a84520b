"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from meal_swaps.api.models import (
    ApplyResponse,
    MealPayload,
    PreviewResponse,
    SkippedPayload,
    SuggestionPayload,
    SuggestRequest,
    SuggestResponse,
    SwapRequest,
)
from meal_swaps.app_logging import configure_logging
from meal_swaps.containers import AppContainer
from meal_swaps.domain.errors import (
    ServiceUnavailableError,
    SwapError,
    SwapTimeoutError,
)
from meal_swaps.domain.meals import Meal
from meal_swaps.domain.swaps import SwapSuggestion
from meal_swaps.services.goals import build_goal


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SwapError)
    async def swap_error_handler(request: Request, exc: SwapError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Swap request failed: %s", exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/swaps/suggestions")
    async def suggest_swaps(
        payload: SuggestRequest, request: Request
    ) -> SuggestResponse:
        """Return ranked swap suggestions for a meal."""
        state_container: AppContainer = request.app.state.container
        meal = _meal_from(payload.meal)
        goals = [
            build_goal(
                goal.nutrient,
                goal.direction,
                goal.intensity,
                goal.percent,
                policy=state_container.goal_policy,
            )
            for goal in payload.goals
        ]
        report = await state_container.swap_engine.suggest_with_report(
            meal, goals, max_results=payload.max_results
        )
        return SuggestResponse(
            suggestions=[SuggestionPayload.from_domain(s) for s in report.suggestions],
            skipped=[SkippedPayload.from_domain(s) for s in report.skipped],
            timed_out=report.timed_out,
        )

    @app.post("/swaps/preview")
    async def preview_swap(payload: SwapRequest, request: Request) -> PreviewResponse:
        """Return meal totals before and after a suggestion."""
        state_container: AppContainer = request.app.state.container
        preview = await state_container.swap_engine.preview_swap(
            _meal_from(payload.meal), _suggestion_from(payload.suggestion)
        )
        return PreviewResponse.from_domain(preview)

    @app.post("/swaps/apply")
    async def apply_swap(payload: SwapRequest, request: Request) -> ApplyResponse:
        """Return the meal with the chosen suggestion applied."""
        state_container: AppContainer = request.app.state.container
        updated = state_container.swap_engine.apply_swap(
            _meal_from(payload.meal), _suggestion_from(payload.suggestion)
        )
        return ApplyResponse(meal=MealPayload.from_domain(updated))

    return app


def _status_for(exc: SwapError) -> int:
    if isinstance(exc, ServiceUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, SwapTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_400_BAD_REQUEST


def _meal_from(payload: MealPayload) -> Meal:
    try:
        return payload.to_domain()
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _suggestion_from(payload: SuggestionPayload) -> SwapSuggestion:
    try:
        return payload.to_domain()
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
