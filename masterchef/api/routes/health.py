"""Liveness, readiness and in-process request metrics."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from masterchef.api.dependencies import get_recipe_generator
from masterchef.middleware.performance import metrics
from masterchef.services.recipe_generator import RecipeGenerator

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> Dict[str, Any]:
    """
    Cloud Run readiness probe.

    Saved recipes keep working without a model key, so the probe passes and
    only reports whether generation is available.
    """
    return {
        "status": "ready",
        "generation_configured": recipe_generator.gemini_service.is_configured,
    }


@router.get("/metrics")
async def request_metrics() -> Dict[str, Any]:
    """Request count, average latency, slow-request and 5xx counters since start."""
    return {"status": "ok", **metrics.get_summary()}
