from fastapi import APIRouter

from forecaster.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "defaults": {
            "iterations": settings.DEFAULT_ITERATIONS,
            "seed": settings.DEFAULT_SEED,
        },
    }
