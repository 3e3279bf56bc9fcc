"""
Health check endpoints.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.services.ai.gateway import AIGateway, get_ai_gateway
from app.services.database_service import DatabaseService, get_database_service
from app.utils.datetime_utils import isoformat, utcnow

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Dict[str, Any])
async def health_check(database_service: DatabaseService = Depends(get_database_service)):
    """Liveness with a database connectivity check."""
    database = database_service.health_check()
    healthy = database["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": isoformat(utcnow()),
            "service": "Interprep API",
            "checks": {"database": database}
        }
    )


@router.get("/health/ai", response_model=Dict[str, Any])
async def ai_health_check(ai_gateway: AIGateway = Depends(get_ai_gateway)):
    """Probe every registered AI provider with a tiny request."""
    providers = {
        name: "available" if await ai_gateway.is_provider_available(name) else "unavailable"
        for name in ai_gateway.providers
    }
    return {
        "primary": ai_gateway.primary_provider,
        "fallback": ai_gateway.fallback_provider,
        "providers": providers
    }
