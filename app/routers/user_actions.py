"""
User action endpoints: preferences, onboarding, profile, stats and achievements.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.middleware.auth_middleware import Identity, get_current_identity
from app.models.schemas import ActionResponse, OnboardingRequest, PreferencesUpdateRequest
from app.services.database_service import get_db
from app.services.stats_service import StatsService
from app.services.user_service import UserService
from app.utils.endpoint_helpers import action_endpoint

router = APIRouter(prefix="/api/actions/user", tags=["user"])


@router.get("/preferences", response_model=ActionResponse)
@action_endpoint("Failed to fetch preferences")
async def get_preferences(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Current preferences, or defaults before the first write."""
    return UserService(db).get_preferences(identity.owner_id)


@router.put("/preferences", response_model=ActionResponse)
@action_endpoint("Failed to update preferences")
async def update_preferences(
    request: PreferencesUpdateRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Update preferences, creating the user record if needed."""
    return UserService(db).update_preferences(identity, request)


@router.post("/onboarding", response_model=ActionResponse)
@action_endpoint("Failed to complete onboarding")
async def complete_onboarding(
    request: OnboardingRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    UserService(db).complete_onboarding(identity, request)
    return None


@router.post("/sync", response_model=ActionResponse)
@action_endpoint("Failed to sync user")
async def sync_user(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Make sure a user record exists for the signed-in caller."""
    service = UserService(db)
    existed = service.get_user(identity.owner_id) is not None
    user = service.ensure_user_exists(identity)
    return {"synced": user is not None, "created": user is not None and not existed}


@router.get("/profile", response_model=ActionResponse)
@action_endpoint("Failed to fetch profile")
async def get_profile(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    return UserService(db).get_profile(identity)


@router.get("/stats", response_model=ActionResponse)
@action_endpoint("Failed to fetch stats")
async def get_stats(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Totals, average score and streaks over completed interviews."""
    return StatsService(db).get_user_stats(identity.owner_id)


@router.get("/achievements", response_model=ActionResponse)
@action_endpoint("Failed to fetch achievements")
async def get_achievements(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    return StatsService(db).get_user_achievements(identity.owner_id)
