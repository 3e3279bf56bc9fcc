"""
User preference and profile management.

There is no registration step: a ``User`` row is created by upsert the first
time a caller writes preferences or finishes onboarding. Reads fall back to
defaults or to the identity-provider claims when no row exists yet.
"""
from typing import Any, Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.config import Settings, get_settings
from app.database.models import User
from app.middleware.auth_middleware import Identity
from app.models.schemas import OnboardingRequest, PreferencesUpdateRequest
from app.utils.datetime_utils import isoformat, utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _enum_value(value):
    return getattr(value, "value", value)


class UserService:
    """Service for user preferences, onboarding and profile data."""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def get_user(self, owner_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.owner_id == owner_id).first()

    def _upsert(self, identity: Identity, updates: Dict[str, Any]) -> User:
        """Create or update the caller's row with ``updates`` plus fresh identity claims."""
        user = self.get_user(identity.owner_id)
        if user is None:
            user = User(
                owner_id=identity.owner_id,
                timezone=self.settings.DEFAULT_TIMEZONE,
                preferred_language="en",
                onboarding_completed=False
            )
            self.db.add(user)
            logger.info(f"Creating user record for {identity.owner_id}")

        for field, value in updates.items():
            setattr(user, field, value)
        user.email = identity.email
        user.name = identity.name
        user.last_login_at = utcnow()

        self.db.commit()
        return user

    def _preferences(self, user: Optional[User]) -> Dict[str, Any]:
        if user is None:
            return {
                "preferredLanguage": "en",
                "targetRole": "",
                "experienceLevel": None,
                "timezone": self.settings.DEFAULT_TIMEZONE
            }
        return {
            "preferredLanguage": user.preferred_language,
            "targetRole": user.target_role or "",
            "experienceLevel": user.experience_level,
            "timezone": user.timezone
        }

    def get_preferences(self, owner_id: str) -> Dict[str, Any]:
        return self._preferences(self.get_user(owner_id))

    def update_preferences(self, identity: Identity, request: PreferencesUpdateRequest) -> Dict[str, Any]:
        """Upsert preferences; empty or missing fields are left untouched."""
        candidates = {
            "preferred_language": _enum_value(request.preferredLanguage),
            "target_role": request.targetRole,
            "experience_level": _enum_value(request.experienceLevel),
            "timezone": request.timezone
        }
        updates = {field: value for field, value in candidates.items() if value}
        user = self._upsert(identity, updates)
        return self._preferences(user)

    def complete_onboarding(self, identity: Identity, request: OnboardingRequest) -> None:
        self._upsert(identity, {
            "target_role": request.targetRole,
            "experience_level": request.experienceLevel.value,
            "preferred_language": request.preferredLanguage.value,
            "onboarding_completed": True
        })
        logger.info(f"Onboarding completed for {identity.owner_id}")

    def get_profile(self, identity: Identity) -> Dict[str, Any]:
        user = self.get_user(identity.owner_id)
        if user is None:
            now = isoformat(utcnow())
            return {
                "name": identity.name,
                "email": identity.email,
                "onboardingCompleted": False,
                "createdAt": now,
                "lastLoginAt": now
            }
        return {
            "name": user.name,
            "email": user.email,
            "onboardingCompleted": user.onboarding_completed,
            "createdAt": isoformat(user.created_at),
            "lastLoginAt": isoformat(user.last_login_at)
        }

    def ensure_user_exists(self, identity: Identity) -> Optional[User]:
        """Best-effort upsert used on sign-in; failures are logged, not raised."""
        try:
            return self._upsert(identity, {})
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error ensuring user exists: {e}")
            return None
