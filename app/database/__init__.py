"""
Database package: SQLAlchemy declarative models.

Engine and session handling live in app.services.database_service.
"""
from . import models
from .models import Base

__all__ = ["Base", "models"]
