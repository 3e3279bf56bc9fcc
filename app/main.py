from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from app.config import Settings, get_settings
from app.middleware.logging_middleware import log_requests
from app.services.ai.gateway import AIGateway
from app.services.database_service import DatabaseService
from app.startup import validate_startup
from app.utils.endpoint_helpers import action_validation_exception_handler
from app.utils.logger import get_logger
from app.utils.logging_config import setup_logging

# Setup logging configuration
setup_logging()
# Get logger instance
logger = get_logger(__name__)

API_DESCRIPTION = """
## Interprep API

Backend for AI-assisted interview practice.

### Key Features
- **Mock Interviews**: Configure a session and talk to an AI interviewer
- **Scored Feedback**: Receive a strict, rubric-based report when a session ends
- **Resume Review**: Upload a PDF resume for ATS and improvement suggestions
- **Progress**: Totals, average score, practice streaks and achievements
- **Question Bank**: Bilingual (English/Bengali) question catalogue

### Authentication
Send the identity provider's token as `Authorization: Bearer <token>`.
"""


def load_routers(app: FastAPI):
    """Include every router, logging what was loaded."""
    from app.routers import health, interview_actions, questions, resume_actions, user_actions

    routers = [
        ("health", health.router),
        ("user", user_actions.router),
        ("interviews", interview_actions.router),
        ("resumes", resume_actions.router),
        ("questions", questions.router)
    ]

    for router_name, router in routers:
        app.include_router(router)
        logger.info(f"✅ Loaded {router_name} router")

    logger.info(f"Successfully loaded routers: {', '.join(name for name, _ in routers)}")


def create_app(
    settings: Optional[Settings] = None,
    database_service: Optional[DatabaseService] = None,
    ai_gateway: Optional[AIGateway] = None
) -> FastAPI:
    """
    Build the application.

    The database service and AI gateway are created here (or injected by
    tests), initialized when the app starts and torn down when it stops.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        validate_startup(settings)

        owns_database = database_service is None
        db_service = database_service or DatabaseService(settings)
        db_service.initialize()
        health = db_service.health_check()
        if health["status"] != "healthy":
            logger.error("❌ Database connection failed")
            raise RuntimeError("Database connection failed")

        app.state.database_service = db_service
        app.state.ai_gateway = ai_gateway or AIGateway.from_settings(settings)
        logger.info("✅ Interprep API started")

        yield

        if owns_database:
            db_service.dispose()
        logger.info("✅ Interprep API stopped")

    app = FastAPI(
        title="Interprep API",
        description=API_DESCRIPTION,
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(CORSMiddleware, **settings.cors_config)
    app.add_exception_handler(RequestValidationError, action_validation_exception_handler)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        return await log_requests(request, call_next)

    load_routers(app)

    @app.get("/")
    async def root():
        return {
            "message": "Interprep API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
