"""
Interview session action endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.middleware.auth_middleware import Identity, get_current_identity
from app.models.schemas import ActionResponse, SendMessageRequest, SessionConfigRequest, SessionStatusFilter
from app.services.ai.gateway import AIGateway, get_ai_gateway
from app.services.database_service import get_db
from app.services.interview_service import InterviewService
from app.utils.endpoint_helpers import action_endpoint

router = APIRouter(prefix="/api/actions/interviews", tags=["interviews"])


@router.post("", response_model=ActionResponse)
@action_endpoint("Failed to create interview session")
async def create_session(
    config: SessionConfigRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    """Start a session and return its scripted opening question."""
    return await InterviewService(db, ai_gateway).create_session(identity.owner_id, config)


@router.get("", response_model=ActionResponse)
@action_endpoint("Failed to fetch interview history")
async def get_history(
    limit: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
    status: Optional[SessionStatusFilter] = Query(None),
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    return InterviewService(db, ai_gateway).get_history(
        identity.owner_id,
        limit=limit,
        skip=skip,
        status=status.value if status else None
    )


@router.get("/{session_id}", response_model=ActionResponse)
@action_endpoint("Failed to fetch interview session")
async def get_session(
    session_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    return InterviewService(db, ai_gateway).get_session(identity.owner_id, session_id)


@router.post("/{session_id}/messages", response_model=ActionResponse)
@action_endpoint("Failed to send message")
async def send_message(
    session_id: str,
    request: SendMessageRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    """Append the candidate's answer and return the interviewer's reply."""
    return await InterviewService(db, ai_gateway).send_message(identity.owner_id, session_id, request)


@router.post("/{session_id}/complete", response_model=ActionResponse)
@action_endpoint("Failed to complete interview session")
async def complete_session(
    session_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    """Close the session and return its scored feedback."""
    return await InterviewService(db, ai_gateway).complete_session(identity.owner_id, session_id)


@router.post("/{session_id}/abort", response_model=ActionResponse)
@action_endpoint("Failed to abort interview session")
async def abort_session(
    session_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    InterviewService(db, ai_gateway).abort_session(identity.owner_id, session_id)
    return None
