"""
Resume action endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.middleware.auth_middleware import Identity, get_current_identity
from app.models.schemas import ActionResponse, ResumeUploadRequest
from app.services.ai.gateway import AIGateway, get_ai_gateway
from app.services.database_service import get_db
from app.services.resume_service import ResumeService
from app.utils.endpoint_helpers import action_endpoint

router = APIRouter(prefix="/api/actions/resumes", tags=["resumes"])


@router.post("", response_model=ActionResponse)
@action_endpoint("Failed to upload resume")
async def upload_resume(
    upload: ResumeUploadRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
    ai_gateway: AIGateway = Depends(get_ai_gateway)
):
    """Store a PDF resume's extracted text and return its AI analysis."""
    return await ResumeService(db, ai_gateway).upload_resume(identity.owner_id, upload)


@router.get("", response_model=ActionResponse)
@action_endpoint("Failed to fetch resumes")
async def list_resumes(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    return ResumeService(db).list_resumes(identity.owner_id)


@router.get("/{resume_id}", response_model=ActionResponse)
@action_endpoint("Failed to fetch resume details")
async def get_resume_details(
    resume_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    return ResumeService(db).get_resume_details(identity.owner_id, resume_id)


@router.delete("/{resume_id}", response_model=ActionResponse)
@action_endpoint("Failed to delete resume")
async def delete_resume(
    resume_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    ResumeService(db).delete_resume(identity.owner_id, resume_id)
    return None


@router.post("/{resume_id}/default", response_model=ActionResponse)
@action_endpoint("Failed to set default resume")
async def set_default_resume(
    resume_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    ResumeService(db).set_default_resume(identity.owner_id, resume_id)
    return None
