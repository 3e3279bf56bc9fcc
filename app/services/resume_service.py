"""
Resume Service for Interprep

Stores uploaded resumes, requests an AI review of their text and keeps the
one-default-resume-per-owner invariant.
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app.config import Settings, get_settings
from app.database.models import Resume
from app.exceptions import InvalidResponseError, ResourceNotFoundError, UploadValidationError
from app.models.schemas import ResumeAnalysis, ResumeUploadRequest
from app.services.ai.gateway import AIGateway
from app.utils.datetime_utils import isoformat, utcnow
from app.utils.fallback_responses import FallbackResponses
from app.utils.logger import get_logger
from app.utils.prompt_templates import PromptTemplates
from app.utils.response_parser import ResponseParser

logger = get_logger(__name__)

RESUME_ANALYSIS_MAX_TOKENS = 512


def empty_parsed_sections() -> Dict[str, Any]:
    return {
        "summary": None,
        "experience": [],
        "education": [],
        "skills": [],
        "certifications": []
    }


def validate_upload(upload: ResumeUploadRequest, settings: Settings) -> None:
    """
    Reject anything that is not a PDF within the size limit.

    Raises:
        UploadValidationError: On wrong MIME type or oversized file
    """
    if upload.type != settings.RESUME_ALLOWED_MIME_TYPE:
        raise UploadValidationError("Only PDF files are supported", {"mime_type": upload.type})
    if upload.size > settings.RESUME_MAX_SIZE_BYTES:
        raise UploadValidationError("File size must be less than 5MB", {"size": upload.size})


class ResumeService:
    """Service for managing resumes and their analysis."""

    def __init__(self, db: Session, ai_gateway: Optional[AIGateway] = None, settings: Optional[Settings] = None):
        self.db = db
        self.ai_gateway = ai_gateway
        self.settings = settings or get_settings()

    def _get_owned_resume(self, owner_id: str, resume_id: str) -> Resume:
        resume = self.db.query(Resume).filter(
            Resume.id == resume_id,
            Resume.owner_id == owner_id
        ).first()
        if resume is None:
            raise ResourceNotFoundError("Resume not found", {"resume_id": resume_id})
        return resume

    def _storage_url(self, owner_id: str, file_name: str) -> str:
        base_url = self.settings.RESUME_STORAGE_BASE_URL.rstrip("/")
        return f"{base_url}/{quote(owner_id)}/{quote(file_name)}"

    async def analyze_resume(self, resume_text: str) -> Dict[str, Any]:
        """AI review of resume text; the default analysis on any failure."""
        prompt = PromptTemplates.get_resume_analysis_prompt(resume_text, self.settings.RESUME_ANALYSIS_CHAR_LIMIT)
        result = await self.ai_gateway.generate_result(
            prompt,
            prefer_fast=True,
            max_tokens=RESUME_ANALYSIS_MAX_TOKENS
        )
        if not result.ok:
            return FallbackResponses.get_fallback_resume_analysis()

        try:
            parsed = ResponseParser.extract_json_object(result.value)
            return ResumeAnalysis.model_validate(parsed).model_dump(exclude_none=True)
        except (InvalidResponseError, ValidationError) as e:
            logger.warning(f"Could not parse resume analysis, using default: {e}")
            return FallbackResponses.get_fallback_resume_analysis()

    async def upload_resume(self, owner_id: str, upload: ResumeUploadRequest) -> Dict[str, Any]:
        """Validate, store and analyze a resume. The owner's first resume becomes the default."""
        validate_upload(upload, self.settings)

        has_resumes = self.db.query(Resume.id).filter(Resume.owner_id == owner_id).first() is not None
        resume = Resume(
            owner_id=owner_id,
            file_name=upload.name,
            file_url=self._storage_url(owner_id, upload.name),
            file_size=upload.size,
            mime_type=upload.type,
            extracted_text=upload.content,
            parsed_sections=empty_parsed_sections(),
            is_default=not has_resumes
        )
        self.db.add(resume)
        self.db.commit()
        logger.info(f"Stored resume {resume.id} for {owner_id} (default={resume.is_default})")

        analysis = await self.analyze_resume(upload.content)

        resume.analysis = analysis
        resume.analyzed_at = utcnow()
        self.db.commit()

        return {"resumeId": resume.id, "analysis": analysis}

    def list_resumes(self, owner_id: str) -> List[Dict[str, Any]]:
        resumes = self.db.query(Resume).filter(
            Resume.owner_id == owner_id
        ).order_by(Resume.created_at.desc()).all()

        return [
            {
                "id": r.id,
                "fileName": r.file_name,
                "createdAt": isoformat(r.created_at),
                "analyzedAt": isoformat(r.analyzed_at),
                "isDefault": r.is_default,
                "analysis": {
                    "overallScore": r.analysis.get("overallScore"),
                    "atsScore": r.analysis.get("atsScore")
                } if r.analysis else None
            }
            for r in resumes
        ]

    def get_resume_details(self, owner_id: str, resume_id: str) -> Dict[str, Any]:
        resume = self._get_owned_resume(owner_id, resume_id)
        return {
            "fileName": resume.file_name,
            "extractedText": resume.extracted_text,
            "parsedSections": dict(resume.parsed_sections or {}),
            "analysis": resume.analysis
        }

    def delete_resume(self, owner_id: str, resume_id: str) -> None:
        """Delete a resume; removing the default promotes the newest remaining one."""
        resume = self._get_owned_resume(owner_id, resume_id)
        was_default = resume.is_default

        self.db.delete(resume)
        self.db.flush()

        if was_default:
            replacement = self.db.query(Resume).filter(
                Resume.owner_id == owner_id
            ).order_by(Resume.created_at.desc()).first()
            if replacement is not None:
                replacement.is_default = True
                logger.info(f"Promoted resume {replacement.id} to default for {owner_id}")

        self.db.commit()
        logger.info(f"Deleted resume {resume_id} for {owner_id}")

    def set_default_resume(self, owner_id: str, resume_id: str) -> None:
        """Unset every default for the owner, then mark one resume."""
        resume = self._get_owned_resume(owner_id, resume_id)

        self.db.query(Resume).filter(
            Resume.owner_id == owner_id
        ).update({Resume.is_default: False}, synchronize_session="fetch")
        resume.is_default = True
        self.db.commit()
