"""
Question Bank REST Endpoints

Conventional REST resource (not the action envelope): validation failures
answer 400 with field-level details, a missing caller answers 401.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app.middleware.auth_middleware import Identity, get_current_identity
from app.models.schemas import QuestionCreateRequest, QuestionListParams
from app.services.database_service import get_db
from app.services.question_bank_service import QuestionBankService, question_to_dict
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/questions", tags=["question-bank"])

LIST_PARAMS = ("category", "subcategory", "difficulty", "limit", "skip")


def _error(status_code: int, error: str, details=None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


def _unauthorized() -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


@router.get("")
async def list_questions(
    request: Request,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Active questions filtered by category, subcategory and difficulty."""
    if identity is None:
        return _unauthorized()

    # Empty query values count as absent
    raw_params = {
        name: request.query_params.get(name)
        for name in LIST_PARAMS
        if request.query_params.get(name)
    }
    try:
        params = QuestionListParams.model_validate(raw_params)
    except ValidationError as e:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid parameters", e.errors(include_url=False))

    try:
        return QuestionBankService(db).list_questions(params)
    except Exception as e:
        logger.error(f"Error fetching questions: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch questions")


@router.post("")
async def create_question(
    request: Request,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Create a question; records made here are marked as admin-authored."""
    if identity is None:
        return _unauthorized()

    try:
        body = await request.json()
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid question data", [{"msg": f"Malformed JSON body: {e}"}])

    try:
        question_data = QuestionCreateRequest.model_validate(body)
    except ValidationError as e:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid question data", e.errors(include_url=False))

    try:
        question = QuestionBankService(db).create_question(question_data, created_by="admin")
    except Exception as e:
        logger.error(f"Error creating question: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create question")

    return JSONResponse(status_code=status.HTTP_201_CREATED, content=question_to_dict(question))
