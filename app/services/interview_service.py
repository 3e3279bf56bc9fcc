"""
Interview Session Service for Interprep

Runs the interview lifecycle: create a session with a scripted opening
question, exchange messages with the AI interviewer, complete with a scored
feedback report, or abort. Sessions move only from ``in_progress`` to
``completed`` or ``aborted``.
"""
import random
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from app.database.models import InterviewSession, SessionStatus
from app.exceptions import (
    ConcurrentModificationError, InvalidResponseError, OwnershipError,
    ResourceNotFoundError, SessionStateError
)
from app.models.schemas import Feedback, SendMessageRequest, SessionConfigRequest
from app.services.ai.gateway import AIGateway
from app.services.stats_service import StatsService
from app.utils.datetime_utils import elapsed_seconds, isoformat, utcnow
from app.utils.fallback_responses import FallbackResponses
from app.utils.logger import get_logger
from app.utils.prompt_templates import PromptTemplates
from app.utils.response_parser import ResponseParser

logger = get_logger(__name__)

OPENING_QUESTIONS = {
    "behavioral": [
        "Hello! Thank you for joining me today. I'm excited to learn more about you and your experiences. This will be a behavioral interview where we'll discuss how you've handled various situations in the past. Let's start with something to help me understand your background - tell me about a challenging project you worked on.",
        "Hi there! Welcome to your interview. I'm here to understand more about how you approach problems and work with others. Let's begin - can you describe a situation where you had to work with a difficult team member?",
        "Hello and welcome! Thank you for taking the time to speak with me today. In this session, we'll explore your past experiences and how you've navigated different challenges. To start, tell me about a time you failed and what you learned from it.",
    ],
    "technical": [
        "Hello! Welcome to your technical interview for the {role} position. I'll be asking you some questions to understand your technical knowledge and problem-solving abilities. Let's start by having you explain the key principles and technologies you're most experienced with in this field.",
        "Hi, great to meet you! Today we'll dive into the technical aspects of the {role} role. I'd like to start by understanding your technical background - can you describe your experience with the core technologies relevant to this position?",
        "Hello and welcome! I'm looking forward to our technical discussion today. As we explore your qualifications for the {role} role, let's begin - how do you stay updated with the latest developments in your field?",
    ],
    "general": [
        "Hello! Thank you for coming in today. This is a general interview where I'd like to get to know you better and understand what drives you professionally. Let's start with a common but important question - why are you interested in this position?",
        "Hi there! Welcome to your interview. I'm excited to learn more about you and your career aspirations. To begin, tell me about yourself - what are your main strengths and areas where you're still growing?",
        "Hello and welcome! Thanks for joining me today. We'll have a friendly conversation about your goals and fit for this role. Where do you see yourself in five years?",
    ],
    "mock": [
        "Hello! Welcome to your mock interview for the {role} position. I'll be conducting this session just like a real interview, so feel free to treat it as the real thing. Let's start with a classic opener - please give me a brief introduction about yourself and your background.",
        "Hi there! Thank you for joining this mock interview session. I'm your interviewer today, and I'll be simulating a realistic interview experience for the {role} role. Let's begin - can you walk me through your resume and highlight your most relevant experiences?",
    ],
}


def format_display_role(target_role: Optional[str]) -> str:
    """``senior-backend-engineer`` -> ``Senior Backend Engineer``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), (target_role or "").replace("-", " "))


def generate_initial_question(session_type: str, target_role: Optional[str], rng: random.Random = None) -> str:
    """Pick an opening line from the bank for ``session_type`` (general for unknown types)."""
    templates = OPENING_QUESTIONS.get(session_type, OPENING_QUESTIONS["general"])
    template = (rng or random).choice(templates)
    return template.format(role=format_display_role(target_role))


def build_message(role: str, content: str, timestamp: datetime, **extra) -> Dict[str, Any]:
    message = {"role": role, "content": content, "timestamp": isoformat(timestamp)}
    message.update({key: value for key, value in extra.items() if value is not None})
    return message


class InterviewService:
    """Service for managing interview sessions."""

    def __init__(self, db: Session, ai_gateway: AIGateway):
        self.db = db
        self.ai_gateway = ai_gateway

    def _write(self, commit: bool = True):
        """Flush or commit pending changes, rolling back on failure."""
        try:
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except StaleDataError as e:
            self.db.rollback()
            logger.warning(f"Concurrent update detected: {e}")
            raise ConcurrentModificationError("Session was modified concurrently, please retry") from e
        except Exception:
            self.db.rollback()
            raise

    def _commit(self):
        self._write(commit=True)

    def _get_owned_session(self, owner_id: str, session_id: str) -> InterviewSession:
        session = self.db.query(InterviewSession).filter(InterviewSession.id == session_id).first()
        if session is None:
            raise ResourceNotFoundError("Session not found", {"session_id": session_id})
        if session.owner_id != owner_id:
            raise OwnershipError("Unauthorized access", {"session_id": session_id})
        return session

    async def create_session(self, owner_id: str, config: SessionConfigRequest) -> Dict[str, str]:
        """Create an in-progress session with its system note and scripted opening question."""
        now = utcnow()
        session_type = config.sessionType.value
        difficulty = config.difficultyLevel.value

        session = InterviewSession(
            owner_id=owner_id,
            session_type=session_type,
            status=SessionStatus.IN_PROGRESS,
            difficulty_level=difficulty,
            language_mode=config.languageMode.value,
            target_role=config.targetRole,
            target_company=config.targetCompany,
            messages=[
                build_message(
                    "system",
                    f"Interview session started. Role: {config.targetRole}. Type: {session_type}. Difficulty: {difficulty}",
                    now
                )
            ],
            started_at=now
        )
        initial_question = generate_initial_question(session_type, config.targetRole)
        session.messages.append(build_message("ai", initial_question, utcnow()))

        self.db.add(session)
        self._commit()
        logger.info(f"Created {session_type} interview session {session.id} for {owner_id}")

        return {"sessionId": session.id, "initialQuestion": initial_question}

    def get_session(self, owner_id: str, session_id: str) -> Dict[str, Any]:
        return self.serialize_session(self._get_owned_session(owner_id, session_id))

    async def generate_interview_reply(
        self,
        previous_messages: List[Dict[str, Any]],
        user_message: str,
        language_mode: str
    ) -> str:
        """Next interviewer turn, or the generic follow-up when generation fails."""
        prompt = PromptTemplates.get_interview_turn_prompt(previous_messages, user_message, language_mode)
        result = await self.ai_gateway.generate_result(prompt, prefer_fast=True)
        if not result.ok or not result.value.strip():
            logger.warning(f"Using fallback interviewer reply: {result.error or 'empty response'}")
            return FallbackResponses.get_interview_follow_up()
        return result.value.strip()

    async def send_message(self, owner_id: str, session_id: str, request: SendMessageRequest) -> Dict[str, Any]:
        """Append the candidate's message and the interviewer's reply."""
        session = self._get_owned_session(owner_id, session_id)
        if session.is_terminal:
            raise SessionStateError("Session is not active", {"status": session.status})

        previous_messages = list(session.messages)
        session.messages.append(build_message(
            "user",
            request.message,
            utcnow(),
            audioUrl=request.audioUrl,
            transcriptionConfidence=request.transcriptionConfidence,
            durationMs=request.durationMs
        ))
        self._commit()

        reply = await self.generate_interview_reply(previous_messages, request.message, session.language_mode)

        session.messages.append(build_message("ai", reply, utcnow()))
        self._commit()

        return {"response": reply, "isComplete": False}

    async def generate_feedback(self, messages: List[Dict[str, Any]], target_role: Optional[str]) -> Dict[str, Any]:
        """Score the transcript; any generation or parsing failure yields the fallback feedback."""
        prompt = PromptTemplates.get_feedback_prompt(messages, target_role)
        result = await self.ai_gateway.generate_result(prompt, prefer_fast=False)
        if not result.ok:
            return FallbackResponses.get_fallback_feedback()

        try:
            parsed = ResponseParser.extract_json_object(result.value)
            return Feedback.model_validate(parsed).model_dump()
        except (InvalidResponseError, ValidationError) as e:
            logger.warning(f"Could not parse feedback response, using fallback: {e}")
            return FallbackResponses.get_fallback_feedback()

    async def complete_session(self, owner_id: str, session_id: str) -> Dict[str, Any]:
        """Score and close an in-progress session."""
        session = self._get_owned_session(owner_id, session_id)
        if session.status == SessionStatus.COMPLETED:
            raise SessionStateError("Session already completed", {"status": session.status})
        if session.is_terminal:
            raise SessionStateError("Session is not active", {"status": session.status})

        feedback = await self.generate_feedback(list(session.messages), session.target_role)

        completed_at = utcnow()
        session.feedback = feedback
        session.duration = elapsed_seconds(session.started_at, completed_at)
        session.questions_completed = sum(1 for m in session.messages if m.get("role") == "user")
        session.status = SessionStatus.COMPLETED
        session.completed_at = completed_at

        # Flush first so the rollup sees this session as completed
        self._write(commit=False)
        try:
            StatsService(self.db).record_completion(session)
        except Exception:
            self.db.rollback()
            raise
        self._commit()

        logger.info(f"Completed session {session_id} with score {feedback.get('overallScore')}")
        return {"feedback": feedback}

    def abort_session(self, owner_id: str, session_id: str) -> None:
        """Close an in-progress session without feedback."""
        session = self._get_owned_session(owner_id, session_id)
        if session.is_terminal:
            raise SessionStateError("Session is not active", {"status": session.status})

        session.status = SessionStatus.ABORTED
        session.completed_at = utcnow()
        self._commit()
        logger.info(f"Aborted session {session_id}")

    def get_history(
        self,
        owner_id: str,
        limit: int = 20,
        skip: int = 0,
        status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Owner's sessions, newest first."""
        query = self.db.query(InterviewSession).filter(InterviewSession.owner_id == owner_id)
        if status:
            query = query.filter(InterviewSession.status == status)
        sessions = query.order_by(
            InterviewSession.created_at.desc(),
            InterviewSession.started_at.desc()
        ).offset(skip).limit(limit).all()

        return [
            {
                "id": s.id,
                "sessionType": s.session_type,
                "status": s.status,
                "targetRole": s.target_role,
                "startedAt": isoformat(s.started_at),
                "completedAt": isoformat(s.completed_at),
                "duration": s.duration,
                "feedback": s.feedback
            }
            for s in sessions
        ]

    @staticmethod
    def serialize_session(session: InterviewSession) -> Dict[str, Any]:
        return {
            "id": session.id,
            "sessionType": session.session_type,
            "status": session.status,
            "difficultyLevel": session.difficulty_level,
            "languageMode": session.language_mode,
            "targetRole": session.target_role,
            "targetCompany": session.target_company,
            "messages": list(session.messages or []),
            "feedback": session.feedback,
            "duration": session.duration,
            "questionsCompleted": session.questions_completed,
            "startedAt": isoformat(session.started_at),
            "completedAt": isoformat(session.completed_at)
        }
