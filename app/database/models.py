"""
SQLAlchemy models for the Interprep database schema.

Embedded documents (messages, feedback, parsed resume sections, analysis,
evaluation criteria) are stored as JSON columns. Every record is keyed by the
``owner_id`` issued by the external identity provider.
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Date, Float, Index, UniqueConstraint, JSON
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
import uuid
from app.utils.datetime_utils import utcnow

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class SessionStatus:
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"

    TERMINAL = (COMPLETED, ABORTED)


class User(Base):
    """Application profile for an identity-provider subject."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=False, default="")
    name = Column(String(255), nullable=True)
    preferred_language = Column(String(10), nullable=False, default="en")  # en, bn, both
    target_role = Column(String(255), nullable=True)
    target_industry = Column(String(255), nullable=True)
    experience_level = Column(String(20), nullable=True)  # entry, mid, senior, executive
    timezone = Column(String(64), nullable=False, default="Asia/Dhaka")
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, owner_id={self.owner_id}, email={self.email})>"


class InterviewSession(Base):
    """One interview-practice conversation and its feedback report."""
    __tablename__ = "interview_sessions"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String(255), nullable=False, index=True)
    session_type = Column(String(20), nullable=False)  # behavioral, technical, general, mock
    status = Column(String(20), nullable=False, default=SessionStatus.IN_PROGRESS, index=True)
    difficulty_level = Column(String(20), nullable=False, default="adaptive")  # easy, medium, hard, adaptive
    language_mode = Column(String(10), nullable=False, default="en")  # en, bn, mixed
    target_role = Column(String(255), nullable=True)
    target_company = Column(String(255), nullable=True)
    messages = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    feedback = Column(JSON, nullable=True)
    duration = Column(Integer, nullable=True)  # seconds
    questions_completed = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)
    revision = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": revision}

    __table_args__ = (
        Index("ix_interview_sessions_owner_created", "owner_id", "created_at"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in SessionStatus.TERMINAL

    def __repr__(self):
        return f"<InterviewSession(id={self.id}, owner_id={self.owner_id}, type={self.session_type}, status={self.status})>"


class Resume(Base):
    """Uploaded resume with its extracted text and AI analysis."""
    __tablename__ = "resumes"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String(255), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1024), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    extracted_text = Column(Text, nullable=False, default="")
    parsed_sections = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    analysis = Column(JSON, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    analyzed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Resume(id={self.id}, owner_id={self.owner_id}, file_name={self.file_name}, default={self.is_default})>"


class Question(Base):
    """Bilingual question bank entry."""
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=_new_id)
    category = Column(String(100), nullable=False, index=True)
    subcategory = Column(String(100), nullable=True)
    difficulty = Column(Integer, nullable=False, default=3, index=True)  # 1-5
    question_en = Column(Text, nullable=False)
    question_bn = Column(Text, nullable=True)
    model_answer_en = Column(Text, nullable=True)
    model_answer_bn = Column(Text, nullable=True)
    evaluation_criteria = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    usage_count = Column(Integer, nullable=False, default=0)
    average_rating = Column(Float, nullable=False, default=0)
    created_by = Column(String(20), nullable=False, default="ai-generated")  # admin, ai-generated
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_questions_category_subcategory", "category", "subcategory"),
    )

    def __repr__(self):
        return f"<Question(id={self.id}, category={self.category}, difficulty={self.difficulty})>"


class Progress(Base):
    """Daily practice rollup for one owner."""
    __tablename__ = "progress"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String(255), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    interviews_completed = Column(Integer, nullable=False, default=0)
    total_questions_answered = Column(Integer, nullable=False, default=0)
    average_score = Column(Float, nullable=True)
    time_spent_minutes = Column(Integer, nullable=False, default=0)
    focus_areas = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    streak_current = Column(Integer, nullable=False, default=0)
    streak_longest = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "date", name="uq_progress_owner_date"),
    )

    def __repr__(self):
        return f"<Progress(owner_id={self.owner_id}, date={self.date}, interviews={self.interviews_completed})>"
