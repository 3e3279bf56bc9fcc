from pydantic import BaseModel, Field
from typing import List, Optional, Any
from datetime import datetime
from enum import Enum

# Enumerations
class SessionType(str, Enum):
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    GENERAL = "general"
    MOCK = "mock"

class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    ADAPTIVE = "adaptive"

class LanguageMode(str, Enum):
    ENGLISH = "en"
    BENGALI = "bn"
    MIXED = "mixed"

class PreferredLanguage(str, Enum):
    ENGLISH = "en"
    BENGALI = "bn"
    BOTH = "both"

class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"

class SessionStatusFilter(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"

class MessageRole(str, Enum):
    USER = "user"
    AI = "ai"
    SYSTEM = "system"

# Embedded documents
class InterviewMessage(BaseModel):
    role: MessageRole
    content: str
    timestamp: datetime
    audioUrl: Optional[str] = None
    transcriptionConfidence: Optional[float] = Field(None, ge=0, le=1)
    durationMs: Optional[int] = Field(None, ge=0)

# Sub-fields of AI feedback are optional; only the four scores are required
class FeedbackImprovement(BaseModel):
    category: Optional[str] = None
    description: Optional[str] = None
    suggestedResponse: Optional[str] = ""
    explanation: Optional[str] = ""

class SuggestedResource(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None

class Feedback(BaseModel):
    overallScore: float = Field(..., ge=0, le=100)
    contentScore: float = Field(..., ge=0, le=100)
    languageScore: float = Field(..., ge=0, le=100)
    confidenceScore: float = Field(..., ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[FeedbackImprovement] = Field(default_factory=list)
    suggestedResources: List[SuggestedResource] = Field(default_factory=list)

class ImprovementSuggestion(BaseModel):
    section: str
    suggestion: str
    importance: str = Field("medium", pattern="^(high|medium|low)$")

class SectionScores(BaseModel):
    impact: float = Field(..., ge=0, le=100)
    brevity: float = Field(..., ge=0, le=100)
    style: float = Field(..., ge=0, le=100)
    skills: float = Field(..., ge=0, le=100)

class ResumeAnalysis(BaseModel):
    overallScore: float = Field(..., ge=0, le=100)
    atsScore: float = Field(..., ge=0, le=100)
    missingKeywords: List[str] = Field(default_factory=list)
    improvementSuggestions: List[ImprovementSuggestion] = Field(default_factory=list)
    sectionScores: Optional[SectionScores] = None

# Request Models
class SessionConfigRequest(BaseModel):
    sessionType: SessionType = Field(..., description="Kind of interview to run")
    difficultyLevel: DifficultyLevel = Field(DifficultyLevel.ADAPTIVE, description="Requested difficulty")
    languageMode: LanguageMode = Field(LanguageMode.ENGLISH, description="Conversation language")
    targetRole: str = Field(..., min_length=1, max_length=255, description="Role being practiced for")
    targetCompany: Optional[str] = Field(None, max_length=255)

class SendMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=10000, description="The candidate's answer")
    audioUrl: Optional[str] = None
    transcriptionConfidence: Optional[float] = Field(None, ge=0, le=1)
    durationMs: Optional[int] = Field(None, ge=0)

class ResumeUploadRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    size: int = Field(..., ge=0, description="File size in bytes")
    type: str = Field(..., description="MIME type")
    content: str = Field("", description="Text extracted from the document")

class PreferencesUpdateRequest(BaseModel):
    preferredLanguage: Optional[PreferredLanguage] = None
    targetRole: Optional[str] = Field(None, max_length=255)
    experienceLevel: Optional[ExperienceLevel] = None
    timezone: Optional[str] = Field(None, max_length=64)

class OnboardingRequest(BaseModel):
    targetRole: str = Field(..., min_length=1, max_length=255)
    experienceLevel: ExperienceLevel
    preferredLanguage: PreferredLanguage

class EvaluationCriterion(BaseModel):
    criterion: str
    description: str
    keywords: List[str]
    maxPoints: int = Field(..., ge=1, le=10)

class QuestionListParams(BaseModel):
    category: Optional[str] = None
    subcategory: Optional[str] = None
    difficulty: Optional[int] = Field(None, ge=1, le=5)
    limit: int = Field(20, ge=1, le=100)
    skip: int = Field(0, ge=0)

class QuestionCreateRequest(BaseModel):
    category: str = Field(..., min_length=1)
    subcategory: Optional[str] = None
    difficulty: int = Field(3, ge=1, le=5)
    questionEn: str = Field(..., min_length=1)
    questionBn: Optional[str] = None
    modelAnswerEn: Optional[str] = None
    modelAnswerBn: Optional[str] = None
    evaluationCriteria: List[EvaluationCriterion] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    isActive: bool = True

# Response Models
class ActionResponse(BaseModel):
    """Envelope returned by every action endpoint."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
