# Models package for Pydantic schemas

from .schemas import (
    SessionType, SessionStatusFilter, DifficultyLevel, LanguageMode, PreferredLanguage, ExperienceLevel, MessageRole,
    InterviewMessage, Feedback, FeedbackImprovement, SuggestedResource,
    ResumeAnalysis, ImprovementSuggestion, SectionScores,
    SessionConfigRequest, SendMessageRequest, ResumeUploadRequest,
    PreferencesUpdateRequest, OnboardingRequest,
    EvaluationCriterion, QuestionListParams, QuestionCreateRequest, ActionResponse
)

__all__ = [
    "SessionType", "SessionStatusFilter", "DifficultyLevel", "LanguageMode", "PreferredLanguage", "ExperienceLevel", "MessageRole",
    "InterviewMessage", "Feedback", "FeedbackImprovement", "SuggestedResource",
    "ResumeAnalysis", "ImprovementSuggestion", "SectionScores",
    "SessionConfigRequest", "SendMessageRequest", "ResumeUploadRequest",
    "PreferencesUpdateRequest", "OnboardingRequest",
    "EvaluationCriterion", "QuestionListParams", "QuestionCreateRequest", "ActionResponse"
]
