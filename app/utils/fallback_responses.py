"""
Fixed substitutes used when an AI call or its parsing fails.
"""
from typing import Any, Dict


class FallbackResponses:
    """Centralized fallback responses for all AI-backed flows."""

    INTERVIEW_FOLLOW_UP = "Thank you for that answer. Can you tell me more about your experience in this field?"

    @staticmethod
    def get_interview_follow_up() -> str:
        """Generic next interviewer turn."""
        return FallbackResponses.INTERVIEW_FOLLOW_UP

    @staticmethod
    def get_fallback_feedback() -> Dict[str, Any]:
        """Low-score feedback used when scoring fails."""
        return {
            "overallScore": 30,
            "contentScore": 30,
            "languageScore": 30,
            "confidenceScore": 30,
            "strengths": ["Attempted the interview"],
            "improvements": [
                {
                    "category": "Response Quality",
                    "description": "Focus on providing detailed, specific answers with examples",
                    "suggestedResponse": "Use the STAR method: Situation, Task, Action, Result",
                    "explanation": "Interviewers want to see concrete evidence of your skills and experience"
                }
            ],
            "suggestedResources": []
        }

    @staticmethod
    def get_fallback_resume_analysis() -> Dict[str, Any]:
        """Default resume analysis used when analysis fails."""
        return {
            "overallScore": 70,
            "atsScore": 65,
            "missingKeywords": ["achievements", "metrics", "leadership"],
            "improvementSuggestions": [
                {
                    "section": "Summary",
                    "suggestion": "Add a compelling summary that highlights your key achievements.",
                    "importance": "high"
                },
                {
                    "section": "Experience",
                    "suggestion": "Use bullet points with action verbs and quantifiable results.",
                    "importance": "medium"
                }
            ]
        }
