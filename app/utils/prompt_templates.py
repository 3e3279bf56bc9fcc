"""
Centralized prompt templates for interview turns, feedback scoring and resume analysis.
"""
import json
from typing import Any, Dict, List, Optional

class PromptTemplates:
    """Centralized prompt templates for all AI calls."""

    # Number of earlier messages embedded in the next-turn prompt
    CONTEXT_MESSAGE_COUNT = 5

    @staticmethod
    def language_name(language_mode: str) -> str:
        return "Bengali" if language_mode == "bn" else "English"

    @staticmethod
    def _messages_json(messages: List[Dict[str, Any]]) -> str:
        return json.dumps(
            [{"role": m.get("role"), "content": m.get("content")} for m in messages],
            ensure_ascii=False
        )

    @staticmethod
    def get_interview_turn_prompt(messages: List[Dict[str, Any]], user_message: str, language_mode: str) -> str:
        """Prompt for the interviewer's next turn."""
        language = PromptTemplates.language_name(language_mode)
        recent = messages[-PromptTemplates.CONTEXT_MESSAGE_COUNT:]
        return f"""
        You are an expert {language} speaking interviewer.
        Previous messages: {PromptTemplates._messages_json(recent)}
        User's latest response: "{user_message}"

        Respond in {language}.
        Acknowledge their answer briefly and ask the next relevant interview question.
        Keep it professional and conversational.
        """

    @staticmethod
    def get_feedback_prompt(messages: List[Dict[str, Any]], target_role: Optional[str]) -> str:
        """Strict scoring prompt for a finished interview."""
        user_response_count = sum(1 for m in messages if m.get("role") == "user")
        return f"""
        You are a strict, professional interview evaluator. Analyze this interview session for a {target_role or 'general'} role.

        IMPORTANT SCORING GUIDELINES - BE STRICT:
        - 90-100: Exceptional - Only for candidates who gave detailed, specific examples with clear context, actions, and results (STAR method). Answers must be comprehensive and demonstrate deep expertise.
        - 70-89: Good - Candidate gave solid answers with some specific examples. Showed competence but may have lacked depth in some areas.
        - 50-69: Average - Candidate gave acceptable answers but were too brief, generic, or lacked specific examples. Needs improvement.
        - 30-49: Below Average - Answers were vague, irrelevant, too short, or showed lack of preparation. Did not properly address questions.
        - 0-29: Poor - Candidate gave one-word answers, off-topic responses, or inappropriate replies. Did not engage properly with the interview.

        EVALUATION CRITERIA:
        1. Content Quality (contentScore): Did they provide specific examples? Were answers relevant to the question? Did they use the STAR method where appropriate?
        2. Communication Style (confidenceScore): Were answers well-structured? Did they speak professionally? Was there clarity in expression?
        3. Language Proficiency (languageScore): Grammar, vocabulary, articulation. Were sentences complete and professional?

        Red flags that should SIGNIFICANTLY lower scores:
        - One-word or very short answers (e.g., "yes", "no", "okay", "good")
        - Generic answers without specific examples
        - Not answering the actual question asked
        - Unprofessional language or tone
        - Lack of detail or context

        Interview Messages: {PromptTemplates._messages_json(messages)}
        Number of user responses: {user_response_count}

        If the user gave very few responses or very short answers, scores should be LOW (under 40).

        Provide HONEST, STRICT feedback in JSON format:
        {{
            "overallScore": number (0-100, be strict!),
            "contentScore": number (0-100),
            "languageScore": number (0-100),
            "confidenceScore": number (0-100),
            "strengths": ["list up to 3 genuine strengths, or fewer if none evident"],
            "improvements": [
                {{
                    "category": "category name",
                    "description": "specific issue observed",
                    "suggestedResponse": "example of a better response",
                    "explanation": "why this would be better"
                }}
            ],
            "suggestedResources": [
                {{
                    "type": "article|video",
                    "title": "resource title",
                    "url": "resource url"
                }}
            ]
        }}

        Be honest and constructive. Do not inflate scores to make the candidate feel good - they need accurate feedback to improve.
        """

    @staticmethod
    def get_resume_analysis_prompt(resume_text: str, char_limit: int = 3000) -> str:
        """Prompt asking for a structured resume review."""
        return f"""
        Analyze the following resume and provide structured feedback.

        Resume:
        {resume_text[:char_limit]}...

        Provide analysis in JSON format:
        {{
            "overallScore": number (0-100),
            "atsScore": number (0-100),
            "missingKeywords": ["list of missing keywords"],
            "improvementSuggestions": [
                {{
                    "section": "section name",
                    "suggestion": "specific suggestion",
                    "importance": "high|medium|low"
                }}
            ]
        }}
        """
