"""
Question Bank Service

Query helpers and creation for the bilingual question bank. Only active
questions are ever returned to callers.
"""
from typing import List, Optional, Dict, Any
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session
from app.database.models import Question
from app.models.schemas import QuestionCreateRequest, QuestionListParams
from app.utils.datetime_utils import isoformat
from app.utils.logger import get_logger

logger = get_logger(__name__)


def question_to_dict(question: Question) -> Dict[str, Any]:
    """Serialize a question with camelCase keys."""
    return {
        "id": question.id,
        "category": question.category,
        "subcategory": question.subcategory,
        "difficulty": question.difficulty,
        "questionEn": question.question_en,
        "questionBn": question.question_bn,
        "modelAnswerEn": question.model_answer_en,
        "modelAnswerBn": question.model_answer_bn,
        "evaluationCriteria": list(question.evaluation_criteria or []),
        "tags": list(question.tags or []),
        "usageCount": question.usage_count,
        "averageRating": question.average_rating,
        "createdBy": question.created_by,
        "isActive": question.is_active,
        "createdAt": isoformat(question.created_at),
        "updatedAt": isoformat(question.updated_at)
    }


class QuestionBankService:
    """Service for managing question bank operations."""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Question).filter(Question.is_active.is_(True))

    def create_question(self, question_data: QuestionCreateRequest, created_by: str = "admin") -> Question:
        """
        Create a new question in the question bank.

        Args:
            question_data: Validated question payload
            created_by: ``admin`` for the REST endpoint, ``ai-generated`` otherwise

        Returns:
            Created Question object
        """
        question = Question(
            category=question_data.category,
            subcategory=question_data.subcategory,
            difficulty=question_data.difficulty,
            question_en=question_data.questionEn,
            question_bn=question_data.questionBn,
            model_answer_en=question_data.modelAnswerEn,
            model_answer_bn=question_data.modelAnswerBn,
            evaluation_criteria=[c.model_dump() for c in question_data.evaluationCriteria],
            tags=list(question_data.tags),
            usage_count=0,
            average_rating=0,
            created_by=created_by,
            is_active=question_data.isActive
        )
        try:
            self.db.add(question)
            self.db.commit()
        except Exception as e:
            logger.error(f"Error creating question: {e}")
            self.db.rollback()
            raise

        logger.info(f"Created question: {question.id}")
        return question

    def list_questions(self, params: QuestionListParams) -> Dict[str, Any]:
        """Filtered page of active questions, most used first."""
        query = self._active()
        if params.category:
            query = query.filter(Question.category == params.category)
        if params.subcategory:
            query = query.filter(Question.subcategory == params.subcategory)
        if params.difficulty:
            query = query.filter(Question.difficulty == params.difficulty)

        total = query.count()
        questions = query.order_by(
            Question.usage_count.desc(),
            Question.created_at.asc()
        ).offset(params.skip).limit(params.limit).all()

        return {
            "items": [question_to_dict(q) for q in questions],
            "total": total,
            "page": params.skip // params.limit + 1,
            "limit": params.limit,
            "hasMore": params.skip + len(questions) < total
        }

    def find_by_category(self, category: str, limit: int = 50, skip: int = 0) -> List[Question]:
        return self._active().filter(
            Question.category == category
        ).order_by(Question.usage_count.desc()).offset(skip).limit(limit).all()

    def find_random(
        self,
        category: Optional[str] = None,
        difficulty: Optional[int] = None,
        tags: Optional[List[str]] = None,
        limit: int = 10
    ) -> List[Question]:
        """Random sample of active questions matching any of ``tags``."""
        query = self._active()
        if category:
            query = query.filter(Question.category == category)
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)
        if tags:
            serialized_tags = cast(Question.tags, String)
            query = query.filter(or_(*[serialized_tags.contains(f'"{tag}"') for tag in tags]))
        return query.order_by(func.random()).limit(limit).all()

    def find_active_by_id(self, question_id: str) -> Optional[Question]:
        return self._active().filter(Question.id == question_id).first()

    def increment_usage(self, question_id: str) -> None:
        self.db.query(Question).filter(Question.id == question_id).update(
            {Question.usage_count: Question.usage_count + 1},
            synchronize_session=False
        )
        self.db.commit()

    def get_categories(self) -> List[str]:
        rows = self.db.execute(
            select(Question.category).where(Question.is_active.is_(True)).distinct().order_by(Question.category)
        ).all()
        return [row[0] for row in rows]

    def get_subcategories(self, category: str) -> List[str]:
        rows = self.db.execute(
            select(Question.subcategory).where(
                Question.category == category,
                Question.is_active.is_(True),
                Question.subcategory.is_not(None)
            ).distinct().order_by(Question.subcategory)
        ).all()
        return [row[0] for row in rows]

    def search(self, search_term: str, limit: int = 20, skip: int = 0) -> List[Question]:
        """Case-insensitive match on the English text or any tag."""
        pattern = f"%{search_term.lower()}%"
        return self._active().filter(
            or_(
                func.lower(Question.question_en).like(pattern),
                func.lower(cast(Question.tags, String)).like(pattern)
            )
        ).order_by(Question.usage_count.desc()).offset(skip).limit(limit).all()
