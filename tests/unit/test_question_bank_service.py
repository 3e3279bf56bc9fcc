"""
Unit tests for QuestionBankService.
"""
import pytest

from app.database.models import Question
from app.models.schemas import QuestionCreateRequest, QuestionListParams
from app.services.question_bank_service import QuestionBankService, question_to_dict


def make_question(**overrides):
    data = {
        "category": "behavioral",
        "subcategory": "teamwork",
        "difficulty": 3,
        "questionEn": "Tell me about a conflict with a teammate.",
        "tags": ["conflict", "Teamwork"],
        "evaluationCriteria": [
            {"criterion": "STAR", "description": "Uses STAR", "keywords": ["situation"], "maxPoints": 5}
        ]
    }
    data.update(overrides)
    return QuestionCreateRequest(**data)


@pytest.fixture
def service(db_session):
    return QuestionBankService(db_session)


@pytest.fixture
def seeded(service, db_session):
    questions = [
        service.create_question(make_question()),
        service.create_question(make_question(questionEn="Describe a time you led a project.", subcategory="leadership", difficulty=4, tags=["leadership"])),
        service.create_question(make_question(category="technical", subcategory="python", questionEn="Explain Python generators.", tags=["python"])),
        service.create_question(make_question(questionEn="Inactive question", isActive=False)),
    ]
    questions[1].usage_count = 10
    db_session.commit()
    return questions


class TestQuestionBankService:

    @pytest.mark.unit
    def test_create_question(self, service):
        question = service.create_question(make_question(questionBn="বাংলা প্রশ্ন"))

        data = question_to_dict(question)
        assert data["createdBy"] == "admin"
        assert data["usageCount"] == 0
        assert data["averageRating"] == 0
        assert data["isActive"] is True
        assert data["questionBn"] == "বাংলা প্রশ্ন"
        assert data["evaluationCriteria"][0]["maxPoints"] == 5

    @pytest.mark.unit
    def test_list_questions_filters_and_pages(self, service, seeded):
        page = service.list_questions(QuestionListParams(category="behavioral", limit=1))

        assert page["total"] == 2
        assert page["page"] == 1
        assert page["limit"] == 1
        assert page["hasMore"] is True
        # Most used first
        assert page["items"][0]["id"] == seeded[1].id

        last = service.list_questions(QuestionListParams(category="behavioral", limit=1, skip=1))
        assert last["page"] == 2
        assert last["hasMore"] is False

    @pytest.mark.unit
    def test_list_questions_excludes_inactive(self, service, seeded):
        page = service.list_questions(QuestionListParams())

        assert page["total"] == 3
        assert seeded[3].id not in [item["id"] for item in page["items"]]

    @pytest.mark.unit
    def test_difficulty_and_subcategory_filters(self, service, seeded):
        assert service.list_questions(QuestionListParams(difficulty=4))["total"] == 1
        assert service.list_questions(QuestionListParams(subcategory="python"))["total"] == 1

    @pytest.mark.unit
    def test_find_helpers(self, service, seeded):
        assert [q.id for q in service.find_by_category("behavioral")] == [seeded[1].id, seeded[0].id]
        assert service.find_active_by_id(seeded[3].id) is None
        assert service.find_active_by_id(seeded[2].id).id == seeded[2].id
        assert {q.id for q in service.find_random(category="behavioral")} == {seeded[0].id, seeded[1].id}
        assert [q.id for q in service.find_random(tags=["python"])] == [seeded[2].id]

    @pytest.mark.unit
    def test_categories_and_subcategories(self, service, seeded):
        assert service.get_categories() == ["behavioral", "technical"]
        assert service.get_subcategories("behavioral") == ["leadership", "teamwork"]

    @pytest.mark.unit
    def test_search_is_case_insensitive(self, service, seeded):
        assert [q.id for q in service.search("GENERATORS")] == [seeded[2].id]
        assert [q.id for q in service.search("teamwork")] == [seeded[0].id]

    @pytest.mark.unit
    def test_increment_usage(self, service, seeded, db_session):
        service.increment_usage(seeded[0].id)
        service.increment_usage(seeded[0].id)

        db_session.expire_all()
        assert db_session.get(Question, seeded[0].id).usage_count == 2
