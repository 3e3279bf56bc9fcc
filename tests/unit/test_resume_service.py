"""
Unit tests for ResumeService.
"""
import pytest

from app.config import get_settings
from app.database.models import Resume
from app.exceptions import ResourceNotFoundError, UploadValidationError
from app.models.schemas import ResumeUploadRequest
from app.services.ai.gateway import AIGateway
from app.services.resume_service import ResumeService, validate_upload
from app.utils.fallback_responses import FallbackResponses
from tests.conftest import OTHER_OWNER_ID, TEST_OWNER_ID, FakeProvider

ANALYSIS_REPLY = """Sure! Here is the analysis:
```json
{"overallScore": 82, "atsScore": 77, "missingKeywords": ["kubernetes"],
 "improvementSuggestions": [{"section": "Skills", "suggestion": "Group by domain", "importance": "low"}]}
```"""


def make_upload(name="resume.pdf", size=1024, mime_type="application/pdf", content="Jane Doe. Backend engineer."):
    return ResumeUploadRequest(name=name, size=size, type=mime_type, content=content)


@pytest.fixture
def groq():
    return FakeProvider("groq", [ANALYSIS_REPLY])


@pytest.fixture
def gemini():
    return FakeProvider("gemini", [RuntimeError("gemini down")])


@pytest.fixture
def service(db_session, groq, gemini):
    gateway = AIGateway({"groq": groq, "gemini": gemini}, primary_provider="groq", fallback_provider="gemini")
    return ResumeService(db_session, gateway)


class TestUploadValidation:

    @pytest.mark.unit
    def test_accepts_pdf_at_limit(self):
        validate_upload(make_upload(size=5 * 1024 * 1024), get_settings())

    @pytest.mark.unit
    def test_rejects_six_megabytes(self):
        with pytest.raises(UploadValidationError, match="File size must be less than 5MB"):
            validate_upload(make_upload(size=6 * 1024 * 1024), get_settings())

    @pytest.mark.unit
    @pytest.mark.parametrize("mime_type", ["application/msword", "application/pdf; charset=binary", "text/plain"])
    def test_rejects_non_pdf(self, mime_type):
        with pytest.raises(UploadValidationError, match="Only PDF files are supported"):
            validate_upload(make_upload(mime_type=mime_type), get_settings())


class TestUploadResume:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_stores_and_analyzes(self, service, db_session, groq):
        result = await service.upload_resume(TEST_OWNER_ID, make_upload(content="x" * 5000))

        resume = db_session.get(Resume, result["resumeId"])
        assert result["analysis"]["overallScore"] == 82
        assert result["analysis"]["improvementSuggestions"][0]["importance"] == "low"
        assert resume.analysis == result["analysis"]
        assert resume.analyzed_at is not None
        assert resume.is_default is True
        assert resume.file_url == f"https://storage.example.com/resumes/{TEST_OWNER_ID}/resume.pdf"
        assert resume.parsed_sections["experience"] == []
        call = groq.calls[0]
        assert call["prefer_fast"] is True
        assert call["max_tokens"] == 512
        assert "x" * 3000 in call["prompt"]
        assert "x" * 3001 not in call["prompt"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rejected_upload_touches_nothing(self, service, db_session, groq):
        with pytest.raises(UploadValidationError):
            await service.upload_resume(TEST_OWNER_ID, make_upload(size=6 * 1024 * 1024))
        with pytest.raises(UploadValidationError):
            await service.upload_resume(TEST_OWNER_ID, make_upload(mime_type="image/png"))

        assert db_session.query(Resume).count() == 0
        assert groq.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_only_first_upload_is_default(self, service, db_session):
        first = await service.upload_resume(TEST_OWNER_ID, make_upload("a.pdf"))
        second = await service.upload_resume(TEST_OWNER_ID, make_upload("b.pdf"))
        other = await service.upload_resume(OTHER_OWNER_ID, make_upload("c.pdf"))

        assert db_session.get(Resume, first["resumeId"]).is_default is True
        assert db_session.get(Resume, second["resumeId"]).is_default is False
        assert db_session.get(Resume, other["resumeId"]).is_default is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["Looks great overall!", '{"overallScore": 90}', "```json\n{broken\n```"])
    async def test_unparseable_analysis_uses_default(self, db_session, reply):
        gateway = AIGateway({"groq": FakeProvider("groq", [reply])}, primary_provider="groq", fallback_provider=None)
        service = ResumeService(db_session, gateway)

        result = await service.upload_resume(TEST_OWNER_ID, make_upload())

        assert result["analysis"] == FallbackResponses.get_fallback_resume_analysis()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_generation_uses_default(self, db_session, gemini):
        groq = FakeProvider("groq", [RuntimeError("groq down")])
        gateway = AIGateway({"groq": groq, "gemini": gemini}, primary_provider="groq", fallback_provider="gemini")

        analysis = await ResumeService(db_session, gateway).analyze_resume("text")

        assert analysis["overallScore"] == 70
        assert analysis["atsScore"] == 65
        assert analysis["missingKeywords"] == ["achievements", "metrics", "leadership"]
        assert len(gemini.calls) == 1


class TestResumeQueries:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_newest_first(self, service):
        first = await service.upload_resume(TEST_OWNER_ID, make_upload("a.pdf"))
        second = await service.upload_resume(TEST_OWNER_ID, make_upload("b.pdf"))

        resumes = service.list_resumes(TEST_OWNER_ID)

        assert [r["id"] for r in resumes] == [second["resumeId"], first["resumeId"]]
        assert resumes[0]["analysis"] == {"overallScore": 82, "atsScore": 77}
        assert resumes[1]["isDefault"] is True
        assert service.list_resumes(OTHER_OWNER_ID) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_details_are_owner_scoped(self, service):
        created = await service.upload_resume(TEST_OWNER_ID, make_upload(content="Resume body"))

        details = service.get_resume_details(TEST_OWNER_ID, created["resumeId"])

        assert details["fileName"] == "resume.pdf"
        assert details["extractedText"] == "Resume body"
        assert set(details["parsedSections"]) == {"summary", "experience", "education", "skills", "certifications"}
        with pytest.raises(ResourceNotFoundError, match="Resume not found"):
            service.get_resume_details(OTHER_OWNER_ID, created["resumeId"])


class TestDefaultResume:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_default_leaves_exactly_one(self, service, db_session):
        ids = [(await service.upload_resume(TEST_OWNER_ID, make_upload(f"{n}.pdf")))["resumeId"] for n in range(4)]
        # Simulate a corrupted state with several defaults
        db_session.query(Resume).update({Resume.is_default: True})
        db_session.commit()

        service.set_default_resume(TEST_OWNER_ID, ids[2])

        defaults = db_session.query(Resume).filter(Resume.owner_id == TEST_OWNER_ID, Resume.is_default.is_(True)).all()
        assert [r.id for r in defaults] == [ids[2]]
        assert db_session.get(Resume, ids[2]).is_default is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_default_does_not_touch_other_owner(self, service, db_session):
        mine = await service.upload_resume(TEST_OWNER_ID, make_upload())
        theirs = await service.upload_resume(OTHER_OWNER_ID, make_upload())

        with pytest.raises(ResourceNotFoundError):
            service.set_default_resume(TEST_OWNER_ID, theirs["resumeId"])
        service.set_default_resume(TEST_OWNER_ID, mine["resumeId"])

        assert db_session.get(Resume, theirs["resumeId"]).is_default is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_deleting_default_promotes_newest(self, service, db_session):
        first = await service.upload_resume(TEST_OWNER_ID, make_upload("a.pdf"))
        second = await service.upload_resume(TEST_OWNER_ID, make_upload("b.pdf"))
        third = await service.upload_resume(TEST_OWNER_ID, make_upload("c.pdf"))

        service.delete_resume(TEST_OWNER_ID, first["resumeId"])

        assert db_session.get(Resume, first["resumeId"]) is None
        assert db_session.get(Resume, third["resumeId"]).is_default is True
        assert db_session.get(Resume, second["resumeId"]).is_default is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_requires_ownership(self, service):
        created = await service.upload_resume(TEST_OWNER_ID, make_upload())

        with pytest.raises(ResourceNotFoundError, match="Resume not found"):
            service.delete_resume(OTHER_OWNER_ID, created["resumeId"])
        with pytest.raises(ResourceNotFoundError):
            service.delete_resume(TEST_OWNER_ID, "missing")
