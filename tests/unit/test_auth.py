"""
Unit tests for identity token verification.
"""
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt

from app.config import Settings, get_settings
from app.middleware.auth_middleware import verify_identity_token
from tests.conftest import TEST_OWNER_ID, make_token


class TestVerifyIdentityToken:

    @pytest.mark.unit
    def test_valid_token(self):
        identity = verify_identity_token(make_token(), get_settings())

        assert identity.owner_id == TEST_OWNER_ID
        assert identity.email == "test@example.com"
        assert identity.name == "Test User"

    @pytest.mark.unit
    def test_name_from_given_and_family_claims(self):
        token = make_token(name=None, given_name="Ada", family_name="Lovelace")

        assert verify_identity_token(token, get_settings()).name == "Ada Lovelace"

    @pytest.mark.unit
    def test_wrong_secret_is_rejected(self):
        token = jwt.encode({"sub": TEST_OWNER_ID}, "another-secret", algorithm="HS256")

        assert verify_identity_token(token, get_settings()) is None

    @pytest.mark.unit
    def test_expired_token_is_rejected(self):
        token = make_token(exp=datetime.now(timezone.utc) - timedelta(minutes=1))

        assert verify_identity_token(token, get_settings()) is None

    @pytest.mark.unit
    def test_token_without_subject_is_rejected(self):
        settings = get_settings()
        token = jwt.encode({"email": "x@example.com"}, settings.IDENTITY_JWT_SECRET, algorithm="HS256")

        assert verify_identity_token(token, settings) is None

    @pytest.mark.unit
    def test_missing_secret_rejects_everything(self):
        settings = Settings()
        settings.IDENTITY_JWT_SECRET = ""

        assert verify_identity_token(make_token(), settings) is None

    @pytest.mark.unit
    def test_audience_is_checked_when_configured(self):
        settings = Settings()
        settings.IDENTITY_JWT_AUDIENCE = "interprep"

        assert verify_identity_token(make_token(aud="interprep"), settings).owner_id == TEST_OWNER_ID
        assert verify_identity_token(make_token(aud="someone-else"), settings) is None
