"""
Unit tests for AIGateway.

Covers provider resolution, the one-shot fallback, the result wrapper and the
streaming path.
"""
import pytest

from app.exceptions import ServiceUnavailableError, UnknownProviderError
from app.services.ai.gateway import AIGateway, GenerationResult
from tests.conftest import FakeProvider


def build_gateway(primary, fallback, fallback_name="gemini"):
    return AIGateway(
        {"groq": primary, "gemini": fallback},
        primary_provider="groq",
        fallback_provider=fallback_name
    )


class TestGenerateContent:
    """Test cases for generate_content."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_uses_primary_provider_by_default(self):
        primary = FakeProvider("groq", ["primary text"])
        fallback = FakeProvider("gemini", ["fallback text"])
        gateway = build_gateway(primary, fallback)

        result = await gateway.generate_content("Hello")

        assert result == "primary text"
        assert len(primary.calls) == 1
        assert fallback.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_passes_options_to_provider(self):
        primary = FakeProvider("groq", ["text"])
        gateway = build_gateway(primary, FakeProvider("gemini"))

        await gateway.generate_content("Hello", prefer_fast=True, temperature=0.2, max_tokens=64)

        assert primary.calls[0] == {"prompt": "Hello", "prefer_fast": True, "temperature": 0.2, "max_tokens": 64}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_falls_back_once_when_primary_fails(self):
        primary = FakeProvider("groq", [RuntimeError("groq down")])
        fallback = FakeProvider("gemini", ["fallback text"])
        gateway = build_gateway(primary, fallback)

        result = await gateway.generate_content("Hello", max_tokens=10)

        assert result == "fallback text"
        assert len(primary.calls) == 1
        assert len(fallback.calls) == 1
        assert fallback.calls[0]["max_tokens"] == 10

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_raises_fallback_error_when_both_fail(self):
        primary = FakeProvider("groq", [RuntimeError("groq down")])
        fallback = FakeProvider("gemini", [ValueError("gemini down")])
        gateway = build_gateway(primary, fallback)

        with pytest.raises(ValueError, match="gemini down"):
            await gateway.generate_content("Hello")

        assert len(primary.calls) == 1
        assert len(fallback.calls) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_explicit_fallback_provider_is_not_retried(self):
        primary = FakeProvider("groq", ["unused"])
        fallback = FakeProvider("gemini", [RuntimeError("gemini down")])
        gateway = build_gateway(primary, fallback)

        with pytest.raises(RuntimeError, match="gemini down"):
            await gateway.generate_content("Hello", provider="gemini")

        assert len(fallback.calls) == 1
        assert primary.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_fallback_configured_propagates_original_error(self):
        primary = FakeProvider("groq", [ServiceUnavailableError("no key")])
        fallback = FakeProvider("gemini", ["unused"])
        gateway = build_gateway(primary, fallback, fallback_name=None)

        with pytest.raises(ServiceUnavailableError):
            await gateway.generate_content("Hello")

        assert fallback.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_provider_raises(self):
        gateway = build_gateway(FakeProvider("groq"), FakeProvider("gemini"))

        with pytest.raises(UnknownProviderError, match="Unknown AI provider: openai"):
            await gateway.generate_content("Hello", provider="openai")


class TestGenerateResult:
    """Test cases for the value-or-error wrapper."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_result(self):
        gateway = build_gateway(FakeProvider("groq", ["text"]), FakeProvider("gemini"))

        result = await gateway.generate_result("Hello")

        assert result.ok is True
        assert result.value == "text"
        assert result.error is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_result_carries_last_error(self):
        error = RuntimeError("gemini down")
        gateway = build_gateway(
            FakeProvider("groq", [RuntimeError("groq down")]),
            FakeProvider("gemini", [error])
        )

        result = await gateway.generate_result("Hello")

        assert result.ok is False
        assert result.error is error
        assert result.value_or("fallback") == "fallback"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_provider_is_not_wrapped(self):
        gateway = build_gateway(FakeProvider("groq"), FakeProvider("gemini"))

        with pytest.raises(UnknownProviderError):
            await gateway.generate_result("Hello", provider="missing")

    @pytest.mark.unit
    def test_value_or_returns_value_when_ok(self):
        assert GenerationResult(value="text").value_or("default") == "text"


class TestStreaming:
    """Test cases for generate_streaming_content."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_streams_chunks_from_streaming_provider(self):
        primary = FakeProvider("groq", ["one two three"], supports_streaming=True)
        gateway = build_gateway(primary, FakeProvider("gemini"))
        chunks = []

        await gateway.generate_streaming_content("Hello", chunks.append)

        assert chunks == ["one", "two", "three"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_streaming_provider_delivers_one_chunk(self):
        fallback = FakeProvider("gemini", ["whole reply"])
        gateway = build_gateway(FakeProvider("groq", supports_streaming=True), fallback)
        chunks = []

        await gateway.generate_streaming_content("Hello", chunks.append, provider="gemini")

        assert chunks == ["whole reply"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_streaming_failure_falls_back_to_single_chunk(self):
        primary = FakeProvider("groq", [RuntimeError("stream broke")], supports_streaming=True)
        fallback = FakeProvider("gemini", ["fallback reply"])
        gateway = build_gateway(primary, fallback)
        chunks = []

        await gateway.generate_streaming_content("Hello", chunks.append)

        assert chunks == ["fallback reply"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_streaming_raises_when_both_fail(self):
        gateway = build_gateway(
            FakeProvider("groq", [RuntimeError("stream broke")], supports_streaming=True),
            FakeProvider("gemini", [RuntimeError("gemini down")])
        )

        with pytest.raises(RuntimeError, match="gemini down"):
            await gateway.generate_streaming_content("Hello", lambda chunk: None)


class TestProviderAvailability:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_available_provider(self):
        primary = FakeProvider("groq", ["hi"])
        gateway = build_gateway(primary, FakeProvider("gemini"))

        assert await gateway.is_provider_available("groq") is True
        assert primary.calls[0]["prompt"] == "Hello"
        assert primary.calls[0]["max_tokens"] == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_or_unknown_provider_is_unavailable(self):
        gateway = build_gateway(FakeProvider("groq", [RuntimeError("down")]), FakeProvider("gemini"))

        assert await gateway.is_provider_available("groq") is False
        assert await gateway.is_provider_available("openai") is False
