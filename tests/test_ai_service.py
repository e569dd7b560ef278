"""Tests for Gemini-backed generation, with the model replaced by a fake."""

import pytest

from hrbuddy.config import settings
from hrbuddy.errors import GenerationError
from hrbuddy.services import ai_service


@pytest.mark.asyncio
async def test_query_interpretation_returns_parsed_filters(fake_model):
    fake_model.reply = '```json\n{"skills":["React"],"experience":3}\n```'

    result = await ai_service.process_natural_language_query("React developers with 3+ years")

    assert result == {"skills": ["React"], "experience": 3}
    assert "React developers with 3+ years" in fake_model.prompts[0]


@pytest.mark.asyncio
async def test_query_interpretation_without_json_returns_raw(fake_model):
    fake_model.reply = "I cannot determine this."

    result = await ai_service.process_natural_language_query("anything")

    assert result == {"rawAnalysis": "I cannot determine this."}


@pytest.mark.asyncio
async def test_backend_failure_raises_generation_error(fake_model):
    fake_model.reply = RuntimeError("quota exceeded")

    with pytest.raises(GenerationError, match="quota exceeded"):
        await ai_service.process_natural_language_query("anything")


@pytest.mark.asyncio
async def test_empty_reply_raises_generation_error(fake_model):
    fake_model.reply = "   "

    with pytest.raises(GenerationError):
        await ai_service.generate_text("hello")


@pytest.mark.asyncio
async def test_multipart_reply_is_joined(fake_model):
    fake_model.reply = [{"type": "text", "text": "<p>Hello"}, "</p>"]

    assert await ai_service.generate_text("hello") == "<p>Hello</p>"


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")

    with pytest.raises(GenerationError, match="GEMINI_API_KEY"):
        ai_service.get_model()


@pytest.mark.asyncio
async def test_analyze_resume_malformed_json(fake_model):
    fake_model.reply = '{"skills": [Python]}'

    result = await ai_service.analyze_resume("Skills: Python")

    assert result == {"error": "Failed to parse analysis", "rawOutput": '{"skills": [Python]}'}


@pytest.mark.asyncio
async def test_analyze_resume_plain_text(fake_model):
    fake_model.reply = "Strong candidate."

    assert await ai_service.analyze_resume("Skills: Python") == {"rawAnalysis": "Strong candidate."}


@pytest.mark.asyncio
async def test_email_content_includes_custom_message(fake_model):
    fake_model.reply = "<p>Dear Ada</p>"

    html = await ai_service.generate_email_content("Ada Lovelace", "Engineer", "interview", "Bring a laptop")

    assert html == "<p>Dear Ada</p>"
    assert "Bring a laptop" in fake_model.prompts[0]
    assert '"interview" stage' in fake_model.prompts[0]


def test_truncate_resume_keeps_short_text():
    assert ai_service.truncate_resume("Skills: Python") == "Skills: Python"


def test_truncate_resume_drops_references():
    resume = "\n".join(["Experience"] + ["built things"] * 600 + ["References", "John Doe"])

    result = ai_service.truncate_resume(resume, max_chars=500)

    assert "John Doe" not in result
    assert len(result) <= 500 + len("\n[truncated]")
