"""
Gemini-backed text generation.

Resume analysis, applicant summaries, email drafts and natural-language
search interpretation all go through ``generate_text``.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from hrbuddy.config import settings
from hrbuddy.errors import GenerationError
from hrbuddy.utils.parser import ParsedJson, parse_json_reply

logger = logging.getLogger(__name__)

# Generation options shared by every prompt
TEMPERATURE = 0.7
TOP_P = 0.95
TOP_K = 40
MAX_OUTPUT_TOKENS = 2048


def get_model(model_name: str | None = None) -> ChatGoogleGenerativeAI:
    """Create the Gemini chat model."""
    if not settings.gemini_api_key:
        raise GenerationError("GEMINI_API_KEY not set")

    return ChatGoogleGenerativeAI(
        model=model_name or settings.gemini_model,
        google_api_key=settings.gemini_api_key,
        temperature=TEMPERATURE,
        top_p=TOP_P,
        top_k=TOP_K,
        max_output_tokens=MAX_OUTPUT_TOKENS,
    )


def _message_text(message: BaseMessage) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    # Multi-part replies come back as a list of strings or {"type": "text", "text": ...}
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("text"):
            parts.append(part["text"])
    return "".join(parts)


async def generate_text(prompt: str) -> str:
    """
    Send a prompt to Gemini and return the reply text.

    Raises:
        GenerationError: The API failed, rejected the key, or returned no text
    """
    model = get_model()
    try:
        message = await model.ainvoke(prompt)
    except Exception as e:
        logger.error(f"Gemini request failed: {e}")
        raise GenerationError(f"Gemini request failed: {e}") from e

    text = _message_text(message)
    if not text.strip():
        raise GenerationError("Gemini returned no text")
    return text


def truncate_resume(resume_text: str, max_chars: int = 8000) -> str:
    """
    Truncate resume text to essential sections for token efficiency.

    Keeps: Skills, Experience, Education sections
    Removes: references, declarations
    """
    if len(resume_text) <= max_chars:
        return resume_text

    lines = resume_text.split("\n")
    essential_lines = []
    in_section = False
    skip_sections = ["reference", "declaration"]

    for line in lines:
        line_lower = line.lower().strip()

        if any(skip in line_lower for skip in skip_sections):
            in_section = False
            continue

        if any(kw in line_lower for kw in ["skill", "experience", "education", "summary", "project"]):
            in_section = True

        if in_section or len(essential_lines) < 50:
            essential_lines.append(line)

        if len("\n".join(essential_lines)) > max_chars:
            break

    result = "\n".join(essential_lines)
    if len(result) > max_chars:
        result = result[:max_chars] + "\n[truncated]"
    return result


async def generate_email_content(
    applicant_name: str,
    position_title: str,
    stage: str,
    custom_message: str | None = None,
) -> str:
    """Draft an HTML status email to an applicant."""
    custom = f"Include this custom message: {custom_message}" if custom_message else ""
    prompt = f"""
Write a professional email to an applicant named {applicant_name}
regarding their application for the {position_title} position.
The application is currently in the "{stage}" stage.
{custom}

The email should be professional, concise, and provide clear next steps.
Format the email with appropriate HTML tags (<p>, <h2>, etc.) for display in an email client.
"""
    return await generate_text(prompt)


async def analyze_resume(resume_text: str) -> dict[str, Any]:
    """
    Extract skills, experience, education and past roles from a resume.

    Returns the parsed JSON object. When the reply holds no JSON, returns
    ``{"rawAnalysis": text}``; when it holds JSON that does not parse,
    returns ``{"error": ..., "rawOutput": text}``.
    """
    prompt = f"""
Analyze the following resume and extract key information:

{truncate_resume(resume_text)}

Please provide the following in JSON format:
1. A list of skills identified (key "skills", list of strings)
2. Years of experience, if specified (key "experience", number)
3. Education details (key "education")
4. Previous job titles and companies (key "jobTitles")
5. A brief assessment of their qualifications (key "assessment")
"""
    text = await generate_text(prompt)

    parsed = parse_json_reply(text)
    if isinstance(parsed, ParsedJson):
        return parsed.data
    if parsed.malformed:
        logger.error("Error parsing resume analysis: reply held malformed JSON")
        return {"error": "Failed to parse analysis", "rawOutput": text}
    return {"rawAnalysis": text}


async def generate_applicant_summary(applicant: Any) -> dict[str, Any]:
    """Generate an HTML summary card for an applicant."""
    application = applicant.applications[0] if applicant.applications else None
    position_title = application.position.title if application else "Unknown position"
    skills = ", ".join(link.skill.name for link in applicant.skills)

    prompt = f"""
Generate a comprehensive HTML summary for the following job applicant:

Name: {applicant.first_name} {applicant.last_name or ''}
Email: {applicant.email}
Phone: {applicant.phone or 'Not provided'}
Location: {applicant.location or 'Not provided'}
Position Applied For: {position_title}
Skills: {skills or 'None specified'}
LinkedIn: {applicant.linkedin_url or 'Not provided'}
Portfolio: {applicant.portfolio_url or 'Not provided'}

Please format the summary with HTML that includes:
- A header with the applicant's name
- Sections for contact information, skills, and qualifications
- A brief assessment of their fit for the position
- Styling with appropriate CSS classes (we use Tailwind CSS)
"""
    html = await generate_text(prompt)
    return {
        "html": html,
        "generatedAt": datetime.now(UTC).isoformat(),
        "modelVersion": settings.gemini_model,
    }


QUERY_PROMPT = """
You translate recruiter search requests into structured filters.

Search request: "{query}"

Extract the following if mentioned:
- skills: list of required skills
- experience: minimum years of experience, as a number
- education: required education level
- jobTitles: list of job titles or positions

Respond with a JSON object only, using exactly these keys and omitting any
that the request does not mention.
"""


async def process_natural_language_query(query: str) -> dict[str, Any]:
    """
    Interpret a free-text search query as search filters.

    Returns the object Gemini produced, unvalidated, or
    ``{"rawAnalysis": text}`` when the reply holds no usable JSON.

    Raises:
        GenerationError: Gemini could not be reached or returned nothing
    """
    text = await generate_text(QUERY_PROMPT.format(query=query))

    parsed = parse_json_reply(text)
    if isinstance(parsed, ParsedJson):
        return parsed.data

    logger.info("Search query reply held no JSON, returning raw analysis")
    return {"rawAnalysis": parsed.text}
