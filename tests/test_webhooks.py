"""Tests for the Zapier webhook and the analysis queue."""

from pathlib import Path

import httpx
import pytest
from sqlalchemy import select

from hrbuddy.api.routes import webhooks
from hrbuddy.db import AIAnalysis, Applicant, Application, File

SUBMISSION = {
    "email": "linus@mail.com",
    "first_name": "Linus",
    "last_name": "Torvalds",
    "position_applied": "Kernel Engineer",
    "department": "Platform",
    "cover_letter": "I like kernels.",
    "resume_url": "https://files.zapier.example/resume.pdf",
    "resume_filename": "linus resume.pdf",
    "resume_text": "Skills: C, Git. Experience: 30 years. Education: MSc Computer Science.",
    "utm_campaign": "spring",
}

ANALYSIS_REPLY = '```json\n{"skills": ["C", "Git"], "experience": 30, "education": "MSc Computer Science"}\n```'


@pytest.fixture
def resume_download(monkeypatch):
    urls = []

    async def fake_download(url: str) -> bytes:
        urls.append(url)
        return b"%PDF-1.4 fake resume"

    monkeypatch.setattr(webhooks, "download_resume", fake_download)
    return urls


def test_rejects_missing_secret(client):
    resp = client.post("/webhooks/zapier", json=SUBMISSION)

    assert resp.status_code == 401


def test_rejects_wrong_secret(client):
    resp = client.post("/webhooks/zapier", json=SUBMISSION, headers={"Authorization": "Bearer guess"})

    assert resp.status_code == 401


def test_rejects_when_secret_unset(client, webhook_headers, monkeypatch):
    from hrbuddy.config import settings

    monkeypatch.setattr(settings, "zapier_webhook_secret", "")

    resp = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers)

    assert resp.status_code == 401


def test_submission_creates_application(client, webhook_headers, resume_download, fake_model, db):
    fake_model.reply = ANALYSIS_REPLY

    resp = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert resume_download == ["https://files.zapier.example/resume.pdf"]

    application = db.get(Application, body["application_id"])
    assert application.applicant_id == body["applicant_id"]
    assert application.position.title == "Kernel Engineer"
    assert application.form_data["utm_campaign"] == "spring"
    assert [s.stage for s in application.stages] == ["applied"]

    resume = application.files[0]
    assert resume.file_category == "resume"
    assert resume.file_size == len(b"%PDF-1.4 fake resume")
    assert Path(resume.storage_path).name.endswith("linus_resume.pdf")
    assert Path(resume.storage_path).read_bytes() == b"%PDF-1.4 fake resume"

    # Background analysis ran after the response
    analysis = application.ai_analyses[0]
    assert analysis.analysis_type == "resume_analysis"
    assert analysis.analysis_result["education"] == "MSc Computer Science"
    skills = {link.skill.name: link.is_ai_detected for link in application.applicant.skills}
    assert skills == {"C": True, "Git": True}


def test_resubmission_updates_applicant(client, webhook_headers, resume_download, fake_model, db):
    fake_model.reply = ANALYSIS_REPLY
    client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers)

    again = {**SUBMISSION, "phone": "+358 555 0100", "position_applied": "Git Maintainer"}
    client.post("/webhooks/zapier", json=again, headers=webhook_headers)

    applicants = db.scalars(select(Applicant)).all()
    assert len(applicants) == 1
    assert applicants[0].phone == "+358 555 0100"
    assert len(applicants[0].applications) == 2


def test_resume_download_failure_keeps_application(client, webhook_headers, fake_model, monkeypatch, db):
    async def broken_download(url: str) -> bytes:
        raise httpx.ConnectError("no route to host")

    monkeypatch.setattr(webhooks, "download_resume", broken_download)

    resp = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers)

    assert resp.status_code == 200
    application = db.get(Application, resp.json()["application_id"])
    assert application.files == []
    # Nothing to analyze without a stored resume
    assert application.ai_analyses[0].analysis_result["status"] == "no_resume"


def test_invalid_submission(client, webhook_headers):
    resp = client.post("/webhooks/zapier", json={"email": "linus@mail.com"}, headers=webhook_headers)

    assert resp.status_code == 400


def test_queue_analysis(client, webhook_headers, resume_download, fake_model, db):
    fake_model.reply = ANALYSIS_REPLY
    application_id = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers).json()[
        "application_id"
    ]

    resp = client.post("/analysis/queue", json={"application_id": application_id}, headers=webhook_headers)

    assert resp.json() == {"success": True, "message": "Resume analysis completed"}
    assert db.scalars(select(AIAnalysis).where(AIAnalysis.application_id == application_id)).all()


def test_queue_analysis_without_resume_text(client, webhook_headers, resume_download, fake_model, db):
    submission = {**SUBMISSION, "resume_text": None}
    application_id = client.post("/webhooks/zapier", json=submission, headers=webhook_headers).json()[
        "application_id"
    ]

    resp = client.post("/analysis/queue", json={"application_id": application_id}, headers=webhook_headers)

    # The stored bytes are not a readable PDF, so there is no text to analyze
    assert resp.json()["status"] == "pending"
    assert db.scalar(select(File).where(File.application_id == application_id)) is not None


def test_queue_analysis_failure(client, webhook_headers, resume_download, fake_model):
    fake_model.reply = ANALYSIS_REPLY
    application_id = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers).json()[
        "application_id"
    ]
    fake_model.reply = RuntimeError("quota exceeded")

    resp = client.post("/analysis/queue", json={"application_id": application_id}, headers=webhook_headers)

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to analyze resume"}


def test_queue_unknown_application(client, webhook_headers):
    resp = client.post("/analysis/queue", json={"application_id": "missing"}, headers=webhook_headers)

    assert resp.status_code == 404


def test_repeated_detected_skills_link_once(client, webhook_headers, resume_download, fake_model, db):
    fake_model.reply = '{"skills": ["React", " React", "Go"], "education": "BSc"}'

    resp = client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers)
    application_id = resp.json()["application_id"]

    application = db.get(Application, application_id)
    assert sorted(link.skill.name for link in application.applicant.skills) == ["Go", "React"]

    # Analyzing again keeps the existing links
    queued = client.post("/analysis/queue", json={"application_id": application_id}, headers=webhook_headers)
    assert queued.json() == {"success": True, "message": "Resume analysis completed"}


def test_deleting_applicant_removes_stored_resume(auth_client, webhook_headers, resume_download, fake_model):
    fake_model.reply = ANALYSIS_REPLY
    body = auth_client.post("/webhooks/zapier", json=SUBMISSION, headers=webhook_headers).json()
    detail = auth_client.get(f"/applicants/{body['applicant_id']}").json()
    stored = Path(detail["applications"][0]["files"][0]["storagePath"])
    assert stored.exists()

    resp = auth_client.delete(f"/applicants/{body['applicant_id']}")

    assert resp.json()["success"] is True
    assert not stored.exists()
