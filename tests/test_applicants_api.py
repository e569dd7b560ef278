"""Tests for the applicant endpoints."""

import pytest

from hrbuddy.db import Applicant, ApplicationStage
from hrbuddy.services import workflow

NEW_APPLICANT = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@mail.com",
    "location": "London",
    "skills": [{"name": "Python", "yearsExperience": 5}, {"name": "SQL"}],
    "position": {"title": "Data Engineer", "department": "Data"},
}


@pytest.fixture
def applicant_id(auth_client):
    resp = auth_client.post("/applicants", json=NEW_APPLICANT)
    assert resp.status_code == 200
    return resp.json()["applicant"]["id"]


def test_create_applicant(auth_client, db):
    resp = auth_client.post("/applicants", json=NEW_APPLICANT)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["applicant"]["firstName"] == "Ada"

    applicant = db.get(Applicant, body["applicant"]["id"])
    assert {link.skill.name for link in applicant.skills} == {"Python", "SQL"}
    application = applicant.applications[0]
    assert application.position.title == "Data Engineer"
    assert [s.stage for s in application.stages] == ["applied"]


def test_duplicate_email_conflicts(auth_client, applicant_id):
    resp = auth_client.post("/applicants", json=NEW_APPLICANT)

    assert resp.status_code == 409


def test_missing_name_is_rejected(auth_client):
    resp = auth_client.post("/applicants", json={"firstName": "", "lastName": "X", "email": "x@mail.com"})

    assert resp.status_code == 400


def test_list_and_filter(auth_client, applicant_id):
    auth_client.post(
        "/applicants",
        json={"firstName": "Grace", "lastName": "Hopper", "email": "grace@mail.com", "skills": [{"name": "COBOL"}]},
    )

    everyone = auth_client.get("/applicants").json()
    assert everyone["count"] == 2

    by_skill = auth_client.get("/applicants", params={"skill": "python"}).json()
    assert [a["id"] for a in by_skill["applicants"]] == [applicant_id]

    by_position = auth_client.get("/applicants", params={"position": "engineer"}).json()
    assert by_position["applicants"][0]["positions"][0]["title"] == "Data Engineer"

    by_search = auth_client.get("/applicants", params={"search": "hopper"}).json()
    assert [a["name"] for a in by_search["applicants"]] == ["Grace Hopper"]


def test_get_applicant_detail(auth_client, applicant_id):
    resp = auth_client.get(f"/applicants/{applicant_id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["fullName"] == "Ada Lovelace"
    assert body["applications"][0]["position"]["department"] == "Data"
    assert body["applications"][0]["aiAnalysis"] is None
    python = next(s for s in body["skills"] if s["name"] == "Python")
    assert python["yearsExperience"] == 5
    assert python["isAiDetected"] is False


def test_get_unknown_applicant(auth_client):
    assert auth_client.get("/applicants/missing").status_code == 404


def test_update_applicant_and_skills(auth_client, applicant_id):
    detail = auth_client.get(f"/applicants/{applicant_id}").json()
    sql_id = next(s["id"] for s in detail["skills"] if s["name"] == "SQL")

    resp = auth_client.put(
        f"/applicants/{applicant_id}",
        json={"location": "Paris", "skills": [{"name": "Rust", "yearsExperience": 1}], "removeSkills": [sql_id]},
    )

    assert resp.status_code == 200
    detail = auth_client.get(f"/applicants/{applicant_id}").json()
    assert detail["location"] == "Paris"
    assert {s["name"] for s in detail["skills"]} == {"Python", "Rust"}


def test_update_to_taken_email_conflicts(auth_client, applicant_id):
    auth_client.post("/applicants", json={"firstName": "Grace", "lastName": "Hopper", "email": "grace@mail.com"})

    resp = auth_client.put(f"/applicants/{applicant_id}", json={"email": "grace@mail.com"})

    assert resp.status_code == 409


def test_delete_applicant(auth_client, applicant_id, db):
    resp = auth_client.delete(f"/applicants/{applicant_id}")

    assert resp.json()["success"] is True
    assert db.get(Applicant, applicant_id) is None
    assert db.query(ApplicationStage).count() == 0


def test_generate_summary(auth_client, applicant_id, fake_model):
    fake_model.reply = "<h1>Ada Lovelace</h1>"

    resp = auth_client.post(f"/applicants/{applicant_id}/summary")

    assert resp.status_code == 200
    assert resp.json()["html"] == "<h1>Ada Lovelace</h1>"
    assert "Skills: Python, SQL" in fake_model.prompts[0] or "Skills: SQL, Python" in fake_model.prompts[0]


def test_generate_summary_failure(auth_client, applicant_id, fake_model):
    fake_model.reply = RuntimeError("model overloaded")

    resp = auth_client.post(f"/applicants/{applicant_id}/summary")

    assert resp.status_code == 500
    assert resp.json()["success"] is False


def test_workflow(auth_client, applicant_id, fake_model, mcp_factory, monkeypatch, db):
    sent = []

    async def fake_send(**kwargs):
        sent.append(kwargs)
        return True

    monkeypatch.setattr(workflow, "send_email", fake_send)
    fake_model.reply = "<p>See you at the interview</p>"

    resp = auth_client.post(
        f"/applicants/{applicant_id}/workflow",
        json={"positionTitle": "Data Engineer", "stage": "interview", "listId": "L1"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "taskCreated": True, "emailSent": True}
    assert sent[0]["to"] == "ada@mail.com"
    assert sent[0]["html"] == "<p>See you at the interview</p>"

    clickup = mcp_factory.clients_for("https://clickup.example/mcp")[0]
    tool_name, arguments = clickup.calls[0]
    assert tool_name == "create_task"
    assert arguments["list_id"] == "L1"
    assert arguments["name"] == "Applicant: Ada Lovelace"

    stages = [s.stage for s in db.get(Applicant, applicant_id).applications[0].stages]
    assert sorted(stages) == ["applied", "interview"]


def test_workflow_failure_reports_error(auth_client, applicant_id, fake_model, mcp_factory):
    mcp_factory.failing.add("https://clickup.example/mcp")

    resp = auth_client.post(
        f"/applicants/{applicant_id}/workflow",
        json={"positionTitle": "Data Engineer", "stage": "interview", "listId": "L1"},
    )

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert "connection refused" in resp.json()["error"]


def test_dashboard_stats(auth_client, applicant_id):
    stats = auth_client.get("/dashboard/stats").json()

    assert stats["applicantCount"] == 1
    assert stats["applicationCount"] == 1
    assert stats["positionCount"] == 1
    assert stats["recentApplicants"][0]["id"] == applicant_id


def test_repeated_skill_in_one_request_links_once(auth_client, db):
    resp = auth_client.post(
        "/applicants",
        json={
            "firstName": "Alan",
            "lastName": "Turing",
            "email": "alan@mail.com",
            "skills": [{"name": "React"}, {"name": "React", "yearsExperience": 2}],
        },
    )

    assert resp.status_code == 200
    applicant = db.get(Applicant, resp.json()["applicant"]["id"])
    assert [(link.skill.name, link.years_experience) for link in applicant.skills] == [("React", 2)]
