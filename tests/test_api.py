"""HTTP接口测试"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from careerai.main import app

from conftest import RESUME_TEXT


@pytest.fixture
def client(monkeypatch, data_manager, nlp_service, resume_service, job_service,
           interview_service, assessment_service):
    monkeypatch.setattr("careerai.core.data_manager._data_manager_instance", data_manager)
    monkeypatch.setattr("careerai.core.nlp_service._nlp_service_instance", nlp_service)
    monkeypatch.setattr("careerai.services.resume_service._resume_service_instance", resume_service)
    monkeypatch.setattr("careerai.services.job_service._job_service_instance", job_service)
    monkeypatch.setattr("careerai.services.interview_service._interview_service_instance", interview_service)
    monkeypatch.setattr("careerai.services.assessment_service._assessment_service_instance", assessment_service)
    return TestClient(app)


def _job_payload(**kwargs):
    payload = {
        "title": "Backend Engineer",
        "company": "Acme Corp",
        "description": "Build and run backend services",
        "location": "Bangalore",
        "requirements": {"skills": ["Python", "Node.js", "Kubernetes"]},
        "posted_by": 100,
    }
    payload.update(kwargs)
    return payload


def _upload(client, user_id=1):
    response = client.post("/api/resumes/upload", json={
        "user_id": user_id, "file_name": "jane_smith.pdf", "original_text": RESUME_TEXT
    })
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"

    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["components"]["database"] == "connected"


def test_resume_endpoints(client):
    resume = _upload(client)
    assert resume["extracted_data"]["name"] == "Jane Smith"

    assert client.get(f"/api/resumes/{resume['id']}", params={"user_id": 1}).status_code == 200
    assert client.get(f"/api/resumes/{resume['id']}", params={"user_id": 2}).status_code == 404
    assert len(client.get("/api/resumes", params={"user_id": 1}).json()) == 1

    short = client.post("/api/resumes/upload", json={"user_id": 1, "file_name": "a.pdf", "original_text": "short"})
    assert short.status_code == 400
    assert "detail" in short.json()

    assert client.delete(f"/api/resumes/{resume['id']}", params={"user_id": 1}).status_code == 200
    assert client.get("/api/resumes", params={"user_id": 1}).json() == []


def test_request_validation_is_422(client):
    assert client.post("/api/resumes/upload", json={"user_id": 1}).status_code == 422
    assert client.get("/api/resumes").status_code == 422


def test_job_flow(client):
    job = client.post("/api/jobs", json=_job_payload())
    assert job.status_code == 201
    job_id = job.json()["id"]

    listing = client.get("/api/jobs", params={"skills": "python, go", "limit": 5}).json()
    assert listing["total_jobs"] == 1
    assert listing["total_pages"] == 1

    resume = _upload(client)
    apply = client.post(f"/api/jobs/{job_id}/apply", json={"candidate_id": 1, "resume_id": resume["id"]})
    assert apply.status_code == 200
    assert apply.json()["match_score"] == 84
    assert apply.json()["match_details"]["missing_skills"] == ["Kubernetes"]

    again = client.post(f"/api/jobs/{job_id}/apply", json={"candidate_id": 1, "resume_id": resume["id"]})
    assert again.status_code == 409

    applicants = client.get(f"/api/jobs/{job_id}/applicants", params={"recruiter_id": 100})
    assert applicants.status_code == 200
    assert applicants.json()["applicants"][0]["candidate_name"] == "Jane Smith"
    assert client.get(f"/api/jobs/{job_id}/applicants", params={"recruiter_id": 7}).status_code == 403

    matches = client.get(f"/api/resumes/{resume['id']}/matches", params={"user_id": 1}).json()
    assert matches[0]["match"]["final_score"] == 84

    closed = client.patch(f"/api/jobs/{job_id}/status", json={"recruiter_id": 100, "is_active": False})
    assert closed.json()["is_active"] is False
    assert client.get(f"/api/jobs/{job_id}").status_code == 404


def test_interview_flow(client):
    job_id = client.post("/api/jobs", json=_job_payload()).json()["id"]
    resume = _upload(client)
    client.post(f"/api/jobs/{job_id}/apply", json={"candidate_id": 1, "resume_id": resume["id"]})

    scheduled_at = (datetime.now() + timedelta(days=3)).replace(hour=10, minute=0, second=0, microsecond=0)
    created = client.post("/api/interviews/schedule", json={
        "job_id": job_id, "candidate_id": 1, "recruiter_id": 100,
        "resume_id": resume["id"], "scheduled_at": scheduled_at.isoformat()
    })
    assert created.status_code == 201
    interview_id = created.json()["id"]

    accepted = client.patch(f"/api/interviews/{interview_id}/respond", json={"candidate_id": 1, "response": "accept"})
    assert accepted.json()["status"] == "confirmed"
    again = client.patch(f"/api/interviews/{interview_id}/respond", json={"candidate_id": 1, "response": "accept"})
    assert again.status_code == 409

    invite = client.get(f"/api/interviews/{interview_id}/invite", params={"recruiter_id": 100})
    assert invite.json()["message"].startswith("Dear Jane Smith,")

    early = client.post(f"/api/interviews/{interview_id}/feedback", json={
        "recruiter_id": 100, "rating": 4, "recommendation": "hire"
    })
    assert early.status_code == 400

    ended = client.post(f"/api/interviews/{interview_id}/end", params={"recruiter_id": 100})
    assert ended.json()["requires_feedback"] is True

    feedback = client.post(f"/api/interviews/{interview_id}/feedback", json={
        "recruiter_id": 100, "rating": 4, "recommendation": "hire"
    })
    assert feedback.status_code == 200

    as_candidate = client.get("/api/interviews", params={"user_id": 1, "role": "candidate"}).json()
    assert as_candidate[0]["feedback"] is None
    as_recruiter = client.get("/api/interviews", params={"user_id": 100, "role": "hr"}).json()
    assert as_recruiter[0]["feedback"]["rating"] == 4

    history = client.get("/api/interviews/candidates/1/feedback", params={"role": "hr"})
    assert len(history.json()) == 1
    assert client.get("/api/interviews/candidates/1/feedback", params={"role": "candidate"}).status_code == 403

    slots = client.get(f"/api/interviews/jobs/{job_id}/slots", params={"candidate_id": 1})
    assert slots.status_code == 200
    assert client.get(f"/api/interviews/jobs/{job_id}/slots", params={"candidate_id": 9}).status_code == 404


def test_feedback_analysis(client):
    response = client.post("/api/interviews/feedback/analyze", json={"feedback_text": "Great communicator"})
    assert response.status_code == 200
    assert response.json()["sentiment"] == "neutral"

    assert client.post("/api/interviews/feedback/analyze", json={"feedback_text": "  "}).status_code == 400


def test_assessment_flow(client):
    job_id = client.post("/api/jobs", json=_job_payload()).json()["id"]

    paper = client.post(f"/api/assessments/jobs/{job_id}/generate", json={"candidate_id": 1})
    assert paper.status_code == 200
    assessment_id = paper.json()["assessment_id"]
    assert "correct_answer" not in paper.json()["questions"][0]

    assert client.post(f"/api/assessments/{assessment_id}/start", json={"candidate_id": 1}).status_code == 200
    assert client.post(f"/api/assessments/jobs/{job_id}/generate", json={"candidate_id": 1}).status_code == 409
    assert client.get(f"/api/assessments/{assessment_id}/results", params={"candidate_id": 1}).status_code == 404

    submitted = client.post(f"/api/assessments/{assessment_id}/submit", json={"candidate_id": 1, "answers": []})
    assert submitted.status_code == 200
    assert submitted.json()["score"] == 0
    assert submitted.json()["passed"] is False

    results = client.get(f"/api/assessments/{assessment_id}/results", params={"candidate_id": 1})
    assert results.status_code == 200

    listing = client.get("/api/assessments", params={"candidate_id": 1}).json()
    assert listing[0]["status"] == "completed"
