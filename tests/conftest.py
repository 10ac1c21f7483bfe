"""测试公共夹具"""

import json
from typing import Dict, List, Optional

import pytest

from careerai.core.data_manager import DataManager
from careerai.core.nlp_service import NLPService
from careerai.integrations.llm_client import LLMAPIError
from careerai.integrations.meeting_service import MeetingService, InMemoryMeetingRepository
from careerai.models.job import JobCreate, JobRequirement, ExperienceRequirement, EducationRequirement
from careerai.models.resume import ResumeCreate
from careerai.services.resume_service import ResumeService
from careerai.services.job_service import JobService
from careerai.services.interview_service import InterviewService
from careerai.services.assessment_service import AssessmentService


RESUME_TEXT = """Jane Smith
jane.smith@example.com | +1 (555) 987-6543
Senior software engineer with six years building web platforms.
Skills: Python, React, Node.js, PostgreSQL, Docker
Experience: Backend Engineer at Acme Corp, Full Stack Developer at Globex
Education: B.Tech in Computer Science, State University
"""

EXTRACTED_PROFILE = {
    "name": "Jane Smith",
    "email": "jane.smith@example.com",
    "phone": "+1 (555) 987-6543",
    "skills": ["Python", "React", "Node.js"],
    "experience": [
        {"title": "Backend Engineer", "company": "Acme Corp", "duration": "2021 - Present"},
        {"title": "Full Stack Developer", "company": "Globex", "duration": "2018 - 2021"},
    ],
    "education": [
        {"degree": "B.Tech", "school": "State University", "year": 2018, "stream": "Computer Science"}
    ],
    "certifications": [],
    "projects": [],
}


class FakeLLMClient:
    """按提示词关键字返回预设回复的AI客户端，未命中时模拟AI不可用"""

    def __init__(self, routes: Optional[Dict[str, str]] = None):
        self.routes = routes or {}
        self.prompts: List[str] = []

    async def generate_text(self, prompt: str, temperature: float = 0.7, max_tokens: int = 1000) -> str:
        self.prompts.append(prompt)
        for keyword, reply in self.routes.items():
            if keyword in prompt:
                return reply
        raise LLMAPIError("AI服务不可用")


@pytest.fixture
def offline_llm():
    return FakeLLMClient()


@pytest.fixture
def scripted_llm():
    return FakeLLMClient({
        "Analyze the following resume": "```json\n" + json.dumps(EXTRACTED_PROFILE) + "\n```",
        "professional brief": "Jane is a backend engineer with strong Python skills.",
    })


@pytest.fixture
def data_manager(tmp_path):
    return DataManager(db_path=str(tmp_path / "careerai_test.db"))


@pytest.fixture
def nlp_service(scripted_llm):
    return NLPService(llm_client=scripted_llm)


@pytest.fixture
def meeting_service():
    return MeetingService(repository=InMemoryMeetingRepository())


@pytest.fixture
def resume_service(data_manager, nlp_service):
    return ResumeService(data_manager=data_manager, nlp_service=nlp_service)


@pytest.fixture
def job_service(data_manager, nlp_service):
    return JobService(data_manager=data_manager, nlp_service=nlp_service)


@pytest.fixture
def interview_service(data_manager, nlp_service, meeting_service):
    return InterviewService(data_manager=data_manager, nlp_service=nlp_service, meeting_service=meeting_service)


@pytest.fixture
def assessment_service(data_manager, nlp_service):
    return AssessmentService(data_manager=data_manager, nlp_service=nlp_service)


def make_job(posted_by: int = 100, title: str = "Backend Engineer", skills=None, min_years=None, streams=None, **kwargs) -> JobCreate:
    return JobCreate(
        title=title,
        company=kwargs.pop("company", "Acme Corp"),
        description=kwargs.pop("description", "Build and run backend services"),
        location=kwargs.pop("location", "Bangalore"),
        requirements=JobRequirement(
            skills=skills if skills is not None else ["Python", "Node.js", "Kubernetes"],
            experience=ExperienceRequirement(min=min_years) if min_years is not None else None,
            education=EducationRequirement(stream=streams) if streams else None,
        ),
        posted_by=posted_by,
        **kwargs
    )


def make_resume(user_id: int = 1, text: str = RESUME_TEXT) -> ResumeCreate:
    return ResumeCreate(user_id=user_id, file_name="jane_smith.pdf", original_text=text)
