"""业务服务层"""

from .resume_service import ResumeService, get_resume_service
from .job_service import JobService, get_job_service
from .interview_service import InterviewService, get_interview_service
from .assessment_service import AssessmentService, get_assessment_service

__all__ = [
    "ResumeService",
    "get_resume_service",
    "JobService",
    "get_job_service",
    "InterviewService",
    "get_interview_service",
    "AssessmentService",
    "get_assessment_service",
]
