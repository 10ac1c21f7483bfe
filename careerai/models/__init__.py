"""数据模型模块"""

from .resume import Resume, ResumeCreate, ResumeProfile
from .job import Job, JobCreate, JobRequirement, Application
from .match import MatchResult, JobMatch
from .interview import Interview, InterviewCreate, InterviewFeedback, MeetingRecord
from .assessment import Assessment, AssessmentQuestion

__all__ = [
    "Resume",
    "ResumeCreate",
    "ResumeProfile",
    "Job",
    "JobCreate",
    "JobRequirement",
    "Application",
    "MatchResult",
    "JobMatch",
    "Interview",
    "InterviewCreate",
    "InterviewFeedback",
    "MeetingRecord",
    "Assessment",
    "AssessmentQuestion",
]
