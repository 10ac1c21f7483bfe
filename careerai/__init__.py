"""CareerAI招聘匹配系统"""

__version__ = "1.0.0"
__author__ = "CareerAI Team"
__description__ = "基于AI的简历解析、岗位匹配与面试安排系统"

# 导出主要组件
from .core import get_data_manager, get_nlp_service
from .services import (
    get_resume_service, get_job_service, get_interview_service, get_assessment_service
)
from .integrations import get_llm_client, get_meeting_service
from .utils.config import get_config
from .utils.logger import app_logger

__all__ = [
    "get_data_manager",
    "get_nlp_service",
    "get_resume_service",
    "get_job_service",
    "get_interview_service",
    "get_assessment_service",
    "get_llm_client",
    "get_meeting_service",
    "get_config",
    "app_logger",
]
