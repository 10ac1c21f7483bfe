"""核心业务逻辑模块"""

from .data_manager import DataManager, get_data_manager
from .nlp_service import NLPService, get_nlp_service
from .matcher import calculate_job_match, rank_jobs

__all__ = [
    "DataManager",
    "get_data_manager",
    "NLPService",
    "get_nlp_service",
    "calculate_job_match",
    "rank_jobs",
]
