"""第三方集成模块"""

from .llm_client import DeepSeekClient, LLMAPIError, get_llm_client, close_llm_client
from .meeting_service import (
    MeetingService, MeetingRepository, InMemoryMeetingRepository, get_meeting_service
)

__all__ = [
    "DeepSeekClient",
    "LLMAPIError",
    "get_llm_client",
    "close_llm_client",
    "MeetingService",
    "MeetingRepository",
    "InMemoryMeetingRepository",
    "get_meeting_service",
]
