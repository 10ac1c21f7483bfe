"""视频会议集成模块

生成会议链接并记录会议状态。会议记录通过 MeetingRepository 持久化，
默认使用数据库实现，测试中可替换为内存实现。
"""

import random
import string
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..models.interview import MeetingRecord
from ..utils.config import get_settings
from ..utils.logger import app_logger


class MeetingRepository(ABC):
    """会议记录存储接口"""

    @abstractmethod
    async def save_meeting(self, meeting: MeetingRecord) -> MeetingRecord:
        ...

    @abstractmethod
    async def get_meeting(self, meeting_id: str) -> Optional[MeetingRecord]:
        ...

    @abstractmethod
    async def mark_meeting_ended(self, meeting_id: str, ended_at: datetime) -> bool:
        ...


class InMemoryMeetingRepository(MeetingRepository):
    """内存会议存储"""

    def __init__(self):
        self._meetings: Dict[str, MeetingRecord] = {}

    async def save_meeting(self, meeting: MeetingRecord) -> MeetingRecord:
        self._meetings[meeting.id] = meeting
        return meeting

    async def get_meeting(self, meeting_id: str) -> Optional[MeetingRecord]:
        return self._meetings.get(meeting_id)

    async def mark_meeting_ended(self, meeting_id: str, ended_at: datetime) -> bool:
        meeting = self._meetings.get(meeting_id)
        if meeting is None:
            return False
        self._meetings[meeting_id] = meeting.model_copy(update={"status": "completed", "ended_at": ended_at})
        return True


class MeetingService:
    """会议服务"""

    def __init__(self, repository: Optional[MeetingRepository] = None, base_url: Optional[str] = None):
        if repository is None:
            from ..core.data_manager import get_data_manager
            repository = get_data_manager()
        self.repository = repository
        self.base_url = (base_url or get_settings().interview.meeting_base_url).rstrip("/")

    @staticmethod
    def generate_meeting_id() -> str:
        """生成 xxxx-xxxx-xxxx 形式的会议ID"""
        segments = [
            "".join(random.choice(string.ascii_lowercase) for _ in range(4))
            for _ in range(3)
        ]
        return "-".join(segments)

    async def create_meeting_link(
        self,
        title: str,
        start_time: datetime,
        duration: int,
        attendees: Optional[List[str]] = None
    ) -> MeetingRecord:
        """创建会议并返回会议记录"""
        meeting_id = self.generate_meeting_id()
        meeting = MeetingRecord(
            id=meeting_id,
            title=title,
            start_time=start_time,
            duration=duration,
            attendees=[a for a in (attendees or []) if a],
            meet_link=f"{self.base_url}/{meeting_id}",
            status="active",
            created_at=datetime.now()
        )

        await self.repository.save_meeting(meeting)
        app_logger.info(f"会议链接创建成功: {meeting.meet_link}")

        return meeting

    async def end_meeting(self, meeting_id: str) -> bool:
        """结束会议，会议不存在时返回False"""
        ended = await self.repository.mark_meeting_ended(meeting_id, datetime.now())
        if ended:
            app_logger.info(f"会议已结束: {meeting_id}")
        else:
            app_logger.warning(f"结束会议失败，会议不存在: {meeting_id}")
        return ended

    async def get_meeting_status(self, meeting_id: str) -> Optional[MeetingRecord]:
        """查询会议记录"""
        return await self.repository.get_meeting(meeting_id)


# 全局会议服务实例
_meeting_service_instance = None


def get_meeting_service() -> MeetingService:
    """获取会议服务实例"""
    global _meeting_service_instance
    if _meeting_service_instance is None:
        _meeting_service_instance = MeetingService()
    return _meeting_service_instance
