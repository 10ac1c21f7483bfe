"""简历处理服务"""

from typing import List, Optional

from ..core.data_manager import DataManager, get_data_manager
from ..core.nlp_service import NLPService, get_nlp_service
from ..core.matcher import rank_jobs
from ..core.exceptions import NotFoundError, ValidationError
from ..models.resume import Resume, ResumeCreate, ResumeProfile
from ..models.match import JobMatch
from ..utils.config import get_settings
from ..utils.logger import app_logger


class ResumeService:
    """简历处理服务"""

    def __init__(self, data_manager: Optional[DataManager] = None, nlp_service: Optional[NLPService] = None):
        self.data_manager = data_manager or get_data_manager()
        self.nlp_service = nlp_service or get_nlp_service()
        self.config = get_settings().resume

    def _validate_text(self, text: Optional[str]):
        """简历原文去除首尾空白后至少需要 min_text_length 个字符"""
        if not text or len(text.strip()) < self.config.min_text_length:
            raise ValidationError(
                f"简历内容过短，至少需要{self.config.min_text_length}个字符，请确认文件内容可读"
            )

    async def upload_resume(self, resume_data: ResumeCreate) -> Resume:
        """上传简历: 校验、AI提取结构化信息并保存"""
        self._validate_text(resume_data.original_text)

        extracted = await self.nlp_service.extract_resume_data(resume_data.original_text)
        resume = await self.data_manager.create_resume(resume_data, extracted)

        app_logger.info(
            f"简历上传成功: {resume.file_name} (ID: {resume.id}) - 提取技能{len(extracted.skills)}项"
        )
        return resume

    async def get_resume(self, resume_id: int, user_id: int) -> Resume:
        """获取用户本人的有效简历"""
        resume = await self.data_manager.get_resume_by_id(resume_id)
        if not resume or not resume.is_active or resume.user_id != user_id:
            raise NotFoundError(f"简历不存在: {resume_id}")
        return resume

    async def list_resumes(self, user_id: int) -> List[Resume]:
        """获取用户的全部有效简历(按上传时间倒序)"""
        return await self.data_manager.list_resumes_by_user(user_id)

    async def delete_resume(self, resume_id: int, user_id: int):
        """软删除简历"""
        resume = await self.get_resume(resume_id, user_id)
        await self.data_manager.deactivate_resume(resume.id)

    async def find_job_matches(self, resume_id: int, user_id: int, limit: Optional[int] = None) -> List[JobMatch]:
        """将简历与所有在招岗位匹配，按总分降序返回前 limit 个"""
        resume = await self.get_resume(resume_id, user_id)
        jobs = await self.data_manager.list_active_jobs()

        matches = rank_jobs(resume.extracted_data, jobs, limit or self.config.match_limit)
        app_logger.info(f"简历岗位匹配完成: 简历 {resume_id} - 在招岗位{len(jobs)}个，返回{len(matches)}个")
        return matches

    async def analyze_text(self, resume_text: str) -> ResumeProfile:
        """仅解析简历文本，不保存"""
        self._validate_text(resume_text)
        return await self.nlp_service.extract_resume_data(resume_text)


# 全局简历服务实例
_resume_service_instance = None


def get_resume_service() -> ResumeService:
    """获取简历服务实例"""
    global _resume_service_instance
    if _resume_service_instance is None:
        _resume_service_instance = ResumeService()
    return _resume_service_instance
