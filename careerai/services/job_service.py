"""岗位与投递服务"""

import math
from typing import Optional

from ..core.data_manager import DataManager, get_data_manager
from ..core.nlp_service import NLPService, get_nlp_service
from ..core.matcher import calculate_job_match
from ..core.exceptions import NotFoundError, PermissionDeniedError, ConflictError
from ..models.job import (
    Job, JobCreate, JobSearchParams, JobListResult, JobStatusUpdate,
    ApplicationCreate, Applicant, JobApplicants
)
from ..models.match import ApplicationResult
from ..utils.logger import app_logger


class JobService:
    """岗位与投递服务"""

    def __init__(self, data_manager: Optional[DataManager] = None, nlp_service: Optional[NLPService] = None):
        self.data_manager = data_manager or get_data_manager()
        self.nlp_service = nlp_service or get_nlp_service()

    async def create_job(self, job_data: JobCreate) -> Job:
        """发布岗位"""
        job = await self.data_manager.create_job(job_data)
        app_logger.info(f"岗位发布成功: {job.title} @ {job.company}")
        return job

    async def list_jobs(self, params: JobSearchParams) -> JobListResult:
        """分页查询在招岗位"""
        jobs, total = await self.data_manager.search_jobs(params)
        return JobListResult(
            jobs=jobs,
            page=params.page,
            total_pages=math.ceil(total / params.limit),
            count=len(jobs),
            total_jobs=total
        )

    async def get_job(self, job_id: int) -> Job:
        """获取在招岗位详情"""
        job = await self.data_manager.get_job_by_id(job_id)
        if not job or not job.is_active:
            raise NotFoundError(f"岗位不存在: {job_id}")
        return job

    async def _get_owned_job(self, job_id: int, recruiter_id: int) -> Job:
        job = await self.data_manager.get_job_by_id(job_id)
        if not job:
            raise NotFoundError(f"岗位不存在: {job_id}")
        if job.posted_by != recruiter_id:
            raise PermissionDeniedError("无权操作该岗位")
        return job

    async def apply_to_job(self, job_id: int, application_data: ApplicationCreate) -> ApplicationResult:
        """投递岗位: 计算匹配分并生成候选人简介"""
        job = await self.get_job(job_id)

        resume = await self.data_manager.get_resume_by_id(application_data.resume_id)
        if not resume or not resume.is_active or resume.user_id != application_data.candidate_id:
            raise NotFoundError(f"简历不存在: {application_data.resume_id}")

        if await self.data_manager.get_application(job_id, application_data.candidate_id):
            raise ConflictError("已投递过该岗位")

        match = calculate_job_match(resume.extracted_data, job.requirements)
        brief = await self.nlp_service.generate_candidate_brief(resume.extracted_data)

        application = await self.data_manager.create_application(
            job_id=job_id,
            candidate_id=application_data.candidate_id,
            resume_id=resume.id,
            match_score=match.final_score,
            candidate_brief=brief
        )

        return ApplicationResult(
            application=application,
            match_score=match.final_score,
            match_details=match
        )

    async def get_applicants(self, job_id: int, recruiter_id: int) -> JobApplicants:
        """获取岗位投递人(仅发布人可见)，按匹配分降序"""
        job = await self._get_owned_job(job_id, recruiter_id)
        applications = await self.data_manager.list_applications_by_job(job_id)

        applicants = []
        for application in applications:
            resume = await self.data_manager.get_resume_by_id(application.resume_id)
            profile = resume.extracted_data if resume else None
            applicants.append(Applicant(
                **application.model_dump(),
                candidate_name=profile.name if profile else None,
                candidate_email=profile.email if profile else None,
                file_name=resume.file_name if resume else None
            ))

        return JobApplicants(job=job, applicants=applicants)

    async def update_job_status(self, job_id: int, status_data: JobStatusUpdate) -> Job:
        """岗位上下线(仅发布人)"""
        await self._get_owned_job(job_id, status_data.recruiter_id)
        job = await self.data_manager.set_job_active(job_id, status_data.is_active)

        app_logger.info(f"岗位{'上线' if status_data.is_active else '下线'}: {job.title} (ID: {job_id})")
        return job


# 全局岗位服务实例
_job_service_instance = None


def get_job_service() -> JobService:
    """获取岗位服务实例"""
    global _job_service_instance
    if _job_service_instance is None:
        _job_service_instance = JobService()
    return _job_service_instance
