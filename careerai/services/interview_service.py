"""面试安排服务

面试时段在安排后 slot_expiry_hours 小时内未被候选人确认即失效。
可选时段按工作日上午/下午整点生成，并排除面试官已占用(待确认/已确认)的时段。
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from ..core.data_manager import DataManager, get_data_manager
from ..core.nlp_service import NLPService, get_nlp_service
from ..core.exceptions import (
    NotFoundError, PermissionDeniedError, ConflictError, ValidationError, SlotExpiredError
)
from ..integrations.meeting_service import MeetingService
from ..models.interview import (
    Interview, InterviewCreate, InterviewStatus, InterviewReply, InterviewResponseRequest,
    InterviewStatusRequest, InterviewFeedback, FeedbackRequest, FeedbackHistoryItem,
    InterviewInvite, UserRole
)
from ..models.job import ApplicationStatus
from ..utils.config import get_settings
from ..utils.logger import app_logger


def to_local_naive(value: datetime) -> datetime:
    """带时区的时间转换为本地时间并去掉时区信息"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class InterviewService:
    """面试安排服务"""

    def __init__(
        self,
        data_manager: Optional[DataManager] = None,
        nlp_service: Optional[NLPService] = None,
        meeting_service: Optional[MeetingService] = None
    ):
        self.data_manager = data_manager or get_data_manager()
        self.nlp_service = nlp_service or get_nlp_service()
        self.meeting_service = meeting_service or MeetingService(repository=self.data_manager)
        self.config = get_settings().interview

    async def _get_participant_interview(self, interview_id: int, user_id: int) -> Interview:
        interview = await self.data_manager.get_interview_by_id(interview_id)
        if not interview or user_id not in (interview.candidate_id, interview.recruiter_id):
            raise NotFoundError(f"面试不存在: {interview_id}")
        return interview

    async def _get_recruiter_interview(self, interview_id: int, recruiter_id: int) -> Interview:
        interview = await self.data_manager.get_interview_by_id(interview_id)
        if not interview or interview.recruiter_id != recruiter_id:
            raise NotFoundError(f"面试不存在: {interview_id}")
        return interview

    async def schedule_interview(self, interview_data: InterviewCreate, now: Optional[datetime] = None) -> Interview:
        """安排面试: 生成候选人简介和会议链接，时段24小时内有效"""
        now = now or datetime.now()

        job = await self.data_manager.get_job_by_id(interview_data.job_id)
        if not job or not job.is_active:
            raise NotFoundError(f"岗位不存在: {interview_data.job_id}")
        if job.posted_by != interview_data.recruiter_id:
            raise PermissionDeniedError("只能为自己发布的岗位安排面试")

        resume = await self.data_manager.get_resume_by_id(interview_data.resume_id)
        if not resume or not resume.is_active or resume.user_id != interview_data.candidate_id:
            raise NotFoundError("候选人或简历不存在")

        interview_data = interview_data.model_copy(
            update={"scheduled_at": to_local_naive(interview_data.scheduled_at)}
        )
        duration = interview_data.duration or self.config.default_duration_minutes
        profile = resume.extracted_data

        brief = await self.nlp_service.generate_candidate_brief(profile)
        meeting = await self.meeting_service.create_meeting_link(
            title=f"Interview: {job.title} - {profile.name or 'Candidate'}",
            start_time=interview_data.scheduled_at,
            duration=duration,
            attendees=[profile.email] if profile.email else []
        )

        interview = await self.data_manager.create_interview(
            interview_data,
            duration=duration,
            slot_expires_at=now + timedelta(hours=self.config.slot_expiry_hours),
            meeting_link=meeting.meet_link,
            meeting_id=meeting.id,
            candidate_brief=brief
        )

        application = await self.data_manager.get_application(job.id, interview.candidate_id)
        if application and application.status == ApplicationStatus.APPLIED:
            await self.data_manager.update_application_status(application.id, ApplicationStatus.SHORTLISTED)

        app_logger.info(f"面试安排成功: {job.title} - 候选人 {interview.candidate_id} - {interview.scheduled_at}")
        return interview

    async def respond_to_interview(
        self,
        interview_id: int,
        request: InterviewResponseRequest,
        now: Optional[datetime] = None
    ) -> Interview:
        """候选人接受或拒绝面试，时段过期时面试自动取消"""
        now = now or datetime.now()

        interview = await self.data_manager.get_interview_by_id(interview_id)
        if not interview or interview.candidate_id != request.candidate_id:
            raise NotFoundError(f"面试不存在: {interview_id}")
        if interview.status != InterviewStatus.PENDING:
            raise ConflictError("该面试已答复")

        if now > interview.slot_expires_at:
            await self.data_manager.update_interview(interview_id, status=InterviewStatus.CANCELLED)
            app_logger.warning(f"面试时段已过期: {interview_id}")
            raise SlotExpiredError("面试时段已过期")

        new_status = (
            InterviewStatus.CONFIRMED if request.response == InterviewReply.ACCEPT
            else InterviewStatus.CANCELLED
        )
        interview = await self.data_manager.update_interview(interview_id, status=new_status)

        app_logger.info(f"候选人 {request.candidate_id} {request.response.value} 面试 {interview_id}")
        return interview

    async def list_interviews(
        self,
        user_id: int,
        role: UserRole,
        status: Optional[InterviewStatus] = None,
        upcoming: bool = False,
        now: Optional[datetime] = None
    ) -> List[Interview]:
        """按角色查询用户的面试，按面试时间升序"""
        filters = {"candidate_id": user_id} if role == UserRole.CANDIDATE else {"recruiter_id": user_id}
        return await self.data_manager.list_interviews(
            statuses=[status] if status else None,
            scheduled_after=(now or datetime.now()) if upcoming else None,
            **filters
        )

    async def get_interview(self, interview_id: int, user_id: int) -> Interview:
        """面试详情(仅参与双方可见，候选人看不到反馈)"""
        interview = await self._get_participant_interview(interview_id, user_id)
        if user_id != interview.recruiter_id:
            interview = interview.model_copy(update={"feedback": None})
        return interview

    async def update_status(self, interview_id: int, request: InterviewStatusRequest) -> Interview:
        """参与者更新面试状态"""
        await self._get_participant_interview(interview_id, request.user_id)
        interview = await self.data_manager.update_interview(interview_id, status=request.status)

        app_logger.info(f"面试状态更新: {interview_id} -> {request.status.value}")
        return interview

    async def end_meeting(self, interview_id: int, recruiter_id: int) -> Interview:
        """面试官结束会议，面试状态置为已结束"""
        interview = await self._get_recruiter_interview(interview_id, recruiter_id)

        if interview.meeting_id:
            await self.meeting_service.end_meeting(interview.meeting_id)

        interview = await self.data_manager.update_interview(
            interview_id,
            status=InterviewStatus.COMPLETED,
            meeting_ended_at=datetime.now()
        )

        application = await self.data_manager.get_application(interview.job_id, interview.candidate_id)
        if application and application.status in (ApplicationStatus.APPLIED, ApplicationStatus.SHORTLISTED):
            await self.data_manager.update_application_status(application.id, ApplicationStatus.INTERVIEWED)

        app_logger.info(f"面试会议已结束: {interview_id}")
        return interview

    async def submit_feedback(self, interview_id: int, request: FeedbackRequest) -> InterviewFeedback:
        """面试官提交反馈，仅已结束的面试可提交"""
        interview = await self._get_recruiter_interview(interview_id, request.recruiter_id)
        if interview.status != InterviewStatus.COMPLETED:
            raise ValidationError("面试结束后才能提交反馈")

        feedback = InterviewFeedback(
            rating=request.rating,
            comments=request.comments,
            strengths=request.strengths,
            weaknesses=request.weaknesses,
            recommendation=request.recommendation,
            submitted_at=datetime.now(),
            submitted_by=request.recruiter_id
        )
        await self.data_manager.update_interview(interview_id, feedback=feedback)

        app_logger.info(f"面试反馈已提交: {interview_id} - {feedback.recommendation.value}")
        return feedback

    async def get_feedback_history(self, candidate_id: int, role: UserRole) -> List[FeedbackHistoryItem]:
        """候选人历史面试反馈(仅HR可查看)"""
        if role != UserRole.HR:
            raise PermissionDeniedError("仅HR可查看候选人反馈记录")

        interviews = await self.data_manager.list_feedback_by_candidate(candidate_id)
        return [
            FeedbackHistoryItem(
                interview_id=interview.id,
                job_id=interview.job_id,
                recruiter_id=interview.recruiter_id,
                feedback=interview.feedback,
                created_at=interview.created_at
            )
            for interview in interviews
            if interview.status == InterviewStatus.COMPLETED
        ]

    def generate_time_slots(self, start_date: date) -> List[datetime]:
        """生成 start_date 起 days_ahead 天内的工作日整点时段(避开午休)"""
        hours = [
            h for h in range(self.config.business_start_hour, self.config.business_end_hour)
            if not self.config.lunch_start_hour <= h < self.config.lunch_end_hour
        ]

        slots = []
        for offset in range(self.config.days_ahead):
            day = start_date + timedelta(days=offset)
            # 周六周日不排面试
            if self.config.skip_weekends and day.weekday() >= 5:
                continue
            slots.extend(datetime(day.year, day.month, day.day, hour) for hour in hours)
        return slots

    async def get_available_slots(
        self,
        job_id: int,
        candidate_id: int,
        start_date: Optional[date] = None
    ) -> List[datetime]:
        """获取已投递候选人可预约的面试时段"""
        job = await self.data_manager.get_job_by_id(job_id)
        if not job or not await self.data_manager.get_application(job_id, candidate_id):
            raise NotFoundError("岗位不存在或尚未投递该岗位")

        start_date = start_date or date.today()
        window_start = datetime(start_date.year, start_date.month, start_date.day)
        window_end = window_start + timedelta(days=self.config.days_ahead)

        booked = await self.data_manager.list_interviews(
            recruiter_id=job.posted_by,
            statuses=[InterviewStatus.PENDING, InterviewStatus.CONFIRMED],
            scheduled_after=window_start,
            scheduled_before=window_end
        )
        booked_times = {interview.scheduled_at for interview in booked}

        return [slot for slot in self.generate_time_slots(start_date) if slot not in booked_times]

    async def generate_invite(self, interview_id: int, recruiter_id: int, interviewer: Optional[str] = None) -> InterviewInvite:
        """生成面试邀请函文本"""
        interview = await self._get_recruiter_interview(interview_id, recruiter_id)
        job = await self.data_manager.get_job_by_id(interview.job_id)
        resume = await self.data_manager.get_resume_by_id(interview.resume_id)

        candidate_name = (resume.extracted_data.name if resume else None) or "Candidate"
        job_title = job.title if job else "the open"
        interviewer = interviewer or (f"{job.company} Hiring Team" if job else "Hiring Team")

        lines = [
            f"Dear {candidate_name},",
            "",
            f"Thank you for your interest in the {job_title} position. "
            "We are pleased to invite you for an interview.",
            "",
            "Interview Details:",
            f"- Date: {interview.scheduled_at.strftime('%A, %B %d, %Y')}",
            f"- Time: {interview.scheduled_at.strftime('%I:%M %p').lstrip('0')}",
            f"- Interviewer: {interviewer}",
        ]
        if interview.meeting_link:
            lines.append(f"- Meeting Link: {interview.meeting_link}")
        if interview.notes:
            lines.extend(["", f"Additional Notes: {interview.notes}"])
        lines.extend([
            "",
            "Please confirm your availability for this interview slot. If this time doesn't work for you, "
            "please let us know your preferred time slots.",
            "",
            "Best regards,",
            interviewer,
        ])

        return InterviewInvite(
            candidate_name=candidate_name,
            job_title=job_title,
            interview_date=interview.scheduled_at,
            interviewer=interviewer,
            meeting_link=interview.meeting_link,
            additional_notes=interview.notes,
            message="\n".join(lines),
            status=interview.status
        )


# 全局面试服务实例
_interview_service_instance = None


def get_interview_service() -> InterviewService:
    """获取面试服务实例"""
    global _interview_service_instance
    if _interview_service_instance is None:
        _interview_service_instance = InterviewService()
    return _interview_service_instance
