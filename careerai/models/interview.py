"""面试数据模型"""

from datetime import datetime
from typing import List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class InterviewType(str, Enum):
    """面试类型枚举"""
    TECHNICAL = "technical"  # 技术面试
    HR = "hr"  # HR面试
    BEHAVIORAL = "behavioral"  # 行为面试
    FINAL = "final"  # 终面


class InterviewStatus(str, Enum):
    """面试状态枚举"""
    PENDING = "pending"  # 待候选人确认
    CONFIRMED = "confirmed"  # 已确认
    COMPLETED = "completed"  # 已结束
    CANCELLED = "cancelled"  # 已取消
    RESCHEDULED = "rescheduled"  # 已改期


class InterviewReply(str, Enum):
    """候选人答复枚举"""
    ACCEPT = "accept"
    DECLINE = "decline"


class FeedbackRecommendation(str, Enum):
    """面试结论枚举"""
    HIRE = "hire"
    REJECT = "reject"
    NEXT_ROUND = "next-round"
    HOLD = "hold"


class UserRole(str, Enum):
    """查询方角色"""
    CANDIDATE = "candidate"
    HR = "hr"


class InterviewFeedback(BaseModel):
    """面试反馈模型(对候选人不可见)"""
    rating: int = Field(..., ge=1, le=5, description="评分(1-5)")
    comments: Optional[str] = Field(None, description="评语")
    strengths: List[str] = Field(default_factory=list, description="优势")
    weaknesses: List[str] = Field(default_factory=list, description="不足")
    recommendation: FeedbackRecommendation = Field(..., description="结论")
    submitted_at: Optional[datetime] = Field(None, description="提交时间")
    submitted_by: Optional[int] = Field(None, description="提交人")


class InterviewCreate(BaseModel):
    """安排面试请求模型"""
    job_id: int = Field(..., description="岗位ID")
    candidate_id: int = Field(..., description="候选人用户ID")
    recruiter_id: int = Field(..., description="面试官(HR)用户ID")
    resume_id: int = Field(..., description="简历ID")
    scheduled_at: datetime = Field(..., description="面试时间")
    duration: Optional[int] = Field(None, gt=0, description="时长(分钟)")
    type: InterviewType = Field(InterviewType.TECHNICAL, description="面试类型")
    notes: Optional[str] = Field(None, description="备注")


class Interview(BaseModel):
    """完整面试模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="面试ID")
    job_id: int = Field(..., description="岗位ID")
    candidate_id: int = Field(..., description="候选人用户ID")
    recruiter_id: int = Field(..., description="面试官(HR)用户ID")
    resume_id: int = Field(..., description="简历ID")
    scheduled_at: datetime = Field(..., description="面试时间")
    duration: int = Field(60, description="时长(分钟)")
    type: InterviewType = Field(InterviewType.TECHNICAL, description="面试类型")
    status: InterviewStatus = Field(InterviewStatus.PENDING, description="面试状态")

    meeting_link: Optional[str] = Field(None, description="会议链接")
    meeting_id: Optional[str] = Field(None, description="会议ID")
    notes: Optional[str] = Field(None, description="备注")
    candidate_brief: Optional[str] = Field(None, description="AI生成的候选人简介")

    # 未确认的时段在此时间后失效
    slot_expires_at: datetime = Field(..., description="时段失效时间")
    meeting_ended_at: Optional[datetime] = Field(None, description="会议结束时间")
    feedback: Optional[InterviewFeedback] = Field(None, description="面试反馈")

    # 时间戳
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")


class InterviewResponseRequest(BaseModel):
    """候选人答复请求"""
    candidate_id: int
    response: InterviewReply


class InterviewStatusRequest(BaseModel):
    """面试状态更新请求"""
    user_id: int
    status: InterviewStatus


class FeedbackRequest(BaseModel):
    """提交反馈请求"""
    recruiter_id: int
    rating: int = Field(..., ge=1, le=5)
    comments: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendation: FeedbackRecommendation


class FeedbackHistoryItem(BaseModel):
    """候选人历史反馈项"""
    interview_id: int
    job_id: int
    recruiter_id: int
    feedback: InterviewFeedback
    created_at: datetime


class InterviewInvite(BaseModel):
    """面试邀请函"""
    candidate_name: str
    job_title: str
    interview_date: datetime
    interviewer: str
    meeting_link: Optional[str] = None
    additional_notes: Optional[str] = None
    message: str
    status: InterviewStatus = InterviewStatus.PENDING


class MeetingRecord(BaseModel):
    """会议记录模型"""
    id: str = Field(..., description="会议ID")
    title: str = Field(..., description="会议标题")
    start_time: datetime = Field(..., description="开始时间")
    duration: int = Field(..., description="时长(分钟)")
    attendees: List[str] = Field(default_factory=list, description="参会人邮箱")
    meet_link: str = Field(..., description="会议链接")
    status: str = Field("active", description="会议状态(active/completed)")
    created_at: datetime = Field(..., description="创建时间")
    ended_at: Optional[datetime] = Field(None, description="结束时间")


class FeedbackAnalysis(BaseModel):
    """面试反馈情感分析结果"""
    sentiment: str = Field("neutral", pattern="^(positive|negative|neutral)$", description="情感倾向")
    score: float = Field(0.5, ge=0, le=1, description="情感得分")
    confidence: float = Field(0.0, ge=0, le=1, description="置信度")
    keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {"positive": [], "negative": [], "neutral": []},
        description="关键词"
    )
    red_flags: List[str] = Field(default_factory=list, description="风险点")
    strengths: List[str] = Field(default_factory=list, description="优势")
    recommendation: str = Field("", description="建议")


class FeedbackAnalysisRequest(BaseModel):
    """反馈分析请求"""
    feedback_text: str
