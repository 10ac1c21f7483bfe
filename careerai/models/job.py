"""岗位数据模型"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class JobType(str, Enum):
    """岗位类型枚举"""
    FULL_TIME = "full-time"  # 全职
    PART_TIME = "part-time"  # 兼职
    CONTRACT = "contract"  # 合同工
    INTERNSHIP = "internship"  # 实习


class ExperienceLevel(str, Enum):
    """经验级别枚举"""
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"


class ApplicationStatus(str, Enum):
    """投递状态枚举"""
    APPLIED = "applied"  # 已投递
    SHORTLISTED = "shortlisted"  # 入围
    INTERVIEWED = "interviewed"  # 已面试
    HIRED = "hired"  # 已录用
    REJECTED = "rejected"  # 已拒绝


class SalaryRange(BaseModel):
    """薪资范围模型"""
    min: Optional[int] = Field(None, description="最低薪资")
    max: Optional[int] = Field(None, description="最高薪资")
    currency: str = Field("USD", description="货币单位")


class ExperienceRequirement(BaseModel):
    """经验要求模型"""
    min: Optional[int] = Field(None, ge=0, description="最少工作年限")
    max: Optional[int] = Field(None, ge=0, description="最多工作年限")
    level: Optional[ExperienceLevel] = Field(None, description="经验级别")


class EducationRequirement(BaseModel):
    """学历要求模型"""
    degree: Optional[str] = Field(None, description="学位要求")
    stream: List[str] = Field(default_factory=list, description="可接受的专业方向")
    cgpa: Optional[float] = Field(None, description="最低绩点")


class JobRequirement(BaseModel):
    """岗位要求模型

    未填写的维度按"无要求"处理，匹配时该维度记满分。
    """
    skills: List[str] = Field(default_factory=list, description="技能要求")
    experience: Optional[ExperienceRequirement] = Field(None, description="经验要求")
    education: Optional[EducationRequirement] = Field(None, description="学历要求")

    @field_validator('skills', mode='before')
    @classmethod
    def drop_empty_skills(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple)):
            return []
        return [s.strip() for s in v if isinstance(s, str) and s.strip()]


class JobBase(BaseModel):
    """岗位基础模型"""
    title: str = Field(..., description="岗位名称")
    company: str = Field(..., description="公司名称")
    description: str = Field(..., description="岗位描述")
    location: str = Field(..., description="工作地点")
    job_type: JobType = Field(JobType.FULL_TIME, description="岗位类型")
    requirements: JobRequirement = Field(default_factory=JobRequirement, description="岗位要求")
    salary: Optional[SalaryRange] = Field(None, description="薪资范围")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError('岗位名称不能为空且长度至少为2个字符')
        return v.strip()

    @field_validator('company')
    @classmethod
    def validate_company(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError('公司名称不能为空且长度至少为2个字符')
        return v.strip()


class JobCreate(JobBase):
    """创建岗位模型"""
    posted_by: int = Field(..., description="发布人(HR)用户ID")


class Job(JobBase):
    """完整岗位模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="岗位ID")
    posted_by: int = Field(..., description="发布人(HR)用户ID")
    is_active: bool = Field(True, description="是否在招")

    # 时间戳
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")


class JobStatusUpdate(BaseModel):
    """岗位上下线请求"""
    recruiter_id: int = Field(..., description="操作人(HR)用户ID")
    is_active: bool = Field(..., description="是否在招")


class JobSearchParams(BaseModel):
    """岗位搜索参数"""
    location: Optional[str] = Field(None, description="工作地点(模糊匹配)")
    job_type: Optional[JobType] = Field(None, description="岗位类型")
    skills: Optional[List[str]] = Field(None, description="命中任一技能即可")

    # 分页参数
    page: int = Field(1, ge=1, description="页码")
    limit: int = Field(10, ge=1, le=100, description="每页数量")


class JobListResult(BaseModel):
    """岗位分页结果"""
    jobs: List[Job] = Field(default_factory=list)
    page: int = Field(..., description="当前页")
    total_pages: int = Field(..., description="总页数")
    count: int = Field(..., description="本页数量")
    total_jobs: int = Field(..., description="岗位总数")


class ApplicationCreate(BaseModel):
    """投递请求模型"""
    candidate_id: int = Field(..., description="候选人用户ID")
    resume_id: int = Field(..., description="简历ID")


class Application(BaseModel):
    """投递记录模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="投递ID")
    job_id: int = Field(..., description="岗位ID")
    candidate_id: int = Field(..., description="候选人用户ID")
    resume_id: int = Field(..., description="简历ID")
    match_score: int = Field(..., ge=0, le=100, description="投递时计算的匹配分")
    candidate_brief: Optional[str] = Field(None, description="AI生成的候选人简介")
    status: ApplicationStatus = Field(ApplicationStatus.APPLIED, description="投递状态")
    applied_at: datetime = Field(..., description="投递时间")


class Applicant(Application):
    """投递人视图(附带简历中的姓名和邮箱)"""
    candidate_name: Optional[str] = Field(None, description="候选人姓名")
    candidate_email: Optional[str] = Field(None, description="候选人邮箱")
    file_name: Optional[str] = Field(None, description="简历文件名")


class JobApplicants(BaseModel):
    """岗位投递人列表"""
    job: Job
    applicants: List[Applicant] = Field(default_factory=list)
