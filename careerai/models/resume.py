"""简历数据模型"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExperienceEntry(BaseModel):
    """工作经历模型"""
    title: Optional[str] = Field(None, description="职位名称")
    company: Optional[str] = Field(None, description="公司名称")
    duration: Optional[str] = Field(None, description="起止时间(原始字符串)")
    location: Optional[str] = Field(None, description="工作地点")
    description: Optional[str] = Field(None, description="工作描述")
    technologies: List[str] = Field(default_factory=list, description="使用技术")


class EducationEntry(BaseModel):
    """教育经历模型"""
    degree: Optional[str] = Field(None, description="学位")
    school: Optional[str] = Field(None, description="学校名称")
    year: Optional[str] = Field(None, description="毕业年份")
    cgpa: Optional[str] = Field(None, description="绩点")
    stream: Optional[str] = Field(None, description="专业方向")
    location: Optional[str] = Field(None, description="学校所在地")


class ProjectEntry(BaseModel):
    """项目经历模型"""
    name: Optional[str] = Field(None, description="项目名称")
    description: Optional[str] = Field(None, description="项目描述")
    technologies: List[str] = Field(default_factory=list, description="使用技术")
    duration: Optional[str] = Field(None, description="项目周期")
    url: Optional[str] = Field(None, description="项目链接")


class ResumeProfile(BaseModel):
    """简历结构化信息(AI提取结果)"""
    name: Optional[str] = Field(None, description="姓名")
    email: Optional[str] = Field(None, description="邮箱")
    phone: Optional[str] = Field(None, description="电话")
    linkedin: Optional[str] = Field(None, description="LinkedIn")
    location: Optional[str] = Field(None, description="所在地")
    summary: Optional[str] = Field(None, description="个人简介")

    skills: List[str] = Field(default_factory=list, description="技能列表(保持原顺序)")
    experience: List[ExperienceEntry] = Field(default_factory=list, description="工作经历")
    education: List[EducationEntry] = Field(default_factory=list, description="教育经历")
    certifications: List[str] = Field(default_factory=list, description="证书资质")
    projects: List[ProjectEntry] = Field(default_factory=list, description="项目经历")
    languages: List[str] = Field(default_factory=list, description="语言能力")
    achievements: List[str] = Field(default_factory=list, description="主要成就")

    @field_validator('skills', 'certifications', 'languages', 'achievements', mode='before')
    @classmethod
    def drop_empty_items(cls, v):
        if v is None:
            return []
        # AI偶尔把列表字段返回成逗号分隔的字符串
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple)):
            return []
        return [item.strip() for item in v if isinstance(item, str) and item.strip()]


class ResumeCreate(BaseModel):
    """上传简历模型"""
    user_id: int = Field(..., description="候选人用户ID")
    file_name: str = Field(..., description="文件名")
    original_text: str = Field(..., description="简历原文")

    @field_validator('file_name')
    @classmethod
    def validate_file_name(cls, v):
        if not v or not v.strip():
            raise ValueError('文件名不能为空')
        return v.strip()


class Resume(BaseModel):
    """完整简历模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="简历ID")
    user_id: int = Field(..., description="候选人用户ID")
    file_name: str = Field(..., description="文件名")
    original_text: str = Field(..., description="简历原文")
    extracted_data: ResumeProfile = Field(default_factory=ResumeProfile, description="结构化信息")

    # 软删除标记，删除后记录保留用于审计
    is_active: bool = Field(True, description="是否有效")

    # 时间戳
    processed_at: datetime = Field(..., description="处理时间")
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")


class ResumeTextRequest(BaseModel):
    """简历文本解析请求"""
    resume_text: str = Field(..., description="简历原文")
