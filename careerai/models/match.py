"""匹配结果数据模型"""

from typing import List
from pydantic import BaseModel, Field

from .job import Job, Application


class MatchResult(BaseModel):
    """简历与岗位的匹配结果(按需计算，不单独落库)"""
    skills_match: int = Field(..., ge=0, le=100, description="技能匹配度")
    experience_match: int = Field(..., ge=0, le=100, description="经验匹配度")
    education_match: int = Field(..., ge=0, le=100, description="学历匹配度")
    final_score: int = Field(..., ge=0, le=100, description="加权总分")
    matching_skills: List[str] = Field(default_factory=list, description="已具备的技能")
    missing_skills: List[str] = Field(default_factory=list, description="缺失的技能")


class JobMatch(BaseModel):
    """岗位排序结果项"""
    job: Job
    match: MatchResult


class ApplicationResult(BaseModel):
    """投递结果"""
    application: Application
    match_score: int
    match_details: MatchResult
