"""在线笔试数据模型"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class QuestionDifficulty(str, Enum):
    """题目难度枚举"""
    EASY = "easy"
    MODERATE = "moderate"
    ADVANCED = "advanced"


class AssessmentStatus(str, Enum):
    """笔试状态枚举"""
    GENERATED = "generated"  # 已生成
    IN_PROGRESS = "in_progress"  # 作答中
    COMPLETED = "completed"  # 已交卷
    EXPIRED = "expired"  # 已超时


class AssessmentQuestion(BaseModel):
    """笔试题目(含答案，仅服务端保存)"""
    question_id: int = Field(..., description="题号")
    question: str = Field(..., description="题干")
    options: List[str] = Field(..., min_length=2, description="选项")
    correct_answer: int = Field(..., ge=0, description="正确选项下标")
    difficulty: QuestionDifficulty = Field(QuestionDifficulty.MODERATE, description="难度")
    category: str = Field("technical", description="分类")

    @field_validator('difficulty', mode='before')
    @classmethod
    def coerce_difficulty(cls, v):
        # AI偶尔返回medium/hard等值，无法识别时按moderate处理
        try:
            return QuestionDifficulty(v)
        except ValueError:
            return QuestionDifficulty.MODERATE


class CandidateQuestion(BaseModel):
    """下发给候选人的题目(不含答案)"""
    id: int
    question: str
    options: List[str]
    difficulty: QuestionDifficulty
    category: str


class QuestionResult(BaseModel):
    """单题判分结果"""
    question_id: int
    selected_answer: Optional[int] = None
    correct_answer: int
    is_correct: bool
    difficulty: QuestionDifficulty
    category: str


class Assessment(BaseModel):
    """完整笔试模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="笔试ID")
    job_id: int = Field(..., description="岗位ID")
    candidate_id: int = Field(..., description="候选人用户ID")
    questions: List[AssessmentQuestion] = Field(default_factory=list, description="题目")
    answers: List[Optional[int]] = Field(default_factory=list, description="作答")
    score: Optional[int] = Field(None, ge=0, le=100, description="得分")
    passed: bool = Field(False, description="是否通过")
    time_limit: int = Field(900, description="时限(秒)")
    passing_score: int = Field(95, description="及格线")
    status: AssessmentStatus = Field(AssessmentStatus.GENERATED, description="状态")
    detailed_results: List[QuestionResult] = Field(default_factory=list, description="判分明细")

    started_at: Optional[datetime] = Field(None, description="开始作答时间")
    completed_at: Optional[datetime] = Field(None, description="交卷时间")
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")


class AssessmentPaper(BaseModel):
    """下发给候选人的试卷"""
    assessment_id: int
    questions: List[CandidateQuestion]
    time_limit: int
    passing_score: int


class AssessmentRequest(BaseModel):
    """生成/开始笔试请求"""
    candidate_id: int


class AssessmentSubmission(BaseModel):
    """交卷请求"""
    candidate_id: int
    answers: List[Optional[int]]


class AssessmentOutcome(BaseModel):
    """交卷结果"""
    score: int
    passed: bool
    correct_answers: int
    total_questions: int
    passing_score: int


class AssessmentResultView(BaseModel):
    """笔试结果查询"""
    assessment_id: int
    job_id: int
    score: int
    passed: bool
    completed_at: Optional[datetime]
    detailed_results: List[QuestionResult]


class AssessmentSummary(BaseModel):
    """候选人笔试列表项(不含题目)"""
    assessment_id: int
    job_id: int
    status: AssessmentStatus
    score: Optional[int] = None
    passed: bool = False
    question_count: int
    created_at: datetime
    completed_at: Optional[datetime] = None
