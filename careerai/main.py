"""CareerAI招聘匹配系统主应用入口"""

import asyncio
import argparse
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.data_manager import get_data_manager
from .core.exceptions import (
    CareerAIError, NotFoundError, PermissionDeniedError, ConflictError,
    ValidationError, SlotExpiredError
)
from .core.nlp_service import get_nlp_service
from .integrations.llm_client import close_llm_client
from .services import (
    get_resume_service, get_job_service, get_interview_service, get_assessment_service
)
from .models.resume import Resume, ResumeCreate, ResumeProfile, ResumeTextRequest
from .models.job import (
    Job, JobCreate, JobType, JobSearchParams, JobListResult, JobStatusUpdate,
    JobRequirement, ExperienceRequirement, EducationRequirement,
    ApplicationCreate, JobApplicants
)
from .models.match import JobMatch, ApplicationResult
from .models.interview import (
    Interview, InterviewCreate, InterviewStatus, InterviewResponseRequest, InterviewStatusRequest,
    InterviewFeedback, FeedbackRequest, FeedbackHistoryItem, InterviewInvite, UserRole,
    FeedbackAnalysis, FeedbackAnalysisRequest
)
from .models.assessment import (
    AssessmentPaper, AssessmentRequest, AssessmentSubmission, AssessmentOutcome,
    AssessmentResultView, AssessmentSummary
)
from .utils.logger import app_logger, api_logger
from .utils.config import get_config

config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_logger.info(f"{config.app.name} v{config.app.version} 启动")
    yield
    await close_llm_client()
    app_logger.info(f"{config.app.name} 已关闭")


# FastAPI应用实例
app = FastAPI(
    title="CareerAI招聘匹配系统",
    description="简历解析、岗位匹配评分、面试安排与在线笔试",
    version=config.app.version,
    lifespan=lifespan
)

# 添加CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.app.client_url, "*"] if config.app.debug else [config.app.client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== 异常处理 ====================

ERROR_STATUS_CODES = {
    NotFoundError: 404,
    PermissionDeniedError: 403,
    ConflictError: 409,
    ValidationError: 400,
    SlotExpiredError: 400,
}


@app.exception_handler(CareerAIError)
async def business_exception_handler(request, exc: CareerAIError):
    """业务异常处理"""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    api_logger.warning(f"{request.method} {request.url.path} -> {status_code}: {str(exc)}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "timestamp": datetime.now().isoformat()}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """全局异常处理"""
    app_logger.error(f"未处理的异常: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "内部服务器错误", "timestamp": datetime.now().isoformat()}
    )


# ==================== API路由 ====================

@app.get("/")
async def root():
    """根路径"""
    return {
        "message": "CareerAI招聘匹配系统",
        "version": config.app.version,
        "status": "running",
        "timestamp": datetime.now().isoformat()
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    try:
        data_manager = get_data_manager()
        async with data_manager.get_connection() as conn:
            conn.execute("SELECT 1")

        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "components": {
                "database": "connected",
                "llm": "configured" if config.llm.api_key else "fallback"
            }
        }
    except Exception as e:
        app_logger.error(f"健康检查失败: {str(e)}")
        raise HTTPException(status_code=500, detail="系统不健康")


# ==================== 简历管理API ====================

@app.post("/api/resumes/upload", response_model=Resume, status_code=201)
async def upload_resume(resume_data: ResumeCreate):
    """上传简历并提取结构化信息"""
    return await get_resume_service().upload_resume(resume_data)


@app.post("/api/resumes/analyze", response_model=ResumeProfile)
async def analyze_resume_text(request: ResumeTextRequest):
    """解析简历文本(不保存)"""
    return await get_resume_service().analyze_text(request.resume_text)


@app.get("/api/resumes", response_model=List[Resume])
async def list_resumes(user_id: int):
    """获取用户的简历列表"""
    return await get_resume_service().list_resumes(user_id)


@app.get("/api/resumes/{resume_id}", response_model=Resume)
async def get_resume(resume_id: int, user_id: int):
    """获取简历详情"""
    return await get_resume_service().get_resume(resume_id, user_id)


@app.get("/api/resumes/{resume_id}/matches", response_model=List[JobMatch])
async def get_resume_matches(resume_id: int, user_id: int, limit: Optional[int] = Query(None, ge=1, le=100)):
    """获取简历匹配的岗位(按总分降序)"""
    return await get_resume_service().find_job_matches(resume_id, user_id, limit)


@app.delete("/api/resumes/{resume_id}")
async def delete_resume(resume_id: int, user_id: int):
    """删除简历"""
    await get_resume_service().delete_resume(resume_id, user_id)
    return {"message": "简历已删除", "resume_id": resume_id}


# ==================== 岗位管理API ====================

@app.post("/api/jobs", response_model=Job, status_code=201)
async def create_job(job_data: JobCreate):
    """发布岗位"""
    return await get_job_service().create_job(job_data)


@app.get("/api/jobs", response_model=JobListResult)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    location: Optional[str] = None,
    type: Optional[JobType] = None,
    skills: Optional[str] = Query(None, description="逗号分隔的技能列表")
):
    """分页查询在招岗位"""
    params = JobSearchParams(
        page=page,
        limit=limit,
        location=location,
        job_type=type,
        skills=[s.strip() for s in skills.split(",") if s.strip()] if skills else None
    )
    return await get_job_service().list_jobs(params)


@app.get("/api/jobs/{job_id}", response_model=Job)
async def get_job(job_id: int):
    """获取岗位详情"""
    return await get_job_service().get_job(job_id)


@app.post("/api/jobs/{job_id}/apply", response_model=ApplicationResult)
async def apply_to_job(job_id: int, application_data: ApplicationCreate):
    """投递岗位"""
    return await get_job_service().apply_to_job(job_id, application_data)


@app.get("/api/jobs/{job_id}/applicants", response_model=JobApplicants)
async def get_job_applicants(job_id: int, recruiter_id: int):
    """获取岗位投递人(按匹配分降序)"""
    return await get_job_service().get_applicants(job_id, recruiter_id)


@app.patch("/api/jobs/{job_id}/status", response_model=Job)
async def update_job_status(job_id: int, status_data: JobStatusUpdate):
    """岗位上下线"""
    return await get_job_service().update_job_status(job_id, status_data)


# ==================== 面试管理API ====================

@app.post("/api/interviews/schedule", response_model=Interview, status_code=201)
async def schedule_interview(interview_data: InterviewCreate):
    """安排面试"""
    return await get_interview_service().schedule_interview(interview_data)


@app.get("/api/interviews", response_model=List[Interview])
async def list_interviews(
    user_id: int,
    role: UserRole,
    status: Optional[InterviewStatus] = None,
    upcoming: bool = False
):
    """查询用户的面试列表"""
    interviews = await get_interview_service().list_interviews(user_id, role, status, upcoming)
    if role == UserRole.CANDIDATE:
        interviews = [i.model_copy(update={"feedback": None}) for i in interviews]
    return interviews


@app.post("/api/interviews/feedback/analyze", response_model=FeedbackAnalysis)
async def analyze_feedback(request: FeedbackAnalysisRequest):
    """面试反馈情感分析"""
    if not request.feedback_text.strip():
        raise ValidationError("反馈内容不能为空")
    return await get_nlp_service().analyze_feedback(request.feedback_text)


@app.get("/api/interviews/candidates/{candidate_id}/feedback", response_model=List[FeedbackHistoryItem])
async def get_candidate_feedback_history(candidate_id: int, role: UserRole):
    """候选人历史面试反馈(仅HR)"""
    return await get_interview_service().get_feedback_history(candidate_id, role)


@app.get("/api/interviews/jobs/{job_id}/slots", response_model=List[datetime])
async def get_available_slots(job_id: int, candidate_id: int, start_date: Optional[date] = None):
    """获取可预约的面试时段"""
    return await get_interview_service().get_available_slots(job_id, candidate_id, start_date)


@app.get("/api/interviews/{interview_id}", response_model=Interview)
async def get_interview(interview_id: int, user_id: int):
    """面试详情"""
    return await get_interview_service().get_interview(interview_id, user_id)


@app.get("/api/interviews/{interview_id}/invite", response_model=InterviewInvite)
async def get_interview_invite(interview_id: int, recruiter_id: int, interviewer: Optional[str] = None):
    """生成面试邀请函"""
    return await get_interview_service().generate_invite(interview_id, recruiter_id, interviewer)


@app.patch("/api/interviews/{interview_id}/respond", response_model=Interview)
async def respond_to_interview(interview_id: int, request: InterviewResponseRequest):
    """候选人答复面试"""
    return await get_interview_service().respond_to_interview(interview_id, request)


@app.patch("/api/interviews/{interview_id}/status", response_model=Interview)
async def update_interview_status(interview_id: int, request: InterviewStatusRequest):
    """更新面试状态"""
    return await get_interview_service().update_status(interview_id, request)


@app.post("/api/interviews/{interview_id}/end")
async def end_meeting(interview_id: int, recruiter_id: int):
    """结束面试会议"""
    interview = await get_interview_service().end_meeting(interview_id, recruiter_id)
    return {"message": "会议已结束", "interview_id": interview.id, "requires_feedback": True}


@app.post("/api/interviews/{interview_id}/feedback", response_model=InterviewFeedback)
async def submit_feedback(interview_id: int, request: FeedbackRequest):
    """提交面试反馈"""
    return await get_interview_service().submit_feedback(interview_id, request)


# ==================== 在线笔试API ====================

@app.post("/api/assessments/jobs/{job_id}/generate", response_model=AssessmentPaper)
async def generate_assessment(job_id: int, request: AssessmentRequest):
    """生成岗位笔试"""
    return await get_assessment_service().generate_assessment(job_id, request.candidate_id)


@app.get("/api/assessments", response_model=List[AssessmentSummary])
async def list_assessments(candidate_id: int):
    """候选人的笔试记录"""
    return await get_assessment_service().list_assessments(candidate_id)


@app.post("/api/assessments/{assessment_id}/start", response_model=AssessmentPaper)
async def start_assessment(assessment_id: int, request: AssessmentRequest):
    """开始作答"""
    return await get_assessment_service().start_assessment(assessment_id, request.candidate_id)


@app.post("/api/assessments/{assessment_id}/submit", response_model=AssessmentOutcome)
async def submit_assessment(assessment_id: int, submission: AssessmentSubmission):
    """交卷"""
    return await get_assessment_service().submit_assessment(assessment_id, submission)


@app.get("/api/assessments/{assessment_id}/results", response_model=AssessmentResultView)
async def get_assessment_results(assessment_id: int, candidate_id: int):
    """查询笔试结果"""
    return await get_assessment_service().get_results(assessment_id, candidate_id)


# ==================== 命令行接口 ====================

async def cli_create_job(args):
    """命令行创建岗位"""
    try:
        requirements = JobRequirement(
            skills=[s.strip() for s in args.skills.split(",")] if args.skills else [],
            experience=ExperienceRequirement(min=args.min_experience) if args.min_experience else None,
            education=EducationRequirement(
                stream=[s.strip() for s in args.streams.split(",")]
            ) if args.streams else None
        )

        job_data = JobCreate(
            title=args.title,
            company=args.company,
            location=args.location,
            description=args.description or f"{args.title}岗位",
            requirements=requirements,
            posted_by=args.posted_by
        )

        job = await get_job_service().create_job(job_data)

        print("岗位创建成功:")
        print(f"ID: {job.id}")
        print(f"标题: {job.title}")
        print(f"公司: {job.company}")
        print(f"地点: {job.location}")
        print(f"技能要求: {', '.join(job.requirements.skills) or '无'}")

    except (CareerAIError, ValueError) as e:
        print(f"创建岗位失败: {str(e)}")


async def cli_match(args):
    """命令行计算简历与在招岗位的匹配"""
    try:
        matches = await get_resume_service().find_job_matches(args.resume_id, args.user_id, args.limit)

        if not matches:
            print("没有在招岗位")
            return

        print(f"简历 {args.resume_id} 匹配结果:")
        for index, item in enumerate(matches, start=1):
            match = item.match
            print(
                f"{index}. [{match.final_score:>3}] {item.job.title} @ {item.job.company} "
                f"(技能 {match.skills_match} / 经验 {match.experience_match} / 学历 {match.education_match})"
            )
            if match.missing_skills:
                print(f"   缺失技能: {', '.join(match.missing_skills)}")

    except CareerAIError as e:
        print(f"匹配失败: {str(e)}")


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description="CareerAI招聘匹配系统")
    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # 启动API服务器
    server_parser = subparsers.add_parser("server", help="启动API服务器")
    server_parser.add_argument("--host", default="0.0.0.0", help="服务器地址")
    server_parser.add_argument("--port", type=int, default=8000, help="服务器端口")
    server_parser.add_argument("--reload", action="store_true", help="开发模式")

    # 创建岗位
    job_parser = subparsers.add_parser("create-job", help="创建岗位")
    job_parser.add_argument("title", help="岗位标题")
    job_parser.add_argument("company", help="公司名称")
    job_parser.add_argument("location", help="工作地点")
    job_parser.add_argument("--description", help="岗位描述")
    job_parser.add_argument("--skills", help="技能要求(逗号分隔)")
    job_parser.add_argument("--min-experience", type=int, help="最少工作年限")
    job_parser.add_argument("--streams", help="专业方向(逗号分隔)")
    job_parser.add_argument("--posted-by", type=int, default=1, help="发布人用户ID")

    # 岗位匹配
    match_parser = subparsers.add_parser("match", help="计算简历与在招岗位的匹配")
    match_parser.add_argument("resume_id", type=int, help="简历ID")
    match_parser.add_argument("--user-id", type=int, required=True, help="简历所属用户ID")
    match_parser.add_argument("--limit", type=int, default=None, help="返回数量")

    args = parser.parse_args()

    if args.command == "server":
        import uvicorn
        uvicorn.run(
            "careerai.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload
        )
    elif args.command == "create-job":
        asyncio.run(cli_create_job(args))
    elif args.command == "match":
        asyncio.run(cli_match(args))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
