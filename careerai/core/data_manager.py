"""数据管理器核心模块"""

import sqlite3
import json
from typing import List, Dict, Optional, Any, Tuple, Iterable
from datetime import datetime
from pathlib import Path
from contextlib import asynccontextmanager

from ..models.resume import Resume, ResumeCreate, ResumeProfile
from ..models.job import (
    Job, JobCreate, JobType, JobRequirement, SalaryRange, JobSearchParams,
    Application, ApplicationStatus
)
from ..models.interview import (
    Interview, InterviewCreate, InterviewFeedback, InterviewStatus, InterviewType, MeetingRecord
)
from ..models.assessment import Assessment, AssessmentQuestion, AssessmentStatus, QuestionResult
from ..integrations.meeting_service import MeetingRepository
from ..utils.logger import app_logger
from ..utils.config import get_config
from .exceptions import ConflictError


def _ts(value: Optional[datetime]) -> Optional[str]:
    """时间统一存为秒级ISO字符串，保证字符串比较与时间先后一致"""
    return value.isoformat(timespec="seconds") if value else None


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class DataManager(MeetingRepository):
    """数据管理器"""

    def __init__(self, db_path: Optional[str] = None):
        config = get_config()
        self.db_path = str(db_path or config.database.path)
        self._init_database()

    def _init_database(self):
        """初始化数据库"""
        try:
            # 确保数据库目录存在
            db_dir = Path(self.db_path).parent
            db_dir.mkdir(parents=True, exist_ok=True)

            with sqlite3.connect(self.db_path) as conn:
                conn.execute("PRAGMA foreign_keys = ON")
                self._create_tables(conn)
                app_logger.info(f"数据库初始化完成: {self.db_path}")
        except Exception as e:
            app_logger.error(f"数据库初始化失败: {str(e)}")
            raise

    def _create_tables(self, conn: sqlite3.Connection):
        """创建数据表"""
        # 简历表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS resumes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                file_name TEXT NOT NULL,
                original_text TEXT NOT NULL,
                extracted_data TEXT NOT NULL,  -- JSON object
                is_active INTEGER NOT NULL DEFAULT 1,
                processed_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # 岗位表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                company TEXT NOT NULL,
                description TEXT NOT NULL,
                location TEXT NOT NULL,
                job_type TEXT NOT NULL,
                requirements TEXT NOT NULL,  -- JSON object
                salary TEXT,  -- JSON object
                posted_by INTEGER NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # 投递表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS applications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                job_id INTEGER NOT NULL,
                candidate_id INTEGER NOT NULL,
                resume_id INTEGER NOT NULL,
                match_score INTEGER NOT NULL,
                candidate_brief TEXT,
                status TEXT NOT NULL DEFAULT 'applied',
                applied_at TEXT NOT NULL,
                FOREIGN KEY (job_id) REFERENCES jobs (id),
                FOREIGN KEY (resume_id) REFERENCES resumes (id),
                UNIQUE(job_id, candidate_id)
            )
        """)

        # 面试表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS interviews (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                job_id INTEGER NOT NULL,
                candidate_id INTEGER NOT NULL,
                recruiter_id INTEGER NOT NULL,
                resume_id INTEGER NOT NULL,
                scheduled_at TEXT NOT NULL,
                duration INTEGER NOT NULL,
                type TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                meeting_link TEXT,
                meeting_id TEXT,
                notes TEXT,
                candidate_brief TEXT,
                slot_expires_at TEXT NOT NULL,
                meeting_ended_at TEXT,
                feedback TEXT,  -- JSON object
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (job_id) REFERENCES jobs (id),
                FOREIGN KEY (resume_id) REFERENCES resumes (id)
            )
        """)

        # 会议表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS meetings (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                start_time TEXT NOT NULL,
                duration INTEGER NOT NULL,
                attendees TEXT,  -- JSON array
                meet_link TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'active',
                created_at TEXT NOT NULL,
                ended_at TEXT
            )
        """)

        # 笔试表
        conn.execute("""
            CREATE TABLE IF NOT EXISTS assessments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                job_id INTEGER NOT NULL,
                candidate_id INTEGER NOT NULL,
                questions TEXT NOT NULL,  -- JSON array
                answers TEXT,  -- JSON array
                score INTEGER,
                passed INTEGER NOT NULL DEFAULT 0,
                time_limit INTEGER NOT NULL,
                passing_score INTEGER NOT NULL,
                status TEXT NOT NULL DEFAULT 'generated',
                detailed_results TEXT,  -- JSON array
                started_at TEXT,
                completed_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (job_id) REFERENCES jobs (id)
            )
        """)

        # 创建索引
        conn.execute("CREATE INDEX IF NOT EXISTS idx_resumes_user ON resumes (user_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_active ON jobs (is_active)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_applications_job ON applications (job_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_interviews_candidate ON interviews (candidate_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_interviews_recruiter ON interviews (recruiter_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_assessments_candidate ON assessments (candidate_id)")

        conn.commit()

    @asynccontextmanager
    async def get_connection(self):
        """获取数据库连接"""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.row_factory = sqlite3.Row
            yield conn
        except Exception as e:
            if conn:
                conn.rollback()
            raise e
        finally:
            if conn:
                conn.close()

    async def _update_fields(self, table: str, record_id: int, fields: Dict[str, Any]):
        """按字段更新记录，自动刷新updated_at"""
        columns = [f"{name} = ?" for name in fields]
        values = list(fields.values())
        if table != "applications":
            columns.append("updated_at = ?")
            values.append(_ts(datetime.now()))
        values.append(record_id)

        async with self.get_connection() as conn:
            conn.execute(f"UPDATE {table} SET {', '.join(columns)} WHERE id = ?", values)
            conn.commit()

    # ==================== 简历管理 ====================

    async def create_resume(self, resume_data: ResumeCreate, extracted_data: ResumeProfile) -> Resume:
        """创建简历"""
        try:
            now = _ts(datetime.now())
            async with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO resumes (
                        user_id, file_name, original_text, extracted_data,
                        is_active, processed_at, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, 1, ?, ?, ?)
                """, (
                    resume_data.user_id,
                    resume_data.file_name,
                    resume_data.original_text,
                    json.dumps(extracted_data.model_dump(mode="json"), ensure_ascii=False),
                    now, now, now
                ))

                resume_id = cursor.lastrowid
                conn.commit()

            resume = await self.get_resume_by_id(resume_id)
            app_logger.info(f"创建简历成功: {resume.file_name} (ID: {resume_id})")

            return resume
        except Exception as e:
            app_logger.error(f"创建简历失败: {str(e)}")
            raise

    async def get_resume_by_id(self, resume_id: int) -> Optional[Resume]:
        """根据ID获取简历(包含已删除)"""
        try:
            async with self.get_connection() as conn:
                cursor = conn.execute("SELECT * FROM resumes WHERE id = ?", (resume_id,))
                row = cursor.fetchone()

                if row:
                    return self._row_to_resume(row)
                return None
        except Exception as e:
            app_logger.error(f"获取简历失败: {str(e)}")
            return None

    async def list_resumes_by_user(self, user_id: int) -> List[Resume]:
        """获取用户的有效简历，按上传时间倒序"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM resumes WHERE user_id = ? AND is_active = 1 ORDER BY created_at DESC, id DESC",
                (user_id,)
            )
            return [self._row_to_resume(row) for row in cursor.fetchall()]

    async def deactivate_resume(self, resume_id: int):
        """软删除简历"""
        await self._update_fields("resumes", resume_id, {"is_active": 0})
        app_logger.info(f"简历已删除: ID {resume_id}")

    # ==================== 岗位管理 ====================

    async def create_job(self, job_data: JobCreate) -> Job:
        """创建岗位"""
        try:
            now = _ts(datetime.now())
            async with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO jobs (
                        title, company, description, location, job_type,
                        requirements, salary, posted_by, is_active,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1, ?, ?)
                """, (
                    job_data.title,
                    job_data.company,
                    job_data.description,
                    job_data.location,
                    job_data.job_type.value,
                    json.dumps(job_data.requirements.model_dump(mode="json"), ensure_ascii=False),
                    json.dumps(job_data.salary.model_dump(mode="json"), ensure_ascii=False) if job_data.salary else None,
                    job_data.posted_by,
                    now, now
                ))

                job_id = cursor.lastrowid
                conn.commit()

            # 获取创建的岗位
            job = await self.get_job_by_id(job_id)
            app_logger.info(f"创建岗位成功: {job.title} (ID: {job_id})")

            return job
        except Exception as e:
            app_logger.error(f"创建岗位失败: {str(e)}")
            raise

    async def get_job_by_id(self, job_id: int) -> Optional[Job]:
        """根据ID获取岗位"""
        try:
            async with self.get_connection() as conn:
                cursor = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,))
                row = cursor.fetchone()

                if row:
                    return self._row_to_job(row)
                return None
        except Exception as e:
            app_logger.error(f"获取岗位失败: {str(e)}")
            return None

    async def list_active_jobs(self) -> List[Job]:
        """获取所有在招岗位，按发布时间倒序"""
        async with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM jobs WHERE is_active = 1 ORDER BY created_at DESC, id DESC")
            return [self._row_to_job(row) for row in cursor.fetchall()]

    async def search_jobs(self, params: JobSearchParams) -> Tuple[List[Job], int]:
        """搜索在招岗位，返回(当前页岗位, 总数)"""
        where_conditions = ["is_active = 1"]
        values: List[Any] = []

        # 构建查询条件
        if params.location:
            where_conditions.append("location LIKE ?")
            values.append(f"%{params.location}%")

        if params.job_type:
            where_conditions.append("job_type = ?")
            values.append(params.job_type.value)

        where_clause = " AND ".join(where_conditions)

        async with self.get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM jobs WHERE {where_clause} ORDER BY created_at DESC, id DESC",
                values
            )
            jobs = [self._row_to_job(row) for row in cursor.fetchall()]

        # 技能过滤: 岗位要求中命中任一技能即可(不区分大小写)
        if params.skills:
            wanted = {s.lower().strip() for s in params.skills if s.strip()}
            if wanted:
                jobs = [
                    job for job in jobs
                    if wanted & {s.lower() for s in job.requirements.skills}
                ]

        total = len(jobs)
        offset = (params.page - 1) * params.limit
        return jobs[offset:offset + params.limit], total

    async def set_job_active(self, job_id: int, is_active: bool) -> Optional[Job]:
        """岗位上下线"""
        await self._update_fields("jobs", job_id, {"is_active": 1 if is_active else 0})
        return await self.get_job_by_id(job_id)

    # ==================== 投递管理 ====================

    async def create_application(
        self,
        job_id: int,
        candidate_id: int,
        resume_id: int,
        match_score: int,
        candidate_brief: Optional[str]
    ) -> Application:
        """创建投递记录，同一候选人对同一岗位只能投递一次"""
        try:
            async with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO applications (
                        job_id, candidate_id, resume_id, match_score,
                        candidate_brief, status, applied_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    job_id, candidate_id, resume_id, match_score, candidate_brief,
                    ApplicationStatus.APPLIED.value, _ts(datetime.now())
                ))
                application_id = cursor.lastrowid
                conn.commit()
        except sqlite3.IntegrityError as e:
            app_logger.warning(f"重复投递: 岗位 {job_id} - 候选人 {candidate_id}")
            raise ConflictError("已投递过该岗位") from e

        app_logger.info(f"投递成功: 岗位 {job_id} - 候选人 {candidate_id} - 匹配分 {match_score}")
        return await self.get_application_by_id(application_id)

    async def get_application_by_id(self, application_id: int) -> Optional[Application]:
        """根据ID获取投递记录"""
        async with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM applications WHERE id = ?", (application_id,))
            row = cursor.fetchone()
            return self._row_to_application(row) if row else None

    async def get_application(self, job_id: int, candidate_id: int) -> Optional[Application]:
        """获取候选人在某岗位的投递记录"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM applications WHERE job_id = ? AND candidate_id = ?",
                (job_id, candidate_id)
            )
            row = cursor.fetchone()
            return self._row_to_application(row) if row else None

    async def list_applications_by_job(self, job_id: int) -> List[Application]:
        """获取岗位的投递列表，按匹配分降序(同分按投递先后)"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM applications WHERE job_id = ? ORDER BY match_score DESC, id ASC",
                (job_id,)
            )
            return [self._row_to_application(row) for row in cursor.fetchall()]

    async def update_application_status(self, application_id: int, status: ApplicationStatus):
        """更新投递状态"""
        await self._update_fields("applications", application_id, {"status": status.value})

    # ==================== 面试管理 ====================

    async def create_interview(
        self,
        interview_data: InterviewCreate,
        duration: int,
        slot_expires_at: datetime,
        meeting_link: Optional[str] = None,
        meeting_id: Optional[str] = None,
        candidate_brief: Optional[str] = None
    ) -> Interview:
        """创建面试"""
        try:
            now = _ts(datetime.now())
            async with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO interviews (
                        job_id, candidate_id, recruiter_id, resume_id, scheduled_at,
                        duration, type, status, meeting_link, meeting_id, notes,
                        candidate_brief, slot_expires_at, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    interview_data.job_id,
                    interview_data.candidate_id,
                    interview_data.recruiter_id,
                    interview_data.resume_id,
                    _ts(interview_data.scheduled_at),
                    duration,
                    interview_data.type.value,
                    InterviewStatus.PENDING.value,
                    meeting_link,
                    meeting_id,
                    interview_data.notes,
                    candidate_brief,
                    _ts(slot_expires_at),
                    now, now
                ))

                interview_id = cursor.lastrowid
                conn.commit()

            interview = await self.get_interview_by_id(interview_id)
            app_logger.info(f"创建面试成功: 岗位 {interview.job_id} - 候选人 {interview.candidate_id} (ID: {interview_id})")

            return interview
        except Exception as e:
            app_logger.error(f"创建面试失败: {str(e)}")
            raise

    async def get_interview_by_id(self, interview_id: int) -> Optional[Interview]:
        """根据ID获取面试"""
        try:
            async with self.get_connection() as conn:
                cursor = conn.execute("SELECT * FROM interviews WHERE id = ?", (interview_id,))
                row = cursor.fetchone()

                if row:
                    return self._row_to_interview(row)
                return None
        except Exception as e:
            app_logger.error(f"获取面试失败: {str(e)}")
            return None

    async def update_interview(
        self,
        interview_id: int,
        status: Optional[InterviewStatus] = None,
        meeting_ended_at: Optional[datetime] = None,
        feedback: Optional[InterviewFeedback] = None
    ) -> Optional[Interview]:
        """更新面试状态/结束时间/反馈"""
        fields: Dict[str, Any] = {}
        if status is not None:
            fields["status"] = status.value
        if meeting_ended_at is not None:
            fields["meeting_ended_at"] = _ts(meeting_ended_at)
        if feedback is not None:
            fields["feedback"] = json.dumps(feedback.model_dump(mode="json"), ensure_ascii=False)

        if fields:
            await self._update_fields("interviews", interview_id, fields)
        return await self.get_interview_by_id(interview_id)

    async def list_interviews(
        self,
        candidate_id: Optional[int] = None,
        recruiter_id: Optional[int] = None,
        statuses: Optional[Iterable[InterviewStatus]] = None,
        scheduled_after: Optional[datetime] = None,
        scheduled_before: Optional[datetime] = None
    ) -> List[Interview]:
        """按条件查询面试，按面试时间升序"""
        where_conditions = []
        values: List[Any] = []

        if candidate_id is not None:
            where_conditions.append("candidate_id = ?")
            values.append(candidate_id)

        if recruiter_id is not None:
            where_conditions.append("recruiter_id = ?")
            values.append(recruiter_id)

        if statuses:
            statuses = list(statuses)
            where_conditions.append(f"status IN ({', '.join('?' for _ in statuses)})")
            values.extend(s.value for s in statuses)

        if scheduled_after is not None:
            where_conditions.append("scheduled_at >= ?")
            values.append(_ts(scheduled_after))

        if scheduled_before is not None:
            where_conditions.append("scheduled_at <= ?")
            values.append(_ts(scheduled_before))

        where_clause = " AND ".join(where_conditions) if where_conditions else "1=1"

        async with self.get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM interviews WHERE {where_clause} ORDER BY scheduled_at ASC, id ASC",
                values
            )
            return [self._row_to_interview(row) for row in cursor.fetchall()]

    async def list_feedback_by_candidate(self, candidate_id: int) -> List[Interview]:
        """获取候选人已有反馈的面试，按创建时间倒序"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM interviews WHERE candidate_id = ? AND feedback IS NOT NULL "
                "ORDER BY created_at DESC, id DESC",
                (candidate_id,)
            )
            return [self._row_to_interview(row) for row in cursor.fetchall()]

    # ==================== 会议管理 ====================

    async def save_meeting(self, meeting: MeetingRecord) -> MeetingRecord:
        """保存会议记录"""
        async with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO meetings (
                    id, title, start_time, duration, attendees, meet_link,
                    status, created_at, ended_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                meeting.id,
                meeting.title,
                _ts(meeting.start_time),
                meeting.duration,
                json.dumps(meeting.attendees, ensure_ascii=False),
                meeting.meet_link,
                meeting.status,
                _ts(meeting.created_at),
                _ts(meeting.ended_at)
            ))
            conn.commit()
        return meeting

    async def get_meeting(self, meeting_id: str) -> Optional[MeetingRecord]:
        """获取会议记录"""
        async with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM meetings WHERE id = ?", (meeting_id,))
            row = cursor.fetchone()
            return self._row_to_meeting(row) if row else None

    async def mark_meeting_ended(self, meeting_id: str, ended_at: datetime) -> bool:
        """标记会议结束"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE meetings SET status = 'completed', ended_at = ? WHERE id = ?",
                (_ts(ended_at), meeting_id)
            )
            conn.commit()
            return cursor.rowcount > 0

    # ==================== 笔试管理 ====================

    async def create_assessment(
        self,
        job_id: int,
        candidate_id: int,
        questions: List[AssessmentQuestion],
        time_limit: int,
        passing_score: int
    ) -> Assessment:
        """创建笔试"""
        try:
            now = _ts(datetime.now())
            async with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO assessments (
                        job_id, candidate_id, questions, answers, time_limit,
                        passing_score, status, detailed_results, created_at, updated_at
                    ) VALUES (?, ?, ?, '[]', ?, ?, ?, '[]', ?, ?)
                """, (
                    job_id,
                    candidate_id,
                    json.dumps([q.model_dump(mode="json") for q in questions], ensure_ascii=False),
                    time_limit,
                    passing_score,
                    AssessmentStatus.GENERATED.value,
                    now, now
                ))

                assessment_id = cursor.lastrowid
                conn.commit()

            assessment = await self.get_assessment_by_id(assessment_id)
            app_logger.info(f"创建笔试成功: 岗位 {job_id} - 候选人 {candidate_id} (ID: {assessment_id})")

            return assessment
        except Exception as e:
            app_logger.error(f"创建笔试失败: {str(e)}")
            raise

    async def get_assessment_by_id(self, assessment_id: int) -> Optional[Assessment]:
        """根据ID获取笔试"""
        try:
            async with self.get_connection() as conn:
                cursor = conn.execute("SELECT * FROM assessments WHERE id = ?", (assessment_id,))
                row = cursor.fetchone()

                if row:
                    return self._row_to_assessment(row)
                return None
        except Exception as e:
            app_logger.error(f"获取笔试失败: {str(e)}")
            return None

    async def find_assessment(
        self,
        job_id: int,
        candidate_id: int,
        statuses: Iterable[AssessmentStatus]
    ) -> Optional[Assessment]:
        """查找候选人在某岗位处于指定状态的笔试"""
        statuses = list(statuses)
        async with self.get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM assessments WHERE job_id = ? AND candidate_id = ? "
                f"AND status IN ({', '.join('?' for _ in statuses)}) ORDER BY id DESC LIMIT 1",
                [job_id, candidate_id] + [s.value for s in statuses]
            )
            row = cursor.fetchone()
            return self._row_to_assessment(row) if row else None

    async def update_assessment(self, assessment_id: int, **fields) -> Optional[Assessment]:
        """更新笔试字段(answers/score/passed/status/detailed_results/started_at/completed_at)"""
        columns: Dict[str, Any] = {}
        for name, value in fields.items():
            if name == "answers":
                columns[name] = json.dumps(value)
            elif name == "detailed_results":
                columns[name] = json.dumps([r.model_dump(mode="json") for r in value], ensure_ascii=False)
            elif name == "status":
                columns[name] = value.value
            elif name == "passed":
                columns[name] = 1 if value else 0
            elif name in ("started_at", "completed_at"):
                columns[name] = _ts(value)
            else:
                columns[name] = value

        if columns:
            await self._update_fields("assessments", assessment_id, columns)
        return await self.get_assessment_by_id(assessment_id)

    async def list_assessments_by_candidate(self, candidate_id: int) -> List[Assessment]:
        """获取候选人的笔试记录，按创建时间倒序"""
        async with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM assessments WHERE candidate_id = ? ORDER BY created_at DESC, id DESC",
                (candidate_id,)
            )
            return [self._row_to_assessment(row) for row in cursor.fetchall()]

    # ==================== 数据转换方法 ====================

    def _row_to_resume(self, row: sqlite3.Row) -> Resume:
        """将数据库行转换为Resume对象"""
        return Resume(
            id=row["id"],
            user_id=row["user_id"],
            file_name=row["file_name"],
            original_text=row["original_text"],
            extracted_data=ResumeProfile.model_validate(json.loads(row["extracted_data"])),
            is_active=bool(row["is_active"]),
            processed_at=_dt(row["processed_at"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"])
        )

    def _row_to_job(self, row: sqlite3.Row) -> Job:
        """将数据库行转换为Job对象"""
        salary = None
        if row["salary"]:
            salary = SalaryRange(**json.loads(row["salary"]))

        return Job(
            id=row["id"],
            title=row["title"],
            company=row["company"],
            description=row["description"],
            location=row["location"],
            job_type=JobType(row["job_type"]),
            requirements=JobRequirement.model_validate(json.loads(row["requirements"])),
            salary=salary,
            posted_by=row["posted_by"],
            is_active=bool(row["is_active"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"])
        )

    def _row_to_application(self, row: sqlite3.Row) -> Application:
        """将数据库行转换为Application对象"""
        return Application(
            id=row["id"],
            job_id=row["job_id"],
            candidate_id=row["candidate_id"],
            resume_id=row["resume_id"],
            match_score=row["match_score"],
            candidate_brief=row["candidate_brief"],
            status=ApplicationStatus(row["status"]),
            applied_at=_dt(row["applied_at"])
        )

    def _row_to_interview(self, row: sqlite3.Row) -> Interview:
        """将数据库行转换为Interview对象"""
        feedback = None
        if row["feedback"]:
            feedback = InterviewFeedback(**json.loads(row["feedback"]))

        return Interview(
            id=row["id"],
            job_id=row["job_id"],
            candidate_id=row["candidate_id"],
            recruiter_id=row["recruiter_id"],
            resume_id=row["resume_id"],
            scheduled_at=_dt(row["scheduled_at"]),
            duration=row["duration"],
            type=InterviewType(row["type"]),
            status=InterviewStatus(row["status"]),
            meeting_link=row["meeting_link"],
            meeting_id=row["meeting_id"],
            notes=row["notes"],
            candidate_brief=row["candidate_brief"],
            slot_expires_at=_dt(row["slot_expires_at"]),
            meeting_ended_at=_dt(row["meeting_ended_at"]),
            feedback=feedback,
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"])
        )

    def _row_to_meeting(self, row: sqlite3.Row) -> MeetingRecord:
        """将数据库行转换为MeetingRecord对象"""
        return MeetingRecord(
            id=row["id"],
            title=row["title"],
            start_time=_dt(row["start_time"]),
            duration=row["duration"],
            attendees=json.loads(row["attendees"]) if row["attendees"] else [],
            meet_link=row["meet_link"],
            status=row["status"],
            created_at=_dt(row["created_at"]),
            ended_at=_dt(row["ended_at"])
        )

    def _row_to_assessment(self, row: sqlite3.Row) -> Assessment:
        """将数据库行转换为Assessment对象"""
        return Assessment(
            id=row["id"],
            job_id=row["job_id"],
            candidate_id=row["candidate_id"],
            questions=[AssessmentQuestion(**q) for q in json.loads(row["questions"])],
            answers=json.loads(row["answers"]) if row["answers"] else [],
            score=row["score"],
            passed=bool(row["passed"]),
            time_limit=row["time_limit"],
            passing_score=row["passing_score"],
            status=AssessmentStatus(row["status"]),
            detailed_results=[
                QuestionResult(**r) for r in json.loads(row["detailed_results"])
            ] if row["detailed_results"] else [],
            started_at=_dt(row["started_at"]),
            completed_at=_dt(row["completed_at"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"])
        )


# 全局数据管理器实例
_data_manager_instance = None


def get_data_manager() -> DataManager:
    """获取数据管理器实例"""
    global _data_manager_instance
    if _data_manager_instance is None:
        _data_manager_instance = DataManager()
    return _data_manager_instance
