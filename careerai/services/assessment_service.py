"""岗位笔试服务"""

from datetime import datetime, timedelta
from typing import List, Optional

from ..core.data_manager import DataManager, get_data_manager
from ..core.nlp_service import NLPService, get_nlp_service
from ..core.matcher import round_half_up
from ..core.exceptions import NotFoundError, ConflictError, ValidationError, SlotExpiredError
from ..models.assessment import (
    Assessment, AssessmentStatus, AssessmentPaper, AssessmentSubmission, AssessmentOutcome,
    AssessmentResultView, AssessmentSummary, CandidateQuestion, QuestionResult
)
from ..utils.config import get_settings
from ..utils.logger import app_logger


class AssessmentService:
    """岗位笔试服务"""

    def __init__(self, data_manager: Optional[DataManager] = None, nlp_service: Optional[NLPService] = None):
        self.data_manager = data_manager or get_data_manager()
        self.nlp_service = nlp_service or get_nlp_service()
        self.config = get_settings().assessment

    @staticmethod
    def _to_paper(assessment: Assessment) -> AssessmentPaper:
        return AssessmentPaper(
            assessment_id=assessment.id,
            questions=[
                CandidateQuestion(
                    id=q.question_id,
                    question=q.question,
                    options=q.options,
                    difficulty=q.difficulty,
                    category=q.category
                )
                for q in assessment.questions
            ],
            time_limit=assessment.time_limit,
            passing_score=assessment.passing_score
        )

    async def _get_candidate_assessment(self, assessment_id: int, candidate_id: int) -> Assessment:
        assessment = await self.data_manager.get_assessment_by_id(assessment_id)
        if not assessment or assessment.candidate_id != candidate_id:
            raise NotFoundError(f"笔试不存在: {assessment_id}")
        return assessment

    async def generate_assessment(self, job_id: int, candidate_id: int) -> AssessmentPaper:
        """为候选人生成岗位笔试，返回不含答案的试卷"""
        job = await self.data_manager.get_job_by_id(job_id)
        if not job or not job.is_active:
            raise NotFoundError(f"岗位不存在: {job_id}")

        existing = await self.data_manager.find_assessment(
            job_id, candidate_id, [AssessmentStatus.IN_PROGRESS, AssessmentStatus.COMPLETED]
        )
        if existing:
            raise ConflictError("已参加过该岗位的笔试")

        questions = await self.nlp_service.generate_questions(job.title)
        questions = questions[:self.config.question_count]

        assessment = await self.data_manager.create_assessment(
            job_id=job_id,
            candidate_id=candidate_id,
            questions=questions,
            time_limit=self.config.time_limit_seconds,
            passing_score=self.config.passing_score
        )

        app_logger.info(f"笔试生成成功: 岗位 {job_id} - 候选人 {candidate_id} - {len(questions)}道题")
        return self._to_paper(assessment)

    async def start_assessment(self, assessment_id: int, candidate_id: int, now: Optional[datetime] = None) -> AssessmentPaper:
        """开始作答，开始计时"""
        assessment = await self._get_candidate_assessment(assessment_id, candidate_id)
        if assessment.status != AssessmentStatus.GENERATED:
            raise ConflictError("笔试已开始或已结束")

        assessment = await self.data_manager.update_assessment(
            assessment_id,
            status=AssessmentStatus.IN_PROGRESS,
            started_at=now or datetime.now()
        )

        app_logger.info(f"笔试开始: {assessment_id}")
        return self._to_paper(assessment)

    async def submit_assessment(
        self,
        assessment_id: int,
        submission: AssessmentSubmission,
        now: Optional[datetime] = None
    ) -> AssessmentOutcome:
        """交卷判分，超过时限的笔试置为已超时"""
        now = now or datetime.now()

        assessment = await self._get_candidate_assessment(assessment_id, submission.candidate_id)
        if assessment.status != AssessmentStatus.IN_PROGRESS:
            raise ConflictError("笔试未开始或已结束")

        if not assessment.questions:
            raise ValidationError("笔试没有题目")

        deadline = assessment.started_at + timedelta(seconds=assessment.time_limit)
        if now > deadline:
            await self.data_manager.update_assessment(assessment_id, status=AssessmentStatus.EXPIRED)
            app_logger.warning(f"笔试超时: {assessment_id}")
            raise SlotExpiredError("笔试已超过时限")

        # 未作答的题目按错误处理，多余的答案忽略
        answers = list(submission.answers[:len(assessment.questions)])
        answers += [None] * (len(assessment.questions) - len(answers))

        detailed_results = []
        for question, selected in zip(assessment.questions, answers):
            detailed_results.append(QuestionResult(
                question_id=question.question_id,
                selected_answer=selected,
                correct_answer=question.correct_answer,
                is_correct=selected == question.correct_answer,
                difficulty=question.difficulty,
                category=question.category
            ))

        correct_answers = sum(1 for r in detailed_results if r.is_correct)
        total = len(assessment.questions)
        score = round_half_up(100 * correct_answers, total)
        passed = score >= assessment.passing_score

        await self.data_manager.update_assessment(
            assessment_id,
            answers=answers,
            score=score,
            passed=passed,
            status=AssessmentStatus.COMPLETED,
            completed_at=now,
            detailed_results=detailed_results
        )

        app_logger.info(f"笔试完成: {assessment_id}, 得分: {score}, 通过: {passed}")
        return AssessmentOutcome(
            score=score,
            passed=passed,
            correct_answers=correct_answers,
            total_questions=total,
            passing_score=assessment.passing_score
        )

    async def get_results(self, assessment_id: int, candidate_id: int) -> AssessmentResultView:
        """查询已完成笔试的结果"""
        assessment = await self._get_candidate_assessment(assessment_id, candidate_id)
        if assessment.status != AssessmentStatus.COMPLETED:
            raise NotFoundError("笔试结果不存在")

        return AssessmentResultView(
            assessment_id=assessment.id,
            job_id=assessment.job_id,
            score=assessment.score,
            passed=assessment.passed,
            completed_at=assessment.completed_at,
            detailed_results=assessment.detailed_results
        )

    async def list_assessments(self, candidate_id: int) -> List[AssessmentSummary]:
        """候选人的笔试记录(按创建时间倒序)"""
        assessments = await self.data_manager.list_assessments_by_candidate(candidate_id)
        return [
            AssessmentSummary(
                assessment_id=a.id,
                job_id=a.job_id,
                status=a.status,
                score=a.score,
                passed=a.passed,
                question_count=len(a.questions),
                created_at=a.created_at,
                completed_at=a.completed_at
            )
            for a in assessments
        ]


# 全局笔试服务实例
_assessment_service_instance = None


def get_assessment_service() -> AssessmentService:
    """获取笔试服务实例"""
    global _assessment_service_instance
    if _assessment_service_instance is None:
        _assessment_service_instance = AssessmentService()
    return _assessment_service_instance
