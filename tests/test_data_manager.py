"""数据管理器测试"""

import pytest

from careerai.core.exceptions import ConflictError
from careerai.models.job import JobSearchParams, JobType, ApplicationStatus
from careerai.models.resume import ResumeProfile, EducationEntry

from conftest import make_job, make_resume


async def test_resume_round_trip(data_manager):
    profile = ResumeProfile(name="Jane Smith", skills=["Python"], education=[EducationEntry(stream="CS")])
    resume = await data_manager.create_resume(make_resume(), profile)

    loaded = await data_manager.get_resume_by_id(resume.id)
    assert loaded.extracted_data == profile
    assert loaded.is_active is True

    await data_manager.deactivate_resume(resume.id)
    assert (await data_manager.get_resume_by_id(resume.id)).is_active is False
    assert await data_manager.list_resumes_by_user(1) == []


async def test_missing_records_return_none(data_manager):
    assert await data_manager.get_resume_by_id(999) is None
    assert await data_manager.get_job_by_id(999) is None
    assert await data_manager.get_interview_by_id(999) is None
    assert await data_manager.get_assessment_by_id(999) is None


async def test_job_round_trip_keeps_optional_requirements(data_manager):
    job = await data_manager.create_job(make_job(skills=["Python"]))

    assert job.requirements.skills == ["Python"]
    assert job.requirements.experience is None
    assert job.requirements.education is None
    assert job.job_type == JobType.FULL_TIME


async def test_search_jobs_filters_and_pagination(data_manager):
    await data_manager.create_job(make_job(title="Python Dev", skills=["Python"], location="Bangalore"))
    await data_manager.create_job(make_job(title="Go Dev", skills=["Go"], location="Pune"))
    await data_manager.create_job(make_job(title="Intern", skills=["python"], job_type=JobType.INTERNSHIP))
    hidden = await data_manager.create_job(make_job(title="Closed", skills=["Python"]))
    await data_manager.set_job_active(hidden.id, False)

    jobs, total = await data_manager.search_jobs(JobSearchParams(skills=["PYTHON"]))
    assert total == 2
    assert [j.title for j in jobs] == ["Intern", "Python Dev"]

    jobs, total = await data_manager.search_jobs(JobSearchParams(location="pune"))
    assert [j.title for j in jobs] == ["Go Dev"]

    jobs, total = await data_manager.search_jobs(JobSearchParams(job_type=JobType.INTERNSHIP))
    assert [j.title for j in jobs] == ["Intern"]

    jobs, total = await data_manager.search_jobs(JobSearchParams(page=2, limit=2))
    assert total == 3
    assert len(jobs) == 1


async def test_duplicate_application_conflicts(data_manager):
    job = await data_manager.create_job(make_job())
    resume = await data_manager.create_resume(make_resume(), ResumeProfile())

    application = await data_manager.create_application(job.id, 1, resume.id, 80, "brief")
    assert application.status == ApplicationStatus.APPLIED

    with pytest.raises(ConflictError):
        await data_manager.create_application(job.id, 1, resume.id, 90, None)


async def test_applications_sorted_by_score(data_manager):
    job = await data_manager.create_job(make_job())
    for candidate_id, score in ((1, 40), (2, 90), (3, 90), (4, 70)):
        resume = await data_manager.create_resume(make_resume(user_id=candidate_id), ResumeProfile())
        await data_manager.create_application(job.id, candidate_id, resume.id, score, None)

    applications = await data_manager.list_applications_by_job(job.id)
    assert [a.candidate_id for a in applications] == [2, 3, 4, 1]
