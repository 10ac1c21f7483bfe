"""简历服务测试"""

import pytest

from careerai.core.exceptions import NotFoundError, ValidationError
from careerai.models.resume import ResumeCreate

from conftest import make_job, make_resume, RESUME_TEXT


async def test_upload_resume_extracts_profile(resume_service):
    resume = await resume_service.upload_resume(make_resume())

    assert resume.id > 0
    assert resume.is_active is True
    assert resume.extracted_data.name == "Jane Smith"
    assert "Python" in resume.extracted_data.skills


@pytest.mark.parametrize("text", ["", "   ", "too short to be a resume", " " * 60 + "x" * 49])
async def test_upload_rejects_short_text(resume_service, text):
    with pytest.raises(ValidationError):
        await resume_service.upload_resume(ResumeCreate(user_id=1, file_name="cv.pdf", original_text=text))


async def test_fifty_characters_are_enough(resume_service):
    resume = await resume_service.upload_resume(ResumeCreate(user_id=1, file_name="cv.txt", original_text="x" * 50))
    assert resume.original_text == "x" * 50


async def test_get_resume_checks_owner(resume_service):
    resume = await resume_service.upload_resume(make_resume(user_id=1))

    assert (await resume_service.get_resume(resume.id, 1)).id == resume.id
    with pytest.raises(NotFoundError):
        await resume_service.get_resume(resume.id, 2)
    with pytest.raises(NotFoundError):
        await resume_service.get_resume(999, 1)


async def test_list_newest_first_and_delete(resume_service):
    first = await resume_service.upload_resume(make_resume(user_id=1))
    second = await resume_service.upload_resume(make_resume(user_id=1))
    await resume_service.upload_resume(make_resume(user_id=2))

    assert [r.id for r in await resume_service.list_resumes(1)] == [second.id, first.id]

    await resume_service.delete_resume(first.id, 1)
    assert [r.id for r in await resume_service.list_resumes(1)] == [second.id]
    with pytest.raises(NotFoundError):
        await resume_service.get_resume(first.id, 1)
    with pytest.raises(NotFoundError):
        await resume_service.delete_resume(second.id, 2)


async def test_find_job_matches_ranks_active_jobs(resume_service, job_service):
    resume = await resume_service.upload_resume(make_resume())

    weak = await job_service.create_job(make_job(title="Data Engineer", skills=["Scala", "Spark"]))
    strong = await job_service.create_job(make_job(title="Python Developer", skills=["Python", "React"]))
    partial = await job_service.create_job(make_job(title="Platform Engineer", skills=["Python", "Kubernetes"]))
    closed = await job_service.create_job(make_job(title="Closed Role", skills=["Python"]))
    await job_service.data_manager.set_job_active(closed.id, False)

    matches = await resume_service.find_job_matches(resume.id, 1)

    assert [m.job.id for m in matches] == [strong.id, partial.id, weak.id]
    assert matches[0].match.final_score == 100
    assert matches[1].match.missing_skills == ["Kubernetes"]

    limited = await resume_service.find_job_matches(resume.id, 1, limit=1)
    assert [m.job.id for m in limited] == [strong.id]


async def test_analyze_text_does_not_store(resume_service):
    profile = await resume_service.analyze_text(RESUME_TEXT)

    assert profile.name == "Jane Smith"
    assert await resume_service.list_resumes(1) == []
