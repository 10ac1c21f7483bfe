"""AI文本分析服务测试"""

import json

from careerai.core.nlp_service import NLPService, scan_skills, get_fallback_questions, MAX_QUESTIONS
from careerai.models.resume import ResumeProfile, ExperienceEntry, EducationEntry

from conftest import FakeLLMClient, RESUME_TEXT, EXTRACTED_PROFILE


class TestSkillScan:
    def test_finds_catalogue_skills(self):
        skills = scan_skills("Worked with Python, Docker and PostgreSQL on AWS")
        assert {"Python", "Docker", "PostgreSQL", "AWS"} <= set(skills)

    def test_variations(self):
        assert "Kubernetes" in scan_skills("Deployed services on k8s")
        assert "PostgreSQL" in scan_skills("Tuned postgres queries")

    def test_dotted_names_do_not_leak(self):
        skills = scan_skills("Built APIs in Node.js")
        assert "Node.js" in skills
        assert "JavaScript" not in skills

    def test_whole_words_only(self):
        skills = scan_skills("Javascript developer")
        assert "Java" not in skills
        assert "JavaScript" in skills

    def test_keeps_known_skills_first_without_duplicates(self):
        skills = scan_skills("python and docker", ["python"])
        assert skills[0] == "python"
        assert "Python" not in skills
        assert "Docker" in skills


class TestExtractResumeData:
    async def test_parses_fenced_json(self, scripted_llm):
        service = NLPService(llm_client=scripted_llm)
        profile = await service.extract_resume_data(RESUME_TEXT)

        assert profile.name == "Jane Smith"
        assert len(profile.experience) == 2
        assert profile.education[0].stream == "Computer Science"
        assert profile.education[0].year == "2018"
        # 合并原文中扫描到的技能
        assert profile.skills[:3] == ["Python", "React", "Node.js"]
        assert "Docker" in profile.skills

    async def test_fills_missing_contact_fields_from_text(self):
        data = dict(EXTRACTED_PROFILE, email=None, phone="")
        service = NLPService(llm_client=FakeLLMClient({"Analyze the following resume": json.dumps(data)}))
        profile = await service.extract_resume_data(RESUME_TEXT)

        assert profile.email == "jane.smith@example.com"
        assert profile.phone is not None

    async def test_fallback_does_not_invent_history(self, offline_llm):
        service = NLPService(llm_client=offline_llm)
        profile = await service.extract_resume_data(RESUME_TEXT)

        assert profile.name == "Jane Smith"
        assert profile.email == "jane.smith@example.com"
        assert profile.experience == []
        assert profile.education == []
        assert "Python" in profile.skills

    async def test_fallback_on_malformed_reply(self):
        service = NLPService(llm_client=FakeLLMClient({"Analyze the following resume": "Sorry, I cannot help."}))
        profile = await service.extract_resume_data(RESUME_TEXT)
        assert profile.experience == []
        assert "React" in profile.skills


class TestCandidateBrief:
    async def test_uses_llm_reply(self, scripted_llm):
        service = NLPService(llm_client=scripted_llm)
        brief = await service.generate_candidate_brief(ResumeProfile(name="Jane Smith"))
        assert brief == "Jane is a backend engineer with strong Python skills."

    async def test_template_fallback(self, offline_llm):
        service = NLPService(llm_client=offline_llm)
        profile = ResumeProfile(
            name="Jane Smith",
            skills=["Python", "React"],
            experience=[ExperienceEntry(title="Backend Engineer", company="Acme")],
            education=[EducationEntry(degree="B.Tech")]
        )
        brief = await service.generate_candidate_brief(profile)

        assert brief.startswith("Jane Smith is a Backend Engineer")
        assert "Python, React" in brief
        assert "B.Tech" in brief

    async def test_template_handles_empty_profile(self, offline_llm):
        brief = await NLPService(llm_client=offline_llm).generate_candidate_brief(ResumeProfile())
        assert brief.startswith("The candidate is a professional")


class TestQuestions:
    async def test_parses_and_validates_questions(self):
        reply = json.dumps([
            {"id": 1, "question": "Q1?", "options": ["a", "b", "c", "d"], "correctAnswer": 2, "difficulty": "easy"},
            {"id": 2, "question": "Broken", "options": ["a", "b"], "correctAnswer": 5},
            {"id": 3, "question": "Q3?", "options": ["a", "b", "c", "d"], "correctAnswer": 0, "difficulty": "hard"},
        ])
        service = NLPService(llm_client=FakeLLMClient({"technical assessment questions": "Here:\n" + reply}))
        questions = await service.generate_questions("Backend Engineer")

        assert [q.question_id for q in questions] == [1, 2]
        assert questions[0].correct_answer == 2
        assert questions[1].difficulty.value == "moderate"

    async def test_fallback_bank(self, offline_llm):
        questions = await NLPService(llm_client=offline_llm).generate_questions("Frontend React Developer")
        assert 0 < len(questions) <= MAX_QUESTIONS
        assert questions[0].category == "react"
        assert [q.question_id for q in questions] == list(range(1, len(questions) + 1))

    def test_generic_bank_for_unknown_title(self):
        questions = get_fallback_questions("Office Manager")
        assert questions
        assert all(0 <= q.correct_answer < len(q.options) for q in questions)


class TestFeedbackAnalysis:
    async def test_parses_reply(self):
        reply = json.dumps({
            "sentiment": "positive", "score": 0.8, "confidence": 0.9,
            "keywords": {"positive": ["strong"], "negative": [], "neutral": []},
            "redFlags": ["limited cloud exposure"], "strengths": ["clear communicator"],
            "recommendation": "Advance to next round"
        })
        service = NLPService(llm_client=FakeLLMClient({"interview feedback": reply}))
        analysis = await service.analyze_feedback("Strong candidate, limited cloud exposure")

        assert analysis.sentiment == "positive"
        assert analysis.red_flags == ["limited cloud exposure"]

    async def test_neutral_fallback(self, offline_llm):
        analysis = await NLPService(llm_client=offline_llm).analyze_feedback("Okay interview")
        assert analysis.sentiment == "neutral"
        assert analysis.confidence == 0.0
        assert analysis.red_flags == []


class TestMalformedReplies:
    async def test_non_list_sections_are_dropped(self):
        reply = json.dumps({"name": "Jane Smith", "experience": 3, "education": "B.Tech", "projects": {"x": 1}})
        service = NLPService(llm_client=FakeLLMClient({"Analyze the following resume": reply}))
        profile = await service.extract_resume_data(RESUME_TEXT)

        assert profile.name == "Jane Smith"
        assert profile.experience == []
        assert profile.education == []
        assert profile.projects == []

    async def test_comma_separated_skills_string(self):
        reply = json.dumps({"name": "Jane Smith", "skills": "Excel, Tableau"})
        service = NLPService(llm_client=FakeLLMClient({"Analyze the following resume": reply}))
        profile = await service.extract_resume_data("Jane Smith\nAnalyst working with spreadsheets and dashboards daily.")

        assert profile.skills[:2] == ["Excel", "Tableau"]
        assert all(len(skill) > 1 for skill in profile.skills)
