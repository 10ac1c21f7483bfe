"""AI文本分析核心模块

简历结构化提取、候选人简介、笔试题生成、面试反馈情感分析。
所有方法在AI不可用或返回格式错误时走降级逻辑，不向调用方抛出AI异常。
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..integrations.llm_client import get_llm_client, LLMAPIError
from ..models.resume import ResumeProfile
from ..models.assessment import AssessmentQuestion
from ..models.interview import FeedbackAnalysis
from ..utils.logger import ai_logger
from ..utils.helpers import (
    clean_json_response, safe_json_loads, extract_email, extract_phone,
    extract_name, join_non_empty
)


# 技能词库(按领域分组，扫描简历原文时使用)
SKILL_CATALOGUE = [
    # 编程语言
    'JavaScript', 'Python', 'Java', 'C++', 'C#', 'C', 'TypeScript', 'PHP', 'Ruby', 'Golang',
    'Rust', 'Swift', 'Kotlin', 'Scala', 'MATLAB', 'Perl', 'Shell Scripting', 'PowerShell', 'SQL',
    # 前端
    'React', 'Angular', 'Vue.js', 'HTML', 'CSS', 'SCSS', 'SASS', 'Bootstrap', 'Tailwind CSS',
    'jQuery', 'Redux', 'Next.js', 'Nuxt.js', 'Svelte',
    # 后端
    'Node.js', 'Express.js', 'Django', 'Flask', 'FastAPI', 'Spring Boot', 'ASP.NET', 'Laravel',
    'Ruby on Rails',
    # 数据库
    'MongoDB', 'PostgreSQL', 'MySQL', 'SQLite', 'Redis', 'Cassandra', 'DynamoDB', 'Firebase',
    'Oracle', 'SQL Server', 'MariaDB',
    # 云与运维
    'AWS', 'Azure', 'Google Cloud', 'Docker', 'Kubernetes', 'Jenkins', 'GitHub Actions',
    'Terraform', 'Ansible', 'Linux',
    # 工具
    'Git', 'GitHub', 'GitLab', 'Jira', 'Figma',
    # 测试
    'Jest', 'Cypress', 'Selenium', 'Playwright', 'JUnit', 'PyTest', 'Postman',
    # 移动端
    'React Native', 'Flutter', 'Android', 'iOS',
    # 数据与AI
    'Machine Learning', 'Deep Learning', 'Natural Language Processing', 'Computer Vision',
    'TensorFlow', 'PyTorch', 'Scikit-learn', 'Pandas', 'NumPy', 'Matplotlib', 'Tableau',
    'Power BI', 'Apache Spark', 'Hadoop', 'OpenCV',
    # 方法论
    'Agile', 'Scrum', 'Kanban', 'DevOps', 'CI/CD', 'TDD', 'Microservices', 'REST API',
    'GraphQL', 'gRPC',
    # 其他
    'Cybersecurity', 'Blockchain', 'System Design', 'Data Structures', 'Algorithms',
]

# 常见写法变体
SKILL_VARIATIONS = {
    'JavaScript': ['js', 'ecmascript'],
    'TypeScript': ['ts'],
    'React': ['react.js', 'reactjs'],
    'Node.js': ['nodejs'],
    'Express.js': ['expressjs'],
    'MongoDB': ['mongo'],
    'PostgreSQL': ['postgres', 'psql'],
    'Kubernetes': ['k8s'],
    'Machine Learning': ['ml'],
    'Deep Learning': ['dl'],
    'Natural Language Processing': ['nlp'],
    'REST API': ['restful', 'rest apis'],
}

# 通用题库
GENERIC_QUESTIONS = [
    {
        "question": "What is the primary purpose of version control systems like Git?",
        "options": [
            "To track changes in source code over time",
            "To compile and run code",
            "To test applications",
            "To deploy applications to production"
        ],
        "correct_answer": 0, "difficulty": "easy", "category": "tools"
    },
    {
        "question": "Which HTTP status code indicates a successful request?",
        "options": ["404", "500", "200", "301"],
        "correct_answer": 2, "difficulty": "easy", "category": "web"
    },
    {
        "question": "What does API stand for?",
        "options": [
            "Application Programming Interface",
            "Advanced Programming Integration",
            "Automated Program Interaction",
            "Application Process Integration"
        ],
        "correct_answer": 0, "difficulty": "easy", "category": "concepts"
    },
    {
        "question": "What is the average time complexity of looking up a key in a hash table?",
        "options": ["O(n)", "O(log n)", "O(1)", "O(n log n)"],
        "correct_answer": 2, "difficulty": "moderate", "category": "algorithms"
    },
    {
        "question": "Which data structure follows the Last-In-First-Out principle?",
        "options": ["Queue", "Stack", "Linked list", "Heap"],
        "correct_answer": 1, "difficulty": "easy", "category": "data-structures"
    },
    {
        "question": "What is the main goal of a database index?",
        "options": [
            "To encrypt stored data",
            "To speed up data retrieval",
            "To enforce user permissions",
            "To back up tables automatically"
        ],
        "correct_answer": 1, "difficulty": "moderate", "category": "database"
    },
    {
        "question": "Which practice best describes continuous integration?",
        "options": [
            "Merging code changes frequently and verifying them with automated builds and tests",
            "Releasing software once per year",
            "Writing documentation before code",
            "Testing only in production"
        ],
        "correct_answer": 0, "difficulty": "moderate", "category": "devops"
    },
    {
        "question": "In a distributed system, what does the CAP theorem state cannot be fully guaranteed at the same time?",
        "options": [
            "Caching, availability and performance",
            "Consistency, availability and partition tolerance",
            "Concurrency, atomicity and persistence",
            "Compression, authentication and privacy"
        ],
        "correct_answer": 1, "difficulty": "advanced", "category": "system-design"
    },
]

# 岗位关键词 -> 专项题目
ROLE_QUESTIONS = {
    ('frontend', 'react', 'front-end'): [
        {
            "question": "What is the virtual DOM in React?",
            "options": [
                "A lightweight copy of the real DOM kept in memory",
                "A new HTML standard",
                "A CSS framework",
                "A JavaScript testing library"
            ],
            "correct_answer": 0, "difficulty": "moderate", "category": "react"
        },
        {
            "question": "Which CSS property is used to create flexible layouts?",
            "options": ["display: block", "display: flex", "display: inline", "display: none"],
            "correct_answer": 1, "difficulty": "easy", "category": "css"
        },
    ],
    ('backend', 'node', 'back-end'): [
        {
            "question": "What is middleware in Express.js?",
            "options": [
                "A database connection pool",
                "Functions that execute during the request-response cycle",
                "A frontend framework",
                "A testing library"
            ],
            "correct_answer": 1, "difficulty": "moderate", "category": "backend"
        },
        {
            "question": "What does CRUD stand for in database operations?",
            "options": [
                "Create, Read, Update, Delete",
                "Connect, Retrieve, Upload, Download",
                "Copy, Remove, Undo, Deploy",
                "Cache, Render, Update, Display"
            ],
            "correct_answer": 0, "difficulty": "easy", "category": "database"
        },
    ],
    ('data', 'machine learning', 'ml', 'python'): [
        {
            "question": "Which technique helps reduce overfitting in a machine learning model?",
            "options": ["Adding more features only", "Regularization", "Removing the validation set", "Training longer"],
            "correct_answer": 1, "difficulty": "moderate", "category": "machine-learning"
        },
        {
            "question": "Which Python library is primarily used for tabular data manipulation?",
            "options": ["Requests", "Pandas", "Flask", "Pygame"],
            "correct_answer": 1, "difficulty": "easy", "category": "python"
        },
    ],
}

MAX_QUESTIONS = 15


def _skill_pattern(term: str) -> re.Pattern:
    # 前面不能紧跟字母数字或点号，避免 node.js 命中 js
    return re.compile(r'(?<![a-z0-9.])' + re.escape(term.lower()) + r'(?![a-z0-9+#])')


_SKILL_PATTERNS = {
    skill: [_skill_pattern(v) for v in [skill] + SKILL_VARIATIONS.get(skill, [])]
    for skill in SKILL_CATALOGUE
}


def scan_skills(text: str, known_skills: Optional[List[str]] = None) -> List[str]:
    """扫描文本中出现的词库技能，合并到已知技能之后(按小写去重)"""
    found = list(known_skills or [])
    seen = {s.lower() for s in found}
    lower_text = (text or "").lower()

    for skill, patterns in _SKILL_PATTERNS.items():
        if skill.lower() in seen:
            continue
        if any(p.search(lower_text) for p in patterns):
            found.append(skill)
            seen.add(skill.lower())

    return found


def get_fallback_questions(job_title: str) -> List[AssessmentQuestion]:
    """降级题库: 岗位专项题 + 通用题，最多15道"""
    title_lower = (job_title or "").lower()

    role_specific = []
    for keywords, questions in ROLE_QUESTIONS.items():
        if any(k in title_lower for k in keywords):
            role_specific.extend(questions)

    bank = (role_specific + GENERIC_QUESTIONS)[:MAX_QUESTIONS]
    return [
        AssessmentQuestion(question_id=i, **q)
        for i, q in enumerate(bank, start=1)
    ]


class NLPService:
    """AI文本分析服务"""

    def __init__(self, llm_client=None):
        # 任何实现 generate_text(prompt, temperature, max_tokens) 的对象均可
        self.llm_client = llm_client or get_llm_client()

    async def _complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        return await self.llm_client.generate_text(prompt, temperature=temperature, max_tokens=max_tokens)

    # ==================== 简历提取 ====================

    async def extract_resume_data(self, resume_text: str) -> ResumeProfile:
        """从简历原文中提取结构化信息"""
        prompt = f"""Analyze the following resume and extract structured information. Return ONLY a JSON object with no additional text.

Resume text:
{resume_text}

Return a JSON object with this exact structure:
{{
  "name": "Full name",
  "email": "Email address",
  "phone": "Phone number",
  "linkedin": "LinkedIn profile URL",
  "location": "City, Country",
  "summary": "Professional summary",
  "skills": ["skill1", "skill2"],
  "experience": [{{"title": "", "company": "", "duration": "", "location": "", "description": "", "technologies": []}}],
  "education": [{{"degree": "", "school": "", "year": "", "cgpa": "", "stream": "Field of study", "location": ""}}],
  "certifications": ["cert1"],
  "projects": [{{"name": "", "description": "", "technologies": [], "duration": "", "url": ""}}],
  "languages": ["English"],
  "achievements": ["achievement1"]
}}"""

        try:
            content = await self._complete(prompt, temperature=0.3, max_tokens=3000)
            data = safe_json_loads(clean_json_response(content))
            if not isinstance(data, dict):
                raise ValueError("AI返回内容不是JSON对象")

            profile = ResumeProfile.model_validate(self._normalize_profile_data(data))
            profile = self._enhance_profile(profile, resume_text)
            ai_logger.info(f"简历信息提取成功: {profile.name}, 技能{len(profile.skills)}项")
            return profile

        except (LLMAPIError, ValueError, TypeError, PydanticValidationError) as e:
            ai_logger.warning(f"简历信息提取失败，使用降级提取: {str(e)}")
            return self.fallback_extraction(resume_text)

    def _normalize_profile_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """清理AI返回数据中的空值和非字符串字段"""
        normalized = dict(data)
        for key in ('name', 'email', 'phone', 'linkedin', 'location', 'summary'):
            value = normalized.get(key)
            normalized[key] = str(value).strip() if value not in (None, "") else None

        for key in ('experience', 'education', 'projects'):
            items = normalized.get(key)
            if not isinstance(items, list):
                items = []
            normalized[key] = [
                {k: (str(v) if k in ('year', 'cgpa') else v) for k, v in item.items() if v is not None}
                for item in items if isinstance(item, dict)
            ]
        return normalized

    def _enhance_profile(self, profile: ResumeProfile, resume_text: str) -> ResumeProfile:
        """用正则结果补全缺失字段，并合并词库扫描到的技能"""
        return profile.model_copy(update={
            "name": profile.name or extract_name(resume_text),
            "email": profile.email or extract_email(resume_text),
            "phone": profile.phone or extract_phone(resume_text),
            "skills": scan_skills(resume_text, profile.skills),
        })

    def fallback_extraction(self, resume_text: str) -> ResumeProfile:
        """降级提取: 只保留能从原文中确认的信息"""
        return ResumeProfile(
            name=extract_name(resume_text),
            email=extract_email(resume_text),
            phone=extract_phone(resume_text),
            skills=scan_skills(resume_text),
        )

    # ==================== 候选人简介 ====================

    async def generate_candidate_brief(self, profile: ResumeProfile) -> str:
        """生成面向HR的候选人简介"""
        experience = join_non_empty(
            [join_non_empty([exp.title, exp.company], " at ") for exp in profile.experience]
        )
        education = join_non_empty(
            [join_non_empty([edu.degree, edu.stream], " in ") for edu in profile.education]
        )

        prompt = f"""Create a concise 3-4 line professional brief about this candidate for recruiters.

Candidate Data:
Name: {profile.name or 'Unknown'}
Skills: {', '.join(profile.skills)}
Experience: {experience}
Education: {education}
Projects: {join_non_empty([p.name for p in profile.projects])}
Certifications: {', '.join(profile.certifications)}

Highlight key technical qualifications, relevant experience and educational background. Keep it professional."""

        try:
            brief = (await self._complete(prompt, temperature=0.5, max_tokens=400)).strip()
            if brief:
                return brief
            ai_logger.warning("AI返回空简介，使用模板简介")
        except LLMAPIError as e:
            ai_logger.warning(f"候选人简介生成失败，使用模板简介: {str(e)}")

        return self.template_brief(profile)

    def template_brief(self, profile: ResumeProfile) -> str:
        """模板简介"""
        name = profile.name or "The candidate"
        title = profile.experience[0].title if profile.experience and profile.experience[0].title else "professional"
        parts = [f"{name} is a {title} with {len(profile.experience)} listed role(s)"]

        if profile.skills:
            parts.append(f"expertise in {', '.join(profile.skills[:4])}")
        brief = ", ".join(parts) + "."

        if profile.education and profile.education[0].degree:
            brief += f" They hold a {profile.education[0].degree}."
        if profile.projects:
            brief += f" They have worked on {len(profile.projects)} notable project(s)."
        return brief

    # ==================== 笔试题生成 ====================

    async def generate_questions(self, job_title: str) -> List[AssessmentQuestion]:
        """生成岗位笔试题(单选题，最多15道)"""
        prompt = f"""Generate {MAX_QUESTIONS} technical assessment questions for a {job_title} position.

IMPORTANT: Return ONLY a JSON array with no additional text or explanations.

Distribution: 5 easy, 7 moderate, 3 advanced. Each question has exactly 4 options and one correct answer.

[
  {{
    "id": 1,
    "question": "Clear, specific question text?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "difficulty": "easy",
    "category": "technical"
  }}
]"""

        try:
            content = await self._complete(prompt, temperature=0.7, max_tokens=4000)
            raw_questions = safe_json_loads(clean_json_response(content, '[', ']'))
            questions = self._parse_questions(raw_questions)
            if questions:
                ai_logger.info(f"为{job_title}生成了{len(questions)}道笔试题")
                return questions
            ai_logger.warning("AI返回的题目均无效，使用降级题库")
        except LLMAPIError as e:
            ai_logger.warning(f"笔试题生成失败，使用降级题库: {str(e)}")

        return get_fallback_questions(job_title)

    def _parse_questions(self, raw_questions: Any) -> List[AssessmentQuestion]:
        """校验AI返回的题目，丢弃不合法的题目并重新编号"""
        if not isinstance(raw_questions, list):
            return []

        questions = []
        for item in raw_questions:
            if not isinstance(item, dict):
                continue
            options = item.get("options") or []
            correct = item.get("correctAnswer", item.get("correct_answer"))
            if not item.get("question") or not isinstance(correct, int) or not 0 <= correct < len(options):
                continue
            try:
                questions.append(AssessmentQuestion(
                    question_id=len(questions) + 1,
                    question=item.get("question", ""),
                    options=[str(o) for o in options],
                    correct_answer=correct,
                    difficulty=item.get("difficulty", "moderate"),
                    category=item.get("category") or "technical",
                ))
            except PydanticValidationError:
                continue
            if len(questions) >= MAX_QUESTIONS:
                break

        return questions

    # ==================== 反馈分析 ====================

    async def analyze_feedback(self, feedback_text: str) -> FeedbackAnalysis:
        """面试反馈情感分析"""
        prompt = f"""Analyze the following interview feedback and provide sentiment analysis.

IMPORTANT: Return ONLY a JSON object with no additional text.

Feedback:
{feedback_text}

Return a JSON object with this exact structure:
{{
  "sentiment": "positive" | "negative" | "neutral",
  "score": (number 0-1),
  "confidence": (number 0-1),
  "keywords": {{"positive": [], "negative": [], "neutral": []}},
  "redFlags": ["concern1"],
  "strengths": ["strength1"],
  "recommendation": "Brief recommendation"
}}"""

        try:
            content = await self._complete(prompt, temperature=0.3, max_tokens=1000)
            data = safe_json_loads(clean_json_response(content))
            if not isinstance(data, dict):
                raise ValueError("AI返回内容不是JSON对象")

            if "redFlags" in data and "red_flags" not in data:
                data["red_flags"] = data.pop("redFlags")
            analysis = FeedbackAnalysis.model_validate(data)
            ai_logger.info(f"反馈分析完成: {analysis.sentiment} ({analysis.score})")
            return analysis

        except (LLMAPIError, ValueError, TypeError, PydanticValidationError) as e:
            ai_logger.warning(f"反馈分析失败，返回中性结果: {str(e)}")
            return FeedbackAnalysis(
                sentiment="neutral",
                score=0.5,
                confidence=0.0,
                recommendation="Automatic analysis unavailable; review the feedback manually"
            )


# 全局NLP服务实例
_nlp_service_instance = None


def get_nlp_service() -> NLPService:
    """获取NLP服务实例"""
    global _nlp_service_instance
    if _nlp_service_instance is None:
        _nlp_service_instance = NLPService()
    return _nlp_service_instance
