"""岗位匹配评分模块

纯函数实现，不做IO。评分规则:
- 技能: 双向子串匹配(小写+别名归一)，命中数/要求数
- 经验: 经历条数与最低年限比较(条数≠年限，保持原有口径)
- 学历: 专业方向双向子串匹配，未命中给固定60分
- 总分: 0.5*技能 + 0.3*经验 + 0.2*学历，四舍五入(0.5进位)
"""

from typing import Iterable, List, Optional

from ..models.resume import ResumeProfile, ExperienceEntry, EducationEntry
from ..models.job import Job, JobRequirement, ExperienceRequirement, EducationRequirement
from ..models.match import MatchResult, JobMatch
from ..utils.helpers import normalize_skill_name
from ..utils.logger import app_logger

# 权重以整数表示(十分位)，总和为10
SKILLS_WEIGHT = 5
EXPERIENCE_WEIGHT = 3
EDUCATION_WEIGHT = 2

# 专业不匹配时的固定分
EDUCATION_PARTIAL_CREDIT = 60


def round_half_up(numerator: int, denominator: int) -> int:
    """整数除法四舍五入(0.5进位)"""
    return (2 * numerator + denominator) // (2 * denominator)


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


def get_matching_skills(candidate_skills: Iterable[str], required_skills: Iterable[str]) -> List[str]:
    """返回候选人已具备的要求技能(保持岗位原始写法和顺序)"""
    normalized_candidate = [normalize_skill_name(s) for s in candidate_skills]
    normalized_candidate = [s for s in normalized_candidate if s]

    matching = []
    for skill in required_skills:
        required = normalize_skill_name(skill)
        if not required:
            continue
        if any(_contains_either_way(required, cand) for cand in normalized_candidate):
            matching.append(skill)
    return matching


def get_missing_skills(candidate_skills: Iterable[str], required_skills: Iterable[str]) -> List[str]:
    """返回候选人缺失的要求技能"""
    required_skills = list(required_skills)
    matching = set(get_matching_skills(candidate_skills, required_skills))
    return [skill for skill in required_skills if skill not in matching]


def calculate_skills_match(candidate_skills: List[str], required_skills: List[str]) -> int:
    """技能匹配度(0-100)，无技能要求时为100"""
    required = [s for s in required_skills if normalize_skill_name(s)]
    if not required:
        return 100

    matching = get_matching_skills(candidate_skills, required)
    return round_half_up(100 * len(matching), len(required))


def calculate_experience_match(
    experience: List[ExperienceEntry],
    requirement: Optional[ExperienceRequirement]
) -> int:
    """经验匹配度(0-100)

    以经历条数对比最低年限要求，未设置最低年限(None或0)时为100。
    """
    if requirement is None or not requirement.min:
        return 100

    count = len(experience)
    if count >= requirement.min:
        return 100
    return round_half_up(100 * count, requirement.min)


def calculate_education_match(
    education: List[EducationEntry],
    requirement: Optional[EducationRequirement]
) -> int:
    """学历匹配度(0-100)，无专业要求时为100，专业不符给固定分"""
    if requirement is None:
        return 100

    required_streams = [s.lower().strip() for s in requirement.stream if s and s.strip()]
    if not required_streams:
        return 100

    candidate_streams = [
        edu.stream.lower().strip() for edu in education
        if edu.stream and edu.stream.strip()
    ]

    has_matching_stream = any(
        _contains_either_way(stream, required)
        for stream in candidate_streams
        for required in required_streams
    )
    return 100 if has_matching_stream else EDUCATION_PARTIAL_CREDIT


def calculate_final_score(skills_match: int, experience_match: int, education_match: int) -> int:
    """加权总分: round(0.5*技能 + 0.3*经验 + 0.2*学历)"""
    weighted = (
        SKILLS_WEIGHT * skills_match
        + EXPERIENCE_WEIGHT * experience_match
        + EDUCATION_WEIGHT * education_match
    )
    return round_half_up(weighted, SKILLS_WEIGHT + EXPERIENCE_WEIGHT + EDUCATION_WEIGHT)


def calculate_job_match(profile: ResumeProfile, requirements: JobRequirement) -> MatchResult:
    """计算简历与单个岗位要求的匹配结果"""
    if profile is None or requirements is None:
        raise ValueError("简历信息和岗位要求不能为空")

    skills_match = calculate_skills_match(profile.skills, requirements.skills)
    experience_match = calculate_experience_match(profile.experience, requirements.experience)
    education_match = calculate_education_match(profile.education, requirements.education)

    return MatchResult(
        skills_match=skills_match,
        experience_match=experience_match,
        education_match=education_match,
        final_score=calculate_final_score(skills_match, experience_match, education_match),
        matching_skills=get_matching_skills(profile.skills, requirements.skills),
        missing_skills=get_missing_skills(profile.skills, requirements.skills),
    )


def rank_jobs(profile: ResumeProfile, jobs: Iterable[Job], limit: Optional[int] = None) -> List[JobMatch]:
    """按总分降序排列岗位，同分保持输入顺序"""
    matches = [JobMatch(job=job, match=calculate_job_match(profile, job.requirements)) for job in jobs]
    matches.sort(key=lambda m: m.match.final_score, reverse=True)

    if limit is not None:
        matches = matches[:limit]

    app_logger.debug(f"岗位排序完成: 共{len(matches)}个结果")
    return matches
