"""辅助函数模块"""

import re
import json
from typing import Any, List, Optional


# 技能别名映射(仅做精确别名替换，不做同义词扩展)
# 只把短写法映射到长写法，避免子串匹配误命中(如go命中mongodb)
SKILL_ALIASES = {
    'js': 'javascript',
    'ts': 'typescript',
    'py': 'python',
    'go': 'golang',
    'reactjs': 'react',
    'vuejs': 'vue.js',
    'nodejs': 'node.js',
    'expressjs': 'express.js',
    'postgres': 'postgresql',
    'k8s': 'kubernetes',
}


def extract_email(text: str) -> Optional[str]:
    """从文本中提取邮箱地址"""
    email_pattern = r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}'
    matches = re.findall(email_pattern, text)
    return matches[0] if matches else None


def extract_phone(text: str) -> Optional[str]:
    """从文本中提取电话号码"""
    phone_patterns = [
        r'\+?1?[-.\s]?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}',  # 北美格式
        r'\+?[0-9]{1,4}[-.\s]?[0-9]{3,4}[-.\s]?[0-9]{3,4}[-.\s]?[0-9]{3,4}',  # 国际格式
    ]

    for pattern in phone_patterns:
        match = re.search(pattern, text)
        if match:
            return match.group(0).strip()

    return None


def is_likely_name(line: str) -> bool:
    """判断一行文本是否像英文姓名"""
    return (
        bool(re.match(r'^[A-Z][a-z]+ [A-Z][a-z]+', line))
        and len(line) < 50
        and '@' not in line
        and 'http' not in line
        and 'www' not in line
    )


def extract_name(text: str, max_lines: int = 5) -> Optional[str]:
    """从简历前几行中提取姓名"""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines[:max_lines]:
        if is_likely_name(line):
            return line
    return None


def clean_json_response(content: str, opening: str = '{', closing: str = '}') -> str:
    """截取AI回复中第一个开括号到最后一个闭括号之间的内容"""
    json_start = content.find(opening)
    json_end = content.rfind(closing)

    if json_start != -1 and json_end != -1:
        return content[json_start:json_end + 1]

    return content


def safe_json_loads(json_str: str, default: Any = None) -> Any:
    """安全的JSON解析"""
    try:
        return json.loads(json_str)
    except (json.JSONDecodeError, TypeError):
        return default


def normalize_skill_name(skill: str) -> str:
    """标准化技能名称(小写并替换别名)"""
    skill_lower = skill.lower().strip()
    return SKILL_ALIASES.get(skill_lower, skill_lower)


def join_non_empty(items: List[Optional[str]], sep: str = ", ") -> str:
    """拼接非空字符串"""
    return sep.join(item for item in items if item)
