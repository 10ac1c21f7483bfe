"""配置管理模块"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()


class LLMConfig(BaseSettings):
    """DeepSeek API配置"""
    model_config = SettingsConfigDict(env_prefix="DEEPSEEK_")

    api_key: Optional[str] = Field(None, description="未配置时所有AI功能走降级逻辑")
    base_url: str = "https://api.deepseek.com/v1"
    model: str = "deepseek-chat"
    timeout: int = 30
    max_retries: int = 3


class DatabaseConfig(BaseSettings):
    """数据库配置"""
    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = "sqlite:///./data/careerai.db"

    @property
    def path(self) -> str:
        return self.url.replace("sqlite:///", "")


class ResumeConfig(BaseSettings):
    """简历处理配置"""
    model_config = SettingsConfigDict(env_prefix="RESUME_")

    min_text_length: int = 50
    match_limit: int = 10


class InterviewConfig(BaseSettings):
    """面试排期配置"""
    model_config = SettingsConfigDict(env_prefix="INTERVIEW_")

    slot_expiry_hours: int = 24
    default_duration_minutes: int = 60
    days_ahead: int = 7
    business_start_hour: int = 9
    business_end_hour: int = 17
    lunch_start_hour: int = 12
    lunch_end_hour: int = 14
    skip_weekends: bool = True
    meeting_base_url: str = "https://meet.google.com"


class AssessmentConfig(BaseSettings):
    """笔试配置"""
    model_config = SettingsConfigDict(env_prefix="ASSESSMENT_")

    time_limit_seconds: int = 900
    passing_score: int = 95
    question_count: int = 15


class AppConfig(BaseSettings):
    """应用配置"""
    model_config = SettingsConfigDict(env_prefix="APP_")

    name: str = "CareerAI"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"
    client_url: str = "http://localhost:5173"


class Settings:
    """全局配置类"""

    def __init__(self):
        self.app = AppConfig()
        self.llm = LLMConfig()
        self.database = DatabaseConfig()
        self.resume = ResumeConfig()
        self.interview = InterviewConfig()
        self.assessment = AssessmentConfig()


# 全局配置实例
settings = Settings()


def get_settings() -> Settings:
    """获取配置实例"""
    return settings


def get_config() -> Settings:
    """获取配置实例(兼容旧调用)"""
    return settings
