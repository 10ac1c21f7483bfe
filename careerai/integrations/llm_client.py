"""DeepSeek API集成模块"""

from typing import Dict, List, Optional, Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..utils.config import get_settings
from ..utils.logger import ai_logger

settings = get_settings()


class LLMAPIError(Exception):
    """大模型API异常"""
    pass


class _RetryableError(LLMAPIError):
    """可重试的网络/服务端错误"""
    pass


class DeepSeekClient:
    """DeepSeek API客户端

    对外只暴露 generate_text(prompt) -> text，业务层可替换为任意实现。
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.llm.api_key
        self.base_url = base_url or settings.llm.base_url
        self.model = model or settings.llm.model
        self.timeout = timeout or settings.llm.timeout
        self.max_retries = settings.llm.max_retries

        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            }
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @retry(
        retry=retry_if_exception_type(_RetryableError),
        stop=stop_after_attempt(settings.llm.max_retries),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True
    )
    async def _make_request(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        """发送API请求"""
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.get("temperature", 0.7),
            "max_tokens": kwargs.get("max_tokens", 1000),
            "stream": False
        }

        ai_logger.info(f"发送DeepSeek API请求: {self.model}")

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            ai_logger.error(f"DeepSeek API HTTP错误: {e.response.status_code} - {e.response.text}")
            if e.response.status_code >= 500 or e.response.status_code == 429:
                raise _RetryableError(f"API请求失败: {e.response.status_code}")
            raise LLMAPIError(f"API请求失败: {e.response.status_code}")
        except httpx.RequestError as e:
            ai_logger.error(f"DeepSeek API请求错误: {str(e)}")
            raise _RetryableError(f"网络请求失败: {str(e)}")

        try:
            result = response.json()
        except ValueError as e:
            raise LLMAPIError(f"AI返回内容不是JSON: {str(e)}")
        if not isinstance(result, dict):
            raise LLMAPIError("AI返回格式错误: 响应不是JSON对象")

        ai_logger.info(f"DeepSeek API响应成功, tokens: {result.get('usage', {})}")

        return result

    async def generate_text(self, prompt: str, temperature: float = 0.7, max_tokens: int = 1000) -> str:
        """根据提示词生成文本"""
        if not self.is_configured:
            raise LLMAPIError("未配置DEEPSEEK_API_KEY")

        messages = [{"role": "user", "content": prompt}]
        response = await self._make_request(messages, temperature=temperature, max_tokens=max_tokens)

        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMAPIError(f"AI返回格式错误: {str(e)}")

        return content or ""

    async def close(self):
        """关闭客户端"""
        await self.client.aclose()


# 全局API实例
_client_instance = None


def get_llm_client() -> DeepSeekClient:
    """获取DeepSeek客户端实例"""
    global _client_instance
    if _client_instance is None:
        _client_instance = DeepSeekClient()
    return _client_instance


async def close_llm_client():
    """关闭客户端实例"""
    global _client_instance
    if _client_instance:
        await _client_instance.close()
        _client_instance = None
