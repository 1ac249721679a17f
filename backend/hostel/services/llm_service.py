"""
LLM 服务 - 支持 OpenAI 兼容 API
为宿舍管理员生成建议、起草消息；只读取统计快照，不修改任何数据

调用失败时返回固定的降级文本，从不向调用方抛出异常
"""
import logging
from typing import Optional

from openai import OpenAI

from hostel.config import settings
from hostel.models.ontology import DEFAULT_HOSTEL_NAME

logger = logging.getLogger(__name__)

MISSING_KEY_REPLY = "Please configure your API Key to use the AI Assistant."
EMPTY_REPLY = "I couldn't generate a response at this time."
ERROR_REPLY = "Sorry, I encountered an error communicating with the AI service."


class AdviceService:
    """宿舍管理建议服务"""

    PROMPT_TEMPLATE = """You are an expert Hostel Manager Assistant for "{hostel_name}".

Here is the current data context of the hostel (JSON):
{context}

User Query: {question}

Instructions:
1. Provide helpful, professional advice or draft messages.
2. If asked to draft a message (e.g., for rent), keep it polite but firm.
3. If analyzing data, provide insights on occupancy or revenue.
4. Keep responses concise and actionable.
"""

    def __init__(self, client: Optional[OpenAI] = None, hostel_name: str = DEFAULT_HOSTEL_NAME):
        """初始化 LLM 客户端；传入 client 时直接使用（便于测试）"""
        self.hostel_name = hostel_name
        self.api_key = settings.OPENAI_API_KEY

        if client is not None:
            self.client = client
            self.enabled = True
        else:
            self.enabled = settings.ENABLE_LLM and bool(self.api_key)
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=settings.OPENAI_BASE_URL,
                timeout=settings.LLM_TIMEOUT
            ) if self.enabled else None

    def is_enabled(self) -> bool:
        """检查 LLM 是否可用"""
        return self.enabled

    def build_prompt(self, question: str, context: str, hostel_name: Optional[str] = None) -> str:
        return self.PROMPT_TEMPLATE.format(
            hostel_name=hostel_name or self.hostel_name,
            context=context,
            question=question,
        )

    def generate_advice(self, question: str, context: str, hostel_name: Optional[str] = None) -> str:
        """
        根据用户问题和数据快照生成建议

        Args:
            question: 用户问题
            context: 统计快照 (JSON 字符串)
            hostel_name: 当前宿舍名称，未指定时使用初始化时的名称

        Returns:
            建议文本；未配置或调用失败时返回降级文本
        """
        if not self.enabled:
            return MISSING_KEY_REPLY

        try:
            response = self.client.chat.completions.create(
                model=settings.LLM_MODEL,
                messages=[{"role": "user", "content": self.build_prompt(question, context, hostel_name)}],
                temperature=settings.LLM_TEMPERATURE,
                max_tokens=settings.LLM_MAX_TOKENS,
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            logger.error(f"LLM API error: {e}")
            return ERROR_REPLY

        return content.strip() if content and content.strip() else EMPTY_REPLY
