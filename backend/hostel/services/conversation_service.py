"""
会话服务 - AI 助手的聊天记录
仅保存在内存中，不属于持久化聚合
"""
import threading
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from hostel.services.llm_service import AdviceService

GREETING = "Hello! I am your Hari PG Assistant. How can I help you manage the hostel today?"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ChatMessage:
    """会话消息"""
    role: str  # 'user' | 'model'
    text: str
    timestamp: int  # 毫秒时间戳

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ChatTranscript:
    """
    聊天记录

    ask() 追加用户消息、调用 AdviceService、再追加模型回复；
    hostel_name 由调用方按当前设置传入，改名后立即生效；
    丢弃返回值即可视为取消，不影响任何存储数据
    """

    def __init__(self, advisor: AdviceService, greeting: Optional[str] = GREETING):
        self.advisor = advisor
        self.greeting = greeting
        self._messages: List[ChatMessage] = []
        self._lock = threading.Lock()
        self._seed()

    def _seed(self) -> None:
        if self.greeting:
            self._messages.append(ChatMessage(role="model", text=self.greeting, timestamp=_now_ms()))

    @property
    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def ask(self, question: str, context: str, hostel_name: Optional[str] = None) -> ChatMessage:
        """发送问题，返回模型回复"""
        question = question.strip()
        if not question:
            raise ValueError("消息内容不能为空")

        with self._lock:
            self._messages.append(ChatMessage(role="user", text=question, timestamp=_now_ms()))

        reply_text = self.advisor.generate_advice(question, context, hostel_name=hostel_name)
        reply = ChatMessage(role="model", text=reply_text, timestamp=_now_ms())

        with self._lock:
            self._messages.append(reply)
        return reply

    def clear(self) -> None:
        """清空聊天记录，只保留问候语"""
        with self._lock:
            self._messages.clear()
            self._seed()
