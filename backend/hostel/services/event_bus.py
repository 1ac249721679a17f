"""
事件总线 - 进程内发布/订阅
EntityStore 在每次成功变更后发布事件，订阅者（日志、统计刷新等）与存储解耦
"""
import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[["Event"], None]


@dataclass
class Event:
    """存储变更事件"""
    event_type: str
    timestamp: datetime
    data: Dict
    source: str
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def entity_id(self) -> Optional[str]:
        return self.data.get("entity_id")


class EventBus:
    """
    内存级事件总线

    处理器按订阅顺序同步执行
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: Handler) -> None:
        """订阅事件，重复订阅同一处理器会被忽略"""
        with self._lock:
            if handler not in self._handlers[event_type]:
                self._handlers[event_type].append(handler)

    def publish(self, event: Event) -> int:
        """
        发布事件，返回成功执行的处理器数量

        处理器异常只记录日志，不影响其他处理器，也不回滚已提交的变更
        """
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, []))

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {getattr(handler, '__name__', handler)} failed on "
                    f"{event.event_type} ({event.entity_id}): {e}",
                    exc_info=True
                )
        return delivered


# 进程级事件总线，EntityStore 默认发布到这里
event_bus = EventBus()
