"""
ID 生成器
为新建的楼层/房间/租户生成短的不透明字符串 ID
"""
import itertools
import threading
import uuid


class IdGenerator:
    """基于 uuid4 的 ID 生成器，取前 12 位十六进制字符"""

    LENGTH = 12

    def new_id(self) -> str:
        return uuid.uuid4().hex[:self.LENGTH]


class SequentialIdGenerator(IdGenerator):
    """
    递增 ID 生成器：prefix1, prefix2, ...
    结果可预测，主要用于测试
    """

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return f"{self.prefix}{next(self._counter)}"
