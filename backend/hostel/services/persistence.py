"""
持久化适配器 - 快照持久化
整个 HostelData 聚合序列化为 JSON，保存在 app_state 表中以固定键标识的一行

加载规则：
- 记录不存在（首次运行）：返回内置默认数据集
- 记录缺少 settings（旧版数据）：合并默认设置，其他字段保持不变
- 记录损坏（非法 JSON 或校验失败）：记录警告并回退到默认数据集
- 正向列表与回指字段不一致：按回指字段重建并记录警告
"""
import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from hostel.config import settings
from hostel.database import SessionLocal
from hostel.models.ontology import HostelData, HostelSettings, default_hostel_data
from hostel.models.storage import AppState

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    """
    聚合快照的读写

    支持依赖注入以便于测试：
    - session_factory: 数据库会话工厂
    - key: 记录键名，默认 settings.STORE_KEY
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal,
                 key: Optional[str] = None):
        self._session_factory = session_factory
        self.key = key or settings.STORE_KEY

    def load(self) -> HostelData:
        """读取持久化记录，不存在时返回默认数据集"""
        db = self._session_factory()
        try:
            record = db.get(AppState, self.key)
            payload = record.payload if record else None
        finally:
            db.close()

        if payload is None:
            logger.info(f"No stored record under '{self.key}', starting from default data")
            return default_hostel_data()

        return self.deserialize(payload)

    def save(self, data: HostelData) -> None:
        """序列化完整聚合并覆盖持久化记录"""
        payload = self.serialize(data)
        db = self._session_factory()
        try:
            record = db.get(AppState, self.key)
            if record is None:
                db.add(AppState(key=self.key, payload=payload))
            else:
                record.payload = payload
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ============== 序列化 ==============

    @staticmethod
    def serialize(data: HostelData) -> str:
        return json.dumps(data.to_record(), ensure_ascii=False)

    def deserialize(self, payload: str) -> HostelData:
        """解析记录内容，应用迁移规则；无法解析时回退到默认数据集"""
        try:
            raw = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Stored record '{self.key}' is not valid JSON ({e}), using default data")
            return default_hostel_data()

        if not isinstance(raw, dict):
            logger.warning(f"Stored record '{self.key}' is not an object, using default data")
            return default_hostel_data()

        if raw.get("settings") is None:
            # 旧版记录没有 settings 字段
            logger.info(f"Migrating record '{self.key}': adding default settings")
            raw = {**raw, "settings": HostelSettings().model_dump(mode="json", by_alias=True)}

        try:
            data = HostelData.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Stored record '{self.key}' failed validation "
                f"({e.error_count()} errors), using default data"
            )
            return default_hostel_data()

        # 回指字段是权威数据，正向列表按其重建（旧版记录可能残留已删除房间的 ID）
        repaired = data.rebuild_forward_lists()
        if repaired:
            logger.warning(f"Stored record '{self.key}' forward lists rebuilt: {'; '.join(repaired)}")

        problems = data.check_integrity()
        if problems:
            logger.error(f"Stored record '{self.key}' is inconsistent: {'; '.join(problems)}")

        return data
