"""
领域事件定义 (Domain Events)
每次成功变更聚合后由 EntityStore 发布
"""
from enum import Enum
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any


class EventType(str, Enum):
    """事件类型枚举"""
    # 楼层相关
    FLOOR_CREATED = "floor.created"
    FLOOR_RENAMED = "floor.renamed"
    FLOOR_DELETED = "floor.deleted"

    # 房间相关
    ROOM_CREATED = "room.created"
    ROOM_UPDATED = "room.updated"
    ROOM_DELETED = "room.deleted"

    # 租户相关
    TENANT_ASSIGNED = "tenant.assigned"
    TENANT_UPDATED = "tenant.updated"
    TENANT_REMOVED = "tenant.removed"

    # 设置
    SETTINGS_UPDATED = "settings.updated"


@dataclass
class StoreChangedData:
    """聚合变更事件数据"""
    entity_type: str
    entity_id: Optional[str] = None
    # 级联删除时被一并移除的对象
    removed_room_ids: list = field(default_factory=list)
    removed_tenant_ids: list = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        result = asdict(self)
        result["timestamp"] = self.timestamp.isoformat()
        return result
