"""
领域错误定义
所有错误继承 ValueError，路由层统一转换为 HTTP 状态码
"""


class HostelError(ValueError):
    """宿舍数据操作错误基类"""


class NotFoundError(HostelError):
    """引用的楼层/房间/租户不存在"""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' 不存在")


class InvalidCapacityError(HostelError):
    """房间容量必须至少为 1"""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"房间容量必须至少为 1，当前值: {capacity}")


class RoomFullError(HostelError):
    """房间已满，无法分配新租户"""

    def __init__(self, room_id: str, capacity: int):
        self.room_id = room_id
        self.capacity = capacity
        super().__init__(f"房间 '{room_id}' 已满 (容量 {capacity})")
