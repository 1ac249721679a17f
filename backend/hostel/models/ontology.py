"""
本体对象定义 (Ontology Objects)
楼层、房间、租户与宿舍设置构成一个聚合 (HostelData)，作为一致性单元整体持久化

引用方向约定：
- 子对象的回指字段 (Room.floor_id, Tenant.room_id) 是权威数据
- 父对象的正向列表 (Floor.room_ids, Room.tenant_ids) 是派生缓存，
  每次变更都必须同步更新
"""
from datetime import date
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DEFAULT_HOSTEL_NAME = "Hari PG Hostel"


class OntologyModel(BaseModel):
    """本体对象基类：Python 侧使用 snake_case，持久化 JSON 使用 camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============== 本体对象定义 ==============

class Floor(OntologyModel):
    """楼层对象，room_ids 按插入顺序即展示顺序"""
    id: str
    name: str
    # 旧版记录使用 "rooms" 作为键名
    room_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("roomIds", "rooms", "room_ids"),
        serialization_alias="roomIds",
    )


class Room(OntologyModel):
    """房间对象，capacity 为床位数"""
    id: str
    number: str
    floor_id: str
    capacity: int
    tenant_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tenantIds", "tenants", "tenant_ids"),
        serialization_alias="tenantIds",
    )


class Tenant(OntologyModel):
    """租户对象，room_id 分配后不可变更"""
    id: str
    name: str
    mobile: str
    rent: int
    joining_date: date
    room_id: str


class HostelSettings(OntologyModel):
    """宿舍设置（单例），用于收据抬头和收款二维码"""
    hostel_name: str = DEFAULT_HOSTEL_NAME
    address: str = ""
    upi_id: str = ""
    contact_number: str = ""
    signature_text: Optional[str] = None
    # 用户上传的收款码图片（data URL），存在时优先于动态生成的二维码
    custom_qr_image: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("customQrImage", "customQrCode", "custom_qr_image"),
        serialization_alias="customQrImage",
    )


class HostelData(OntologyModel):
    """聚合根：floors / rooms / tenants / settings"""
    floors: List[Floor] = Field(default_factory=list)
    rooms: List[Room] = Field(default_factory=list)
    tenants: List[Tenant] = Field(default_factory=list)
    settings: HostelSettings = Field(default_factory=HostelSettings)

    # ============== 查询 ==============

    def find_floor(self, floor_id: str) -> Optional[Floor]:
        return next((f for f in self.floors if f.id == floor_id), None)

    def find_room(self, room_id: str) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    def find_tenant(self, tenant_id: str) -> Optional[Tenant]:
        return next((t for t in self.tenants if t.id == tenant_id), None)

    def to_record(self) -> dict:
        """序列化为持久化格式 (camelCase JSON)"""
        return self.model_dump(mode="json", by_alias=True)

    # ============== 一致性检查 ==============

    def rebuild_forward_lists(self) -> List[str]:
        """
        按回指字段重建 Floor.room_ids 和 Room.tenant_ids

        保留原有顺序，删除不存在或不属于该对象的 ID，缺失的 ID 追加到末尾；
        返回被修正的对象描述列表
        """
        repaired: List[str] = []

        for floor in self.floors:
            expected = [r.id for r in self.rooms if r.floor_id == floor.id]
            rebuilt = _reconcile(floor.room_ids, expected)
            if rebuilt != floor.room_ids:
                repaired.append(f"floor {floor.id} room list {floor.room_ids} -> {rebuilt}")
                floor.room_ids = rebuilt

        for room in self.rooms:
            expected = [t.id for t in self.tenants if t.room_id == room.id]
            rebuilt = _reconcile(room.tenant_ids, expected)
            if rebuilt != room.tenant_ids:
                repaired.append(f"room {room.id} tenant list {room.tenant_ids} -> {rebuilt}")
                room.tenant_ids = rebuilt

        return repaired

    def check_integrity(self) -> List[str]:
        """
        检查聚合不变量，返回违规描述列表（空列表表示一致）

        1. 引用完整性：Tenant.room_id / Room.floor_id 指向存在的对象
        2. 正向列表与回指字段一致且无重复
        3. 各集合内 ID 唯一
        """
        problems: List[str] = []

        for label, items in (("floor", self.floors), ("room", self.rooms), ("tenant", self.tenants)):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                problems.append(f"duplicate {label} ids")

        floor_ids = {f.id for f in self.floors}
        room_ids = {r.id for r in self.rooms}

        for room in self.rooms:
            if room.floor_id not in floor_ids:
                problems.append(f"room {room.id} references missing floor {room.floor_id}")
            if room.capacity < 1:
                problems.append(f"room {room.id} has invalid capacity {room.capacity}")
        for tenant in self.tenants:
            if tenant.room_id not in room_ids:
                problems.append(f"tenant {tenant.id} references missing room {tenant.room_id}")

        for floor in self.floors:
            expected = {r.id for r in self.rooms if r.floor_id == floor.id}
            if len(floor.room_ids) != len(set(floor.room_ids)) or set(floor.room_ids) != expected:
                problems.append(f"floor {floor.id} room list out of sync")
        for room in self.rooms:
            expected = {t.id for t in self.tenants if t.room_id == room.id}
            if len(room.tenant_ids) != len(set(room.tenant_ids)) or set(room.tenant_ids) != expected:
                problems.append(f"room {room.id} tenant list out of sync")

        return problems


def _reconcile(current: List[str], expected: List[str]) -> List[str]:
    wanted = set(expected)
    kept = list(dict.fromkeys(i for i in current if i in wanted))
    return kept + [i for i in expected if i not in kept]


def default_hostel_data() -> HostelData:
    """首次运行时的内置数据集：两层楼、四个房间、无租户"""
    return HostelData(
        floors=[
            Floor(id="f1", name="Ground Floor", room_ids=["r1", "r2"]),
            Floor(id="f2", name="First Floor", room_ids=["r3", "r4"]),
        ],
        rooms=[
            Room(id="r1", number="101", floor_id="f1", capacity=2),
            Room(id="r2", number="102", floor_id="f1", capacity=3),
            Room(id="r3", number="201", floor_id="f2", capacity=2),
            Room(id="r4", number="202", floor_id="f2", capacity=1),
        ],
        tenants=[],
        settings=HostelSettings(),
    )
