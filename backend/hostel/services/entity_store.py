"""
实体存储 - 聚合变更的唯一入口
管理 Floor / Room / Tenant / HostelSettings，维护跨集合不变量

每个操作都是原子的：
1. 在当前聚合的深拷贝上校验并修改（包括正向列表的同步更新）
2. 调用 PersistenceAdapter.save 保存完整新聚合
3. 保存成功后才替换内存中的聚合

任何错误（NotFound / InvalidCapacity / RoomFull / 持久化异常）都不会留下部分修改
"""
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterable, Iterator, Mapping, Optional, Union

from hostel.models.events import EventType, StoreChangedData
from hostel.models.ontology import Floor, HostelData, HostelSettings, Room, Tenant
from hostel.models.schemas import TenantFields
from hostel.services.errors import InvalidCapacityError, NotFoundError, RoomFullError
from hostel.services.event_bus import Event, event_bus
from hostel.services.id_generator import IdGenerator
from hostel.services.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

TenantInput = Union[TenantFields, Mapping]
SettingsInput = Union[HostelSettings, Mapping]


class EntityStore:
    """
    实体存储

    支持依赖注入以便于测试：
    - id_generator: ID 生成器
    - event_publisher: 事件发布器
    - data: 初始聚合（默认从 persistence.load() 读取）
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        id_generator: Optional[IdGenerator] = None,
        event_publisher: Callable[[Event], None] = None,
        data: Optional[HostelData] = None,
    ):
        self._persistence = persistence
        self._ids = id_generator or IdGenerator()
        self._publish_event = event_publisher or event_bus.publish
        self._lock = threading.RLock()
        self._data = data if data is not None else persistence.load()

    # ============== 读取 ==============

    @property
    def data(self) -> HostelData:
        """当前聚合的快照（副本，修改不会影响存储）"""
        with self._lock:
            return self._data.model_copy(deep=True)

    def get_floor(self, floor_id: str) -> Floor:
        with self._lock:
            return self._require_floor(self._data, floor_id).model_copy(deep=True)

    def get_room(self, room_id: str) -> Room:
        with self._lock:
            return self._require_room(self._data, room_id).model_copy(deep=True)

    def get_tenant(self, tenant_id: str) -> Tenant:
        with self._lock:
            return self._require_tenant(self._data, tenant_id).model_copy(deep=True)

    def has_vacancy(self, room_id: str) -> bool:
        """房间是否还有空床位（入住前的预检查）"""
        with self._lock:
            room = self._require_room(self._data, room_id)
            return self._occupancy(self._data, room_id) < room.capacity

    # ============== 楼层操作 ==============

    def add_floor(self, name: str) -> Floor:
        """新建楼层，追加到楼层序列末尾"""
        with self._transaction() as draft:
            floor = Floor(id=self._mint_id(draft.floors), name=name)
            draft.floors.append(floor)

        logger.info(f"Floor {floor.id} '{name}' created")
        self._emit(EventType.FLOOR_CREATED, StoreChangedData("floor", floor.id))
        return floor.model_copy(deep=True)

    def rename_floor(self, floor_id: str, name: str) -> Floor:
        """修改楼层名称"""
        with self._transaction() as draft:
            floor = self._require_floor(draft, floor_id)
            floor.name = name

        logger.info(f"Floor {floor_id} renamed to '{name}'")
        self._emit(EventType.FLOOR_RENAMED, StoreChangedData("floor", floor_id))
        return floor.model_copy(deep=True)

    def delete_floor(self, floor_id: str) -> None:
        """
        删除楼层，级联删除其下所有房间及房间内所有租户

        先根据回指字段计算待删除的房间和租户集合，再统一移除
        """
        with self._transaction() as draft:
            self._require_floor(draft, floor_id)
            doomed_rooms = {r.id for r in draft.rooms if r.floor_id == floor_id}
            doomed_tenants = {t.id for t in draft.tenants if t.room_id in doomed_rooms}

            draft.floors = [f for f in draft.floors if f.id != floor_id]
            draft.rooms = [r for r in draft.rooms if r.id not in doomed_rooms]
            draft.tenants = [t for t in draft.tenants if t.id not in doomed_tenants]

        logger.info(
            f"Floor {floor_id} deleted with {len(doomed_rooms)} rooms "
            f"and {len(doomed_tenants)} tenants"
        )
        self._emit(EventType.FLOOR_DELETED, StoreChangedData(
            "floor", floor_id,
            removed_room_ids=sorted(doomed_rooms),
            removed_tenant_ids=sorted(doomed_tenants),
        ))

    # ============== 房间操作 ==============

    def add_room(self, floor_id: str, number: str, capacity: int) -> Room:
        """在楼层下新建房间"""
        with self._transaction() as draft:
            floor = self._require_floor(draft, floor_id)
            self._check_capacity(capacity)
            room = Room(
                id=self._mint_id(draft.rooms),
                number=number,
                floor_id=floor_id,
                capacity=capacity,
            )
            draft.rooms.append(room)
            floor.room_ids.append(room.id)

        logger.info(f"Room {room.id} '{number}' (capacity {capacity}) added to floor {floor_id}")
        self._emit(EventType.ROOM_CREATED, StoreChangedData("room", room.id))
        return room.model_copy(deep=True)

    def edit_room(self, room_id: str, number: str, capacity: int) -> Room:
        """
        修改房间号和容量

        容量低于当前入住人数时不驱逐、不拒绝已有租户（保留的既有策略）
        """
        with self._transaction() as draft:
            room = self._require_room(draft, room_id)
            self._check_capacity(capacity)
            room.number = number
            room.capacity = capacity
            occupied = self._occupancy(draft, room_id)

        if occupied > capacity:
            logger.warning(f"Room {room_id} now holds {occupied} tenants over capacity {capacity}")
        logger.info(f"Room {room_id} updated: number='{number}', capacity={capacity}")
        self._emit(EventType.ROOM_UPDATED, StoreChangedData("room", room_id))
        return room.model_copy(deep=True)

    def delete_room(self, room_id: str) -> None:
        """删除房间，同时从楼层列表中移除并删除其中所有租户"""
        with self._transaction() as draft:
            self._require_room(draft, room_id)
            doomed_tenants = {t.id for t in draft.tenants if t.room_id == room_id}

            for floor in draft.floors:
                if room_id in floor.room_ids:
                    floor.room_ids = [rid for rid in floor.room_ids if rid != room_id]
            draft.rooms = [r for r in draft.rooms if r.id != room_id]
            draft.tenants = [t for t in draft.tenants if t.id not in doomed_tenants]

        logger.info(f"Room {room_id} deleted with {len(doomed_tenants)} tenants")
        self._emit(EventType.ROOM_DELETED, StoreChangedData(
            "room", room_id, removed_tenant_ids=sorted(doomed_tenants),
        ))

    # ============== 租户操作 ==============

    def assign_tenant(self, room_id: str, fields: TenantInput) -> Tenant:
        """向有空床位的房间分配新租户"""
        fields = self._tenant_fields(fields)
        with self._transaction() as draft:
            room = self._require_room(draft, room_id)
            if self._occupancy(draft, room_id) >= room.capacity:
                raise RoomFullError(room_id, room.capacity)

            tenant = Tenant(id=self._mint_id(draft.tenants), room_id=room_id, **fields.model_dump())
            draft.tenants.append(tenant)
            room.tenant_ids.append(tenant.id)

        logger.info(f"Tenant {tenant.id} '{tenant.name}' assigned to room {room_id}")
        self._emit(EventType.TENANT_ASSIGNED, StoreChangedData("tenant", tenant.id))
        return tenant.model_copy(deep=True)

    def edit_tenant(self, tenant_id: str, fields: TenantInput) -> Tenant:
        """替换租户的可编辑字段；所在房间不可更改，也不重新检查容量"""
        fields = self._tenant_fields(fields)
        with self._transaction() as draft:
            tenant = self._require_tenant(draft, tenant_id)
            for key, value in fields.model_dump().items():
                setattr(tenant, key, value)

        logger.info(f"Tenant {tenant_id} updated")
        self._emit(EventType.TENANT_UPDATED, StoreChangedData("tenant", tenant_id))
        return tenant.model_copy(deep=True)

    def remove_tenant(self, tenant_id: str) -> None:
        """移除租户并从房间列表中删除其 ID"""
        with self._transaction() as draft:
            self._require_tenant(draft, tenant_id)
            draft.tenants = [t for t in draft.tenants if t.id != tenant_id]
            for room in draft.rooms:
                if tenant_id in room.tenant_ids:
                    room.tenant_ids = [tid for tid in room.tenant_ids if tid != tenant_id]

        logger.info(f"Tenant {tenant_id} removed")
        self._emit(EventType.TENANT_REMOVED, StoreChangedData("tenant", tenant_id))

    # ============== 设置 ==============

    def update_settings(self, new_settings: SettingsInput) -> HostelSettings:
        """整体替换宿舍设置"""
        if not isinstance(new_settings, HostelSettings):
            new_settings = HostelSettings.model_validate(new_settings)
        with self._transaction() as draft:
            draft.settings = new_settings.model_copy(deep=True)

        logger.info("Hostel settings updated")
        self._emit(EventType.SETTINGS_UPDATED, StoreChangedData("settings"))
        return new_settings.model_copy(deep=True)

    # ============== 内部方法 ==============

    @contextmanager
    def _transaction(self) -> Iterator[HostelData]:
        """在副本上执行修改，保存成功后才提交到内存"""
        with self._lock:
            draft = self._data.model_copy(deep=True)
            yield draft
            self._persistence.save(draft)
            self._data = draft

    def _mint_id(self, existing: Iterable) -> str:
        """生成在目标集合中未被占用的 ID"""
        taken = {item.id for item in existing}
        candidate = self._ids.new_id()
        while candidate in taken:
            candidate = self._ids.new_id()
        return candidate

    def _emit(self, event_type: EventType, payload: StoreChangedData) -> None:
        try:
            self._publish_event(Event(
                event_type=event_type.value,
                timestamp=datetime.now(),
                data=payload.to_dict(),
                source="entity_store",
            ))
        except Exception as e:
            logger.error(f"Failed to publish {event_type.value}: {e}", exc_info=True)

    @staticmethod
    def _tenant_fields(fields: TenantInput) -> TenantFields:
        if isinstance(fields, TenantFields):
            return fields
        return TenantFields.model_validate(dict(fields))

    @staticmethod
    def _check_capacity(capacity: int) -> None:
        if capacity < 1:
            raise InvalidCapacityError(capacity)

    @staticmethod
    def _occupancy(data: HostelData, room_id: str) -> int:
        return sum(1 for t in data.tenants if t.room_id == room_id)

    @staticmethod
    def _require_floor(data: HostelData, floor_id: str) -> Floor:
        floor = data.find_floor(floor_id)
        if floor is None:
            raise NotFoundError("Floor", floor_id)
        return floor

    @staticmethod
    def _require_room(data: HostelData, room_id: str) -> Room:
        room = data.find_room(room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        return room

    @staticmethod
    def _require_tenant(data: HostelData, tenant_id: str) -> Tenant:
        tenant = data.find_tenant(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant", tenant_id)
        return tenant
