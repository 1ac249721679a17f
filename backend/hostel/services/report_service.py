"""
报表服务 - 只读统计投影
所有统计都基于传入的聚合快照即时计算，不缓存、不持久化
"""
import json
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from hostel.models.ontology import HostelData, Tenant
from hostel.services.errors import NotFoundError


class ReportService:
    """报表服务"""

    def __init__(self, data: HostelData):
        self.data = data

    # ============== 基础统计 ==============

    def total_rooms(self) -> int:
        return len(self.data.rooms)

    def total_tenants(self) -> int:
        return len(self.data.tenants)

    def total_capacity(self) -> int:
        return sum(room.capacity for room in self.data.rooms)

    def total_revenue(self) -> int:
        """月租金合计"""
        return sum(tenant.rent for tenant in self.data.tenants)

    def occupancy_rate(self) -> int:
        """入住率（百分比，四舍五入到整数）；总容量为 0 时返回 0"""
        capacity = self.total_capacity()
        if capacity <= 0:
            return 0
        rate = Decimal(self.total_tenants() * 100) / Decimal(capacity)
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def tenants_in_room(self, room_id: str) -> List[Tenant]:
        """房间内的租户，按入住顺序"""
        return [t for t in self.data.tenants if t.room_id == room_id]

    # ============== 仪表盘 ==============

    def get_dashboard_stats(self) -> dict:
        """获取仪表盘统计数据"""
        return {
            'total_rooms': self.total_rooms(),
            'total_tenants': self.total_tenants(),
            'total_capacity': self.total_capacity(),
            'total_revenue': self.total_revenue(),
            'occupancy_rate': self.occupancy_rate(),
        }

    def get_occupancy_breakdown(self) -> List[dict]:
        """已住/空闲床位分布（仪表盘图表数据）"""
        occupied = self.total_tenants()
        return [
            {'name': 'Occupied', 'value': occupied},
            {'name': 'Vacant', 'value': self.total_capacity() - occupied},
        ]

    # ============== 房间与楼层 ==============

    def get_room_occupancy(self, room_id: str) -> dict:
        """单个房间的入住情况"""
        room = self.data.find_room(room_id)
        if room is None:
            raise NotFoundError("Room", room_id)

        occupied = len(self.tenants_in_room(room_id))
        return {
            'id': room.id,
            'number': room.number,
            'floor_id': room.floor_id,
            'capacity': room.capacity,
            'occupied': occupied,
            'vacant_beds': max(0, room.capacity - occupied),
            'is_full': occupied >= room.capacity,
        }

    def get_floor_layout(self) -> List[dict]:
        """楼层布局：楼层按顺序排列，房间按楼层 room_ids 顺序排列"""
        layout = []
        for floor in self.data.floors:
            rooms = [
                self.get_room_occupancy(room_id)
                for room_id in floor.room_ids
                if self.data.find_room(room_id) is not None
            ]
            layout.append({'id': floor.id, 'name': floor.name, 'rooms': rooms})
        return layout

    def get_tenant_directory(self) -> List[dict]:
        """全部租户列表，附带房间号"""
        directory = []
        for tenant in self.data.tenants:
            room = self.data.find_room(tenant.room_id)
            directory.append({
                **tenant.model_dump(),
                'room_number': room.number if room else 'N/A',
            })
        return directory

    # ============== AI 助手上下文 ==============

    def get_advice_context(self) -> str:
        """提供给 AI 助手的统计快照（JSON 字符串）"""
        return json.dumps({
            'totalRooms': self.total_rooms(),
            'occupancy': self.total_tenants(),
            'revenue': self.total_revenue(),
            'tenants': [
                {'name': t.name, 'rent': t.rent, 'room': t.room_id}
                for t in self.data.tenants
            ],
        }, ensure_ascii=False)
