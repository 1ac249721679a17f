"""
Pydantic 模式定义
用于 API 请求/响应验证
"""
from datetime import date
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============== 楼层 Schemas ==============

class FloorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class FloorUpdate(FloorCreate):
    pass


# ============== 房间 Schemas ==============

class RoomCreate(BaseModel):
    number: str = Field(..., min_length=1, max_length=20)
    # 容量下限由 EntityStore 校验（InvalidCapacityError）
    capacity: int


class RoomUpdate(RoomCreate):
    pass


class RoomOccupancy(BaseModel):
    id: str
    number: str
    floor_id: str
    capacity: int
    occupied: int
    vacant_beds: int
    is_full: bool


class FloorLayout(BaseModel):
    id: str
    name: str
    rooms: List[RoomOccupancy] = []


# ============== 租户 Schemas ==============

class TenantFields(BaseModel):
    """租户可编辑字段（入住和编辑共用）"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    mobile: str = Field(..., pattern=r"^[0-9]{10}$")
    rent: int = Field(..., ge=0)
    joining_date: date = Field(default_factory=date.today)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("租户姓名不能为空")
        return v


class TenantListItem(BaseModel):
    id: str
    name: str
    mobile: str
    rent: int
    joining_date: date
    room_id: str
    room_number: str


class RoomDetail(RoomOccupancy):
    # 入住前的预检查（EntityStore.has_vacancy）
    has_vacancy: bool
    tenants: List[TenantListItem] = []


# ============== 报表 Schemas ==============

class DashboardStats(BaseModel):
    total_rooms: int
    total_tenants: int
    total_capacity: int
    total_revenue: int
    occupancy_rate: int


class OccupancySlice(BaseModel):
    name: str
    value: int


# ============== 收据 Schemas ==============

class ReceiptResponse(BaseModel):
    receipt_no: str
    issued_on: str
    tenant_name: str
    tenant_mobile: str
    room_number: str
    amount: int
    joining_date: date
    hostel_name: str
    address: str
    contact_number: str
    signature_text: Optional[str] = None
    upi_link: str
    qr_image: str
    uses_custom_qr: bool


# ============== AI 助手 Schemas ==============

class ChatRequest(BaseModel):
    content: str = Field(..., min_length=1)


class ChatMessageResponse(BaseModel):
    role: str
    text: str
    timestamp: int


class ChatResponse(BaseModel):
    reply: ChatMessageResponse
    messages: List[ChatMessageResponse]
