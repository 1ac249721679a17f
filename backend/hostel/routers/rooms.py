"""
房间管理路由
"""
from fastapi import APIRouter, Depends, status

from hostel.models.ontology import Room, Tenant
from hostel.models.schemas import RoomDetail, RoomUpdate, TenantFields
from hostel.routers.deps import get_store, http_error
from hostel.services.entity_store import EntityStore
from hostel.services.errors import HostelError
from hostel.services.report_service import ReportService

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("/{room_id}", response_model=RoomDetail)
def get_room(room_id: str, store: EntityStore = Depends(get_store)):
    """获取房间详情（入住情况和租户列表）"""
    report = ReportService(store.data)
    try:
        occupancy = report.get_room_occupancy(room_id)
        has_vacancy = store.has_vacancy(room_id)
    except HostelError as e:
        raise http_error(e)
    tenants = [
        {**t.model_dump(), 'room_number': occupancy['number']}
        for t in report.tenants_in_room(room_id)
    ]
    return RoomDetail(**occupancy, has_vacancy=has_vacancy, tenants=tenants)


@router.put("/{room_id}", response_model=Room, response_model_by_alias=False)
def update_room(room_id: str, data: RoomUpdate, store: EntityStore = Depends(get_store)):
    """修改房间号和容量（不会驱逐已有租户）"""
    try:
        return store.edit_room(room_id, data.number, data.capacity)
    except HostelError as e:
        raise http_error(e)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: str, store: EntityStore = Depends(get_store)):
    """删除房间及其租户"""
    try:
        store.delete_room(room_id)
    except HostelError as e:
        raise http_error(e)


@router.post("/{room_id}/tenants", response_model=Tenant, response_model_by_alias=False,
             status_code=status.HTTP_201_CREATED)
def assign_tenant(room_id: str, data: TenantFields, store: EntityStore = Depends(get_store)):
    """向房间分配新租户"""
    try:
        return store.assign_tenant(room_id, data)
    except HostelError as e:
        raise http_error(e)
