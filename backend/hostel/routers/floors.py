"""
楼层管理路由
"""
from typing import List
from fastapi import APIRouter, Depends, status

from hostel.models.ontology import Floor, Room
from hostel.models.schemas import FloorCreate, FloorUpdate, FloorLayout, RoomCreate
from hostel.routers.deps import get_store, http_error
from hostel.services.entity_store import EntityStore
from hostel.services.errors import HostelError
from hostel.services.report_service import ReportService

router = APIRouter(prefix="/floors", tags=["楼层管理"])


@router.get("", response_model=List[FloorLayout])
def list_floors(store: EntityStore = Depends(get_store)):
    """获取楼层布局（含房间入住情况）"""
    return ReportService(store.data).get_floor_layout()


@router.post("", response_model=Floor, response_model_by_alias=False,
             status_code=status.HTTP_201_CREATED)
def create_floor(data: FloorCreate, store: EntityStore = Depends(get_store)):
    """新建楼层"""
    return store.add_floor(data.name)


@router.put("/{floor_id}", response_model=Floor, response_model_by_alias=False)
def rename_floor(floor_id: str, data: FloorUpdate, store: EntityStore = Depends(get_store)):
    """修改楼层名称"""
    try:
        return store.rename_floor(floor_id, data.name)
    except HostelError as e:
        raise http_error(e)


@router.delete("/{floor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_floor(floor_id: str, store: EntityStore = Depends(get_store)):
    """删除楼层（级联删除房间和租户）"""
    try:
        store.delete_floor(floor_id)
    except HostelError as e:
        raise http_error(e)


@router.post("/{floor_id}/rooms", response_model=Room, response_model_by_alias=False,
             status_code=status.HTTP_201_CREATED)
def create_room(floor_id: str, data: RoomCreate, store: EntityStore = Depends(get_store)):
    """在楼层下新建房间"""
    try:
        return store.add_room(floor_id, data.number, data.capacity)
    except HostelError as e:
        raise http_error(e)
