"""
租户管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from hostel.models.ontology import Tenant
from hostel.models.schemas import ReceiptResponse, TenantFields, TenantListItem
from hostel.routers.deps import get_receipt_composer, get_store, http_error
from hostel.services.entity_store import EntityStore
from hostel.services.errors import HostelError, NotFoundError
from hostel.services.receipt_service import ReceiptComposer
from hostel.services.report_service import ReportService

router = APIRouter(prefix="/tenants", tags=["租户管理"])


@router.get("", response_model=List[TenantListItem])
def list_tenants(store: EntityStore = Depends(get_store)):
    """获取全部租户（附房间号）"""
    return ReportService(store.data).get_tenant_directory()


@router.get("/{tenant_id}", response_model=Tenant, response_model_by_alias=False)
def get_tenant(tenant_id: str, store: EntityStore = Depends(get_store)):
    """获取单个租户"""
    try:
        return store.get_tenant(tenant_id)
    except HostelError as e:
        raise http_error(e)


@router.put("/{tenant_id}", response_model=Tenant, response_model_by_alias=False)
def update_tenant(tenant_id: str, data: TenantFields, store: EntityStore = Depends(get_store)):
    """修改租户信息（不可换房）"""
    try:
        return store.edit_tenant(tenant_id, data)
    except HostelError as e:
        raise http_error(e)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_tenant(tenant_id: str, store: EntityStore = Depends(get_store)):
    """移除租户"""
    try:
        store.remove_tenant(tenant_id)
    except HostelError as e:
        raise http_error(e)


@router.get("/{tenant_id}/receipt", response_model=ReceiptResponse)
def get_receipt(
    tenant_id: str,
    serial: Optional[int] = Query(None, ge=0, le=ReceiptComposer.SERIAL_MAX),
    store: EntityStore = Depends(get_store),
    composer: ReceiptComposer = Depends(get_receipt_composer),
):
    """生成租金收据"""
    data = store.data
    tenant = data.find_tenant(tenant_id)
    if tenant is None:
        raise http_error(NotFoundError("Tenant", tenant_id))
    room = data.find_room(tenant.room_id)
    return composer.compose(tenant, room, data.settings, serial=serial).to_dict()
