"""
宿舍设置路由
收据抬头、收款 UPI、签名和自定义收款码
"""
from fastapi import APIRouter, Depends

from hostel.models.ontology import HostelSettings
from hostel.routers.deps import get_store
from hostel.services.entity_store import EntityStore

router = APIRouter(prefix="/settings", tags=["宿舍设置"])


@router.get("", response_model=HostelSettings, response_model_by_alias=False)
def get_settings(store: EntityStore = Depends(get_store)):
    """获取宿舍设置"""
    return store.data.settings


@router.put("", response_model=HostelSettings, response_model_by_alias=False)
def update_settings(data: HostelSettings, store: EntityStore = Depends(get_store)):
    """整体替换宿舍设置"""
    return store.update_settings(data)


@router.delete("/custom-qr", response_model=HostelSettings, response_model_by_alias=False)
def remove_custom_qr(store: EntityStore = Depends(get_store)):
    """移除自定义收款码，恢复动态生成的二维码"""
    current = store.data.settings
    return store.update_settings(current.model_copy(update={"custom_qr_image": None}))
