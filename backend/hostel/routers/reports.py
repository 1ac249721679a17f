"""
报表路由
"""
from typing import List
from fastapi import APIRouter, Depends

from hostel.models.schemas import DashboardStats, OccupancySlice
from hostel.routers.deps import get_store
from hostel.services.entity_store import EntityStore
from hostel.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["统计报表"])


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(store: EntityStore = Depends(get_store)):
    """获取仪表盘数据"""
    service = ReportService(store.data)
    return DashboardStats(**service.get_dashboard_stats())


@router.get("/occupancy", response_model=List[OccupancySlice])
def get_occupancy(store: EntityStore = Depends(get_store)):
    """获取已住/空闲床位分布"""
    return ReportService(store.data).get_occupancy_breakdown()
