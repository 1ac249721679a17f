"""
持久化表定义
整个聚合以 JSON 快照形式保存在以固定键标识的一行中
"""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from hostel.database import Base


class AppState(Base):
    """
    应用状态快照表
    key: 应用固定键 (settings.STORE_KEY)
    payload: 序列化后的 HostelData
    """
    __tablename__ = "app_state"

    key = Column(String(100), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
