"""
Pytest 配置和共享 fixtures
"""
import random
import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from hostel.database import Base
from hostel.models import storage  # noqa - 注册 app_state 表
from hostel.main import create_app
from hostel.services.conversation_service import ChatTranscript
from hostel.services.entity_store import EntityStore
from hostel.services.id_generator import SequentialIdGenerator
from hostel.services.llm_service import AdviceService
from hostel.services.persistence import PersistenceAdapter
from hostel.services.receipt_service import ReceiptComposer


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """创建数据库会话工厂"""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def persistence(session_factory):
    """持久化适配器（内存数据库）"""
    return PersistenceAdapter(session_factory, key="testHostelData")


@pytest.fixture
def event_publisher():
    """模拟事件发布器"""
    return MagicMock()


@pytest.fixture
def store(persistence, event_publisher):
    """从默认数据集启动的实体存储，ID 可预测 (id1, id2, ...)"""
    return EntityStore(
        persistence,
        id_generator=SequentialIdGenerator("id"),
        event_publisher=event_publisher,
    )


@pytest.fixture
def advisor():
    """模拟 AI 建议服务"""
    mock = MagicMock(spec=AdviceService)
    mock.generate_advice.return_value = "Send rent reminders on the 1st of every month."
    return mock


@pytest.fixture
def client(store, advisor):
    """创建测试客户端"""
    app = create_app(
        store=store,
        transcript=ChatTranscript(advisor),
        receipt_composer=ReceiptComposer(rng=random.Random(42)),
    )
    with TestClient(app) as test_client:
        yield test_client


def make_tenant_fields(**overrides) -> dict:
    """租户字段样例"""
    fields = {
        "name": "Ravi Kumar",
        "mobile": "9876543210",
        "rent": 5000,
        "joining_date": "2024-01-01",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def tenant_fields():
    return make_tenant_fields
