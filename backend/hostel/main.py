"""
宿舍管理系统主应用入口
楼层 / 房间 / 租户管理、统计、收据和 AI 助手
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostel.config import settings
from hostel.database import init_db
from hostel.routers import floors, rooms, tenants, reports, ai
from hostel.routers import settings as settings_router
from hostel.services.conversation_service import ChatTranscript
from hostel.services.entity_store import EntityStore
from hostel.services.event_bus import Event, event_bus
from hostel.services.llm_service import AdviceService
from hostel.services.persistence import PersistenceAdapter
from hostel.services.receipt_service import ReceiptComposer

logger = logging.getLogger(__name__)


def _log_store_event(event: Event) -> None:
    logger.debug(f"{event.event_type}: {event.data}")


def register_event_handlers() -> None:
    """注册事件处理器"""
    from hostel.models.events import EventType
    for event_type in EventType:
        event_bus.subscribe(event_type.value, _log_store_event)


def create_app(
    store: Optional[EntityStore] = None,
    transcript: Optional[ChatTranscript] = None,
    receipt_composer: Optional[ReceiptComposer] = None,
) -> FastAPI:
    """
    创建应用

    传入的组件直接使用（测试时注入）；未传入的在启动时按配置创建
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        if getattr(app.state, "store", None) is None:
            init_db()
            app.state.store = EntityStore(PersistenceAdapter())
            logger.info("Entity store loaded")
        if getattr(app.state, "transcript", None) is None:
            app.state.transcript = ChatTranscript(AdviceService())
        if getattr(app.state, "receipt_composer", None) is None:
            app.state.receipt_composer = ReceiptComposer()
        register_event_handlers()

        yield

    app = FastAPI(
        title=settings.APP_NAME,
        description="宿舍楼层、房间、租户管理",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.transcript = transcript
    app.state.receipt_composer = receipt_composer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(floors.router)
    app.include_router(rooms.router)
    app.include_router(tenants.router)
    app.include_router(settings_router.router)
    app.include_router(reports.router)
    app.include_router(ai.router)

    @app.get("/health")
    def health_check():
        """健康检查"""
        return {"status": "healthy", "app": settings.APP_NAME}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hostel.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
