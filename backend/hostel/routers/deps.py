"""
路由依赖
EntityStore / ChatTranscript / ReceiptComposer 由应用生命周期创建并挂在 app.state 上
"""
from fastapi import HTTPException, Request, status

from hostel.services.conversation_service import ChatTranscript
from hostel.services.entity_store import EntityStore
from hostel.services.errors import HostelError, NotFoundError, RoomFullError
from hostel.services.receipt_service import ReceiptComposer


def get_store(request: Request) -> EntityStore:
    """依赖注入：获取实体存储"""
    return request.app.state.store


def get_transcript(request: Request) -> ChatTranscript:
    """依赖注入：获取 AI 助手会话"""
    return request.app.state.transcript


def get_receipt_composer(request: Request) -> ReceiptComposer:
    """依赖注入：获取收据生成器"""
    return request.app.state.receipt_composer


def http_error(e: HostelError) -> HTTPException:
    """领域错误 → HTTP 错误"""
    if isinstance(e, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, RoomFullError):
        code = status.HTTP_409_CONFLICT
    else:
        # InvalidCapacityError 等输入错误
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(e))
