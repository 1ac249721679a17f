"""
AI 助手路由
基于当前统计快照生成建议；聊天记录只保存在内存中
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from hostel.models.schemas import ChatMessageResponse, ChatRequest, ChatResponse
from hostel.routers.deps import get_store, get_transcript
from hostel.services.conversation_service import ChatTranscript
from hostel.services.entity_store import EntityStore
from hostel.services.report_service import ReportService

router = APIRouter(prefix="/ai", tags=["AI助手"])


@router.get("/messages", response_model=List[ChatMessageResponse])
def list_messages(transcript: ChatTranscript = Depends(get_transcript)):
    """获取聊天记录"""
    return [m.to_dict() for m in transcript.messages]


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    store: EntityStore = Depends(get_store),
    transcript: ChatTranscript = Depends(get_transcript),
):
    """向 AI 助手提问"""
    data = store.data
    context = ReportService(data).get_advice_context()
    try:
        reply = transcript.ask(request.content, context, hostel_name=data.settings.hostel_name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ChatResponse(
        reply=reply.to_dict(),
        messages=[m.to_dict() for m in transcript.messages],
    )


@router.post("/clear", response_model=List[ChatMessageResponse])
def clear_messages(transcript: ChatTranscript = Depends(get_transcript)):
    """清空聊天记录（保留问候语）"""
    transcript.clear()
    return [m.to_dict() for m in transcript.messages]
