"""
应用配置
从环境变量读取配置，支持 OpenAI 兼容 API
"""
import os
from typing import List, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Hari PG Hostel Manager"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["*"]

    # 持久化配置：整个数据集保存在 app_state 表的一行中
    DATABASE_URL: str = "sqlite:///./hostel.db"
    STORE_KEY: str = "hariPgData"

    # LLM 配置 (OpenAI 兼容 API)
    OPENAI_API_KEY: Optional[str] = os.environ.get("OPENAI_API_KEY")
    OPENAI_BASE_URL: str = os.environ.get(
        "OPENAI_BASE_URL",
        "https://api.openai.com/v1"
    )
    LLM_MODEL: str = os.environ.get("LLM_MODEL", "gpt-4o-mini")
    LLM_TEMPERATURE: float = float(os.environ.get("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_TOKENS: int = int(os.environ.get("LLM_MAX_TOKENS", "1000"))
    LLM_TIMEOUT: float = 30.0

    # LLM 功能开关
    ENABLE_LLM: bool = os.environ.get("ENABLE_LLM", "true").lower() == "true"

    # 收据二维码生成服务
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    QR_SIZE: str = "150x150"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# 全局设置实例
settings = Settings()
