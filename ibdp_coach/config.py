"""应用配置管理。

使用 Pydantic Settings 统一读取环境变量（前缀 ``IBDP_``），便于在本地/生产之间切换。
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """核心配置项。

    - ``database_url``：默认使用本地 SQLite，便于快速启动。
    - ``ai_gateway_url`` / ``ai_gateway_api_key``：OpenAI 兼容的大模型网关。
    - ``outline_saved_status``：保存大纲后写入的作业状态，见 DESIGN.md。
    """

    database_url: str = Field(
        default="sqlite:///./storage/ibdp_coach.db", description="SQLAlchemy 数据库 URL"
    )
    ai_gateway_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="OpenAI 兼容网关的 base URL",
    )
    ai_gateway_api_key: Optional[str] = Field(
        default=None, description="网关 API Key，未配置时 AI 接口返回 500"
    )
    ai_model: str = Field(default="google/gemini-2.5-flash", description="网关模型 ID")
    ai_temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    secret_key: str = Field(
        default="ibdp-dev-secret-change-in-production", description="Token 签名密钥"
    )
    token_expire_hours: int = Field(default=24, ge=1)

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    # 注册时自动授予 admin 角色的用户名
    admin_usernames: List[str] = Field(default_factory=list)

    outline_saved_status: Literal["draft", "writing"] = Field(
        default="draft", description="保存大纲后作业进入的状态"
    )

    model_config = {
        "env_prefix": "IBDP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """缓存后的全局配置实例。"""

    return Settings()
