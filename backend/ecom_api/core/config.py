from typing import List, Optional, Union
import logging

from pydantic import AnyHttpUrl, Field, validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "电商目录服务"
    API_PREFIX: str = "/api/v1"

    # CORS配置
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 数据库配置（支持 sqlite / postgresql）
    DATABASE_URI: str = "sqlite:///./ecom_catalog.db"
    SQL_DEBUG: bool = False

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True
    LOG_TIMEZONE: Optional[str] = Field(
        default=None,
        description="日志时间所用时区，如 Europe/London，留空使用本地时间"
    )

    @property
    def async_database_uri(self) -> str:
        """换成异步驱动的连接串"""
        uri = self.DATABASE_URI
        if uri.startswith("sqlite:///"):
            return uri.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        if uri.startswith("postgresql://"):
            return uri.replace("postgresql://", "postgresql+asyncpg://", 1)
        if uri.startswith("postgres://"):
            return uri.replace("postgres://", "postgresql+asyncpg://", 1)
        return uri

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"加载配置: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
