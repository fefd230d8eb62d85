"""
File: app/core/config.py
Description: 全局应用配置管理（使用 pydantic-settings）

所有配置值通过 .env 文件加载。
本模块负责：
1. 校验环境变量类型
2. 解析复杂类型（如 CORS 列表）
3. 组装数据库 DSN（确保使用 postgresql+asyncpg 协议）
4. 定义 Redis 连接与 Steam (OpenID / Web API / Community) 外部参数
5. 运行时强制校验必填项，确保应用在配置缺失时快速失败

Created: 2025-11-24
Updated: 2026-03-02 (Steam 绑定服务配置)
"""

from typing import Literal
from urllib.parse import urlsplit

from pydantic import AnyHttpUrl, model_validator
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置对象（唯一真实来源）"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    # --------------------------------------------------------------------------
    # 1. General (通用)
    # --------------------------------------------------------------------------
    PROJECT_NAME: str = "Steam Link Service"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "dev", "prod"] = "local"
    DEBUG: bool = False

    # CORS 配置（Pydantic 会自动解析 JSON 字符串列表）
    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = []

    # --------------------------------------------------------------------------
    # 2. Database (PostgreSQL)
    # --------------------------------------------------------------------------
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    # 连接池配置 (Pool Settings)
    DB_POOL_SIZE: int = 20  # 连接池基准大小
    DB_MAX_OVERFLOW: int = 10  # 允许超出基准的额外连接数
    DB_POOL_PRE_PING: bool = True  # 每次获取连接前是否自动 ping
    DB_POOL_TIMEOUT: int = 30  # 连接获取超时（秒）
    DB_POOL_RECYCLE: int = 1800  # 连接回收时间（秒），防止连接过期

    # 完整 DSN 覆盖（可选）
    SQLALCHEMY_DATABASE_URI: str | None = None

    # --------------------------------------------------------------------------
    # 3. Logging (Loguru)
    # --------------------------------------------------------------------------
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON_FORMAT: bool = False  # 是否输出 JSON 格式
    LOG_FILE_ENABLED: bool = False  # 是否启用文件日志
    LOG_DIR: str = "logs"  # 日志文件目录
    LOG_ROTATION: str = "1 hour"  # 轮转策略
    LOG_RETENTION: str = "7 days"  # 保留时间
    LOG_COMPRESSION: str = "zip"  # 压缩格式
    LOG_DIAGNOSE: bool = True  # 是否启用诊断信息（生产环境建议 False）

    # --------------------------------------------------------------------------
    # 4. Redis Settings (OpenID nonce 防重放)
    # --------------------------------------------------------------------------
    # 默认连接本地，生产环境请在 .env 中覆盖
    REDIS_URL: str = "redis://localhost:6379/0"

    # 回调链路中的 Redis 操作超时 (秒)，Redis 不可用时快速失败而不是挂起
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # response_nonce 保留时间 (秒)，窗口内重复出现的断言将被拒绝
    OPENID_NONCE_TTL_SECONDS: int = 3600

    # --------------------------------------------------------------------------
    # 5. Site Origins (回调地址与前端跳转)
    # --------------------------------------------------------------------------
    # 本服务对外可访问的根地址，用于拼接 OpenID return_to
    SITE_URL: str = "http://localhost:8000"

    # 回调结束后跳转的前端地址，未配置时回落到 SITE_URL
    FRONTEND_URL: str | None = None

    # --------------------------------------------------------------------------
    # 6. Steam (Identity Provider / Web API / Community)
    # --------------------------------------------------------------------------
    # Web API Key (GetPlayerSummaries 必需)
    STEAM_API_KEY: str | None = None

    STEAM_OPENID_URL: str = "https://steamcommunity.com/openid/login"
    STEAM_WEB_API_URL: str = "https://api.steampowered.com"
    STEAM_COMMUNITY_URL: str = "https://steamcommunity.com"

    # 出站请求超时（秒），Steam 侧无响应时避免请求无限挂起
    STEAM_HTTP_TIMEOUT: float = 10.0

    # 库存查询默认参数 (CS2: appid=730, contextid=2)
    STEAM_DEFAULT_APP_ID: str = "730"
    STEAM_DEFAULT_CONTEXT_ID: str = "2"
    STEAM_DEFAULT_PAGE_SIZE: int = 100

    # --------------------------------------------------------------------------
    # Properties (便捷属性)
    # --------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """是否为生产环境"""
        return self.ENVIRONMENT == "prod"

    @property
    def is_debug(self) -> bool:
        """是否启用调试模式（仅在非生产环境有效）"""
        return self.DEBUG and not self.is_production

    @property
    def frontend_url(self) -> str:
        """回调结束后的前端跳转地址"""
        return (self.FRONTEND_URL or self.SITE_URL).rstrip("/")

    @property
    def steam_callback_url(self) -> str:
        """OpenID return_to 基础地址 (不含 wallet 参数)"""
        return f"{self.SITE_URL.rstrip('/')}{self.API_V1_STR}/identity/callback"

    # --------------------------------------------------------------------------
    # Validators
    # --------------------------------------------------------------------------
    @model_validator(mode="after")
    def _validate_and_build_db_uri(self) -> "Settings":
        """验证必填项并构建数据库连接串。"""
        # 1. 校验站点地址 (return_to / realm 依赖其 origin)
        parts = urlsplit(self.SITE_URL)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("SITE_URL 必须是完整的 http(s) 地址")

        # 2. 非本地环境强制要求 Steam API Key
        if self.ENVIRONMENT != "local" and not self.STEAM_API_KEY:
            raise ValueError("STEAM_API_KEY 必须在 .env 中设置")

        if self.STEAM_HTTP_TIMEOUT <= 0:
            raise ValueError("STEAM_HTTP_TIMEOUT 必须大于 0")

        # 3. 如果 env 直接提供了 DSN，则优先使用
        if self.SQLALCHEMY_DATABASE_URI:
            return self

        # 4. 否则检查 POSTGRES_* 字段是否齐全
        missing_fields: list[str] = []
        required_pg_fields = [
            "POSTGRES_SERVER",
            "POSTGRES_USER",
            "POSTGRES_PASSWORD",
            "POSTGRES_DB",
        ]

        for field in required_pg_fields:
            if not getattr(self, field):
                missing_fields.append(field)

        if missing_fields:
            raise ValueError(
                f"缺少数据库环境变量，无法构建 DSN: {', '.join(missing_fields)}"
            )

        # 5. 自动组装 DSN
        self.SQLALCHEMY_DATABASE_URI = str(
            MultiHostUrl.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,  # type: ignore[arg-type]
                password=self.POSTGRES_PASSWORD,  # type: ignore[arg-type]
                host=self.POSTGRES_SERVER,  # type: ignore[arg-type]
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,  # type: ignore[arg-type]
            )
        )

        return self


# 单例配置对象
# 配置加载失败时，Pydantic 会抛出 ValidationError，包含详细错误信息
settings = Settings()
