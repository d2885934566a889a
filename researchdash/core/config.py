# researchdash/core/config.py

"""
全局配置模块 (Global Configuration Module)

功能 (Function):
这个文件是 ResearchDash 后端的配置中心。它负责：
1. 定义所有配置项，例如 Notion 访问令牌、各资源对应的数据库 ID、n8n Webhook 地址、
   arXiv 接口地址、HTTP 超时、日志级别等。
2. 使用 Pydantic Settings 从环境变量和 `.env` 文件中加载配置值。
3. 对加载的配置进行类型检查和基本的验证（空字符串视为未设置）。
4. 提供一个全局 `settings` 对象，供 `researchdash.main` 在启动时传入 lifespan。

交互 (Interaction):
- 读取 (Reads): `.env` 文件 (如果存在) 和系统环境变量。
- 被导入 (Imported by):
    - `researchdash.main`: 获取项目名称、API 前缀、CORS 来源、日志级别。
    - `researchdash.core.db`: lifespan 把 settings 放进 `app.state`，并据此创建共享的 httpx 客户端。
    - `researchdash.api.v1.dependencies`: 从 `app.state.settings` 取出配置构造仓库和服务。
    - `tests/*`: 测试直接实例化 `Settings(...)` 覆盖配置，不依赖进程环境。

设计原则 (Design Principles):
- **集中管理 (Centralized Management):** 所有配置项集中在此定义和加载。
- **环境变量优先 (Environment Variable First):** 环境变量覆盖 `.env`，`.env` 覆盖默认值。
- **显式传递 (Explicit Threading):** 处理函数通过依赖注入拿到 settings，而不是直接读取进程环境。
"""

import json
import os
from typing import Any, Dict, List, Literal, Optional

from loguru import logger
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# --- 路径计算 ---

# researchdash/core/config.py -> project root
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
dotenv_path = os.path.join(project_root, ".env")

logger.info(f"Calculated .env path for Pydantic Settings: {dotenv_path}")
logger.info(f"Does .env file exist at calculated path? {os.path.exists(dotenv_path)}")

DEFAULT_TOPIC_DATABASES: Dict[str, str] = {
    "Machine Learning": "2d958fe731b180d5a744d354f84db9fb",
}

DEFAULT_AREA_NAMES: List[str] = [
    "Machine Learning",
    "ADHD",
    "Autism",
    "Psychology",
    "Neuroscience",
    "Deep Learning",
    "Computer Vision",
    "NLP",
]


class Settings(BaseSettings):
    """
    应用配置模型 (Application Settings Model)

    字段名与环境变量通过 `alias` 对应；`populate_by_name=True` 允许测试直接用字段名构造。
    """

    model_config = SettingsConfigDict(
        env_file=dotenv_path if os.path.exists(dotenv_path) else None,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # --- 常规配置 (General Settings) ---
    project_name: str = Field(default="ResearchDash", alias="PROJECT_NAME")
    api_v1_str: str = Field(default="/api/v1", alias="API_V1_STR")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        alias="CORS_ORIGINS",
    )

    # --- Notion (document database) ---
    notion_token: Optional[str] = Field(default=None, alias="NOTION_TOKEN")
    notion_api_base: str = Field(
        default="https://api.notion.com/v1", alias="NOTION_API_BASE"
    )
    notion_version: str = Field(default="2022-06-28", alias="NOTION_VERSION")

    # One database per Notion-backed resource
    notion_areas_database_id: Optional[str] = Field(
        default=None, alias="NOTION_AREAS_DATABASE_ID"
    )
    notion_keywords_database_id: Optional[str] = Field(
        default=None, alias="NOTION_KEYWORDS_DATABASE_ID"
    )
    notion_assumptions_database_id: Optional[str] = Field(
        default=None, alias="NOTION_ASSUMPTIONS_DATABASE_ID"
    )
    notion_sources_database_id: Optional[str] = Field(
        default=None, alias="NOTION_SOURCES_DATABASE_ID"
    )
    notion_saved_database_id: Optional[str] = Field(
        default=None, alias="NOTION_SAVED_DATABASE_ID"
    )
    notion_content_database_id: Optional[str] = Field(
        default=None, alias="NOTION_CONTENT_DATABASE_ID"
    )
    # Topic name -> Notion database id, for the per-topic paper feeds
    notion_topic_databases: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_TOPIC_DATABASES),
        alias="NOTION_TOPIC_DATABASES",
    )
    # Notion rejects rich text longer than this
    notion_text_limit: int = Field(default=2000, alias="NOTION_TEXT_LIMIT")

    # --- n8n / arXiv ---
    n8n_webhook_url: Optional[str] = Field(default=None, alias="N8N_WEBHOOK_URL")
    arxiv_api_url: str = Field(
        default="http://export.arxiv.org/api/query", alias="ARXIV_API_URL"
    )

    # --- Outbound HTTP ---
    http_timeout_seconds: float = Field(default=30.0, alias="HTTP_TIMEOUT_SECONDS")
    # Upper bound on concurrent archive calls when clearing saved papers
    saved_clear_concurrency: int = Field(
        default=8, alias="SAVED_CLEAR_CONCURRENCY", ge=1
    )

    # Served by GET areas when the areas database holds no records
    default_areas: List[str] = Field(
        default_factory=lambda: list(DEFAULT_AREA_NAMES), alias="DEFAULT_AREAS"
    )

    # --- 自定义验证器 (Validation) ---
    @field_validator(
        "notion_token",
        "notion_areas_database_id",
        "notion_keywords_database_id",
        "notion_assumptions_database_id",
        "notion_sources_database_id",
        "notion_saved_database_id",
        "notion_content_database_id",
        "n8n_webhook_url",
        mode="before",
    )
    @classmethod
    def check_not_empty(
        cls, value: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        """
        把空字符串转换为 None。

        环境变量被设置为空字符串 (例如 NOTION_TOKEN="") 时，Pydantic 默认保留空字符串。
        这里统一视为 "未配置"，这样资源级别的 "not configured" 检查只需判断 None。
        """
        if isinstance(value, str) and value.strip() == "":
            logger.warning(
                f"Configuration field '{info.field_name}' was set to an empty string. "
                f"Treating as None (not set)."
            )
            return None
        return value

    @field_validator("notion_topic_databases", mode="before")
    @classmethod
    def parse_topic_databases(cls, value: Any) -> Any:
        """Accepts the topic mapping as a JSON string as well as a dict."""
        if isinstance(value, str):
            if not value.strip():
                return dict(DEFAULT_TOPIC_DATABASES)
            return json.loads(value)
        return value


# --- 实例化配置对象 ---
try:
    settings = Settings()
    logger.info("Settings loaded successfully.")
    logger.debug(f"Project Name: {settings.project_name}")
    logger.debug(f"Environment: {settings.environment}")
    logger.debug(f"Log Level: {settings.log_level}")
except Exception as e:
    logger.critical(f"Failed to load or validate settings: {e}")
    raise RuntimeError(f"Failed to initialize settings: {e}") from e


# --- 记录敏感信息加载状态 ---
# 只记录是否配置，不记录值本身
if not settings.notion_token:
    logger.warning("NOTION_TOKEN is not set in environment variables or .env file.")

if not settings.n8n_webhook_url:
    logger.warning("N8N_WEBHOOK_URL is not set; areas/papers will be unavailable.")
