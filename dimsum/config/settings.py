"""
module: settings.py
description: 환경 변수 및 기본 설정 관리
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from dotenv import load_dotenv

load_dotenv()

# asyncpg가 받지 않는 libpq 전용 쿼리 파라미터
LIBPQ_ONLY_PARAMS = ("sslmode", "channel_binding", "sslrootcert")


def normalize_database_url(url: str) -> str:
    """
    Neon 등에서 발급한 postgres:// URL을 asyncpg 드라이버용으로 변환한다.

    Args:
        url (str): 원본 접속 문자열.

    Returns:
        str: SQLAlchemy async 엔진이 받을 수 있는 URL.
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]

    parsed = make_url(url)
    if not parsed.drivername.startswith("postgresql"):
        # PostgreSQL 외의 URL은 다시 렌더링하면 :memory: 등이 인코딩되므로 그대로 둔다
        return url
    parsed = parsed.difference_update_query(LIBPQ_ONLY_PARAMS)
    return parsed.render_as_string(hide_password=False)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"  # 추가 필드 무시
    )

    DATABASE_URL: str = Field(
        validation_alias=AliasChoices("DATABASE_URL", "NEON_DATABASE_URL")
    )
    DATABASE_SSL: bool = True
    DATABASE_ECHO: bool = False
    DB_RETRY_DELAY_SECONDS: float = 10.0

    SECRET_KEY: str = "dev_secret_change_me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    SEED_DEFAULT_ADMIN: bool = True
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    CORS_ORIGINS: list[str] = ["*"]
    ENVIRONMENT: str = "development"
    PORT: int = 5000

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    @field_validator("DATABASE_URL")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        return normalize_database_url(value)


settings = Settings()
