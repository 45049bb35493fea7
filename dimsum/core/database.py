"""
module: database.py
description: SQLAlchemy 비동기 엔진/세션 관리
"""

import ssl

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from dimsum.config.logger import logger
from dimsum.config.settings import settings

# 모델들이 상속받을 Base 클래스 정의
Base = declarative_base()


def build_ssl_context() -> ssl.SSLContext:
    """TLS는 사용하되 인증서 검증은 하지 않는 컨텍스트 (Neon 관리형 인스턴스)."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def engine_options(url: str) -> dict:
    """드라이버별 엔진 옵션을 구성한다."""
    options = {"echo": settings.DATABASE_ECHO, "future": True}
    if url.startswith("postgresql"):
        options.update(
            pool_pre_ping=True,  # 쿼리 전 연결 상태 확인
            pool_recycle=1800,  # 30분 이상 idle 시 재생성
        )
        if settings.DATABASE_SSL:
            options["connect_args"] = {"ssl": build_ssl_context()}
    return options


logger.info(f"Initializing database engine (driver={settings.DATABASE_URL.split('://', 1)[0]})")

engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # commit 후에도 데이터 유지
    autoflush=False,
)


# Dependency for FastAPI
async def get_db():
    """
    비동기 DB 세션을 생성하여 FastAPI 의존성으로 제공한다.

    Yields:
        AsyncSession: 요청 단위의 DB 세션 객체.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"DB session rollback due to error: {e}")
            await session.rollback()
            raise
