"""
module: bootstrap.py
description: 부팅 시 DB 연결 확인(재시도 루프) 및 기본 관리자 생성
"""

import asyncio
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from dimsum.config.logger import logger
from dimsum.config.settings import settings
from dimsum.core.database import AsyncSessionLocal, engine
from dimsum.core.repositories.admin_repository import AdminRepository
from dimsum.core.security import hash_password
from dimsum.core.transaction import transaction_context


async def check_connection(db_engine: AsyncEngine) -> datetime:
    """커넥션을 하나 열어 DB 서버 시각을 조회한다."""
    async with db_engine.connect() as conn:
        result = await conn.execute(select(func.now()))
        return result.scalar_one()


async def seed_default_admin(session_factory: async_sessionmaker) -> bool:
    """
    admin 테이블이 비어 있으면 기본 관리자를 생성한다.

    Returns:
        bool: 새로 생성했으면 True.
    """
    repo = AdminRepository()
    async with session_factory() as db:
        if await repo.count(db) > 0:
            return False

        async with transaction_context(db):
            await repo.create(
                db,
                {
                    "username": settings.DEFAULT_ADMIN_USERNAME,
                    "password": hash_password(settings.DEFAULT_ADMIN_PASSWORD),
                },
            )

    logger.info(f"Default admin created: username={settings.DEFAULT_ADMIN_USERNAME}")
    return True


async def init_database(
    state: Any,
    db_engine: AsyncEngine = engine,
    session_factory: async_sessionmaker = AsyncSessionLocal,
    retry_delay: float | None = None,
    max_attempts: int | None = None,
) -> bool:
    """
    DB에 연결될 때까지 고정 간격으로 재시도하고, 연결되면 기본 관리자를 시드한다.

    Args:
        state: 결과를 기록할 객체 (app.state). db_ready, db_last_error를 설정한다.
        retry_delay: 재시도 간격(초). None이면 settings.DB_RETRY_DELAY_SECONDS.
        max_attempts: 최대 시도 횟수. None이면 무한 재시도.

    Returns:
        bool: 연결 성공 여부.
    """
    delay = settings.DB_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
    state.db_ready = False
    state.db_last_error = None
    attempt = 0

    while True:
        attempt += 1
        try:
            db_time = await check_connection(db_engine)
            break
        except Exception as e:
            # 드라이버별 타임아웃·DNS 오류 등도 모두 재시도 대상
            state.db_last_error = str(e) or type(e).__name__
            logger.error(f"Database connection error (attempt {attempt}): {e}")
            if max_attempts is not None and attempt >= max_attempts:
                return False
            logger.info(f"Retrying database connection in {delay} seconds...")
            await asyncio.sleep(delay)

    logger.info(f"Connected to database, server time: {db_time}")
    state.db_ready = True
    state.db_last_error = None

    if settings.SEED_DEFAULT_ADMIN:
        try:
            await seed_default_admin(session_factory)
        except SQLAlchemyError as e:
            # 마이그레이션 전이면 admin 테이블이 없을 수 있음
            logger.warning(f"Could not check/create default admin: {e}")

    return True
