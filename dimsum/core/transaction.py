from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.logger import logger


@asynccontextmanager
async def transaction_context(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    트랜잭션 컨텍스트 매니저

    Args:
        db: AsyncSession 인스턴스

    Yields:
        db: 트랜잭션이 활성화된 세션

    롤백 기준:
        - Exception 발생 시 자동 롤백
        - 정상 종료 시 자동 커밋

    Example:
        async with transaction_context(db):
            await repo.create(db, data)
            # 자동 커밋됨

    Note:
        - get_db() dependency가 세션 생명주기를 관리하므로
          여기서는 close()를 호출하지 않음
        - Repository는 flush()만 사용하고, Service 계층에서 이 컨텍스트를 사용
    """
    try:
        yield db
        await db.commit()
        logger.debug("Transaction committed successfully")
    except Exception as e:
        await db.rollback()
        logger.error(f"Transaction rolled back due to exception: {e}")
        raise
