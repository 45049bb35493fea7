from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.core.models.admin_model import Admin
from .base_repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    """관리자 Repository"""

    def __init__(self):
        super().__init__(Admin)

    async def get_by_username(
        self,
        db: AsyncSession,
        username: str
    ) -> Optional[Admin]:
        """사용자명으로 관리자 조회 (로그인용)"""
        result = await db.execute(
            select(Admin).where(Admin.username == username)
        )
        return result.scalar_one_or_none()

    async def username_taken(
        self,
        db: AsyncSession,
        username: str,
        exclude_id: int | None = None
    ) -> bool:
        """다른 관리자가 이미 사용 중인 사용자명인지 확인"""
        query = select(Admin.id).where(Admin.username == username)
        if exclude_id is not None:
            query = query.where(Admin.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def lock_ids(self, db: AsyncSession) -> List[int]:
        """
        모든 관리자 id를 SELECT ... FOR UPDATE로 잠그고 반환.
        트랜잭션이 끝날 때까지 다른 삭제 요청은 대기한다.
        """
        result = await db.execute(
            select(Admin.id).order_by(Admin.id).with_for_update()
        )
        return list(result.scalars().all())
