# dimsum/core/repositories/product_repository.py
"""
제품 Repository
"""
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.core.models.product_model import Product
from .base_repository import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """
    제품 Repository

    책임:
    - 제품 CRUD
    - 키워드 검색 (nama_produk, deskripsi)
    """

    def __init__(self):
        super().__init__(Product)

    async def search(
        self,
        db: AsyncSession,
        keyword: str
    ) -> List[Product]:
        """
        키워드로 제품 검색 (대소문자 무시, 부분 일치).

        Args:
            db: AsyncSession
            keyword: 검색어

        Returns:
            최신 id 순 제품 리스트
        """
        # % 와 _ 는 와일드카드가 아닌 문자 그대로 매칭
        keyword = keyword.strip()
        result = await db.execute(
            select(Product)
            .where(
                or_(
                    Product.nama_produk.icontains(keyword, autoescape=True),
                    Product.deskripsi.icontains(keyword, autoescape=True),
                )
            )
            .order_by(Product.id.desc())
        )
        return list(result.scalars().all())
