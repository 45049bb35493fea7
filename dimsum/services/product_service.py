"""
module: product_service.py
description: 제품 CRUD 및 검색 비즈니스 로직
dependencies:
    - sqlalchemy.ext.asyncio
    - dimsum.core.repositories.product_repository
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.logger import logger
from dimsum.core.errors import NotFoundError
from dimsum.core.models.product_model import Product
from dimsum.core.repositories.product_repository import ProductRepository
from dimsum.core.schemas.product_schema import ProductCreate, ProductResponse, ProductUpdate
from dimsum.core.transaction import transaction_context

# None으로 보내면 기존 값 유지되는 필수 컬럼
REQUIRED_FIELDS = ("nama_produk", "harga")


class ProductService:
    """제품 관련 비즈니스 로직을 처리하는 서비스 클래스"""

    def __init__(self):
        self.repo = ProductRepository()

    async def _get_or_404(self, db: AsyncSession, product_id: int) -> Product:
        product = await self.repo.get(db, product_id)
        if not product:
            logger.warning(f"Product not found: product_id={product_id}")
            raise NotFoundError("Product not found")
        return product

    async def list_products(self, db: AsyncSession, search: Optional[str] = None) -> dict:
        """
        제품 목록을 조회한다. search가 있으면 이름/설명으로 필터링한다.

        Returns:
            dict: {"success": True, "count": int, "data": list}
        """
        if search and search.strip():
            products = await self.repo.search(db, search)
        else:
            products = await self.repo.get_multi(db)

        logger.info(f"Found {len(products)} products (search={search!r})")
        return {
            "success": True,
            "count": len(products),
            "data": [ProductResponse.model_validate(p) for p in products],
        }

    async def get_product(self, db: AsyncSession, product_id: int) -> dict:
        product = await self._get_or_404(db, product_id)
        return {"success": True, "product": ProductResponse.model_validate(product)}

    async def create_product(self, db: AsyncSession, payload: ProductCreate) -> dict:
        async with transaction_context(db):
            product = await self.repo.create(db, payload.model_dump())

        logger.info(f"Product created: product_id={product.id}")
        return {
            "success": True,
            "message": "Product created successfully",
            "product": ProductResponse.model_validate(product),
        }

    async def update_product(self, db: AsyncSession, product_id: int, payload: ProductUpdate) -> dict:
        """
        보낸 필드만 기존 제품에 병합하여 수정한다.

        Raises:
            NotFoundError: 제품이 없는 경우.
        """
        product = await self._get_or_404(db, product_id)

        changes = payload.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if changes.get(field) is None:
                changes.pop(field, None)
        changes["updated_at"] = func.now()

        async with transaction_context(db):
            product = await self.repo.update(db, product, changes)

        logger.info(f"Product updated: product_id={product_id}, fields={sorted(changes)}")
        return {
            "success": True,
            "message": "Product updated successfully",
            "product": ProductResponse.model_validate(product),
        }

    async def delete_product(self, db: AsyncSession, product_id: int) -> dict:
        async with transaction_context(db):
            deleted = await self.repo.delete(db, product_id)

        if not deleted:
            logger.warning(f"Product not found: product_id={product_id}")
            raise NotFoundError("Product not found")

        logger.info(f"Product deleted: product_id={product_id}")
        return {
            "success": True,
            "message": "Product deleted successfully",
            "deletedId": product_id,
        }
