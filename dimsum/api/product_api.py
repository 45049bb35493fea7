"""
module: product_api.py
description: 제품 CRUD 및 키워드 검색 API
dependencies:
    - fastapi
    - dimsum.services.product_service
    - dimsum.core.database
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.logger import logger
from dimsum.core.database import get_db
from dimsum.core.schemas.product_schema import ProductCreate, ProductUpdate
from dimsum.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["Products"])
service = ProductService()


@router.get("")
async def list_products(
    search: str | None = Query(None, description="제품명/설명 검색어"),
    db: AsyncSession = Depends(get_db)
):
    """
    제품 목록을 조회한다.

    Returns:
        dict: {"success", "count", "data"}
    """
    logger.info(f"GET /api/products - search={search}")
    return await service.list_products(db, search)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_db)):
    logger.info(f"POST /api/products - nama_produk={payload.nama_produk}")
    return await service.create_product(db, payload)


@router.get("/{product_id}")
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """
    제품 상세 정보를 조회한다.

    Raises:
        NotFoundError: 제품을 찾을 수 없는 경우 404.
    """
    logger.info(f"GET /api/products/{product_id}")
    return await service.get_product(db, product_id)


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    logger.info(f"PUT /api/products/{product_id}")
    return await service.update_product(db, product_id, payload)


@router.delete("/{product_id}")
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    logger.info(f"DELETE /api/products/{product_id}")
    return await service.delete_product(db, product_id)
