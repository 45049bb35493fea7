"""
module: admin_api.py
description: 관리자 계정 API (CRUD + 로그인/로그아웃)
dependencies:
    - fastapi
    - dimsum.services.admin_service
    - dimsum.core.database
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.logger import logger
from dimsum.core.database import get_db
from dimsum.core.schemas.admin_schema import (
    AdminChangePassword,
    AdminCreate,
    AdminLogin,
    AdminUpdate,
)
from dimsum.services.admin_service import AdminService

router = APIRouter(prefix="/api/admin", tags=["Admin"])
service = AdminService()


@router.get("")
async def list_admins(db: AsyncSession = Depends(get_db)):
    """
    관리자 목록을 조회한다.

    Returns:
        dict: {"success", "count", "data"}
    """
    logger.info("GET /api/admin")
    return await service.list_admins(db)


@router.post("/login")
async def login(payload: AdminLogin, db: AsyncSession = Depends(get_db)):
    """
    로그인 후 관리자 정보와 토큰을 반환한다.

    Raises:
        AuthenticationError: 자격 증명이 올바르지 않은 경우 401.
    """
    logger.info("POST /api/admin/login")
    return await service.login(db, payload)


@router.post("/logout")
async def logout():
    logger.info("POST /api/admin/logout")
    return service.logout()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: AdminCreate, db: AsyncSession = Depends(get_db)):
    logger.info("POST /api/admin/register")
    return await service.register(db, payload)


@router.post("/change-password")
async def change_password(payload: AdminChangePassword, db: AsyncSession = Depends(get_db)):
    logger.info("POST /api/admin/change-password")
    return await service.change_password(db, payload)


@router.get("/{admin_id}")
async def get_admin(admin_id: int, db: AsyncSession = Depends(get_db)):
    logger.info(f"GET /api/admin/{admin_id}")
    return await service.get_admin(db, admin_id)


@router.put("/{admin_id}")
async def update_admin(
    admin_id: int,
    payload: AdminUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    관리자 사용자명/비밀번호를 수정한다.

    Raises:
        NotFoundError: 관리자가 없는 경우 404.
        BadRequestError: 입력이 올바르지 않은 경우 400.
        AuthenticationError: 현재 비밀번호가 틀린 경우 401.
    """
    logger.info(f"PUT /api/admin/{admin_id}")
    return await service.update_admin(db, admin_id, payload)


@router.delete("/{admin_id}")
async def delete_admin(admin_id: int, db: AsyncSession = Depends(get_db)):
    """
    관리자를 삭제한다. 마지막 관리자는 삭제할 수 없다 (400).
    """
    logger.info(f"DELETE /api/admin/{admin_id}")
    return await service.delete_admin(db, admin_id)
