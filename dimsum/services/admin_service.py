"""
module: admin_service.py
description: 관리자 계정 CRUD 및 로그인 비즈니스 로직
dependencies:
    - sqlalchemy.ext.asyncio
    - dimsum.core.repositories.admin_repository
    - dimsum.core.security
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.constants import ADMIN_PASSWORD_MIN_LENGTH
from dimsum.config.logger import logger
from dimsum.core.errors import AuthenticationError, BadRequestError, NotFoundError
from dimsum.core.models.admin_model import Admin
from dimsum.core.repositories.admin_repository import AdminRepository
from dimsum.core.schemas.admin_schema import (
    AdminChangePassword,
    AdminCreate,
    AdminLogin,
    AdminResponse,
    AdminUpdate,
)
from dimsum.core.security import (
    create_access_token,
    fits_bcrypt,
    hash_password,
    is_hashed,
    verify_password,
)
from dimsum.core.transaction import transaction_context


class AdminService:
    """관리자 계정 관련 비즈니스 로직을 처리하는 서비스 클래스"""

    def __init__(self):
        self.repo = AdminRepository()

    async def _get_or_404(self, db: AsyncSession, admin_id: int) -> Admin:
        admin = await self.repo.get(db, admin_id)
        if not admin:
            logger.warning(f"Admin not found: admin_id={admin_id}")
            raise NotFoundError("Admin not found")
        return admin

    def _check_new_password(self, new_password: str) -> None:
        if len(new_password) < ADMIN_PASSWORD_MIN_LENGTH:
            raise BadRequestError(
                f"New password must be at least {ADMIN_PASSWORD_MIN_LENGTH} characters"
            )

    async def _verify_and_upgrade(self, db: AsyncSession, admin: Admin, password: str) -> bool:
        """
        비밀번호를 검증하고, 평문으로 저장된 행이면 bcrypt 해시로 교체한다.
        """
        if not verify_password(password, admin.password):
            return False
        if not is_hashed(admin.password):
            if not fits_bcrypt(password):
                logger.warning(f"Plaintext password too long for bcrypt, not upgraded: admin_id={admin.id}")
                return True
            logger.info(f"Upgrading plaintext password to bcrypt: admin_id={admin.id}")
            async with transaction_context(db):
                await self.repo.update(db, admin, {"password": hash_password(password)})
        return True

    async def list_admins(self, db: AsyncSession) -> dict:
        """
        관리자 목록을 조회한다 (최신 id 순).

        Returns:
            dict: {"success": True, "count": int, "data": list}
        """
        admins = await self.repo.get_multi(db)
        logger.info(f"Found {len(admins)} admins")
        return {
            "success": True,
            "count": len(admins),
            "data": [AdminResponse.model_validate(a) for a in admins],
        }

    async def get_admin(self, db: AsyncSession, admin_id: int) -> dict:
        admin = await self._get_or_404(db, admin_id)
        return {"success": True, "admin": AdminResponse.model_validate(admin)}

    async def login(self, db: AsyncSession, payload: AdminLogin) -> dict:
        """
        사용자명/비밀번호로 로그인하고 토큰을 발급한다.

        Raises:
            AuthenticationError: 사용자가 없거나 비밀번호가 틀린 경우.
        """
        admin = await self.repo.get_by_username(db, payload.username)
        if not admin or not await self._verify_and_upgrade(db, admin, payload.password):
            logger.warning(f"Login failed: username={payload.username}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"Login successful: admin_id={admin.id}")
        return {
            "success": True,
            "message": "Login successful",
            "admin": AdminResponse.model_validate(admin),
            "token": create_access_token(admin.id, admin.username),
        }

    def logout(self) -> dict:
        # 토큰은 서버에 저장하지 않으므로 클라이언트가 폐기한다
        return {
            "success": True,
            "message": "Logout successful",
            "instruction": "Please remove token from client storage",
        }

    async def register(self, db: AsyncSession, payload: AdminCreate) -> dict:
        if await self.repo.username_taken(db, payload.username):
            raise BadRequestError("Username already exists")

        try:
            async with transaction_context(db):
                admin = await self.repo.create(
                    db,
                    {"username": payload.username, "password": hash_password(payload.password)},
                )
        except IntegrityError:
            # 동시 등록으로 unique 제약에 걸린 경우
            raise BadRequestError("Username already exists")

        logger.info(f"Admin registered: admin_id={admin.id}, username={admin.username}")
        return {
            "success": True,
            "message": "Admin created successfully",
            "admin": AdminResponse.model_validate(admin),
        }

    async def update_admin(self, db: AsyncSession, admin_id: int, payload: AdminUpdate) -> dict:
        """
        사용자명 및(또는) 비밀번호를 수정한다.

        Raises:
            NotFoundError: 관리자가 없는 경우.
            BadRequestError: 사용자명 중복, 현재 비밀번호 누락, 새 비밀번호 길이 부족.
            AuthenticationError: 현재 비밀번호가 틀린 경우.
        """
        admin = await self._get_or_404(db, admin_id)
        changes = {}

        if payload.username and payload.username != admin.username:
            if await self.repo.username_taken(db, payload.username, exclude_id=admin_id):
                raise BadRequestError("Username already taken by another admin")
            changes["username"] = payload.username

        if payload.new_password:
            if not payload.password:
                raise BadRequestError("Current password required to change password")
            if not verify_password(payload.password, admin.password):
                raise AuthenticationError("Current password is incorrect")
            self._check_new_password(payload.new_password)
            changes["password"] = hash_password(payload.new_password)

        if changes:
            async with transaction_context(db):
                admin = await self.repo.update(db, admin, changes)

        logger.info(f"Admin updated: admin_id={admin_id}, fields={sorted(changes)}")
        return {
            "success": True,
            "message": "Admin updated successfully",
            "admin": AdminResponse.model_validate(admin),
        }

    async def delete_admin(self, db: AsyncSession, admin_id: int) -> dict:
        """
        관리자를 삭제한다. 마지막 남은 관리자는 삭제할 수 없다.

        admin 행 전체를 잠근 뒤 개수를 확인하므로 동시 삭제 요청은 직렬화된다.
        """
        async with transaction_context(db):
            admin_ids = await self.repo.lock_ids(db)
            if admin_id not in admin_ids:
                logger.warning(f"Admin not found: admin_id={admin_id}")
                raise NotFoundError("Admin not found")
            if len(admin_ids) <= 1:
                raise BadRequestError("Cannot delete the last admin")

            deleted = AdminResponse.model_validate(await self.repo.get(db, admin_id))
            await self.repo.delete(db, admin_id)

        logger.info(f"Admin deleted: admin_id={admin_id}")
        return {
            "success": True,
            "message": "Admin deleted successfully",
            "deletedAdmin": deleted,
        }

    async def change_password(self, db: AsyncSession, payload: AdminChangePassword) -> dict:
        self._check_new_password(payload.new_password)
        admin = await self._get_or_404(db, payload.id)

        if not verify_password(payload.current_password, admin.password):
            raise AuthenticationError("Current password is incorrect")

        async with transaction_context(db):
            await self.repo.update(db, admin, {"password": hash_password(payload.new_password)})

        logger.info(f"Password changed: admin_id={payload.id}")
        return {"success": True, "message": "Password changed successfully"}
