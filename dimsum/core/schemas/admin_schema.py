from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dimsum.config.constants import ADMIN_PASSWORD_MIN_LENGTH, ADMIN_USERNAME_MIN_LENGTH
from dimsum.core.security import BCRYPT_MAX_BYTES, fits_bcrypt


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    # bcrypt 한도는 글자 수가 아니라 UTF-8 바이트 수
    if value is not None and not fits_bcrypt(value):
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


class AdminBase(BaseModel):
    """관리자 기본 스키마"""
    username: str = Field(..., min_length=ADMIN_USERNAME_MIN_LENGTH, max_length=50, description="사용자명")


class AdminCreate(AdminBase):
    """관리자 등록 스키마"""
    password: str = Field(..., min_length=ADMIN_PASSWORD_MIN_LENGTH, description="비밀번호")

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class AdminUpdate(BaseModel):
    """
    관리자 수정 스키마

    new_password를 바꾸려면 password(현재 비밀번호)를 함께 보내야 한다.
    username이 빈 문자열이면 기존 값을 유지한다.
    """
    username: Optional[str] = Field(None, min_length=ADMIN_USERNAME_MIN_LENGTH, max_length=50)
    password: Optional[str] = None
    new_password: Optional[str] = None

    @field_validator("new_password")
    @classmethod
    def check_new_password_bytes(cls, value):
        return _check_password_bytes(value)

    @field_validator("username", mode="before")
    @classmethod
    def blank_username_means_unchanged(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AdminChangePassword(BaseModel):
    """비밀번호 변경 스키마"""
    id: int
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password_bytes(cls, value):
        return _check_password_bytes(value)


class AdminLogin(BaseModel):
    """로그인 요청 스키마"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminResponse(BaseModel):
    """관리자 응답 스키마 (비밀번호 제외)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    created_at: Optional[datetime] = None
