"""
module: security.py
description: 비밀번호 해시 검증 및 로그인 토큰 발급
"""

import hmac
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from dimsum.config.settings import settings

ALGORITHM = "HS256"
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
BCRYPT_MAX_BYTES = 72


def fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= BCRYPT_MAX_BYTES


def hash_password(password: str) -> str:
    """bcrypt 해시 생성. 72바이트를 넘으면 ValueError (bcrypt 버전과 무관하게 잘라내지 않음)"""
    if not fits_bcrypt(password):
        raise ValueError(f"password cannot be longer than {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def is_hashed(stored: str) -> bool:
    """bcrypt 해시 형식인지 확인 (이전 버전이 저장한 평문 행 구분용)"""
    return stored.startswith(BCRYPT_PREFIXES)


def verify_password(password: str, stored: str) -> bool:
    """
    입력 비밀번호를 저장된 값과 비교한다.

    저장값이 bcrypt 해시가 아니면 평문으로 간주하고 상수 시간 비교한다.
    """
    if not password or not stored:
        return False
    if is_hashed(stored):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def create_access_token(admin_id: int, username: str, expires_minutes: int | None = None) -> str:
    expires = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": username,
        "admin_id": admin_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """토큰 검증. 만료/위조 시 jwt.InvalidTokenError 계열 예외 발생"""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
