"""
module: constants.py
description: 전역 상수, Enum 정의
"""
from enum import Enum


class ErrorCode(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ADMIN_USERNAME_MIN_LENGTH = 3
ADMIN_PASSWORD_MIN_LENGTH = 6

PUBLIC_ENDPOINTS = ["/", "/health", "/debug", "/api/products", "/api/admin"]
