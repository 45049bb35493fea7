# dimsum/core/models/__init__.py

from dimsum.core.database import Base

# 마이그레이션/테스트에서 Base.metadata에 모든 테이블이 등록되도록 import
from .admin_model import Admin
from .product_model import Product

__all__ = [
    "Base",
    "Admin",
    "Product",
]
