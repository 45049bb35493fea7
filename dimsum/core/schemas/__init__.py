# dimsum/core/schemas/__init__.py

from .admin_schema import (
    AdminChangePassword,
    AdminCreate,
    AdminLogin,
    AdminResponse,
    AdminUpdate,
)

from .product_schema import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)

__all__ = [
    # Admin
    "AdminChangePassword",
    "AdminCreate",
    "AdminLogin",
    "AdminResponse",
    "AdminUpdate",

    # Product
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
]
