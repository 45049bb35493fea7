from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ProductBase(BaseModel):
    image_url: Optional[str] = None
    deskripsi: Optional[str] = None


class ProductCreate(ProductBase):
    nama_produk: str = Field(..., min_length=1, max_length=100)
    harga: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class ProductUpdate(ProductBase):
    """
    부분 수정 스키마

    nama_produk/harga는 None이면 기존 값 유지,
    image_url/deskripsi는 키가 있으면 null 포함 그대로 반영한다.
    """
    nama_produk: Optional[str] = Field(None, min_length=1, max_length=100)
    harga: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nama_produk: str
    harga: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("harga")
    def _serialize_harga(self, harga: Decimal) -> float:
        return float(harga)
