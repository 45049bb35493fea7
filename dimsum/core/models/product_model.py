from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, func

from dimsum.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)  # SERIAL
    nama_produk = Column(String(100), nullable=False)
    harga = Column(Numeric(10, 2), nullable=False)
    image_url = Column(Text)
    deskripsi = Column(Text)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
    )
