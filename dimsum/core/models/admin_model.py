from sqlalchemy import Column, DateTime, Integer, String, func

from dimsum.core.database import Base


class Admin(Base):
    __tablename__ = "admin"

    id = Column(Integer, primary_key=True)  # SERIAL
    username = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt 해시
    created_at = Column(DateTime, server_default=func.now())
