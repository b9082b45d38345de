from sqlalchemy import Column, DateTime, Integer, String, func

from authcore.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    fullname = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    phone_number = Column(String(16), nullable=False)
    password_hash = Column(String, nullable=False)
    reset_token = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
