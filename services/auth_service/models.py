from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.config.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"schema": "auth_schema"}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Checkout selects a shipping address by its position in this list
    addresses = relationship(
        "Address",
        back_populates="user",
        lazy="selectin",
        order_by="Address.id",
        cascade="all, delete-orphan",
    )


class Address(Base):
    __tablename__ = "addresses"
    __table_args__ = {"schema": "auth_schema"}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("auth_schema.users.id"), nullable=False, index=True)
    street = Column(String(255), nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    landmark = Column(String(255), nullable=True)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(120), nullable=False)

    user = relationship("User", back_populates="addresses")
