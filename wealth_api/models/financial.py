# wealth_api/models/financial.py
from sqlalchemy import Column, String, Float, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
import uuid

from wealth_api.db.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    assets = relationship("Asset", back_populates="user", cascade="all, delete-orphan")
    incomes = relationship("Income", back_populates="user", cascade="all, delete-orphan")
    liabilities = relationship("Liability", back_populates="user", cascade="all, delete-orphan")


class Asset(Base):
    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date_added = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="assets")

    __table_args__ = (Index("ix_assets_user_category", "user_id", "category"),)


class Income(Base):
    __tablename__ = "incomes"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date_added = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="incomes")

    __table_args__ = (Index("ix_incomes_user_category", "user_id", "category"),)


class Liability(Base):
    __tablename__ = "liabilities"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False, default=0.0)
    date_added = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="liabilities")

    __table_args__ = (Index("ix_liabilities_user_category", "user_id", "category"),)
