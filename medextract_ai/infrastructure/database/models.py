"""Database ORM models (read-only reference data)."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class MedicalTypeORM(Base):
    """표준 검사 유형 ORM 모델 (읽기 전용)."""

    __tablename__ = "medicalType"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    coordonance = Column(String(255), nullable=True)


class CoordonanceORM(Base):
    """검사 유형 별칭 ORM 모델 (정규화된 라벨 → 표준 검사 유형)."""

    __tablename__ = "coordonance"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    typeID = Column("typeID", Integer, ForeignKey("medicalType.id"), nullable=False)


class DocumentCategoryORM(Base):
    """문서 카테고리 ORM 모델 (카테고리별 추출 프롬프트)."""

    __tablename__ = "documentCategory"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    prompt = Column(Text, nullable=False, default="")
