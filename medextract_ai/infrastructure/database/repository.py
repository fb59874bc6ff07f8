"""참조 데이터 레포지토리 - 데이터베이스 접근 계층.

각 조회는 짧은 세션에서 단일 쿼리로 수행되며, AI 호출 동안 커넥션을 점유하지 않습니다.
"""

import structlog
from sqlalchemy import func, select

from medextract_ai.domain.medical.models import DocumentCategory, ExaminationType
from medextract_ai.domain.medical.normalization import normalize_label
from medextract_ai.infrastructure.database.connection import Database
from medextract_ai.infrastructure.database.models import (
    CoordonanceORM,
    DocumentCategoryORM,
    MedicalTypeORM,
)

logger = structlog.get_logger(__name__)


class MySqlExaminationTypeRepository:
    """검사 유형 레포지토리 (읽기 전용).

    자유 텍스트 라벨을 정규화한 뒤 별칭(coordonance) 테이블과
    대소문자 구분 없이 비교하여 표준 검사 유형을 찾습니다.
    """

    def __init__(self, database: Database) -> None:
        """레포지토리를 초기화합니다.

        Args:
            database: 커넥션 풀 핸들
        """
        self._database = database

    async def find_by_name(self, name: str) -> ExaminationType | None:
        """라벨로 표준 검사 유형을 조회합니다.

        Args:
            name: AI가 추출한 검사 유형 라벨

        Returns:
            첫 번째 일치 항목 또는 None
        """
        normalized = normalize_label(name)
        if not normalized.strip():
            logger.info("검사 유형 라벨이 정규화 후 비어 있음", label=name)
            return None

        stmt = (
            select(MedicalTypeORM)
            .join(CoordonanceORM, CoordonanceORM.typeID == MedicalTypeORM.id)
            .where(func.lower(CoordonanceORM.name) == func.lower(normalized))
            .limit(1)
        )

        async with self._database.session() as session:
            result = await session.execute(stmt)
            orm_type = result.scalars().first()

        if orm_type is None:
            logger.info("검사 유형 조회 결과 없음", label=name, normalized=normalized)
            return None

        return self._to_domain(orm_type)

    def _to_domain(self, orm_type: MedicalTypeORM) -> ExaminationType:
        return ExaminationType(
            id=orm_type.id,
            name=orm_type.name,
            code=orm_type.code,
            coordonance=orm_type.coordonance,
        )


class MySqlDocumentCategoryRepository:
    """문서 카테고리 레포지토리 (읽기 전용)."""

    def __init__(self, database: Database) -> None:
        """레포지토리를 초기화합니다.

        Args:
            database: 커넥션 풀 핸들
        """
        self._database = database

    async def find_all(self) -> list[DocumentCategory]:
        """모든 카테고리를 조회합니다."""
        async with self._database.session() as session:
            result = await session.execute(
                select(DocumentCategoryORM).order_by(DocumentCategoryORM.id)
            )
            orm_categories = result.scalars().all()

        return [self._to_domain(orm_category) for orm_category in orm_categories]

    async def find_by_name(self, name: str) -> DocumentCategory | None:
        """이름으로 카테고리를 조회합니다.

        Args:
            name: 카테고리명 (예약 시스템 프롬프트명 포함)

        Returns:
            카테고리가 존재하면 도메인 모델, 없으면 None
        """
        async with self._database.session() as session:
            result = await session.execute(
                select(DocumentCategoryORM).where(DocumentCategoryORM.name == name)
            )
            orm_category = result.scalars().first()

        return self._to_domain(orm_category) if orm_category else None

    def _to_domain(self, orm_category: DocumentCategoryORM) -> DocumentCategory:
        return DocumentCategory(
            id=orm_category.id,
            name=orm_category.name,
            prompt=orm_category.prompt or "",
        )
