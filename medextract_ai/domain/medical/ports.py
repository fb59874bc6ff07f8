"""문서 처리 워크플로우가 의존하는 외부 협력자 인터페이스."""

from typing import Any, Protocol

from medextract_ai.domain.medical.models import (
    CategoryDetection,
    Document,
    DocumentCategory,
    ExaminationType,
    ExtractedFields,
    NotificationAttachment,
    ProcessingOutcome,
)


class DocumentExtractor(Protocol):
    """문서에서 환자/검사 정보를 추출합니다."""

    async def extract(
        self, document: Document, custom_prompt: str | None = None
    ) -> ExtractedFields: ...


class CategoryDetector(Protocol):
    """문서 첫 페이지로 카테고리를 분류합니다."""

    async def detect_category(
        self, document: Document, categories: list[str]
    ) -> CategoryDetection: ...


class DocumentCategoryRepository(Protocol):
    async def find_all(self) -> list[DocumentCategory]: ...

    async def find_by_name(self, name: str) -> DocumentCategory | None: ...


class ExaminationTypeRepository(Protocol):
    async def find_by_name(self, name: str) -> ExaminationType | None: ...


class Notifier(Protocol):
    """누락/오류 알림을 전달합니다. 전송 실패 시 NotificationError를 발생시킵니다."""

    async def notify(
        self,
        document_id: str,
        missing_fields: list[str],
        partial_info: dict[str, str],
        attachment: NotificationAttachment | None = None,
    ) -> Any: ...


class MedicalInfoForwarder(Protocol):
    """확인 완료된 결과를 외부 API로 전달합니다."""

    async def forward(self, document_id: str, outcome: ProcessingOutcome) -> Any: ...
