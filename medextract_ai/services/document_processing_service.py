"""문서 처리 서비스 - 애플리케이션 계층.

추출 → 필수 항목 검증 → 검사 유형 확인 → 결과 분기로 이어지는
스캔 의료 문서 처리 워크플로우입니다.
"""

import logging
from dataclasses import dataclass

from medextract_ai.domain.medical.models import (
    Document,
    ExtractedFields,
    NotificationAttachment,
    ProcessingOutcome,
)
from medextract_ai.domain.medical.ports import (
    CategoryDetector,
    DocumentCategoryRepository,
    DocumentExtractor,
    ExaminationTypeRepository,
    MedicalInfoForwarder,
    Notifier,
)
from medextract_ai.domain.medical.validation import validate_extracted_fields

logger = logging.getLogger(__name__)

INVALID_EXAMINATION_TYPE = "Invalid examination type"
DEFAULT_SYSTEM_PROMPT_CATEGORY = "SYSTEM_PROMPT"


@dataclass(frozen=True, kw_only=True)
class BasicWorkflowConfig:
    """카테고리 분류 없이 기본 추출 프롬프트만 사용하는 구성."""

    extractor: DocumentExtractor
    examination_type_repository: ExaminationTypeRepository
    notifier: Notifier
    forwarder: MedicalInfoForwarder | None = None
    attach_document: bool = True


@dataclass(frozen=True, kw_only=True)
class CategorizedWorkflowConfig(BasicWorkflowConfig):
    """카테고리 감지 후 카테고리별 프롬프트로 추출하는 구성."""

    category_detector: CategoryDetector
    category_repository: DocumentCategoryRepository
    system_prompt_category: str = DEFAULT_SYSTEM_PROMPT_CATEGORY


@dataclass(frozen=True)
class ResolvedPrompt:
    """카테고리 감지로 결정된 추출 프롬프트."""

    prompt: str | None = None
    category: str | None = None


class DocumentProcessingService:
    """스캔 의료 문서 처리 서비스.

    업무상 실패(필수 항목 누락, 검사 유형 미확인)는 INCOMPLETE 결과로 반환하고
    알림을 정확히 한 번 보냅니다. 추출기/레포지토리 오류만 호출자에게 전파됩니다.
    """

    def __init__(self, config: BasicWorkflowConfig) -> None:
        """서비스를 초기화합니다.

        Args:
            config: 워크플로우 구성 (Basic 또는 Categorized)
        """
        self.config = config
        self.categorization = (
            config if isinstance(config, CategorizedWorkflowConfig) else None
        )

    async def process(self, document: Document) -> ProcessingOutcome:
        """문서를 처리합니다.

        Args:
            document: 업로드된 문서

        Returns:
            처리 결과 (RESOLVED 또는 INCOMPLETE)

        Raises:
            DocumentExtractionError: 추출 응답을 파싱할 수 없는 경우
            SQLAlchemyError: 참조 데이터 조회 실패 시
        """
        # 1. 카테고리별 프롬프트 결정 (실패해도 기본 프롬프트로 진행)
        resolved = await self._resolve_prompt(document)

        # 2. 정보 추출 (문서당 한 번)
        fields = await self.config.extractor.extract(document, resolved.prompt)

        # 3. 필수 항목 검증
        validation = validate_extracted_fields(fields)
        if not validation.is_valid:
            logger.info(
                "필수 항목 누락",
                extra={
                    "document_id": document.id,
                    "missing_fields": validation.missing_fields,
                },
            )
            await self._notify(
                document, validation.missing_fields, fields, resolved.category
            )
            return ProcessingOutcome.incomplete(
                fields,
                missing_information=validation.missing_fields,
                used_category=resolved.category,
            )

        # 4. 검사 유형 확인
        examination_type = await self.config.examination_type_repository.find_by_name(
            fields.examination_type
        )
        if examination_type is None:
            logger.info(
                "검사 유형 미확인",
                extra={
                    "document_id": document.id,
                    "examination_type": fields.examination_type,
                },
            )
            await self._notify(
                document, [INVALID_EXAMINATION_TYPE], fields, resolved.category
            )
            return ProcessingOutcome.incomplete(fields, used_category=resolved.category)

        # 5. 확인 완료
        outcome = ProcessingOutcome.resolved(
            fields,
            folder_name=examination_type.name,
            used_category=resolved.category,
        )
        logger.info(
            "문서 처리 완료",
            extra={"document_id": document.id, "folder_name": outcome.folder_name},
        )
        await self._forward(document, outcome)
        return outcome

    async def _resolve_prompt(self, document: Document) -> ResolvedPrompt:
        """시스템 프롬프트와 감지된 카테고리 프롬프트를 합칩니다.

        감지 경로의 모든 오류는 로그만 남기고, 그때까지 확보한 프롬프트로 진행합니다.
        """
        config = self.categorization
        if config is None:
            return ResolvedPrompt()

        system_prompt: str | None = None
        category_prompt: str | None = None
        category_name: str | None = None

        try:
            categories = await config.category_repository.find_all()

            system_category = await config.category_repository.find_by_name(
                config.system_prompt_category
            )
            if system_category and system_category.prompt:
                system_prompt = system_category.prompt
            else:
                logger.warning(
                    "시스템 프롬프트 없음",
                    extra={"category_name": config.system_prompt_category},
                )

            candidate_names = [
                category.name
                for category in categories
                if category.name != config.system_prompt_category
            ]
            detection = await config.category_detector.detect_category(
                document, candidate_names
            )
            logger.info(
                "카테고리 감지 결과",
                extra={
                    "document_id": document.id,
                    "category": detection.category,
                    "no_category": detection.no_category,
                },
            )

            if not detection.no_category and detection.category in candidate_names:
                category = await config.category_repository.find_by_name(
                    detection.category
                )
                if category and category.prompt:
                    category_prompt = category.prompt
                    category_name = category.name

        except Exception:
            logger.exception(
                "카테고리 감지 실패, 확보된 프롬프트로 진행",
                extra={"document_id": document.id},
            )

        return ResolvedPrompt(
            prompt=self._merge_prompts(system_prompt, category_prompt),
            category=category_name,
        )

    @staticmethod
    def _merge_prompts(system_prompt: str | None, category_prompt: str | None) -> str | None:
        parts = [part for part in (system_prompt, category_prompt) if part]
        return "\n\n".join(parts) if parts else None

    async def _notify(
        self,
        document: Document,
        missing_fields: list[str],
        fields: ExtractedFields,
        used_category: str | None,
    ) -> None:
        """알림을 보냅니다. 전송 실패는 로그만 남기고 결과에 영향을 주지 않습니다."""
        partial_info = fields.to_report()
        partial_info["usedCategory"] = used_category or ""

        attachment = (
            NotificationAttachment(
                filename=document.filename,
                content=document.content,
                content_type=document.mime_type,
            )
            if self.config.attach_document
            else None
        )

        try:
            await self.config.notifier.notify(
                document.id, missing_fields, partial_info, attachment
            )
        except Exception:
            logger.exception("알림 전송 실패", extra={"document_id": document.id})

    async def _forward(self, document: Document, outcome: ProcessingOutcome) -> None:
        """외부 API 전달. 실패는 로그만 남깁니다."""
        if self.config.forwarder is None:
            return

        try:
            await self.config.forwarder.forward(document.id, outcome)
        except Exception:
            logger.exception("외부 API 전달 실패", extra={"document_id": document.id})
