"""API 의존성.

lifespan에서 한 번 생성한 컴포넌트를 app.state에서 꺼내 라우터에 주입합니다.
"""

from fastapi import Request
from openai import AsyncOpenAI

from medextract_ai.core.config.settings import Settings, settings
from medextract_ai.infrastructure.database.connection import Database
from medextract_ai.infrastructure.database.repository import (
    MySqlDocumentCategoryRepository,
    MySqlExaminationTypeRepository,
)
from medextract_ai.infrastructure.document import DocumentRenderer, DocumentToPdfConverter
from medextract_ai.infrastructure.external import HttpMedicalInfoForwarder
from medextract_ai.infrastructure.llm import OpenAICategoryDetector, OpenAIDocumentExtractor
from medextract_ai.infrastructure.notification import create_notifier
from medextract_ai.services.document_processing_service import (
    BasicWorkflowConfig,
    CategorizedWorkflowConfig,
    DocumentProcessingService,
)


def build_processing_service(
    database: Database, config: Settings = settings
) -> DocumentProcessingService:
    """설정에 따라 문서 처리 서비스를 구성합니다.

    카테고리 분류 사용 여부는 여기서 한 번 결정됩니다.
    """
    client = AsyncOpenAI(api_key=config.openai_api_key)
    renderer = DocumentRenderer.from_settings(config)

    common = {
        "extractor": OpenAIDocumentExtractor(
            client=client,
            renderer=renderer,
            model=config.openai_model,
            max_pages=config.max_pages,
        ),
        "examination_type_repository": MySqlExaminationTypeRepository(database),
        "notifier": create_notifier(config),
        "forwarder": (
            HttpMedicalInfoForwarder(
                api_url=config.external_api_url,
                timeout=config.external_api_timeout,
            )
            if config.external_api_url
            else None
        ),
        "attach_document": config.notification_attach_document,
    }

    if config.category_detection_enabled:
        workflow_config: BasicWorkflowConfig = CategorizedWorkflowConfig(
            **common,
            category_detector=OpenAICategoryDetector(
                client=client, renderer=renderer, model=config.openai_model
            ),
            category_repository=MySqlDocumentCategoryRepository(database),
            system_prompt_category=config.system_prompt_category,
        )
    else:
        workflow_config = BasicWorkflowConfig(**common)

    return DocumentProcessingService(workflow_config)


def get_processing_service(request: Request) -> DocumentProcessingService:
    """문서 처리 서비스 의존성."""
    return request.app.state.processing_service


def get_pdf_converter() -> DocumentToPdfConverter:
    """Word → PDF 변환기 의존성."""
    return DocumentToPdfConverter(
        timeout=settings.libreoffice_timeout, executable=settings.libreoffice_path
    )
