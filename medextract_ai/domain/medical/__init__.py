"""의료 문서 처리 도메인.

문서 추출 결과, 참조 데이터, 처리 결과 모델과 외부 협력자 인터페이스를 정의합니다.
"""

from medextract_ai.domain.medical.models import (
    SUPPORTED_MIME_TYPES,
    CategoryDetection,
    Document,
    DocumentCategory,
    ExaminationType,
    ExtractedFields,
    NotificationAttachment,
    ProcessingOutcome,
    ProcessingStatus,
    ValidationResult,
)
from medextract_ai.domain.medical.normalization import normalize_label
from medextract_ai.domain.medical.validation import REQUIRED_FIELDS, validate_extracted_fields

__all__ = [
    "SUPPORTED_MIME_TYPES",
    "CategoryDetection",
    "Document",
    "DocumentCategory",
    "ExaminationType",
    "ExtractedFields",
    "NotificationAttachment",
    "ProcessingOutcome",
    "ProcessingStatus",
    "ValidationResult",
    "REQUIRED_FIELDS",
    "normalize_label",
    "validate_extracted_fields",
]
