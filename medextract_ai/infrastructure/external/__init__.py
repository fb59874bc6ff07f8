"""External API 클라이언트 모듈."""

from medextract_ai.infrastructure.external.medical_api_client import (
    ForwardingError,
    HttpMedicalInfoForwarder,
)

__all__ = [
    "ForwardingError",
    "HttpMedicalInfoForwarder",
]
