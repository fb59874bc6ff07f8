"""LLM infrastructure.

Provides OpenAI Vision based extraction and classification of scanned documents.
"""

from medextract_ai.infrastructure.llm.category_detector import (
    CategoryDetectionError,
    OpenAICategoryDetector,
)
from medextract_ai.infrastructure.llm.document_extractor import (
    DocumentExtractionError,
    OpenAIDocumentExtractor,
)

__all__ = [
    "CategoryDetectionError",
    "DocumentExtractionError",
    "OpenAICategoryDetector",
    "OpenAIDocumentExtractor",
]
