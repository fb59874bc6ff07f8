"""Service layer.

Provides the scanned medical document processing workflow.
"""

from medextract_ai.services.document_processing_service import (
    BasicWorkflowConfig,
    CategorizedWorkflowConfig,
    DocumentProcessingService,
)

__all__ = [
    "BasicWorkflowConfig",
    "CategorizedWorkflowConfig",
    "DocumentProcessingService",
]
