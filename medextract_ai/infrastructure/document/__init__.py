"""문서 처리 인프라스트럭처."""

from medextract_ai.infrastructure.document.pdf_converter import (
    DocumentToPdfConverter,
    PdfConverterError,
)
from medextract_ai.infrastructure.document.renderer import (
    DocumentRenderer,
    DocumentRenderError,
)

__all__ = [
    "DocumentRenderer",
    "DocumentRenderError",
    "DocumentToPdfConverter",
    "PdfConverterError",
]
