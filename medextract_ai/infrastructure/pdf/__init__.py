"""PDF 처리 인프라스트럭처.

PyMuPDF를 사용하여 PDF 페이지를 Vision API용 이미지로 변환합니다.
"""

from medextract_ai.infrastructure.pdf.image_converter import (
    PageImage,
    PDFImageConverter,
    PDFRenderError,
)

__all__ = [
    "PageImage",
    "PDFImageConverter",
    "PDFRenderError",
]
