"""Vision API 입력 준비.

업로드된 문서를 MIME 타입에 따라 페이지 이미지 목록으로 변환합니다.
- PDF: PyMuPDF로 페이지 렌더링
- JPEG/PNG: 원본 이미지 그대로 사용
- DOC/DOCX: LibreOffice로 PDF 변환 후 렌더링
"""

import hashlib
from collections import OrderedDict

from medextract_ai.core.config.settings import Settings, settings
from medextract_ai.domain.medical.models import (
    DOC_MIME_TYPE,
    DOCX_MIME_TYPE,
    FILE_EXTENSIONS,
    JPEG_MIME_TYPE,
    PDF_MIME_TYPE,
    PNG_MIME_TYPE,
    Document,
)
from medextract_ai.infrastructure.document.pdf_converter import (
    DocumentToPdfConverter,
    PdfConverterError,
)
from medextract_ai.infrastructure.pdf.image_converter import (
    PageImage,
    PDFImageConverter,
    PDFRenderError,
)


class DocumentRenderError(Exception):
    """문서 렌더링 실패 예외."""

    pass


class DocumentRenderer:
    """문서를 Vision API용 페이지 이미지로 변환합니다.

    카테고리 감지와 정보 추출이 같은 Word 문서를 렌더링하므로
    LibreOffice 변환 결과를 문서 단위로 잠시 보관합니다.
    """

    # 동시에 처리 중인 문서 수 정도만 보관
    PDF_CACHE_SIZE = 8

    def __init__(
        self,
        image_converter: PDFImageConverter | None = None,
        pdf_converter: DocumentToPdfConverter | None = None,
    ) -> None:
        self.image_converter = image_converter or PDFImageConverter()
        self.pdf_converter = pdf_converter or DocumentToPdfConverter()
        self._pdf_cache: OrderedDict[tuple[str, str], bytes] = OrderedDict()

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "DocumentRenderer":
        """설정값(DPI, LibreOffice 경로/타임아웃)으로 렌더러를 생성합니다."""
        return cls(
            image_converter=PDFImageConverter(dpi=config.render_dpi),
            pdf_converter=DocumentToPdfConverter(
                timeout=config.libreoffice_timeout,
                executable=config.libreoffice_path,
            ),
        )

    async def render(self, document: Document, max_pages: int) -> list[PageImage]:
        """문서를 최대 max_pages 장의 이미지로 변환합니다.

        Raises:
            DocumentRenderError: 지원하지 않는 형식이거나 변환 실패 시
        """
        if document.mime_type in (JPEG_MIME_TYPE, PNG_MIME_TYPE):
            return [PageImage.from_bytes(document.content, document.mime_type)]

        try:
            pdf_bytes = await self._to_pdf(document)
            return self.image_converter.convert_pages(pdf_bytes, max_pages=max_pages)
        except (PdfConverterError, PDFRenderError) as e:
            raise DocumentRenderError(f"문서 렌더링 실패 ({document.id}): {e}") from e

    async def render_first_page(self, document: Document) -> PageImage:
        """첫 페이지만 변환합니다 (카테고리 감지용).

        Raises:
            DocumentRenderError: 지원하지 않는 형식이거나 변환 실패 시
        """
        if document.mime_type in (JPEG_MIME_TYPE, PNG_MIME_TYPE):
            return PageImage.from_bytes(document.content, document.mime_type)

        try:
            pdf_bytes = await self._to_pdf(document)
            return self.image_converter.convert_first_page(pdf_bytes)
        except (PdfConverterError, PDFRenderError) as e:
            raise DocumentRenderError(f"문서 렌더링 실패 ({document.id}): {e}") from e

    async def _to_pdf(self, document: Document) -> bytes:
        if document.mime_type == PDF_MIME_TYPE:
            return document.content
        if document.mime_type not in (DOC_MIME_TYPE, DOCX_MIME_TYPE):
            raise DocumentRenderError(
                f"지원하지 않는 MIME 타입입니다: {document.mime_type}"
            )

        # 같은 ID로 다른 내용이 올라올 수 있으므로 내용 해시까지 키로 사용
        key = (document.id, hashlib.sha256(document.content).hexdigest())
        cached = self._pdf_cache.get(key)
        if cached is not None:
            self._pdf_cache.move_to_end(key)
            return cached

        pdf_bytes = await self.pdf_converter.convert(
            document.content, suffix=FILE_EXTENSIONS[document.mime_type]
        )
        self._pdf_cache[key] = pdf_bytes
        if len(self._pdf_cache) > self.PDF_CACHE_SIZE:
            self._pdf_cache.popitem(last=False)
        return pdf_bytes
