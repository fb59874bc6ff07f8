"""PDF 페이지를 이미지로 변환하는 모듈.

OpenAI Vision API 전송을 위해 스캔 문서 PDF의 페이지를 PNG 이미지로 변환합니다.
"""

import base64
from dataclasses import dataclass

import fitz  # PyMuPDF


class PDFRenderError(Exception):
    """PDF 페이지 렌더링 실패 예외."""

    pass


@dataclass
class PageImage:
    """Vision API에 전달할 페이지 이미지."""

    page_number: int
    base64_data: str
    mime_type: str = "image/png"
    width: int | None = None
    height: int | None = None

    @property
    def data_url(self) -> str:
        """Data URL 형식으로 반환합니다."""
        return f"data:{self.mime_type};base64,{self.base64_data}"

    @classmethod
    def from_bytes(cls, image_bytes: bytes, mime_type: str) -> "PageImage":
        """업로드된 이미지 파일을 그대로 페이지 이미지로 감쌉니다."""
        return cls(
            page_number=1,
            base64_data=base64.b64encode(image_bytes).decode("utf-8"),
            mime_type=mime_type,
        )


class PDFImageConverter:
    """PDF 페이지를 이미지로 변환하는 클래스.

    PyMuPDF를 사용하여 PDF 페이지를 PNG 이미지로 변환합니다.
    스캔 문서의 글자를 읽을 수 있는 해상도를 유지하면서
    Vision API 크기 제한에 맞춥니다.
    """

    DEFAULT_DPI = 150
    # 최대 이미지 크기 (Vision API 제한 고려)
    MAX_DIMENSION = 2048

    def __init__(self, dpi: int = DEFAULT_DPI) -> None:
        """변환기를 초기화합니다.

        Args:
            dpi: 변환 해상도 (기본값: 150 DPI)
        """
        self.dpi = dpi
        # fitz zoom 계수 (72 DPI 기준)
        self.zoom = dpi / 72.0

    def convert_pages(self, pdf_bytes: bytes, max_pages: int) -> list[PageImage]:
        """앞에서부터 최대 max_pages 페이지를 이미지로 변환합니다.

        Args:
            pdf_bytes: PDF 파일 바이트 데이터
            max_pages: 변환할 최대 페이지 수

        Returns:
            변환된 PageImage 리스트 (페이지 순서)

        Raises:
            PDFRenderError: PDF 처리 실패 또는 페이지가 없는 경우
        """
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
            try:
                if len(doc) == 0:
                    raise PDFRenderError("PDF 문서에 페이지가 없습니다")

                page_count = min(len(doc), max_pages)
                return [
                    self._render_page(doc[index], index + 1)
                    for index in range(page_count)
                ]
            finally:
                doc.close()

        except fitz.FileDataError as e:
            raise PDFRenderError(f"PDF 데이터를 처리할 수 없습니다: {e}") from e
        except PDFRenderError:
            raise
        except Exception as e:
            raise PDFRenderError(f"PDF 이미지 변환 중 오류 발생: {e}") from e

    def convert_first_page(self, pdf_bytes: bytes) -> PageImage:
        """첫 페이지만 이미지로 변환합니다 (카테고리 감지용)."""
        return self.convert_pages(pdf_bytes, max_pages=1)[0]

    def _render_page(self, page: fitz.Page, page_number: int) -> PageImage:
        """단일 페이지를 PNG로 렌더링합니다."""
        zoom = self.zoom
        width, height = page.rect.width * zoom, page.rect.height * zoom

        # 비율을 유지하며 최대 크기에 맞춤
        largest = max(width, height)
        if largest > self.MAX_DIMENSION:
            zoom *= self.MAX_DIMENSION / largest

        pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        png_bytes = pixmap.tobytes("png")

        return PageImage(
            page_number=page_number,
            base64_data=base64.b64encode(png_bytes).decode("utf-8"),
            width=pixmap.width,
            height=pixmap.height,
        )
