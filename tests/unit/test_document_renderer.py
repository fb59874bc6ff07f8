"""문서 렌더링 테스트 (PDF 이미지 변환 포함)."""

import base64
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import fitz
import pytest

from medextract_ai.domain.medical.models import Document
from medextract_ai.infrastructure.document.pdf_converter import (
    DocumentToPdfConverter,
    PdfConverterError,
)
from medextract_ai.infrastructure.document.renderer import (
    DocumentRenderer,
    DocumentRenderError,
)
from medextract_ai.infrastructure.pdf.image_converter import (
    PDFImageConverter,
    PDFRenderError,
)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _make_pdf(page_count: int, width: float = 595, height: float = 842) -> bytes:
    """지정한 페이지 수의 PDF를 생성합니다."""
    doc = fitz.open()
    for index in range(page_count):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {index + 1}")
    pdf_bytes = doc.tobytes()
    doc.close()
    return pdf_bytes


class TestPDFImageConverter:
    """PDFImageConverter 테스트."""

    def test_최대_페이지_수까지만_변환한다(self) -> None:
        """앞에서부터 max_pages 페이지만 변환한다."""
        # Given
        converter = PDFImageConverter(dpi=72)

        # When
        pages = converter.convert_pages(_make_pdf(4), max_pages=2)

        # Then
        assert [page.page_number for page in pages] == [1, 2]
        assert all(page.mime_type == "image/png" for page in pages)
        assert base64.b64decode(pages[0].base64_data).startswith(b"\x89PNG")

    def test_큰_페이지는_최대_크기에_맞춘다(self) -> None:
        """긴 변이 MAX_DIMENSION을 넘지 않는다."""
        # Given
        converter = PDFImageConverter(dpi=300)

        # When
        page = converter.convert_first_page(_make_pdf(1, width=1190, height=1684))

        # Then
        assert max(page.width, page.height) <= PDFImageConverter.MAX_DIMENSION + 1

    def test_PDF가_아닌_데이터는_에러가_발생한다(self) -> None:
        """깨진 데이터는 PDFRenderError로 보고한다."""
        converter = PDFImageConverter()

        with pytest.raises(PDFRenderError):
            converter.convert_pages(b"not a pdf", max_pages=1)


class TestDocumentRenderer:
    """DocumentRenderer 테스트."""

    async def test_이미지는_원본_그대로_사용한다(self) -> None:
        """JPEG는 변환 없이 한 장의 이미지가 된다."""
        # Given
        renderer = DocumentRenderer()
        document = Document(id="img", content=b"\xff\xd8jpeg", mime_type="image/jpeg")

        # When
        pages = await renderer.render(document, max_pages=5)

        # Then
        assert len(pages) == 1
        assert pages[0].data_url.startswith("data:image/jpeg;base64,")
        assert base64.b64decode(pages[0].base64_data) == b"\xff\xd8jpeg"

    async def test_PDF는_페이지별로_렌더링한다(self) -> None:
        """PDF 페이지 이미지 목록을 반환한다."""
        # Given
        renderer = DocumentRenderer(image_converter=PDFImageConverter(dpi=72))
        document = Document(id="pdf", content=_make_pdf(3), mime_type="application/pdf")

        # When
        pages = await renderer.render(document, max_pages=5)

        # Then
        assert len(pages) == 3

    async def test_Word_문서는_PDF_변환_후_렌더링한다(self) -> None:
        """DOCX는 LibreOffice 변환기를 거친다."""
        # Given
        pdf_converter = AsyncMock()
        pdf_converter.convert.return_value = _make_pdf(1)
        renderer = DocumentRenderer(
            image_converter=PDFImageConverter(dpi=72), pdf_converter=pdf_converter
        )
        document = Document(id="word", content=b"PK docx", mime_type=DOCX_MIME)

        # When
        page = await renderer.render_first_page(document)

        # Then
        pdf_converter.convert.assert_awaited_once_with(b"PK docx", suffix=".docx")
        assert page.page_number == 1

    async def test_첫_페이지는_convert_first_page로_렌더링한다(self) -> None:
        """카테고리 감지용 첫 페이지는 이미지 변환기의 첫 페이지 경로를 쓴다."""
        # Given
        image_converter = MagicMock(spec=PDFImageConverter)
        renderer = DocumentRenderer(image_converter=image_converter)
        pdf_bytes = _make_pdf(2)
        document = Document(id="pdf", content=pdf_bytes, mime_type="application/pdf")

        # When
        page = await renderer.render_first_page(document)

        # Then
        image_converter.convert_first_page.assert_called_once_with(pdf_bytes)
        image_converter.convert_pages.assert_not_called()
        assert page is image_converter.convert_first_page.return_value

    async def test_같은_Word_문서는_한_번만_PDF로_변환한다(self) -> None:
        """감지(첫 페이지)와 추출(전체 페이지)이 LibreOffice 결과를 공유한다."""
        # Given
        pdf_converter = AsyncMock()
        pdf_converter.convert.return_value = _make_pdf(3)
        renderer = DocumentRenderer(
            image_converter=PDFImageConverter(dpi=72), pdf_converter=pdf_converter
        )
        document = Document(id="word", content=b"PK docx", mime_type=DOCX_MIME)

        # When
        first_page = await renderer.render_first_page(document)
        pages = await renderer.render(document, max_pages=5)

        # Then
        pdf_converter.convert.assert_awaited_once_with(b"PK docx", suffix=".docx")
        assert first_page.page_number == 1
        assert len(pages) == 3

    async def test_내용이_다르면_다시_변환한다(self) -> None:
        """같은 문서 ID라도 내용이 바뀌면 캐시를 쓰지 않는다."""
        # Given
        pdf_converter = AsyncMock()
        pdf_converter.convert.return_value = _make_pdf(1)
        renderer = DocumentRenderer(
            image_converter=PDFImageConverter(dpi=72), pdf_converter=pdf_converter
        )

        # When
        await renderer.render_first_page(
            Document(id="word", content=b"PK v1", mime_type=DOCX_MIME)
        )
        await renderer.render_first_page(
            Document(id="word", content=b"PK v2", mime_type=DOCX_MIME)
        )

        # Then
        assert pdf_converter.convert.await_count == 2

    async def test_캐시는_최대_개수를_넘지_않는다(self) -> None:
        """오래된 변환 결과부터 버린다."""
        # Given
        pdf_converter = AsyncMock()
        pdf_converter.convert.return_value = _make_pdf(1)
        renderer = DocumentRenderer(
            image_converter=PDFImageConverter(dpi=72), pdf_converter=pdf_converter
        )
        documents = [
            Document(id=f"word-{i}", content=b"PK", mime_type=DOCX_MIME)
            for i in range(DocumentRenderer.PDF_CACHE_SIZE + 1)
        ]

        # When
        for document in documents:
            await renderer.render_first_page(document)
        await renderer.render_first_page(documents[0])

        # Then
        assert len(renderer._pdf_cache) == DocumentRenderer.PDF_CACHE_SIZE
        assert pdf_converter.convert.await_count == DocumentRenderer.PDF_CACHE_SIZE + 2

    async def test_변환_실패는_렌더링_에러로_변환된다(self) -> None:
        """LibreOffice 실패는 DocumentRenderError가 된다."""
        # Given
        pdf_converter = AsyncMock()
        pdf_converter.convert.side_effect = PdfConverterError("LibreOffice 없음")
        renderer = DocumentRenderer(pdf_converter=pdf_converter)
        document = Document(id="word", content=b"PK", mime_type=DOCX_MIME)

        # When & Then
        with pytest.raises(DocumentRenderError):
            await renderer.render(document, max_pages=1)

    async def test_지원하지_않는_형식은_에러가_발생한다(self) -> None:
        """알 수 없는 MIME 타입은 DocumentRenderError."""
        renderer = DocumentRenderer()
        document = Document(id="txt", content=b"hello", mime_type="text/plain")

        with pytest.raises(DocumentRenderError):
            await renderer.render(document, max_pages=1)


class TestDocumentToPdfConverter:
    """DocumentToPdfConverter 테스트."""

    async def test_Word가_아닌_확장자는_에러가_발생한다(self) -> None:
        """.doc/.docx 외에는 변환하지 않는다."""
        converter = DocumentToPdfConverter(executable="/bin/true")

        with pytest.raises(PdfConverterError, match="지원하지 않는"):
            await converter.convert(b"%PDF", suffix=".pdf")

    async def test_실행_파일이_없으면_에러가_발생한다(self) -> None:
        """지정한 경로가 없으면 PdfConverterError."""
        converter = DocumentToPdfConverter(executable="/nonexistent/soffice")

        with pytest.raises(PdfConverterError, match="실행 파일"):
            await converter.convert(b"PK", suffix=".docx")

    async def test_LibreOffice_출력_PDF를_반환한다(self) -> None:
        """headless 변환 결과 파일을 읽어 반환한다."""
        # Given
        converter = DocumentToPdfConverter(executable="/bin/true")

        async def fake_exec(*args: str, **kwargs: object) -> MagicMock:
            source = Path(args[-1])
            source.with_suffix(".pdf").write_bytes(b"%PDF-1.4 out")
            process = MagicMock(returncode=0)
            process.communicate = AsyncMock(return_value=(None, b""))
            return process

        # When
        with patch(
            "medextract_ai.infrastructure.document.pdf_converter.asyncio.create_subprocess_exec",
            side_effect=fake_exec,
        ) as mock_exec:
            pdf_bytes = await converter.convert(b"PK docx", suffix=".docx")

        # Then
        assert pdf_bytes == b"%PDF-1.4 out"
        args = mock_exec.call_args.args
        assert args[:4] == ("/bin/true", "--headless", "--convert-to", "pdf")
        assert args[-1].endswith("source.docx")

    async def test_비정상_종료는_에러가_발생한다(self) -> None:
        """종료 코드가 0이 아니면 stderr를 포함해 실패한다."""
        converter = DocumentToPdfConverter(executable="/bin/true")
        process = MagicMock(returncode=1)
        process.communicate = AsyncMock(return_value=(None, b"source file could not be loaded"))

        with patch(
            "medextract_ai.infrastructure.document.pdf_converter.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            with pytest.raises(PdfConverterError, match="could not be loaded"):
                await converter.convert(b"PK", suffix=".doc")
