"""문서 처리 API 라우터 테스트."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException, status
from fastapi.testclient import TestClient

from medextract_ai.api.dependencies import get_pdf_converter, get_processing_service
from medextract_ai.api.routes.documents import _content_disposition, _read_upload
from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import ExtractedFields, ProcessingOutcome
from medextract_ai.infrastructure.document.pdf_converter import PdfConverterError
from medextract_ai.main import app

UPLOAD_URL = f"{settings.api_v1_prefix}/documents/upload"
CONVERT_URL = f"{settings.api_v1_prefix}/documents/convert"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def mock_service() -> AsyncMock:
    """Mock 문서 처리 서비스."""
    service = AsyncMock()
    service.process.return_value = ProcessingOutcome.resolved(
        ExtractedFields(
            patient_first_name="Jean",
            patient_last_name="Dupont",
            patient_gender="M",
            patient_birthdate="15/03/1985",
            examination_date="20/12/2024",
            examination_type="Radio Thorax",
        ),
        folder_name="Radiographie Thoracique",
    )
    return service


@pytest.fixture
def mock_converter() -> AsyncMock:
    """Mock Word → PDF 변환기."""
    converter = AsyncMock()
    converter.convert.return_value = b"%PDF-1.4 converted"
    return converter


@pytest.fixture
def client(mock_service: AsyncMock, mock_converter: AsyncMock) -> Iterator[TestClient]:
    """의존성을 교체한 테스트 클라이언트 (lifespan 미실행)."""
    app.dependency_overrides[get_processing_service] = lambda: mock_service
    app.dependency_overrides[get_pdf_converter] = lambda: mock_converter
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestUploadDocument:
    """POST /documents/upload 테스트."""

    def test_처리_결과를_camelCase로_반환한다(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        """정상 처리 시 success와 data를 반환한다."""
        # When
        response = client.post(
            UPLOAD_URL,
            files={"document": ("scan.pdf", b"%PDF-1.4 scan", "application/pdf")},
            data={"documentId": "doc-1"},
        )

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == 1
        assert body["data"]["folderName"] == "Radiographie Thoracique"
        assert body["data"]["patientLastName"] == "Dupont"

        document = mock_service.process.await_args.args[0]
        assert document.id == "doc-1"
        assert document.content == b"%PDF-1.4 scan"
        assert document.mime_type == "application/pdf"

    def test_정보_부족도_200으로_반환한다(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        """INCOMPLETE 결과는 오류가 아니다."""
        # Given
        mock_service.process.return_value = ProcessingOutcome.incomplete(
            ExtractedFields(patient_first_name="Jean"),
            missing_information=["patientLastName"],
        )

        # When
        response = client.post(
            UPLOAD_URL,
            files={"document": ("scan.png", b"\x89PNG", "image/png")},
            data={"documentId": "doc-2"},
        )

        # Then
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == 2
        assert data["folderName"] == ""
        assert data["missingInformation"] == ["patientLastName"]

    def test_파일이_없으면_400을_반환한다(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        """document 필드가 없으면 처리하지 않는다."""
        response = client.post(UPLOAD_URL, data={"documentId": "doc-1"})

        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"
        mock_service.process.assert_not_awaited()

    def test_문서_ID가_없으면_400을_반환한다(self, client: TestClient) -> None:
        """documentId 필드가 없으면 처리하지 않는다."""
        response = client.post(
            UPLOAD_URL,
            files={"document": ("scan.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Document ID is required"

    def test_지원하지_않는_형식은_415를_반환한다(self, client: TestClient) -> None:
        """PDF/DOC/DOCX/JPEG/PNG 외 형식은 거부한다."""
        response = client.post(
            UPLOAD_URL,
            files={"document": ("notes.txt", b"hello", "text/plain")},
            data={"documentId": "doc-1"},
        )

        assert response.status_code == 415

    def test_최대_크기를_넘으면_413을_반환한다(
        self,
        client: TestClient,
        mock_service: AsyncMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """max_upload_size_mb를 초과하면 거부한다."""
        monkeypatch.setattr(settings, "max_upload_size_mb", 1)

        response = client.post(
            UPLOAD_URL,
            files={"document": ("big.pdf", b"0" * (1024 * 1024 + 1), "application/pdf")},
            data={"documentId": "doc-1"},
        )

        assert response.status_code == status.HTTP_413_CONTENT_TOO_LARGE
        mock_service.process.assert_not_awaited()

    def test_처리_오류는_500과_오류_메시지를_반환한다(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        """서비스 예외는 error/message 본문으로 응답한다."""
        # Given
        mock_service.process.side_effect = RuntimeError("vision timeout")

        # When
        response = client.post(
            UPLOAD_URL,
            files={"document": ("scan.pdf", b"%PDF", "application/pdf")},
            data={"documentId": "doc-1"},
        )

        # Then
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "vision timeout",
        }


class TestConvertDocument:
    """POST /documents/convert 테스트."""

    def test_Word_문서를_PDF로_변환한다(
        self, client: TestClient, mock_converter: AsyncMock
    ) -> None:
        """PDF 바이트를 첨부 파일로 반환한다."""
        # When
        response = client.post(
            CONVERT_URL,
            files={"document": ("rapport.docx", b"PK docx", DOCX_MIME)},
        )

        # Then
        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 converted"
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="rapport.pdf"' in response.headers["content-disposition"]
        mock_converter.convert.assert_awaited_once_with(b"PK docx", suffix=".docx")

    def test_Word가_아닌_파일은_415를_반환한다(self, client: TestClient) -> None:
        """PDF는 변환 대상이 아니다."""
        response = client.post(
            CONVERT_URL,
            files={"document": ("scan.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 415

    def test_변환_실패는_500을_반환한다(
        self, client: TestClient, mock_converter: AsyncMock
    ) -> None:
        """LibreOffice 오류는 500으로 응답한다."""
        mock_converter.convert.side_effect = PdfConverterError("LibreOffice 없음")

        response = client.post(
            CONVERT_URL,
            files={"document": ("rapport.doc", b"doc", "application/msword")},
        )

        assert response.status_code == 500

    def test_비_ASCII_파일명도_PDF로_변환한다(
        self, client: TestClient, mock_converter: AsyncMock
    ) -> None:
        """latin-1로 표현할 수 없는 파일명은 filename*로 전달한다."""
        # When
        response = client.post(
            CONVERT_URL,
            files={"document": ("compte’rendu.docx", b"PK docx", DOCX_MIME)},
        )

        # Then
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="compterendu.pdf"' in disposition
        assert "filename*=UTF-8''compte%E2%80%99rendu.pdf" in disposition
        mock_converter.convert.assert_awaited_once()

    def test_최대_크기를_넘으면_변환하지_않는다(
        self,
        client: TestClient,
        mock_converter: AsyncMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """변환 엔드포인트도 업로드 크기 제한을 따른다."""
        monkeypatch.setattr(settings, "max_upload_size_mb", 1)

        response = client.post(
            CONVERT_URL,
            files={"document": ("big.docx", b"0" * (1024 * 1024 + 1), DOCX_MIME)},
        )

        assert response.status_code == status.HTTP_413_CONTENT_TOO_LARGE
        mock_converter.convert.assert_not_awaited()


class TestReadUpload:
    """업로드 크기 검사 테스트."""

    async def test_선언된_크기가_크면_읽지_않고_거부한다(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """UploadFile.size가 제한을 넘으면 본문을 읽기 전에 413."""
        # Given
        monkeypatch.setattr(settings, "max_upload_size_mb", 1)
        upload = MagicMock(size=2 * 1024 * 1024)
        upload.read = AsyncMock()

        # When & Then
        with pytest.raises(HTTPException) as exc_info:
            await _read_upload(upload)

        assert exc_info.value.status_code == status.HTTP_413_CONTENT_TOO_LARGE
        upload.read.assert_not_awaited()

    async def test_크기를_모르면_제한보다_1바이트만_더_읽는다(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """size가 없는 업로드는 limit + 1 바이트까지만 읽어 판단한다."""
        # Given
        monkeypatch.setattr(settings, "max_upload_size_mb", 1)
        limit = 1024 * 1024
        upload = MagicMock(size=None)
        upload.read = AsyncMock(return_value=b"0" * 10)

        # When
        content = await _read_upload(upload)

        # Then
        assert content == b"0" * 10
        upload.read.assert_awaited_once_with(limit + 1)


class TestContentDisposition:
    """Content-Disposition 헤더 값 테스트."""

    def test_ASCII_파일명은_그대로_사용한다(self) -> None:
        assert _content_disposition("rapport.docx") == (
            "attachment; filename=\"rapport.pdf\"; filename*=UTF-8''rapport.pdf"
        )

    def test_따옴표는_ASCII_파일명에서_제거한다(self) -> None:
        """헤더 구문을 깨는 문자는 fallback 파일명에 넣지 않는다."""
        value = _content_disposition('le "bilan".docx')

        assert 'filename="le bilan.pdf"' in value
        assert "filename*=UTF-8''le%20%22bilan%22.pdf" in value

    def test_ASCII_문자가_없으면_기본_이름을_쓴다(self) -> None:
        value = _content_disposition("검사결과.docx")

        assert 'filename="document.pdf"' in value
        assert value.encode("latin-1")

    def test_파일명이_없으면_document를_쓴다(self) -> None:
        assert 'filename="document.pdf"' in _content_disposition(None)


class TestHealth:
    """GET /health 테스트."""

    def test_DB_미연결시_degraded를_반환한다(self, client: TestClient) -> None:
        """lifespan 없이 실행하면 데이터베이스가 열려 있지 않다."""
        response = client.get(f"{settings.api_v1_prefix}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"
        assert response.json()["service"] == settings.app_name

    def test_DB_연결시_healthy를_반환한다(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """연결된 Database가 있으면 healthy."""
        database = MagicMock(is_connected=True)
        monkeypatch.setattr(app.state, "database", database, raising=False)

        response = client.get(f"{settings.api_v1_prefix}/health")

        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
