"""문서 처리 API 라우터.

스캔 의료 문서 업로드 처리 및 Word → PDF 변환 엔드포인트를 제공합니다.
"""

import logging
from pathlib import Path
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse, Response

from medextract_ai.api.dependencies import get_pdf_converter, get_processing_service
from medextract_ai.core.config.settings import settings
from medextract_ai.core.models.api import ErrorResponse, ProcessDocumentResponseDTO
from medextract_ai.domain.medical.models import (
    DOC_MIME_TYPE,
    DOCX_MIME_TYPE,
    FILE_EXTENSIONS,
    SUPPORTED_MIME_TYPES,
    Document,
)
from medextract_ai.infrastructure.document.pdf_converter import (
    DocumentToPdfConverter,
    PdfConverterError,
)
from medextract_ai.services.document_processing_service import DocumentProcessingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


async def _read_upload(document: UploadFile) -> bytes:
    """업로드 파일을 최대 크기까지만 읽습니다.

    Raises:
        HTTPException: 최대 크기를 초과한 경우 (413)
    """
    limit = settings.max_upload_size_mb * 1024 * 1024
    too_large = HTTPException(
        status_code=status.HTTP_413_CONTENT_TOO_LARGE,
        detail=f"파일 크기는 {settings.max_upload_size_mb}MB를 초과할 수 없습니다",
    )

    if document.size is not None and document.size > limit:
        raise too_large

    # 크기 정보가 없는 업로드도 limit + 1 바이트 이상은 메모리에 올리지 않음
    content = await document.read(limit + 1)
    if len(content) > limit:
        raise too_large
    return content


def _content_disposition(filename: str | None) -> str:
    """비 ASCII 파일명을 위한 RFC 5987 Content-Disposition 헤더 값."""
    pdf_name = f"{Path(filename or 'document').stem}.pdf"
    ascii_name = pdf_name.encode("ascii", errors="ignore").decode("ascii")
    ascii_name = ascii_name.replace('"', "").replace("\\", "")
    if ascii_name == ".pdf":
        ascii_name = "document.pdf"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(pdf_name)}"


@router.post(
    "/upload",
    response_model=ProcessDocumentResponseDTO,
    responses={500: {"model": ErrorResponse}},
    summary="스캔 문서 처리",
    description="업로드된 의료 문서에서 환자/검사 정보를 추출하고 검사 유형을 확인합니다",
)
async def upload_document(
    document: Annotated[UploadFile | None, File(description="스캔 문서 (PDF/DOC/DOCX/JPEG/PNG)")] = None,
    document_id: Annotated[str | None, Form(alias="documentId", description="문서 ID")] = None,
    service: DocumentProcessingService = Depends(get_processing_service),
) -> ProcessDocumentResponseDTO | JSONResponse:
    """업로드된 문서를 처리합니다.

    정보 부족/검사 유형 미확인도 정상 응답(status=2)으로 반환하며,
    추출 또는 참조 데이터 조회 오류만 500으로 응답합니다.
    """
    if document is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    if not document_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Document ID is required"
        )

    if document.content_type not in SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Invalid file type: {document.content_type}",
        )

    content = await _read_upload(document)

    try:
        outcome = await service.process(
            Document(id=document_id, content=content, mime_type=document.content_type)
        )
    except Exception as e:
        logger.exception("문서 처리 실패", extra={"document_id": document_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error", message=str(e)).model_dump(),
        )

    return ProcessDocumentResponseDTO(data=outcome)


@router.post(
    "/convert",
    response_class=Response,
    summary="Word 문서 PDF 변환",
    description="DOC/DOCX 파일을 LibreOffice로 PDF 변환하여 반환합니다",
)
async def convert_document(
    document: Annotated[UploadFile, File(description="DOC/DOCX 파일")],
    converter: DocumentToPdfConverter = Depends(get_pdf_converter),
) -> Response:
    """업로드된 Word 문서를 PDF로 변환합니다."""
    if document.content_type not in (DOC_MIME_TYPE, DOCX_MIME_TYPE):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="DOC/DOCX 파일만 변환 가능합니다",
        )

    content = await _read_upload(document)

    try:
        pdf_bytes = await converter.convert(
            content, suffix=FILE_EXTENSIONS[document.content_type]
        )
    except PdfConverterError as e:
        logger.error("PDF 변환 실패", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(document.filename)},
    )
