"""Word 문서 → PDF 변환.

LibreOffice headless 모드로 DOC/DOCX 스캔 보고서를 PDF로 변환합니다.
변환된 PDF는 Vision 렌더링 입력 또는 /documents/convert 응답으로 사용됩니다.
"""

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class PdfConverterError(Exception):
    """PDF 변환 에러."""

    pass


class DocumentToPdfConverter:
    """DOC/DOCX → PDF 변환기.

    실행 파일은 명시적 경로 → PATH의 ``soffice``/``libreoffice`` 순서로 찾습니다.

    사용법:
        converter = DocumentToPdfConverter(timeout=60)
        pdf_bytes = await converter.convert(doc_bytes, suffix=".doc")
    """

    EXECUTABLE_NAMES = ("soffice", "libreoffice")
    SUPPORTED_SUFFIXES = (".doc", ".docx")

    def __init__(self, timeout: int = 60, executable: str | None = None) -> None:
        """초기화.

        Args:
            timeout: 변환 타임아웃 (초)
            executable: LibreOffice 실행 파일 경로. None이면 PATH에서 찾음.
        """
        self.timeout = timeout
        self._executable = executable

    @property
    def executable(self) -> str:
        """LibreOffice 실행 파일 경로.

        Raises:
            PdfConverterError: 실행 파일을 찾을 수 없는 경우
        """
        if self._executable:
            if not Path(self._executable).exists():
                raise PdfConverterError(
                    f"LibreOffice 실행 파일이 없습니다: {self._executable}"
                )
            return self._executable

        for name in self.EXECUTABLE_NAMES:
            found = shutil.which(name)
            if found:
                self._executable = found
                logger.info("LibreOffice 실행 파일 발견", extra={"path": found})
                return found

        raise PdfConverterError(
            "LibreOffice를 찾을 수 없습니다. "
            "libreoffice-writer를 설치하거나 LIBREOFFICE_PATH를 설정하세요."
        )

    async def convert(self, content: bytes, suffix: str = ".docx") -> bytes:
        """Word 문서 바이트를 PDF로 변환합니다.

        Args:
            content: DOC/DOCX 파일 바이트 데이터
            suffix: 입력 파일 확장자 (.doc 또는 .docx)

        Returns:
            PDF 파일 바이트 데이터

        Raises:
            PdfConverterError: 지원하지 않는 형식, 타임아웃 또는 변환 실패 시
        """
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise PdfConverterError(f"지원하지 않는 문서 형식입니다: {suffix}")

        executable = self.executable

        with tempfile.TemporaryDirectory(prefix="medextract-") as work_dir:
            source = Path(work_dir) / f"source{suffix}"
            source.write_bytes(content)

            process = await asyncio.create_subprocess_exec(
                executable,
                "--headless",
                "--convert-to",
                "pdf",
                "--outdir",
                work_dir,
                str(source),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )

            try:
                _, stderr = await asyncio.wait_for(process.communicate(), self.timeout)
            except asyncio.TimeoutError as e:
                process.kill()
                await process.wait()
                raise PdfConverterError(
                    f"PDF 변환 타임아웃 ({self.timeout}초 초과)"
                ) from e

            if process.returncode != 0:
                raise PdfConverterError(
                    f"LibreOffice 종료 코드 {process.returncode}: "
                    f"{stderr.decode('utf-8', errors='replace').strip()}"
                )

            # 출력 파일명은 입력 파일명의 확장자만 .pdf로 바뀜
            output = source.with_suffix(".pdf")
            if not output.exists():
                raise PdfConverterError("PDF 파일이 생성되지 않았습니다")

            pdf_bytes = output.read_bytes()

        logger.info(
            "Word → PDF 변환 완료",
            extra={"source_suffix": suffix, "pdf_size": len(pdf_bytes)},
        )
        return pdf_bytes
