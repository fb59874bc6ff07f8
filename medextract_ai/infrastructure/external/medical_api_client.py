"""외부 의료 정보 API 클라이언트.

검사 유형까지 확인된 처리 결과를 다운스트림 API로 전달합니다.
"""

import logging
from typing import Any

import httpx

from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import ProcessingOutcome

logger = logging.getLogger(__name__)


class ForwardingError(Exception):
    """외부 API 전달 실패."""

    pass


class HttpMedicalInfoForwarder:
    """외부 의료 정보 API 클라이언트."""

    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """클라이언트 초기화.

        Args:
            api_url: 전달 대상 URL. None이면 설정에서 가져옴.
            timeout: HTTP 요청 타임아웃 (초).
            transport: httpx 전송 계층 (테스트용).
        """
        api_url = api_url or settings.external_api_url
        if not api_url:
            raise ValueError("external_api_url이 설정되지 않았습니다")

        self.api_url = api_url
        self.timeout = timeout or settings.external_api_timeout
        self._transport = transport

    @staticmethod
    def build_payload(document_id: str, outcome: ProcessingOutcome) -> dict[str, Any]:
        """외부 API 요청 본문을 생성합니다."""
        return {
            "patientFirstname": outcome.patient_first_name,
            "patientLastname": outcome.patient_last_name,
            "medicalExamination": outcome.examination_type,
            "examinationDate": outcome.examination_date,
            "patientBirthDate": outcome.patient_birthdate,
            "documentId": document_id,
            "status": int(outcome.status),
        }

    async def forward(self, document_id: str, outcome: ProcessingOutcome) -> Any:
        """처리 결과를 외부 API로 전송합니다.

        Args:
            document_id: 문서 ID
            outcome: 검사 유형까지 확인된 처리 결과

        Returns:
            외부 API 응답 JSON

        Raises:
            ForwardingError: API 호출 실패 시
        """
        payload = self.build_payload(document_id, outcome)
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(
                "외부 API HTTP 에러",
                extra={
                    "document_id": document_id,
                    "status_code": e.response.status_code,
                    "response": e.response.text[:500],
                },
            )
            raise ForwardingError(f"외부 API 호출 실패: {e.response.status_code}") from e

        except httpx.RequestError as e:
            logger.error(
                "외부 API 연결 에러",
                extra={"document_id": document_id, "error": str(e)},
            )
            raise ForwardingError(f"외부 API 연결 실패: {e}") from e

        logger.info(
            "외부 API 전달 성공",
            extra={"document_id": document_id, "status_code": response.status_code},
        )
        return response.json() if response.content else None
