"""AWS SES 메일 알림."""

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import NotificationAttachment
from medextract_ai.infrastructure.notification.message import (
    NotificationError,
    build_alert_message,
)

logger = logging.getLogger(__name__)


class SesNotifier:
    """AWS SES SendRawEmail로 누락 정보 알림 메일을 발송합니다."""

    def __init__(
        self,
        client: Any | None = None,
        from_address: str | None = None,
        to_address: str | None = None,
    ) -> None:
        """SES 클라이언트를 초기화합니다.

        Args:
            client: boto3 SES 클라이언트. None이면 설정값으로 생성.
            from_address: 발신 주소
            to_address: 수신 주소
        """
        self.client = client or boto3.client(
            "ses",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        self.from_address = from_address or settings.notification_from
        self.to_address = to_address or settings.notification_to

    async def notify(
        self,
        document_id: str,
        missing_fields: list[str],
        partial_info: dict[str, str],
        attachment: NotificationAttachment | None = None,
    ) -> dict[str, Any]:
        """알림 메일을 발송합니다.

        Returns:
            SES 응답 (MessageId 포함)

        Raises:
            NotificationError: SES 전송 실패 시
        """
        msg = build_alert_message(
            from_address=self.from_address,
            to_address=self.to_address,
            document_id=document_id,
            missing_fields=missing_fields,
            partial_info=partial_info,
            attachment=attachment,
        )

        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: self.client.send_raw_email(
                    Source=self.from_address,
                    Destinations=[self.to_address],
                    RawMessage={"Data": msg.as_bytes()},
                ),
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "SES 알림 전송 실패",
                extra={"document_id": document_id, "error": str(e)},
            )
            raise NotificationError(f"SES 알림 전송 실패: {e}") from e

        logger.info(
            "SES 알림 전송 완료",
            extra={"document_id": document_id, "message_id": response.get("MessageId")},
        )
        return response
