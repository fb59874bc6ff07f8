"""로그 전용 알림 (개발 환경용)."""

import logging

from medextract_ai.domain.medical.models import NotificationAttachment

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """알림을 메일로 보내지 않고 로그로만 남깁니다.

    ``notification_channel=log`` 설정 시 시작 시점에 선택됩니다.
    """

    async def notify(
        self,
        document_id: str,
        missing_fields: list[str],
        partial_info: dict[str, str],
        attachment: NotificationAttachment | None = None,
    ) -> None:
        logger.warning(
            "누락 정보 알림 (로그 전용)",
            extra={
                "document_id": document_id,
                "missing_fields": missing_fields,
                "partial_info": partial_info,
                "attachment": attachment.filename if attachment else None,
            },
        )
