"""SMTP 메일 알림."""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart

from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import NotificationAttachment
from medextract_ai.infrastructure.notification.message import (
    NotificationError,
    build_alert_message,
)

logger = logging.getLogger(__name__)


class SmtpNotifier:
    """SMTP로 누락 정보 알림 메일을 발송합니다.

    smtplib는 블로킹 API이므로 기본 executor에서 실행합니다.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        use_ssl: bool | None = None,
        username: str | None = None,
        password: str | None = None,
        from_address: str | None = None,
        to_address: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """SMTP 설정을 초기화합니다. None인 값은 설정에서 가져옵니다."""
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.use_ssl = settings.smtp_use_ssl if use_ssl is None else use_ssl
        self.username = username or settings.smtp_username
        self.password = password or settings.smtp_password
        self.from_address = from_address or settings.notification_from
        self.to_address = to_address or settings.notification_to
        self.timeout = timeout

    async def notify(
        self,
        document_id: str,
        missing_fields: list[str],
        partial_info: dict[str, str],
        attachment: NotificationAttachment | None = None,
    ) -> dict[str, tuple[int, bytes]]:
        """알림 메일을 발송합니다.

        Returns:
            거부된 수신자 딕셔너리 (smtplib.send_message 반환값)

        Raises:
            NotificationError: SMTP 전송 실패 시
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
            refused = await loop.run_in_executor(None, self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "SMTP 알림 전송 실패",
                extra={"document_id": document_id, "error": str(e)},
            )
            raise NotificationError(f"SMTP 알림 전송 실패: {e}") from e

        logger.info(
            "SMTP 알림 전송 완료",
            extra={"document_id": document_id, "to": self.to_address},
        )
        return refused

    def _send(self, msg: MIMEMultipart) -> dict[str, tuple[int, bytes]]:
        smtp_class = smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP
        with smtp_class(self.host, self.port, timeout=self.timeout) as server:
            if not self.use_ssl:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            return server.send_message(msg)
