"""알림 인프라스트럭처.

``notification_channel`` 설정에 따라 시작 시점에 구현체를 선택합니다.
"""

from medextract_ai.core.config.settings import Settings, settings
from medextract_ai.domain.medical.ports import Notifier
from medextract_ai.infrastructure.notification.logging_notifier import LoggingNotifier
from medextract_ai.infrastructure.notification.message import NotificationError
from medextract_ai.infrastructure.notification.ses_notifier import SesNotifier
from medextract_ai.infrastructure.notification.smtp_notifier import SmtpNotifier


def create_notifier(config: Settings = settings) -> Notifier:
    """설정된 채널의 알림 구현체를 생성합니다."""
    if config.notification_channel == "smtp":
        return SmtpNotifier(
            host=config.smtp_host,
            port=config.smtp_port,
            use_ssl=config.smtp_use_ssl,
            username=config.smtp_username,
            password=config.smtp_password,
            from_address=config.notification_from,
            to_address=config.notification_to,
        )
    if config.notification_channel == "ses":
        return SesNotifier(
            from_address=config.notification_from,
            to_address=config.notification_to,
        )
    return LoggingNotifier()


__all__ = [
    "LoggingNotifier",
    "NotificationError",
    "SesNotifier",
    "SmtpNotifier",
    "create_notifier",
]
