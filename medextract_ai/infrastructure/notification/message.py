"""누락 정보 알림 메일 구성."""

from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from medextract_ai.domain.medical.models import NotificationAttachment

DEFAULT_CATEGORY_LABEL = "default"


class NotificationError(Exception):
    """알림 전송 실패 예외."""

    pass


def build_subject(document_id: str) -> str:
    return f"Missing Information - Document {document_id}"


def build_html_body(
    document_id: str,
    missing_fields: list[str],
    partial_info: dict[str, str],
) -> str:
    """알림 메일 HTML 본문을 생성합니다.

    사용된 카테고리, 누락 항목 목록, 추출된 정보 표를 포함합니다.
    빈 값은 ``N/A``로 표시하고 모든 값은 HTML 이스케이프합니다.
    """
    used_category = partial_info.get("usedCategory") or DEFAULT_CATEGORY_LABEL
    category_color = "#ff9900" if used_category == DEFAULT_CATEGORY_LABEL else "#009900"

    missing_items = "".join(f"<li>{escape(field)}</li>" for field in missing_fields)
    info_rows = "".join(
        "<tr>"
        f'<td style="border: 1px solid #ddd; padding: 8px;">{escape(key)}</td>'
        f'<td style="border: 1px solid #ddd; padding: 8px;">{escape(value or "N/A")}</td>'
        "</tr>"
        for key, value in partial_info.items()
    )

    return (
        "<h2>Document Information Incomplete</h2>"
        f"<p>Document ID: {escape(document_id)}</p>"
        f'<h3>Catégorie utilisée: <span style="color: {category_color};">'
        f"{escape(used_category)}</span></h3>"
        "<h3>Missing Fields:</h3>"
        f"<ul>{missing_items}</ul>"
        "<h3>Extracted Information:</h3>"
        f'<table style="border-collapse: collapse; width: 100%;">{info_rows}</table>'
    )


def build_alert_message(
    from_address: str,
    to_address: str,
    document_id: str,
    missing_fields: list[str],
    partial_info: dict[str, str],
    attachment: NotificationAttachment | None = None,
) -> MIMEMultipart:
    """첨부 파일을 포함할 수 있는 MIME 알림 메시지를 생성합니다."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = build_subject(document_id)
    msg["From"] = from_address
    msg["To"] = to_address

    msg.attach(
        MIMEText(build_html_body(document_id, missing_fields, partial_info), "html", "utf-8")
    )

    if attachment is not None:
        maintype, _, subtype = attachment.content_type.partition("/")
        part = MIMEBase(maintype or "application", subtype or "octet-stream")
        part.set_payload(attachment.content)
        encoders.encode_base64(part)
        part.add_header(
            "Content-Disposition",
            f'attachment; filename="{attachment.filename}"',
        )
        msg.attach(part)

    return msg
