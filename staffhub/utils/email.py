"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
SMTP_HOST가 비어 있으면 발송하지 않습니다 (Delivery is disabled when SMTP_HOST is empty).
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from staffhub.config import settings


def smtp_enabled() -> bool:
    """SMTP 발송 가능 여부."""
    return bool(settings.SMTP_HOST)


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
) -> None:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문 (선택)
    """
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to

    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=True,
    )


async def send_onboarding_email(to: str, full_name: str, link: str) -> None:
    """온보딩 링크 메일 발송 (Send the onboarding link to a new hire)."""
    subject = "Complete your StaffHub onboarding"
    html = (
        f"<p>Hi {full_name},</p>"
        f"<p>Your account has been created. Finish setting it up here:</p>"
        f'<p><a href="{link}">{link}</a></p>'
        f"<p>This link expires in {settings.ONBOARDING_TOKEN_EXPIRE_DAYS} days.</p>"
    )
    text = f"Hi {full_name},\n\nFinish setting up your account: {link}\n"
    await send_email(to, subject, html, text)
