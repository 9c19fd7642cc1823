import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from salon.core.config import settings
from salon.models.appointment import AppointmentPublic

logger = logging.getLogger(__name__)


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send to %s", to_email)
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _details_rows(rows: list[tuple[str, str | None]]) -> str:
    return "".join(
        f'<p style="margin:8px 0;"><strong>{label}:</strong> {_html_escape(value)}</p>'
        for label, value in rows
        if value
    )


def _wrap(title: str, body: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body style="margin:0;padding:0;font-family:Arial,sans-serif;background-color:#f3f4f6;">
  <div style="max-width:600px;margin:0 auto;padding:20px;background:#ffffff;">
    <h1 style="color:#d4af37;border-bottom:2px solid #d4af37;padding-bottom:10px;">{title}</h1>
    {body}
    <p style="font-size:16px;margin-top:30px;"><strong>{_html_escape(settings.site_name)}</strong></p>
  </div>
</body>
</html>
"""


def build_appointment_confirmation_html(appointment: AppointmentPublic) -> str:
    """Build HTML body for the client's booking confirmation."""
    details = _details_rows([
        ("Serviço", appointment.service),
        ("Data", appointment.appointment_date.strftime("%d/%m/%Y")),
        ("Horário", appointment.appointment_time),
        ("Observações", appointment.observations),
    ])
    body = f"""
    <p style="font-size:16px;">Olá, <strong>{_html_escape(appointment.client_name)}</strong>!</p>
    <p style="font-size:16px;">Seu agendamento foi <strong>confirmado</strong>. Confira os detalhes:</p>
    <div style="background-color:#f9f9f9;border-left:4px solid #d4af37;padding:15px;margin:20px 0;">{details}</div>
    <div style="border:1px solid #d4af37;border-radius:5px;padding:15px;margin:20px 0;font-size:14px;">
      <p style="margin:0;"><strong>Endereço:</strong> {_html_escape(settings.contact_address)}</p>
      <p style="margin:10px 0 0 0;"><strong>Contato:</strong> {_html_escape(settings.contact_phone)}</p>
    </div>
    <p style="font-size:14px;color:#666;">
      Caso precise cancelar ou reagendar, entre em contato com pelo menos 24 horas de antecedência.
    </p>
    """
    return _wrap("Agendamento Confirmado", body)


def build_professional_notification_html(appointment: AppointmentPublic) -> str:
    details = _details_rows([
        ("Cliente", appointment.client_name),
        ("Email", appointment.client_email),
        ("Telefone", appointment.client_phone),
        ("Serviço", appointment.service),
        ("Data", appointment.appointment_date.strftime("%d/%m/%Y")),
        ("Horário", appointment.appointment_time),
        ("Observações", appointment.observations),
    ])
    body = f"""
    <p style="font-size:16px;">Um novo agendamento foi realizado pelo site:</p>
    <div style="background-color:#f9f9f9;border-left:4px solid #d4af37;padding:15px;margin:20px 0;">{details}</div>
    """
    return _wrap("Novo Agendamento", body)


def build_password_reset_html(recipient_name: str | None, reset_url: str) -> str:
    body = f"""
    <p style="font-size:16px;">Olá, {_html_escape(recipient_name or '')}!</p>
    <p style="font-size:16px;">Recebemos um pedido para redefinir sua senha.</p>
    <p><a href="{_html_escape(reset_url)}" style="color:#d4af37;">Redefinir senha</a></p>
    <p style="font-size:14px;color:#666;">
      O link expira em {settings.password_reset_expire_minutes} minutos. Se não foi você, ignore este e-mail.
    </p>
    """
    return _wrap("Redefinição de Senha", body)


def send_appointment_confirmation_email(appointment: AppointmentPublic) -> None:
    """Compose and send the client confirmation (call from background task)."""
    subject = f"Agendamento Confirmado - {settings.site_name}"
    _send_email_sync(appointment.client_email, subject, build_appointment_confirmation_html(appointment))


def send_professional_notification_email(appointment: AppointmentPublic) -> None:
    if not settings.professional_email:
        logger.debug("PROFESSIONAL_EMAIL not set, skipping new booking notification")
        return
    subject = "Novo Agendamento Recebido"
    _send_email_sync(settings.professional_email, subject, build_professional_notification_html(appointment))


def send_password_reset_email(to_email: str, recipient_name: str | None, token: str) -> None:
    reset_url = f"{settings.site_url.rstrip('/')}/reset-password#token={token}"
    subject = f"{settings.site_name} - Redefinição de senha"
    _send_email_sync(to_email, subject, build_password_reset_html(recipient_name, reset_url))
