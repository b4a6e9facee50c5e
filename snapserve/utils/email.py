import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Tuple

from snapserve.core.config import settings

logger = logging.getLogger(__name__)

EmailContent = Tuple[str, str, str]  # subject, html, text


def send_email(to_email: str, subject: str, html_content: str, text_content: str = None):
    """
    Send an email via SMTP, or log it when the console backend is configured.

    Args:
        to_email: Recipient email address
        subject: Email subject
        html_content: HTML content of the email
        text_content: Plain text content (optional, fallback)
    """
    if settings.MAIL_BACKEND == "console":
        logger.info("Email to %s | %s\n%s", to_email, subject, text_content or html_content)
        return

    msg = MIMEMultipart('alternative')
    msg['Subject'] = subject
    msg['From'] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg['To'] = to_email

    if text_content:
        msg.attach(MIMEText(text_content, 'plain'))
    msg.attach(MIMEText(html_content, 'html'))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.ehlo()
        server.starttls()
        server.ehlo()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.sendmail(settings.SMTP_FROM_EMAIL, to_email, msg.as_string())
    logger.info("Email sent to %s: %s", to_email, subject)


def _layout(heading: str, body_html: str, button_label: str = None, button_url: str = None) -> str:
    """Wrap a message body in the shared SnapServe email layout."""
    button = ""
    if button_label and button_url:
        button = f"""
                                <table width="100%" cellpadding="0" cellspacing="0">
                                    <tr>
                                        <td align="center" style="padding: 20px 0;">
                                            <a href="{button_url}"
                                               style="display: inline-block; padding: 15px 40px; background-color: #e4572e; color: #ffffff; text-decoration: none; border-radius: 5px; font-size: 16px; font-weight: bold;">
                                                {button_label}
                                            </a>
                                        </td>
                                    </tr>
                                </table>
                                <p style="color: #999999; font-size: 14px; margin: 20px 0 0 0;">
                                    Or copy and paste this link into your browser:
                                </p>
                                <p style="color: #e4572e; font-size: 14px; word-break: break-all; margin: 10px 0 0 0;">
                                    {button_url}
                                </p>"""

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f4f4f4;">
        <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #f4f4f4; padding: 20px;">
            <tr>
                <td align="center">
                    <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 8px; overflow: hidden;">
                        <tr>
                            <td style="background-color: #e4572e; padding: 30px; text-align: center;">
                                <h1 style="color: #ffffff; margin: 0; font-size: 28px;">SnapServe</h1>
                            </td>
                        </tr>
                        <tr>
                            <td style="padding: 40px 30px;">
                                <h2 style="color: #333333; margin: 0 0 20px 0; font-size: 24px;">{heading}</h2>
                                {body_html}
                                {button}
                            </td>
                        </tr>
                        <tr>
                            <td style="background-color: #f8f8f8; padding: 20px 30px; text-align: center; border-top: 1px solid #eeeeee;">
                                <p style="color: #999999; font-size: 12px; margin: 0;">
                                    &copy; SnapServe. All rights reserved.
                                </p>
                            </td>
                        </tr>
                    </table>
                </td>
            </tr>
        </table>
    </body>
    </html>
    """


def _paragraph(text: str) -> str:
    return (
        '<p style="color: #666666; font-size: 16px; line-height: 1.6; margin: 0 0 20px 0;">'
        f"{text}</p>"
    )


def build_staff_invitation_email(
    first_name: str,
    restaurant_name: str,
    role: str,
    invite_link: str,
    expires_in_days: int,
    inviter_name: Optional[str] = None,
    custom_message: Optional[str] = None,
) -> EmailContent:
    subject = f"You're invited to join {restaurant_name} on SnapServe"
    inviter = f"<strong>{html.escape(inviter_name)}</strong>" if inviter_name else "The team"
    body = _paragraph(f"Hi {html.escape(first_name)},")
    body += _paragraph(
        f"{inviter} has invited you to join <strong>{html.escape(restaurant_name)}</strong> "
        f"as a <strong>{role}</strong>."
    )
    if custom_message:
        body += _paragraph(f"<em>&ldquo;{html.escape(custom_message)}&rdquo;</em>")
    body += _paragraph(f"This invitation will expire in {expires_in_days} days.")

    text = (
        f"Hi {first_name},\n\n"
        f"{inviter_name or 'The team'} has invited you to join {restaurant_name} as a {role}.\n"
        + (f"\n\"{custom_message}\"\n" if custom_message else "")
        + f"\nSet up your account here:\n{invite_link}\n\n"
        f"This invitation will expire in {expires_in_days} days.\n"
    )
    return subject, _layout("You've been invited!", body, "Set Up Your Account", invite_link), text


def build_staff_welcome_email(first_name: str, restaurant_name: str, role: str) -> EmailContent:
    subject = f"Welcome to {restaurant_name}!"
    body = _paragraph(f"Hi {html.escape(first_name)},")
    body += _paragraph(
        f"Your account is ready. You have joined <strong>{html.escape(restaurant_name)}</strong> "
        f"as a <strong>{role}</strong>."
    )
    login_url = f"{settings.FRONTEND_URL.rstrip('/')}/login"
    text = (
        f"Hi {first_name},\n\n"
        f"Your account is ready. You have joined {restaurant_name} as a {role}.\n\n"
        f"Log in: {login_url}\n"
    )
    return subject, _layout("Welcome aboard", body, "Log In", login_url), text


def build_role_update_email(
    first_name: str, restaurant_name: str, old_role: str, new_role: str
) -> EmailContent:
    subject = f"Your role at {restaurant_name} has changed"
    body = _paragraph(f"Hi {html.escape(first_name)},")
    body += _paragraph(
        f"Your role at <strong>{html.escape(restaurant_name)}</strong> changed from "
        f"<strong>{old_role}</strong> to <strong>{new_role}</strong>."
    )
    text = (
        f"Hi {first_name},\n\n"
        f"Your role at {restaurant_name} changed from {old_role} to {new_role}.\n"
    )
    return subject, _layout("Role updated", body), text


def build_admin_verification_email(
    first_name: str, restaurant_name: str, verification_link: str, ttl_hours: int
) -> EmailContent:
    subject = "Verify your SnapServe account"
    body = _paragraph(f"Hi {html.escape(first_name)},")
    body += _paragraph(
        f"Thanks for registering <strong>{html.escape(restaurant_name)}</strong>. "
        "Please confirm your email address to activate your account."
    )
    body += _paragraph(f"This link will expire in {ttl_hours} hours.")
    text = (
        f"Hi {first_name},\n\n"
        f"Thanks for registering {restaurant_name}. Confirm your email address:\n"
        f"{verification_link}\n\n"
        f"This link will expire in {ttl_hours} hours.\n"
    )
    return subject, _layout("Confirm your email", body, "Verify Email", verification_link), text


def build_admin_welcome_email(first_name: str, restaurant_name: str) -> EmailContent:
    subject = "Welcome to SnapServe"
    body = _paragraph(f"Hi {html.escape(first_name)},")
    body += _paragraph(
        f"Your email is verified and <strong>{html.escape(restaurant_name)}</strong> is now active. "
        "Complete your restaurant profile and invite your team to get started."
    )
    dashboard_url = f"{settings.FRONTEND_URL.rstrip('/')}/admin"
    text = (
        f"Hi {first_name},\n\n"
        f"Your email is verified and {restaurant_name} is now active.\n"
        f"Dashboard: {dashboard_url}\n"
    )
    return subject, _layout("You're all set", body, "Open Dashboard", dashboard_url), text
