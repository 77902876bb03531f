"""
Contact form emails via Resend: a notification to the site owner and an
auto-reply to the sender. Disabled unless RESEND_API_KEY is set.
"""

from typing import Any, Dict

import resend
import structlog
from jinja2 import Template

import config

logger = structlog.get_logger(__name__)

NOTIFICATION_TEMPLATE = Template(
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">New Contact Form Submission</h2>
  <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px;">
    <p><strong>Name:</strong> {{ name }}</p>
    <p><strong>Email:</strong> {{ email }}</p>
    <p><strong>Subject:</strong> {{ subject }}</p>
    <p><strong>Message:</strong></p>
    <p style="white-space: pre-wrap;">{{ message }}</p>
  </div>
  <p style="color: #666; font-size: 12px; margin-top: 20px;">
    This email was sent from your portfolio contact form.
  </p>
</div>
""",
    autoescape=True,
)

AUTO_REPLY_TEMPLATE = Template(
    """
<h2>Thank you for contacting me!</h2>
<p>Dear {{ name }},</p>
<p>I have received your message and will get back to you as soon as possible.</p>
""",
    autoescape=True,
)


def email_enabled() -> bool:
    return bool(config.RESEND_API_KEY)


def send_contact_emails(message: Dict[str, Any]) -> bool:
    """Send both contact emails. Returns False (and logs) when sending fails."""
    if not email_enabled():
        logger.debug("Email disabled, skipping contact notification")
        return False

    resend.api_key = config.RESEND_API_KEY
    try:
        resend.Emails.send(
            {
                "from": config.MAIL_FROM,
                "to": [config.CONTACT_EMAIL],
                "reply_to": message["email"],
                "subject": f"Portfolio Contact: {message['subject']}",
                "html": NOTIFICATION_TEMPLATE.render(**message),
            }
        )
        resend.Emails.send(
            {
                "from": config.MAIL_FROM,
                "to": [message["email"]],
                "subject": "Thank you for your message",
                "html": AUTO_REPLY_TEMPLATE.render(**message),
            }
        )
    except Exception as e:
        logger.error("Email sending failed", error=str(e), recipient=message["email"])
        return False

    logger.info("Contact emails sent", recipient=message["email"])
    return True
