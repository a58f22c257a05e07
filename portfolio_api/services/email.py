# services/email.py
"""Notification and confirmation emails sent through SES."""

import logging
from datetime import datetime, timezone
from html import escape
from typing import List

from ..exceptions import ConfigurationError
from ..models import Submission

logger = logging.getLogger(__name__)


class Mailer:
    """Sends HTML email with an SES client."""

    def __init__(self, client):
        self.client = client

    def send(self, source: str, to: List[str], subject: str, html: str) -> str:
        response = self.client.send_email(
            Source=source,
            Destination={"ToAddresses": to},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {"Html": {"Data": html, "Charset": "UTF-8"}},
            },
        )
        message_id = response.get("MessageId", "")
        logger.info(f"Sent email '{subject}' ({message_id})")
        return message_id


def _or_na(value: str) -> str:
    return escape(value) if value else "N/A"


def notification_email(submission: Submission) -> tuple:
    """Subject and body of the email sent to the site operator."""
    submitted_at = datetime.fromtimestamp(submission.createdAt / 1000, tz=timezone.utc).isoformat()
    resume = "N/A"
    if submission.resumeUrl:
        resume = f'<a href="{escape(submission.resumeUrl)}">{escape(submission.resumeFileName or "resume")}</a>'

    subject = f"New Contact Form Submission - {submission.service}"
    html = f"""
        <h2>New Contact Form Submission</h2>
        <p><strong>Name:</strong> {escape(submission.name)}</p>
        <p><strong>Email:</strong> {escape(submission.email)}</p>
        <p><strong>Phone:</strong> {_or_na(submission.phone)}</p>
        <p><strong>Company:</strong> {_or_na(submission.company)}</p>
        <p><strong>Service Interested:</strong> {escape(submission.service)}</p>
        <p><strong>Timeline:</strong> {_or_na(submission.timeline)}</p>
        <p><strong>Resume:</strong> {resume}</p>
        <p><strong>Message:</strong></p>
        <p>{escape(submission.message)}</p>
        <hr>
        <p><small>Submission ID: {submission.id}</small></p>
        <p><small>Submitted at: {submitted_at}</small></p>
    """
    return subject, html


def confirmation_email(submission: Submission, site_name: str) -> tuple:
    """Subject and body of the auto-reply sent to the submitter."""
    subject = f"Thank you for contacting {site_name}"
    html = f"""
        <h2>Thank you for your inquiry, {escape(submission.name)}!</h2>
        <p>We have received your message and will get back to you within 24 hours.</p>
        <p><strong>Your submission details:</strong></p>
        <p><strong>Service:</strong> {escape(submission.service)}</p>
        <p><strong>Message:</strong> {escape(submission.message)}</p>
        <br>
        <p>Best regards,<br>{escape(site_name)} Team</p>
        <hr>
        <p><small>Reference ID: {submission.id}</small></p>
    """
    return subject, html


def send_submission_emails(mailer: Mailer, submission: Submission, from_email: str, to_email: str, site_name: str):
    """Operator notification first, then the submitter's confirmation."""
    if not from_email or not to_email:
        raise ConfigurationError("FROM_EMAIL and TO_EMAIL must be configured")

    subject, html = notification_email(submission)
    mailer.send(from_email, [to_email], subject, html)

    subject, html = confirmation_email(submission, site_name)
    mailer.send(from_email, [submission.email], subject, html)
