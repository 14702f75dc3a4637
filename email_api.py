import base64
import logging
import time
from datetime import datetime
from email.header import Header
from email.mime.text import MIMEText
from urllib.parse import urlencode

import requests

from database import db
from models import RecruitmentCandidate, BatchStatus
from ats_service import NotFoundError, ValidationError
import recruitment_service
from utils import ConfigHelper, log_processing_time
from workflow_client import WorkflowError, get_workflow_client

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = 'https://accounts.google.com/o/oauth2/v2/auth'
GOOGLE_TOKEN_URL = 'https://oauth2.googleapis.com/token'
GOOGLE_USERINFO_URL = 'https://www.googleapis.com/oauth2/v2/userinfo'
GMAIL_SEND_URL = 'https://www.googleapis.com/gmail/v1/users/me/messages/send'


class GmailError(Exception):
    pass


def application_link(candidate, base_url=None):
    base_url = (base_url or ConfigHelper.get_public_base_url()).rstrip('/')
    return f"{base_url}/apply/{candidate.token}"


def render_template(template, candidate, link):
    """Fill the {{placeholders}} of an email template for one candidate"""
    replacements = {
        '{{first_name}}': candidate.first_name or '',
        '{{last_name}}': candidate.last_name or '',
        '{{position}}': candidate.position or '',
        '{{application_link}}': link,
    }

    subject = template.subject
    body = template.body
    for placeholder, value in replacements.items():
        subject = subject.replace(placeholder, value)
        body = body.replace(placeholder, value)
    return subject, body


@log_processing_time
def send_bulk_emails(candidate_ids, template_id, created_by=None, base_url=None):
    """Send a templated invitation to each candidate and record the batch.

    Returns the finished EmailBatch. Individual delivery failures are
    counted, not raised.
    """
    if not candidate_ids:
        raise ValidationError('No candidates selected')

    template = recruitment_service.get_email_template(template_id)

    candidates = RecruitmentCandidate.query.filter(RecruitmentCandidate.id.in_(candidate_ids)).all()
    if not candidates:
        raise NotFoundError('No valid candidates found')

    batch = recruitment_service.create_email_batch(template.id, candidate_ids, created_by)
    batch.status = BatchStatus.SENDING
    db.session.commit()

    client = get_workflow_client()
    sent_count = 0
    failed_count = 0

    for candidate in candidates:
        link = application_link(candidate, base_url)
        subject, body = render_template(template, candidate, link)
        try:
            client.send_screening_invitation({
                'recipient_email': candidate.email,
                'recipient_name': candidate.full_name,
                'subject': subject,
                'personalized_message': body,
                'screening_url': link,
                'job_title': candidate.position,
                'invitation_type': template.type.value if template.type else 'invitation',
                'sent_at': datetime.utcnow().isoformat(),
            })
            sent_count += 1
        except WorkflowError as e:
            logger.error(f"Failed to send email to {candidate.email}: {e}")
            failed_count += 1

    batch.sent_count = sent_count
    batch.failed_count = failed_count
    batch.status = BatchStatus.COMPLETED if sent_count else BatchStatus.FAILED
    batch.completed_at = datetime.utcnow()
    db.session.commit()

    logger.info(f"Email batch {batch.id}: {sent_count} sent, {failed_count} failed")
    return batch


# Gmail
def get_oauth_url(redirect_uri):
    config = ConfigHelper.get_gmail_config()
    params = {
        'client_id': config['client_id'],
        'redirect_uri': redirect_uri,
        'scope': config['scopes'],
        'response_type': 'code',
        'access_type': 'offline',
        'prompt': 'consent',
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code(code, redirect_uri, timeout=15):
    """Exchange an OAuth authorization code for Gmail tokens"""
    config = ConfigHelper.get_gmail_config()

    token_response = requests.post(GOOGLE_TOKEN_URL, data={
        'client_id': config['client_id'],
        'client_secret': config['client_secret'],
        'code': code,
        'grant_type': 'authorization_code',
        'redirect_uri': redirect_uri,
    }, timeout=timeout)
    if not token_response.ok:
        raise GmailError(f"Token exchange failed: {token_response.text}")
    tokens = token_response.json()

    user_response = requests.get(GOOGLE_USERINFO_URL, headers={
        'Authorization': f"Bearer {tokens['access_token']}",
    }, timeout=timeout)
    if not user_response.ok:
        raise GmailError('Failed to get user info')
    user_info = user_response.json()

    return {
        'access_token': tokens['access_token'],
        'refresh_token': tokens.get('refresh_token'),
        'expires_at': int(time.time() * 1000) + int(tokens.get('expires_in', 0)) * 1000,
        'email': user_info.get('email'),
        'is_connected': True,
    }


def build_raw_message(to, subject, body):
    message = MIMEText(body, 'html', 'utf-8')
    message['To'] = to
    message['Subject'] = Header(subject, 'utf-8')
    return base64.urlsafe_b64encode(message.as_bytes()).decode('ascii').rstrip('=')


def send_email_via_gmail(to, subject, body, access_token, timeout=15):
    response = requests.post(GMAIL_SEND_URL, json={'raw': build_raw_message(to, subject, body)}, headers={
        'Authorization': f"Bearer {access_token}",
        'Content-Type': 'application/json',
    }, timeout=timeout)

    if not response.ok:
        raise GmailError(f"Gmail API error: {response.text}")

    return {'message_id': response.json().get('id')}
