"""
Invite-based recruitment: candidates receive a token link, apply through it,
and their application is forwarded to the AI resume screener workflow.
Also owns email templates and email batch records.
"""

import logging
import uuid
from datetime import datetime

from database import db
from models import (RecruitmentCandidate, RecruitmentStatus, EmailTemplate, EmailBatch,
                    TemplateType, BatchStatus)
from ats_service import NotFoundError, ValidationError, parse_datetime, parse_enum
from utils import log_processing_time, normalize_skills, validate_email
from workflow_client import WorkflowError, get_workflow_client

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAME = 'Default Invitation'
DEFAULT_TEMPLATE_SUBJECT = 'Job Application Invitation - {{position}}'
DEFAULT_TEMPLATE_BODY = """Hi {{first_name}},

We found your profile interesting for our {{position}} role. Please complete your application using the link below:

{{application_link}}

Best regards,
HR Team"""

CANDIDATE_FIELDS = ('first_name', 'last_name', 'email', 'phone', 'position', 'experience',
                    'resume_url', 'match_score', 'ai_analysis', 'screening_questions', 'invited_by')


def _apply_fields(candidate, data):
    for field in CANDIDATE_FIELDS:
        if field in data:
            setattr(candidate, field, data[field])
    if 'skills' in data:
        candidate.skills = normalize_skills(data['skills'])
    if data.get('status') is not None:
        candidate.status = parse_enum(RecruitmentStatus, data['status'], 'status')
    for field in ('interview_scheduled_at', 'applied_at', 'invited_at'):
        if field in data:
            setattr(candidate, field, parse_datetime(data[field], field))


def _check_required(row):
    missing = [field for field in ('first_name', 'email', 'position') if not row.get(field)]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    if not validate_email(row['email']):
        raise ValidationError(f"Invalid email format: {row['email']}")


# Candidate management
def get_candidates(status=None):
    query = RecruitmentCandidate.query
    if status and status != 'all':
        query = query.filter(RecruitmentCandidate.status == parse_enum(RecruitmentStatus, status, 'status'))
    return query.order_by(RecruitmentCandidate.created_at.desc()).all()


def get_candidate(candidate_id):
    candidate = db.session.get(RecruitmentCandidate, candidate_id)
    if candidate is None:
        raise NotFoundError(f"Recruitment candidate {candidate_id} not found")
    return candidate


def get_candidate_by_token(token):
    return RecruitmentCandidate.query.filter_by(token=token).first()


def create_candidate(data, invited_by=None):
    _check_required(data)

    candidate = RecruitmentCandidate(
        token=str(uuid.uuid4()),
        status=RecruitmentStatus.INVITED,
        invited_at=datetime.utcnow(),
        invited_by=invited_by,
    )
    _apply_fields(candidate, {k: v for k, v in data.items() if k not in ('status', 'token')})
    db.session.add(candidate)
    db.session.commit()
    logger.info(f"Invited {candidate.email} for {candidate.position}")
    return candidate


def bulk_create_candidates(rows, invited_by):
    """Create invited candidates from already parsed import rows.

    The whole import is rejected if any row is invalid.
    """
    for index, row in enumerate(rows):
        try:
            _check_required(row)
        except ValidationError as e:
            raise ValidationError(f"Row {index + 1}: {e}")

    now = datetime.utcnow()
    candidates = []
    for row in rows:
        candidate = RecruitmentCandidate(
            token=str(uuid.uuid4()),
            first_name=row['first_name'],
            last_name=row.get('last_name', ''),
            email=row['email'],
            position=row['position'],
            status=RecruitmentStatus.INVITED,
            invited_by=invited_by,
            invited_at=now,
        )
        db.session.add(candidate)
        candidates.append(candidate)

    db.session.commit()
    logger.info(f"Bulk imported {len(candidates)} candidates invited by {invited_by}")
    return candidates


def update_candidate(candidate_id, updates):
    candidate = get_candidate(candidate_id)
    _apply_fields(candidate, updates)
    candidate.updated_at = datetime.utcnow()
    db.session.commit()
    return candidate


def update_candidate_by_token(token, updates):
    candidate = get_candidate_by_token(token)
    if candidate is None:
        raise NotFoundError('Invalid application token')
    _apply_fields(candidate, updates)
    candidate.updated_at = datetime.utcnow()
    db.session.commit()
    return candidate


def submit_to_workflow(candidate):
    """Forward an application to the AI resume screener"""
    form_data = {
        'first_name': candidate.first_name,
        'last_name': candidate.last_name,
        'email': candidate.email,
        'phone': candidate.phone or '',
        'position': candidate.position,
        'experience': candidate.experience or '',
        'skills': candidate.skills or [],
        'resume_file': candidate.resume_url or None,
        'candidate_id': candidate.id,
        'token': candidate.token,
    }
    return get_workflow_client().trigger_resume_screener(form_data)


@log_processing_time
def submit_application(token, application_data):
    """Record an application made through an invitation link.

    The candidate is marked ``applied`` first; once the screening workflow
    accepts the application it moves to ``ai_analyzed``. A workflow failure
    leaves the candidate ``applied``.
    """
    candidate = get_candidate_by_token(token)
    if candidate is None:
        raise NotFoundError('Invalid application token')

    allowed = {k: application_data[k] for k in ('phone', 'experience', 'skills', 'resume_url')
               if k in application_data}
    _apply_fields(candidate, allowed)
    candidate.status = RecruitmentStatus.APPLIED
    candidate.applied_at = datetime.utcnow()
    db.session.commit()

    try:
        result = submit_to_workflow(candidate)
    except WorkflowError as e:
        logger.error(f"Failed to submit application {candidate.id} to workflow: {e}")
        return candidate

    screening = (result.get('data') or {}).get('screening_result')
    if isinstance(screening, dict):
        candidate.ai_analysis = screening
        score = screening.get('match_score')
        if isinstance(score, (int, float)):
            candidate.match_score = int(score)
    candidate.status = RecruitmentStatus.AI_ANALYZED
    db.session.commit()
    return candidate


# Email templates
def ensure_default_template():
    if EmailTemplate.query.filter_by(name=DEFAULT_TEMPLATE_NAME).first():
        return None

    template = EmailTemplate(
        name=DEFAULT_TEMPLATE_NAME,
        subject=DEFAULT_TEMPLATE_SUBJECT,
        body=DEFAULT_TEMPLATE_BODY,
        type=TemplateType.INVITATION,
        is_default=True,
    )
    db.session.add(template)
    db.session.commit()
    logger.info("Default invitation template created")
    return template


def get_email_templates():
    return EmailTemplate.query.order_by(EmailTemplate.created_at.desc()).all()


def get_email_template(template_id):
    template = db.session.get(EmailTemplate, template_id)
    if template is None:
        raise NotFoundError('Email template not found')
    return template


def create_email_template(data):
    missing = [field for field in ('name', 'subject', 'body') if not data.get(field)]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")

    template = EmailTemplate(
        name=data['name'],
        subject=data['subject'],
        body=data['body'],
        type=parse_enum(TemplateType, data.get('type', 'invitation'), 'type'),
        is_default=bool(data.get('is_default', False)),
    )
    db.session.add(template)
    db.session.commit()
    return template


def update_email_template(template_id, updates):
    template = get_email_template(template_id)
    for field in ('name', 'subject', 'body'):
        if field in updates:
            setattr(template, field, updates[field])
    if 'type' in updates:
        template.type = parse_enum(TemplateType, updates['type'], 'type')
    if 'is_default' in updates:
        template.is_default = bool(updates['is_default'])
    template.updated_at = datetime.utcnow()
    db.session.commit()
    return template


# Email batches
def create_email_batch(template_id, candidate_ids, created_by=None):
    batch = EmailBatch(
        template_id=template_id,
        candidate_ids=list(candidate_ids),
        sent_count=0,
        failed_count=0,
        status=BatchStatus.PENDING,
        created_by=created_by,
    )
    db.session.add(batch)
    db.session.commit()
    return batch


def update_email_batch(batch_id, updates):
    batch = db.session.get(EmailBatch, batch_id)
    if batch is None:
        raise NotFoundError(f"Email batch {batch_id} not found")

    for field in ('sent_count', 'failed_count'):
        if field in updates:
            setattr(batch, field, updates[field])
    if 'status' in updates:
        batch.status = parse_enum(BatchStatus, updates['status'], 'status')
    if 'completed_at' in updates:
        batch.completed_at = parse_datetime(updates['completed_at'], 'completed_at')
    db.session.commit()
    return batch


def get_email_batches():
    return EmailBatch.query.order_by(EmailBatch.created_at.desc()).all()


# Dashboard
def get_recruitment_stats():
    rows = db.session.query(RecruitmentCandidate.status, RecruitmentCandidate.match_score).all()

    stats = {'total_candidates': len(rows)}
    for status in RecruitmentStatus:
        stats[status.value] = sum(1 for row in rows if row.status == status)

    scores = [row.match_score or 0 for row in rows]
    stats['high_match'] = sum(1 for score in scores if score >= 80)
    stats['medium_match'] = sum(1 for score in scores if 60 <= score < 80)
    stats['low_match'] = sum(1 for score in scores if score < 60)
    return stats
