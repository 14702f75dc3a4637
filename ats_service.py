"""Persistence for the ``candidates`` and ``jobs`` tables and the ATS dashboard."""

import logging
from datetime import datetime, timedelta

from database import db
from models import Candidate, Job, CandidateStatus, JobStatus, EmploymentType
from utils import normalize_skills, parse_iso_datetime

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    pass


class ValidationError(Exception):
    pass


def parse_enum(enum_cls, value, field):
    """Return the enum member for ``value`` or raise ValidationError"""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}")


def parse_datetime(value, field):
    """Return the naive UTC datetime for an ISO-8601 ``value`` or raise ValidationError"""
    try:
        return parse_iso_datetime(value)
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"Invalid {field} '{value}'. Expected an ISO-8601 date")


CANDIDATE_FIELDS = ('first_name', 'last_name', 'email', 'phone', 'position', 'experience',
                    'cover_letter', 'resume_url', 'rating', 'match_score', 'ai_analysis')

JOB_FIELDS = ('title', 'company', 'description', 'location', 'salary_range', 'department',
              'applicants_count')


def _apply_candidate_fields(candidate, data):
    for field in CANDIDATE_FIELDS:
        if field in data:
            setattr(candidate, field, data[field])
    if 'skills' in data:
        candidate.skills = normalize_skills(data['skills'])
    if data.get('status') is not None:
        candidate.status = parse_enum(CandidateStatus, data['status'], 'status')


def _apply_job_fields(job, data):
    for field in JOB_FIELDS:
        if field in data:
            setattr(job, field, data[field])
    if 'requirements' in data:
        requirements = data['requirements']
        if isinstance(requirements, str):
            requirements = [line.strip() for line in requirements.splitlines() if line.strip()]
        job.requirements = requirements or []
    if 'deadline' in data:
        job.deadline = parse_datetime(data['deadline'], 'deadline')
    if data.get('employment_type') is not None:
        job.employment_type = parse_enum(EmploymentType, data['employment_type'], 'employment_type')
    if data.get('status') is not None:
        job.status = parse_enum(JobStatus, data['status'], 'status')


# Candidate management
def get_candidates():
    return Candidate.query.order_by(Candidate.created_at.desc()).all()


def get_candidate(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if candidate is None:
        raise NotFoundError(f"Candidate {candidate_id} not found")
    return candidate


def create_candidate(data):
    candidate = Candidate()
    _apply_candidate_fields(candidate, data)
    db.session.add(candidate)
    db.session.commit()
    logger.info(f"Created candidate {candidate.id} ({candidate.email})")
    return candidate


def update_candidate(candidate_id, updates):
    candidate = get_candidate(candidate_id)
    _apply_candidate_fields(candidate, updates)
    candidate.updated_at = datetime.utcnow()
    db.session.commit()
    return candidate


def delete_candidate(candidate_id):
    candidate = get_candidate(candidate_id)
    db.session.delete(candidate)
    db.session.commit()
    logger.info(f"Deleted candidate {candidate_id}")


def update_candidate_status(candidate_id, status, notes=None):
    """Move a candidate through the pipeline, keeping recruiter notes in ai_analysis"""
    updates = {'status': status}
    if notes:
        updates['ai_analysis'] = {'notes': notes, 'updated_at': datetime.utcnow().isoformat()}
    return update_candidate(candidate_id, updates)


# Job management
def get_jobs(status=None):
    query = Job.query
    if status and status != 'all':
        query = query.filter(Job.status == parse_enum(JobStatus, status, 'status'))
    return query.order_by(Job.created_at.desc()).all()


def get_job(job_id):
    job = db.session.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    return job


def create_job(data):
    job = Job()
    _apply_job_fields(job, data)
    db.session.add(job)
    db.session.commit()
    logger.info(f"Created job {job.id} ({job.title})")
    return job


def update_job(job_id, updates):
    job = get_job(job_id)
    _apply_job_fields(job, updates)
    job.updated_at = datetime.utcnow()
    db.session.commit()
    return job


def delete_job(job_id):
    job = get_job(job_id)
    db.session.delete(job)
    db.session.commit()
    logger.info(f"Deleted job {job_id}")


def toggle_job_status(job_id):
    job = get_job(job_id)
    job.status = JobStatus.PAUSED if job.status == JobStatus.ACTIVE else JobStatus.ACTIVE
    db.session.commit()
    return job


def get_candidates_by_job(job_id=None):
    """Candidates applying for a job, matched on position title"""
    query = Candidate.query
    if job_id:
        job = get_job(job_id)
        query = query.filter(Candidate.position == job.title)
    return query.order_by(Candidate.created_at.desc()).all()


# Dashboard
def get_dashboard_stats():
    candidates = Candidate.query.all()
    jobs = Job.query.all()

    status_counts = {}
    positions = {}
    for candidate in candidates:
        status = candidate.status.value if candidate.status else 'unknown'
        status_counts[status] = status_counts.get(status, 0) + 1
        position = candidate.position or 'Unknown'
        positions[position] = positions.get(position, 0) + 1

    week_ago = datetime.utcnow() - timedelta(days=7)
    rated = [c.rating for c in candidates if c.rating is not None]

    return {
        'total_candidates': len(candidates),
        'active_candidates': status_counts.get('active', 0),
        'placed_candidates': status_counts.get('placed', 0),
        'inactive_candidates': status_counts.get('inactive', 0),
        'high_rating': sum(1 for r in rated if r >= 4),
        'medium_rating': sum(1 for r in rated if 3 <= r < 4),
        'low_rating': sum(1 for r in rated if r < 3),
        'recent_applications': sum(1 for c in candidates if c.created_at and c.created_at > week_ago),
        'positions': positions,
        'total_jobs': len(jobs),
        'active_jobs': sum(1 for j in jobs if j.status == JobStatus.ACTIVE),
        'last_updated': datetime.utcnow().isoformat(),
    }
